"""HOOT MIND: on-chain activity signals to validated trading directives."""

__version__ = "0.1.0"

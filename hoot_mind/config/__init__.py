"""Configuration for HOOT MIND."""
from .settings import MindConfig, load_config

__all__ = ["MindConfig", "load_config"]

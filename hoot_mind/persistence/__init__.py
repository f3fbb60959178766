"""State persistence for HOOT MIND."""
from .bandit_store import BanditStateStore

__all__ = ["BanditStateStore"]

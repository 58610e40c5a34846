"""API route modules."""

from . import facilities, health

__all__ = ["facilities", "health"]

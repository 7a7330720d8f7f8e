"""API routes package"""

from . import users, health

__all__ = ["users", "health"]

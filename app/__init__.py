"""
App package - Application configuration and core utilities.
Contains settings, exceptions, security primitives and foundational application code.
"""

from app.config import settings
from app.exceptions import (
    ServiceValidationError,
    ConflictError,
    UnauthorizedError,
    ForbiddenError,
)

__all__ = [
    "settings",
    "ServiceValidationError",
    "ConflictError",
    "UnauthorizedError",
    "ForbiddenError",
]

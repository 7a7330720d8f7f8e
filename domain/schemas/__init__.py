"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.user_schemas import UserCreate, UserUpdate, UserPublic
from domain.schemas.auth_schemas import (
    Principal,
    SessionClaim,
    LoginRequest,
    LoginResponse,
)

__all__ = [
    # User schemas
    "UserCreate",
    "UserUpdate",
    "UserPublic",
    # Auth schemas
    "Principal",
    "SessionClaim",
    "LoginRequest",
    "LoginResponse",
]

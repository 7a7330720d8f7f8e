"""Services package - Business logic layer"""

from services.user_service import UserService
from services.auth_service import AuthService

__all__ = [
    "UserService",
    "AuthService",
]

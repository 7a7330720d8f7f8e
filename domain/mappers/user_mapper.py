"""
User domain mappers.
Handles transformation between ORM models and DTOs for user-related entities.
"""

from domain.models import AppUser
from domain.schemas.user_schemas import UserPublic


class UserMapper:
    """Mapper for user-related transformations."""

    @staticmethod
    def to_public(user: AppUser) -> UserPublic:
        """
        Convert AppUser ORM model to its public projection.

        Args:
            user: AppUser ORM instance

        Returns:
            UserPublic DTO with id, user_name, name, role and calorie_target;
            the password hash is never copied.
        """
        return UserPublic(
            id=user.id,
            user_name=user.user_name,
            name=user.name,
            role=user.role,
            calorie_target=user.calorie_target,
        )

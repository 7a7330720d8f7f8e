"""
User Repository - Directory store for user accounts
"""

from typing import Optional, List
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from repositories.base import BaseRepository
from domain.models import AppUser
from app.exceptions import ConflictError


class UserRepository(BaseRepository[AppUser]):
    """Repository for user data access"""

    def __init__(self, db: Session):
        super().__init__(db, AppUser)

    def get_by_user_name(self, user_name: str) -> Optional[AppUser]:
        """Get user by its unique user name"""
        return self.db.query(AppUser).filter(AppUser.user_name == user_name).first()

    def get_page(self, skip: int = 0, take: int = 10) -> List[AppUser]:
        """Get a page of users ordered by user name"""
        return (
            self.db.query(AppUser)
            .order_by(AppUser.user_name.asc())
            .offset(skip)
            .limit(take)
            .all()
        )

    def count_all(self) -> int:
        """Total number of users, ignoring pagination"""
        return self.count()

    def create_user(self, **fields) -> AppUser:
        """Create a new user"""
        user = AppUser(**fields)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(
                f'userName "{fields.get("user_name")}" already in use',
                code="DUPLICATE_USER",
            )

    def update_user(self, user: AppUser) -> AppUser:
        """Persist pending changes on ``user``"""
        self.db.commit()
        self.db.refresh(user)
        return user

    def delete_by_user_name(self, user_name: str, commit: bool = True) -> bool:
        """Delete a user by user name. Returns True if a row was removed."""
        user = self.get_by_user_name(user_name)
        if not user:
            return False
        self.db.delete(user)
        if commit:
            self.db.commit()
        else:
            self.db.flush()
        return True

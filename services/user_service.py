"""
User lifecycle: account creation, lookup, paging, policy-checked updates and
cascading removal. Every public method returns a ServiceResponse.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings
from app.exceptions import ConflictError
from app.security import PasswordHasher
from domain.enums import ErrorKind, Message, Role
from domain.mappers import UserMapper
from domain.models import AppUser
from domain.responses import ServiceResponse, error_response, success_response
from domain.schemas import Principal, UserCreate, UserUpdate
from repositories import MealRepository, UserRepository
from services.access_policy import evaluate_removal, evaluate_update
from services.base_service import BaseService


class UserService(BaseService):
    """Business logic for the user directory"""

    def __init__(
        self,
        db: Session,
        settings: Optional[Settings] = None,
        hasher: Optional[PasswordHasher] = None,
    ):
        super().__init__("calorietracker.users", settings, hasher)
        self.db = db
        self.users = UserRepository(db)
        self.meals = MealRepository(db)

    # ------------------------------------------------------------------ create

    def create_user(self, payload: UserCreate, actor: Principal) -> ServiceResponse:
        """Create an account on behalf of ``actor``.

        Only an ADMIN may choose the new account's role; everyone else gets USER.
        """
        if self.users.get_by_user_name(payload.user_name):
            self.log_warning(
                "user_create_rejected", user_name=payload.user_name, reason="duplicate"
            )
            return error_response(
                ErrorKind.DUPLICATE, f'userName "{payload.user_name}" already in use'
            )
        if not payload.password:
            self.log_warning(
                "user_create_rejected", user_name=payload.user_name, reason="no_password"
            )
            return error_response(ErrorKind.INVALID_CREDENTIALS, "password is required")

        role = self._initial_role(payload, actor)
        calorie_target = payload.calorie_target
        if not calorie_target or calorie_target <= 0:
            calorie_target = self.settings.default_calorie_target

        try:
            user = self.users.create_user(
                user_name=payload.user_name,
                name=payload.name,
                password_hash=self.hasher.hash(payload.password),
                role=role,
                calorie_target=calorie_target,
            )
        except ConflictError as exc:
            self.log_warning(
                "user_create_rejected", user_name=payload.user_name, reason="conflict"
            )
            return error_response(ErrorKind.DUPLICATE, exc.message)
        except SQLAlchemyError as e:
            self.db.rollback()
            self.log_error("user_create_failed", user_name=payload.user_name, error=str(e))
            return error_response(ErrorKind.STORE_FAILURE, "could not create user")

        self.log_info(
            "user_created",
            user_name=user.user_name,
            role=user.role.value,
            by=actor.user_name or "anonymous",
        )
        return success_response(UserMapper.to_public(user), Message.SUCCESS, 1)

    def sign_up(self, payload: UserCreate) -> ServiceResponse:
        """Self-service registration; the new account is always a USER."""
        return self.create_user(payload, Principal.anonymous())

    @staticmethod
    def _initial_role(payload: UserCreate, actor: Principal) -> Role:
        if actor.role == Role.ADMIN and payload.role in Role.assignable():
            return Role(payload.role)
        return Role.USER

    # -------------------------------------------------------------------- read

    def get_user(self, user_name: str, actor: Principal) -> ServiceResponse:
        """Fetch one account. USER principals can only ever see their own."""
        if actor.role == Role.USER:
            user_name = actor.user_name

        user = self.users.get_by_user_name(user_name)
        if not user:
            self.log_warning("user_not_found", user_name=user_name)
            return error_response(ErrorKind.NOT_FOUND, f'user "{user_name}" not found')

        return success_response(UserMapper.to_public(user), Message.RESOURCE_FOUND, 1)

    def list_users(self, page: int = 1, limit: Optional[int] = None) -> ServiceResponse:
        """Return one page of accounts ordered by user name.

        ``page`` is 1-based. ``limit`` is clamped to ``[1, max_page_size]``.
        The envelope's ``count`` is the total number of accounts.
        """
        if limit is None:
            limit = self.settings.default_page_size
        limit = max(1, min(limit, self.settings.max_page_size))
        page = max(1, page)

        skip = (page - 1) * limit
        total = self.users.count_all()
        if skip >= total:
            return error_response(ErrorKind.NOT_FOUND, f"page {page} is empty")

        users = self.users.get_page(skip=skip, take=limit)
        self.log_info("users_listed", page=page, limit=limit, total=total)
        return success_response(
            [UserMapper.to_public(u) for u in users], Message.RESOURCE_FOUND, total
        )

    # ------------------------------------------------------------------ update

    def update_user(self, payload: UserUpdate, actor: Principal) -> ServiceResponse:
        """Apply the subset of ``payload`` the access policy permits, or nothing."""
        user_name = actor.user_name if actor.role == Role.USER else payload.user_name

        user = self.users.get_by_user_name(user_name)
        if not user:
            self.log_warning("user_not_found", user_name=user_name)
            return error_response(ErrorKind.NOT_FOUND, f'user "{user_name}" not found')

        decision = evaluate_update(actor, user, payload)
        if not decision.allowed:
            self.log_warning(
                "user_update_denied",
                user_name=user_name,
                by=actor.user_name,
                error=decision.error.value,
                field=decision.denied_field,
            )
            return error_response(decision.error, decision.reason)

        if decision.changes:
            self._apply_changes(user, decision.changes)
            try:
                user = self.users.update_user(user)
            except SQLAlchemyError as e:
                self.db.rollback()
                self.log_error("user_update_failed", user_name=user_name, error=str(e))
                return error_response(ErrorKind.STORE_FAILURE, "could not save changes")

        self.log_info(
            "user_updated",
            user_name=user_name,
            by=actor.user_name,
            fields=",".join(sorted(decision.changes)) or "-",
        )
        return success_response(UserMapper.to_public(user), Message.SUCCESS, 1)

    def _apply_changes(self, user: AppUser, changes: dict) -> None:
        for name, value in changes.items():
            if name == "password":
                user.password_hash = self.hasher.hash(value)
            else:
                setattr(user, name, value)

    # ------------------------------------------------------------------ delete

    def remove_user(self, user_name: str, actor: Principal) -> ServiceResponse:
        """Delete an account and, first, every meal it owns."""
        user = self.users.get_by_user_name(user_name)
        if not user:
            self.log_warning("user_not_found", user_name=user_name)
            return error_response(ErrorKind.NOT_FOUND, f'user "{user_name}" not found')

        decision = evaluate_removal(actor, user)
        if not decision.allowed:
            self.log_warning(
                "user_remove_denied", user_name=user_name, by=actor.user_name
            )
            return error_response(decision.error, decision.reason)

        try:
            meals = self.meals.get_by_user_name(user_name)
            meals_removed = self.meals.delete_many(meals, commit=False)
            self.users.delete_by_user_name(user_name, commit=False)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self.log_error("user_remove_failed", user_name=user_name, error=str(e))
            return error_response(ErrorKind.STORE_FAILURE, f'could not remove "{user_name}"')

        self.log_info(
            "user_removed",
            user_name=user_name,
            by=actor.user_name,
            meals_removed=meals_removed,
        )
        return success_response(
            {"user_name": user_name, "meals_removed": meals_removed}, Message.SUCCESS, 1
        )

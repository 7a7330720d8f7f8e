"""
Credential verification and session issuing.
"""

from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import Settings
from app.security import PasswordHasher, TokenIssuer
from domain.enums import ErrorKind, Message
from domain.mappers import UserMapper
from domain.responses import ServiceResponse, error_response, success_response
from domain.schemas import LoginResponse
from repositories import UserRepository
from services.base_service import BaseService

# Same text for unknown user and wrong password so responses do not reveal
# which user names exist.
_INVALID_LOGIN = "invalid user name or password"


class AuthService(BaseService):
    """Checks user name / password pairs and mints session tokens"""

    def __init__(
        self,
        db: Session,
        settings: Optional[Settings] = None,
        hasher: Optional[PasswordHasher] = None,
        issuer: Optional[TokenIssuer] = None,
    ):
        super().__init__("calorietracker.auth", settings, hasher)
        self.db = db
        self.users = UserRepository(db)
        self.issuer = issuer or TokenIssuer(self.settings)

    def login(self, user_name: Optional[str], password: Optional[str]) -> ServiceResponse:
        user = self.users.get_by_user_name(user_name) if user_name else None
        if not user or not password:
            self.log_warning("login_failed", user_name=user_name)
            return error_response(ErrorKind.INVALID_CREDENTIALS, _INVALID_LOGIN)

        if not self.hasher.verify(password, user.password_hash):
            self.log_warning("login_failed", user_name=user_name)
            return error_response(ErrorKind.INVALID_CREDENTIALS, _INVALID_LOGIN)

        if self.hasher.needs_rehash(user.password_hash):
            user.password_hash = self.hasher.hash(password)
            try:
                user = self.users.update_user(user)
            except SQLAlchemyError as e:
                self.db.rollback()
                self.log_error("password_rehash_failed", user_name=user_name, error=str(e))
                return error_response(ErrorKind.STORE_FAILURE, "could not update credentials")
            self.log_info("password_rehashed", user_name=user_name)

        token = self.issuer.issue(user)
        claim = self.issuer.verify(token)
        self.log_info("login_succeeded", user_name=user_name, role=user.role.value)
        return success_response(
            LoginResponse(
                access_token=token, claim=claim, user=UserMapper.to_public(user)
            ),
            Message.SUCCESS,
            1,
        )

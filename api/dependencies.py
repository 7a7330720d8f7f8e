"""
API dependencies for dependency injection
"""

from typing import Callable, Generator, Optional
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.config import settings
from app.exceptions import ForbiddenError, UnauthorizedError
from app.security import TokenIssuer
from domain.enums import Role
from domain.models import get_db_session
from domain.schemas import Principal
from services import AuthService, UserService

_bearer = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(settings)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db, settings=settings)


def get_auth_service(
    db: Session = Depends(get_db), issuer: TokenIssuer = Depends(get_token_issuer)
) -> AuthService:
    return AuthService(db, settings=settings, issuer=issuer)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Principal:
    """Resolve the caller from the ``Authorization: Bearer`` header."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Not authenticated", code="NOT_AUTHENTICATED")
    return issuer.verify(credentials.credentials)


def require_role(minimum: Role) -> Callable[..., Principal]:
    """Dependency factory admitting principals whose role is at least ``minimum``."""

    def _dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.role.at_least(minimum):
            raise ForbiddenError(
                f"{minimum.value} role required", code="INSUFFICIENT_ROLE"
            )
        return principal

    return _dependency

"""User directory and authentication routes"""

from typing import Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
import logging

from api.dependencies import (
    get_auth_service,
    get_user_service,
    require_role,
)
from domain.enums import Role
from domain.responses import ServiceResponse
from domain.schemas import LoginRequest, Principal, UserCreate, UserUpdate
from services import AuthService, UserService

router = APIRouter(prefix="/user", tags=["Users"])
logger = logging.getLogger("calorietracker.api.users")


def _respond(result: ServiceResponse) -> JSONResponse:
    """Render an envelope, using its error kind to pick the HTTP status."""
    if not result.ok:
        logger.info(f"request_rejected error={result.error.value} detail={result.detail}")
    return JSONResponse(
        status_code=result.http_status, content=result.model_dump(mode="json")
    )


@router.post("/login")
def login(credentials: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Exchange a user name and password for a session token."""
    return _respond(auth.login(credentials.user_name, credentials.password))


@router.post("/signUp")
def sign_up(payload: UserCreate, service: UserService = Depends(get_user_service)):
    """Self-service registration; always creates a USER account."""
    return _respond(service.sign_up(payload))


@router.get("")
def list_users(
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None),
    principal: Principal = Depends(require_role(Role.MANAGER)),
    service: UserService = Depends(get_user_service),
):
    """Page through all accounts (managers and admins)."""
    return _respond(service.list_users(page=page, limit=limit))


@router.post("/new")
def create_user(
    payload: UserCreate,
    principal: Principal = Depends(require_role(Role.MANAGER)),
    service: UserService = Depends(get_user_service),
):
    """Create an account on behalf of a manager or admin."""
    return _respond(service.create_user(payload, principal))


@router.put("/update")
def update_user(
    payload: UserUpdate,
    principal: Principal = Depends(require_role(Role.USER)),
    service: UserService = Depends(get_user_service),
):
    """Change profile fields or role, as far as the access policy allows."""
    return _respond(service.update_user(payload, principal))


@router.delete("/remove/{user_name}")
def remove_user(
    user_name: str,
    principal: Principal = Depends(require_role(Role.MANAGER)),
    service: UserService = Depends(get_user_service),
):
    """Delete an account together with its meals."""
    return _respond(service.remove_user(user_name, principal))


@router.get("/{user_name}")
def get_user(
    user_name: str,
    principal: Principal = Depends(require_role(Role.USER)),
    service: UserService = Depends(get_user_service),
):
    """Fetch one account; regular users always get their own."""
    return _respond(service.get_user(user_name, principal))

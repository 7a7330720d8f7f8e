"""Schemas for authentication, session claims and the acting principal."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.enums import Role
from domain.schemas.user_schemas import UserPublic


class Principal(BaseModel):
    """The authenticated identity and role making the current call."""

    user_name: str = ""
    role: Role = Role.ANONYMOUS

    model_config = ConfigDict(frozen=True)

    @classmethod
    def anonymous(cls) -> "Principal":
        return cls(user_name="", role=Role.ANONYMOUS)


class SessionClaim(Principal):
    """Decoded session token: who, which role, and for how long."""

    issued_at: datetime
    expires_at: datetime


class LoginRequest(BaseModel):
    user_name: str = Field(..., min_length=1, max_length=64)
    password: Optional[str] = None


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    claim: SessionClaim
    user: UserPublic

from pydantic import BaseModel, Field, field_validator
from typing import Optional

from domain.enums import Role


class UserCreate(BaseModel):
    """Payload for sign-up and manager/admin initiated account creation."""

    user_name: str = Field(..., min_length=1, max_length=64)
    name: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, max_length=128)
    role: Optional[Role] = None
    calorie_target: Optional[int] = None

    @field_validator("user_name", mode="before")
    def normalize_user_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserUpdate(BaseModel):
    """Sparse update. ``password`` is a new plaintext password, never a hash."""

    user_name: str = Field(..., min_length=1, max_length=64)
    name: Optional[str] = Field(None, max_length=255)
    password: Optional[str] = Field(None, max_length=128)
    role: Optional[Role] = None
    calorie_target: Optional[int] = None

    @field_validator("user_name", mode="before")
    def normalize_user_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserPublic(BaseModel):
    """Public projection of an account; the password hash is never exposed."""

    id: int
    user_name: str
    name: Optional[str] = None
    role: Role
    calorie_target: int

    model_config = {"from_attributes": True}

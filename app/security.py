"""Security helpers for password hashing and session token signing."""

from __future__ import annotations

from datetime import timedelta
from typing import Optional

from argon2 import PasswordHasher as _Argon2Hasher
from argon2 import exceptions as argon_exc
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from app.config import Settings, settings as default_settings
from app.exceptions import UnauthorizedError
from domain.enums import Role
from domain.schemas.auth_schemas import SessionClaim


class PasswordHasher:
    """Hash and verify user passwords using Argon2id."""

    def __init__(self, hasher: Optional[_Argon2Hasher] = None) -> None:
        self._hasher = hasher or _Argon2Hasher()

    def hash(self, password: str) -> str:
        return self._hasher.hash(password)

    def verify(self, password: str, hashed: Optional[str]) -> bool:
        if not password or not hashed:
            return False
        try:
            return self._hasher.verify(hashed, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False

    def needs_rehash(self, hashed: str) -> bool:
        try:
            return self._hasher.check_needs_rehash(hashed)
        except argon_exc.InvalidHashError:
            return True


class TokenIssuer:
    """Sign session claims for authenticated users and verify them on later requests."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or default_settings
        self._serializer = URLSafeTimedSerializer(
            self.settings.secret_key, salt=self.settings.token_salt
        )

    @property
    def max_age_seconds(self) -> int:
        return self.settings.access_token_expire_minutes * 60

    def issue(self, user) -> str:
        """Return a signed token carrying the user's name and role."""
        role = user.role.value if isinstance(user.role, Role) else str(user.role)
        return self._serializer.dumps({"sub": user.user_name, "role": role})

    def verify(self, token: str, max_age: Optional[int] = None) -> SessionClaim:
        """Decode ``token`` into a SessionClaim or raise UnauthorizedError."""
        ttl = self.max_age_seconds if max_age is None else max_age
        try:
            payload, issued_at = self._serializer.loads(
                token, max_age=ttl, return_timestamp=True
            )
        except SignatureExpired as exc:
            raise UnauthorizedError("Session expired", code="TOKEN_EXPIRED") from exc
        except BadSignature as exc:
            raise UnauthorizedError("Invalid session token", code="TOKEN_INVALID") from exc

        user_name = payload.get("sub") if isinstance(payload, dict) else None
        try:
            role = Role(payload.get("role"))
        except (AttributeError, ValueError) as exc:
            raise UnauthorizedError("Invalid session token", code="TOKEN_INVALID") from exc
        if not user_name or role == Role.ANONYMOUS:
            raise UnauthorizedError("Invalid session token", code="TOKEN_INVALID")

        return SessionClaim(
            user_name=user_name,
            role=role,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=ttl),
        )

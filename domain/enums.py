"""
Domain enums for CalorieTracker application.
Contains all enumeration types used across the domain models and services.
"""

import enum


class Role(str, enum.Enum):
    """Access level of an account, ordered ANONYMOUS < USER < MANAGER < ADMIN.

    ANONYMOUS only marks a caller without a session; it is never persisted.
    """

    ANONYMOUS = "anonymous"
    USER = "user"
    MANAGER = "manager"
    ADMIN = "admin"

    @property
    def rank(self) -> int:
        return _ROLE_ORDER.index(self)

    def at_least(self, other: "Role") -> bool:
        return self.rank >= other.rank

    @classmethod
    def assignable(cls) -> tuple["Role", ...]:
        """Roles that may be stored on a persisted account."""
        return (cls.USER, cls.MANAGER, cls.ADMIN)


_ROLE_ORDER = (Role.ANONYMOUS, Role.USER, Role.MANAGER, Role.ADMIN)


class Message(str, enum.Enum):
    """User-visible message catalog carried by every ServiceResponse"""

    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_FOUND = "RESOURCE_FOUND"
    SUCCESS = "SUCCESS"
    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED_REQUEST = "UNAUTHORIZED_REQUEST"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


class ErrorKind(str, enum.Enum):
    """Failure categories returned by the core operations"""

    NOT_FOUND = "not_found"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    INVALID_CREDENTIALS = "invalid_credentials"
    DUPLICATE = "duplicate"
    STORE_FAILURE = "store_failure"

    @property
    def message(self) -> Message:
        return _ERROR_MESSAGES[self]

    @property
    def http_status(self) -> int:
        return _ERROR_STATUS[self]


# DUPLICATE shares the INVALID_CREDENTIALS message clients already key on.
_ERROR_MESSAGES = {
    ErrorKind.NOT_FOUND: Message.RESOURCE_NOT_FOUND,
    ErrorKind.BAD_REQUEST: Message.BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: Message.UNAUTHORIZED_REQUEST,
    ErrorKind.INVALID_CREDENTIALS: Message.INVALID_CREDENTIALS,
    ErrorKind.DUPLICATE: Message.INVALID_CREDENTIALS,
    ErrorKind.STORE_FAILURE: Message.SERVICE_UNAVAILABLE,
}

_ERROR_STATUS = {
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.BAD_REQUEST: 400,
    ErrorKind.UNAUTHORIZED: 403,
    ErrorKind.INVALID_CREDENTIALS: 401,
    ErrorKind.DUPLICATE: 409,
    ErrorKind.STORE_FAILURE: 503,
}

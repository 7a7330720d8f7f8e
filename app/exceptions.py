from typing import Any, Mapping, Optional


class ServiceValidationError(Exception):
    """Raised when input data is invalid or a precondition for a service call is not met.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers (400)
    """

    http_status = 400

    def __init__(self, message: str = "Invalid input", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ConflictError(ServiceValidationError):
    """Raised when a resource conflict occurs (e.g., duplicate user name). http_status is 409."""

    http_status = 409

    def __init__(self, message: str = "Conflict", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, details, code)


class UnauthorizedError(ServiceValidationError):
    """Raised when authentication fails (missing, forged or expired token). http_status is 401."""

    http_status = 401

    def __init__(self, message: str = "Unauthorized", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, details, code)


class ForbiddenError(ServiceValidationError):
    """Raised when an authenticated principal lacks the role a route requires. http_status is 403."""

    http_status = 403

    def __init__(self, message: str = "Forbidden", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, details, code)

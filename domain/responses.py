"""
Standardized service response envelope.
Every user-directory and authentication operation returns one of these,
so callers never have to catch exceptions from the service layer.
"""

from typing import Generic, TypeVar, Optional, Any
from pydantic import BaseModel, Field

from domain.enums import ErrorKind, Message

T = TypeVar("T")


class ServiceResponse(BaseModel, Generic[T]):
    """Uniform success/error wrapper"""

    ok: bool = Field(..., description="Indicates if the operation was successful")
    message: Message = Field(..., description="Stable message catalog entry")
    data: Optional[T] = Field(None, description="Response payload")
    count: Optional[int] = Field(None, description="Number of matching records")
    error: Optional[ErrorKind] = Field(None, description="Failure category")
    detail: Optional[str] = Field(None, description="Human-readable context")

    @property
    def http_status(self) -> int:
        """Suggested HTTP status for the boundary layer"""
        if self.ok:
            return 200
        return self.error.http_status


def success_response(
    data: Any = None, message: Message = Message.SUCCESS, count: Optional[int] = None
) -> ServiceResponse:
    """Create a standardized success envelope"""
    return ServiceResponse(ok=True, message=message, data=data, count=count)


def error_response(kind: ErrorKind, detail: Optional[str] = None) -> ServiceResponse:
    """Create a standardized error envelope; the message follows from ``kind``"""
    return ServiceResponse(ok=False, message=kind.message, error=kind, detail=detail)

"""API exceptions and the structured error envelope.

Every error leaves the API as ``{"error": {"message", "code", ...}}``.
"""

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse


@dataclass
class FieldError:
    """Error details for a specific field."""

    field: str
    message: str
    code: str = "invalid"

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message, "code": self.code}


@dataclass
class ErrorResponse:
    """Structured error response for API endpoints."""

    message: str
    status_code: int
    error_code: str
    details: Optional[Dict[str, Any]] = None
    field_errors: List[FieldError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        error: Dict[str, Any] = {"message": self.message, "code": self.error_code}
        if self.details:
            error["details"] = self.details
        if self.field_errors:
            error["field_errors"] = [fe.to_dict() for fe in self.field_errors]
        return {"error": error}


class APIError(Exception):
    """Base exception for API errors."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    error_code: str = "internal_error"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        field_errors: Optional[List[FieldError]] = None,
    ):
        self.message = message or self.__class__.message
        self.details = details
        self.field_errors = field_errors or []
        super().__init__(self.message)

    def to_response(self) -> ErrorResponse:
        return ErrorResponse(
            message=self.message,
            status_code=self.status_code,
            error_code=self.error_code,
            details=self.details,
            field_errors=self.field_errors,
        )


class NotFoundError(APIError):
    """Employee (or manager) id does not exist."""

    status_code: int = HTTPStatus.NOT_FOUND
    error_code: str = "not_found"
    message: str = "Resource not found"


class ConflictError(APIError):
    """Change conflicts with the current org structure."""

    status_code: int = HTTPStatus.CONFLICT
    error_code: str = "conflict"
    message: str = "Request conflicts with current state"


class CircularReportingError(ConflictError):
    """Reassignment would make an employee report to itself or a subordinate."""

    error_code: str = "circular_reporting"
    message: str = "Cannot reassign employee: would create circular dependency"


class HasDirectReportsError(ConflictError):
    """Non-cascading delete of an employee who still manages someone."""

    error_code: str = "has_direct_reports"
    message: str = (
        "Cannot delete employee with direct reports. "
        "Use cascade delete to remove the entire branch."
    )


class DatabaseError(APIError):
    """Exception for database operation failures."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    error_code: str = "database_error"
    message: str = "Database operation failed"


def create_field_error(field: str, message: str, code: str = "invalid") -> FieldError:
    return FieldError(field=field, message=message, code=code)


def create_not_found_error(resource_type: str, identifier: Any) -> NotFoundError:
    """Create a not found error for a specific resource."""
    return NotFoundError(
        message=f"{resource_type} not found",
        details={"resource_type": resource_type, "identifier": str(identifier)},
    )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle API errors and return structured responses."""
    response = exc.to_response()
    return JSONResponse(
        status_code=response.status_code,
        content=response.to_dict(),
    )

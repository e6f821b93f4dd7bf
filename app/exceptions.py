from typing import Any, Mapping, Optional


class DietPlanError(Exception):
    """Base class for errors raised at a service call boundary.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (ids, field errors)
        code: optional machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Service error"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(DietPlanError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"


class NotFoundError(DietPlanError):
    """Raised when a plan, meal, food, version or catalog entry cannot be resolved.

    Raised before any write so the failing operation leaves no partial mutation.
    """

    http_status = 404
    default_message = "Not found"


class ConflictError(DietPlanError):
    """Raised when a write collides with existing state (e.g. a duplicate version number)."""

    http_status = 409
    default_message = "Conflict"

"""Custom exceptions and error handling for the tip tracking API.

Every error raised for a caller mistake derives from ``ValidationError`` so the
HTTP layer can turn it into a structured JSON body.
"""
from typing import Optional, Dict, Any
from datetime import datetime


class ValidationError(Exception):
    """Base class for validation errors with user-friendly messages."""

    status_code = 400

    def __init__(self, message: str, error_code: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize validation error.

        Args:
            message: User-friendly error message
            error_code: Machine-readable error code
            details: Optional additional error details
        """
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary format for API responses.

        Returns:
            Dictionary with error information
        """
        return {
            "success": False,
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details
            }
        }


class InvalidDateRangeError(ValidationError):
    """Error raised when a start date falls after its end date."""

    def __init__(self, start_date: datetime, end_date: datetime):
        """
        Initialize invalid date range error.

        Args:
            start_date: Requested start of the range
            end_date: Requested end of the range
        """
        super().__init__(
            message="The start date cannot be after the end date.",
            error_code="INVALID_DATE_RANGE",
            details={
                "start_date": start_date.isoformat(),
                "end_date": end_date.isoformat()
            }
        )


class MissingFieldError(ValidationError):
    """Error raised when a required field is missing."""

    def __init__(self, field_name: str):
        super().__init__(
            message=f"{field_name} is required.",
            error_code="MISSING_FIELD",
            details={"field_name": field_name}
        )


class ResourceNotFoundError(ValidationError):
    """Error raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        """
        Initialize resource not found error.

        Args:
            resource_type: Type of resource (e.g., "shift", "user")
            resource_id: ID of the resource
        """
        super().__init__(
            message=f"{resource_type.capitalize()} not found (ID: {resource_id}).",
            error_code="RESOURCE_NOT_FOUND",
            details={
                "resource_type": resource_type,
                "resource_id": resource_id
            }
        )


class InvalidRangeError(ValidationError):
    """Error raised when a value is outside the valid range."""

    def __init__(self, field_name: str, value: Any, min_value: Any, max_value: Any = None):
        """
        Initialize invalid range error.

        Args:
            field_name: Name of the field
            value: The invalid value
            min_value: Minimum valid value
            max_value: Maximum valid value, None when unbounded
        """
        if max_value is None:
            message = f"{field_name} must be at least {min_value}. Got: {value}"
        else:
            message = f"{field_name} must be between {min_value} and {max_value}. Got: {value}"

        super().__init__(
            message=message,
            error_code="INVALID_RANGE",
            details={
                "field_name": field_name,
                "value": value,
                "min_value": min_value,
                "max_value": max_value
            }
        )


class DuplicateUsernameError(ValidationError):
    """Error raised when registering a username that is already taken."""

    def __init__(self, username: str):
        super().__init__(
            message=f"Username '{username}' is already taken.",
            error_code="DUPLICATE_USERNAME",
            details={"username": username}
        )


def format_error_for_api(error: ValidationError) -> Dict[str, Any]:
    """
    Format validation error for API response.

    Args:
        error: Validation error to format

    Returns:
        Dictionary suitable for JSON API response
    """
    return error.to_dict()

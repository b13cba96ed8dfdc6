"""
Domain exceptions.

Errors raised by command and query handlers when a business rule fails.
"""

from typing import Optional, Dict, Any, List

from .base import DomainError


class EntityNotFoundError(DomainError):
    """
    Requested entity does not exist.

    Example:
        >>> raise EntityNotFoundError("Book", "3f0c...")
    """

    def __init__(self, entity: str, entity_id: Any, details: Optional[Dict[str, Any]] = None):
        message = f"{entity} with ID {entity_id} not found"
        super().__init__(
            message=message,
            details={"entity": entity, "entity_id": str(entity_id), **(details or {})},
            error_code="NOT_FOUND"
        )
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(DomainError):
    """
    Input failed validation.

    Carries a mapping of field name to error messages.

    Example:
        >>> raise ValidationError({"username": ["Username is already taken"]})
    """

    def __init__(self, errors: Dict[str, List[str]], message: str = "Validation failed"):
        super().__init__(
            message=message,
            details={"errors": errors},
            error_code="VALIDATION_ERROR"
        )
        self.errors = errors

    @classmethod
    def single(cls, field: str, error: str) -> "ValidationError":
        """Build an error for a single field"""
        return cls({field: [error]}, message=error)


class InvalidOperationError(DomainError):
    """
    Operation is not allowed in the current state.

    Example:
        >>> raise InvalidOperationError("Only waiting requests can be processed")
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            details=details,
            error_code="INVALID_OPERATION"
        )


class AuthenticationError(DomainError):
    """Credentials or tokens were rejected."""

    def __init__(self, message: str = "Invalid username or password", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            details=details,
            error_code="AUTHENTICATION_FAILED"
        )


class PermissionDeniedError(DomainError):
    """Caller is authenticated but not allowed to perform the action."""

    def __init__(self, message: str = "You do not have permission to perform this action", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            details=details,
            error_code="PERMISSION_DENIED"
        )

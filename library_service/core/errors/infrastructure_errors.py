"""
Infrastructure exceptions.

Errors raised when the database rejects or fails an operation.
"""

from typing import Optional, Dict, Any

from .base import InfrastructureError


class DatabaseError(InfrastructureError):
    """
    Database operation failed.

    Example:
        >>> raise DatabaseError(operation="commit", reason="database is locked")
    """

    def __init__(
        self,
        operation: str,
        reason: str,
        details: Optional[Dict[str, Any]] = None
    ):
        message = f"Database error during '{operation}': {reason}"
        super().__init__(
            message=message,
            details={
                "operation": operation,
                "reason": reason,
                **(details or {})
            },
            error_code="DATABASE_ERROR"
        )

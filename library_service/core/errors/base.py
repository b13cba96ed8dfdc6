"""
Base exceptions for Library Service.

Defines the exception hierarchy shared by every application layer.
"""

from typing import Optional, Dict, Any


class LibraryServiceError(Exception):
    """
    Base exception for all Library Service errors.

    Every custom exception inherits from this class so that callers can
    catch application errors in one place.

    Attributes:
        message: Human readable error message
        details: Additional error details
        error_code: Machine readable error code

    Example:
        >>> try:
        ...     raise LibraryServiceError("Something went wrong")
        ... except LibraryServiceError as e:
        ...     print(f"Error: {e}")
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the exception to a dictionary.

        Used for logging and API responses.

        Returns:
            Dictionary with error information
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class DomainError(LibraryServiceError):
    """
    Base exception for domain errors.

    Raised when a business rule or entity invariant is violated.
    """
    pass


class InfrastructureError(LibraryServiceError):
    """
    Base exception for infrastructure errors.

    Raised on database or other external system failures.
    """
    pass

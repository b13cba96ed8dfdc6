"""
Exception hierarchy for Library Service.
"""

from .base import (
    LibraryServiceError,
    DomainError,
    InfrastructureError,
)
from .infrastructure_errors import DatabaseError
from .domain_errors import (
    EntityNotFoundError,
    ValidationError,
    InvalidOperationError,
    AuthenticationError,
    PermissionDeniedError,
)

__all__ = [
    "LibraryServiceError",
    "DomainError",
    "InfrastructureError",
    "DatabaseError",
    "EntityNotFoundError",
    "ValidationError",
    "InvalidOperationError",
    "AuthenticationError",
    "PermissionDeniedError",
]

"""Utility modules"""

from library_service.utils.crypto import (
    hash_password,
    hash_token_jti,
    verify_password,
)
from library_service.utils.validators import (
    validate_category_name,
    validate_email,
    validate_full_name,
    validate_isbn,
    validate_length,
    validate_page,
    validate_password,
    validate_published_year,
    validate_username,
)

__all__ = [
    "hash_password",
    "verify_password",
    "hash_token_jti",
    "validate_email",
    "validate_password",
    "validate_username",
    "validate_full_name",
    "validate_category_name",
    "validate_isbn",
    "validate_published_year",
    "validate_length",
    "validate_page",
]

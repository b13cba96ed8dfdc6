"""Input validation utilities"""

import re
from datetime import datetime

USERNAME_REGEX = r"^[a-zA-Z0-9_-]+$"
EMAIL_REGEX = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"
ISBN_REGEX = r"^\d{13}$"
# Largest OFFSET SQLite accepts (signed 64-bit)
MAX_PAGE_OFFSET = 2**63 - 1


def validate_email(email: str | None) -> tuple[bool, str | None]:
    """
    Validate email format

    Args:
        email: Email address to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not email or not email.strip():
        return False, "Email is required"

    if len(email) > 100:
        return False, "Email is too long (max 100 characters)"

    if not re.match(EMAIL_REGEX, email):
        return False, "Invalid email format"

    return True, None


def validate_password(password: str | None) -> tuple[bool, str | None]:
    """
    Validate password strength

    Requirements:
    - Minimum 6 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit

    Args:
        password: Password to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not password:
        return False, "Password is required"

    if len(password) < 6:
        return False, "Password must be at least 6 characters long"

    if not re.search(r"[A-Z]", password):
        return False, "Password must contain at least one uppercase letter"

    if not re.search(r"[a-z]", password):
        return False, "Password must contain at least one lowercase letter"

    if not re.search(r"\d", password):
        return False, "Password must contain at least one digit"

    return True, None


def validate_username(username: str | None) -> tuple[bool, str | None]:
    """
    Validate username format

    Requirements:
    - 3 to 50 characters
    - Letters, digits, underscores and hyphens only

    Args:
        username: Username to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not username:
        return False, "Username is required"

    if len(username) < 3:
        return False, "Username must be at least 3 characters long"

    if len(username) > 50:
        return False, "Username is too long (max 50 characters)"

    if not re.match(USERNAME_REGEX, username):
        return False, "Username can only contain letters, numbers, underscores, and hyphens"

    return True, None


def validate_full_name(full_name: str | None) -> tuple[bool, str | None]:
    """Full name must be 2-100 characters and not blank"""
    if not full_name or not full_name.strip():
        return False, "Full name is required"

    if len(full_name.strip()) < 2:
        return False, "Full name must be at least 2 characters long"

    if len(full_name) > 100:
        return False, "Full name is too long (max 100 characters)"

    return True, None


def validate_category_name(name: str | None) -> tuple[bool, str | None]:
    """Category name must be 3-100 characters and not blank"""
    if not name or not name.strip():
        return False, "Category name is required"

    if len(name.strip()) < 3:
        return False, "Category name must be at least 3 characters long"

    if len(name) > 100:
        return False, "Category name is too long (max 100 characters)"

    return True, None


def validate_isbn(isbn: str | None) -> tuple[bool, str | None]:
    """ISBN must be exactly 13 digits"""
    if not isbn:
        return False, "ISBN is required"

    if not re.match(ISBN_REGEX, isbn):
        return False, "ISBN must be exactly 13 digits"

    return True, None


def validate_published_year(year: int | None) -> tuple[bool, str | None]:
    """Published year is optional; when present it must lie in 1000..current year"""
    if year is None:
        return True, None

    current_year = datetime.now().year
    if year < 1000 or year > current_year:
        return False, f"Published year must be between 1000 and {current_year}"

    return True, None


def validate_length(
    value: str | None,
    field_label: str,
    min_length: int = 0,
    max_length: int | None = None,
    required: bool = False,
) -> tuple[bool, str | None]:
    """
    Validate the length of a free-text field

    Args:
        value: Value to validate
        field_label: Human readable field name used in the message
        min_length: Minimum length after stripping whitespace
        max_length: Maximum raw length
        required: Whether an empty value is an error

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None or not value.strip():
        if required:
            return False, f"{field_label} is required"
        return True, None

    if len(value.strip()) < min_length:
        return False, f"{field_label} must be at least {min_length} characters long"

    if max_length is not None and len(value) > max_length:
        return False, f"{field_label} is too long (max {max_length} characters)"

    return True, None


def validate_page(page_number: int, page_size: int, max_page_size: int = 100) -> tuple[bool, str | None]:
    """Validate pagination parameters"""
    if page_number < 1:
        return False, "Page number must be at least 1"

    if page_size < 1 or page_size > max_page_size:
        return False, f"Page size must be between 1 and {max_page_size}"

    if (page_number - 1) * page_size > MAX_PAGE_OFFSET:
        return False, "Page number is too large"

    return True, None

"""
SQLAlchemy repository implementations.
"""

from .activity_log_repository import ActivityLogRepository
from .base import SqlAlchemyRepository
from .book_repository import BookRepository
from .borrowing_repository import BorrowingDetailRepository, BorrowingRequestRepository
from .category_repository import CategoryRepository
from .refresh_token_repository import RefreshTokenRepository
from .user_repository import UserRepository

__all__ = [
    "SqlAlchemyRepository",
    "UserRepository",
    "CategoryRepository",
    "BookRepository",
    "BorrowingRequestRepository",
    "BorrowingDetailRepository",
    "ActivityLogRepository",
    "RefreshTokenRepository",
]

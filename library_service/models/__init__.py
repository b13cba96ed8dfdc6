"""Database models"""

from library_service.models.activity_log import UserActivityLog
from library_service.models.book import Book
from library_service.models.borrowing import BookBorrowingRequest, BookBorrowingRequestDetail
from library_service.models.category import Category
from library_service.models.database import Base, close_db, init_db, utcnow
from library_service.models.enums import BorrowingDetailStatus, BorrowingRequestStatus, UserType
from library_service.models.refresh_token import RefreshToken
from library_service.models.user import User

__all__ = [
    "Base",
    "init_db",
    "close_db",
    "utcnow",
    "UserType",
    "BorrowingRequestStatus",
    "BorrowingDetailStatus",
    "User",
    "Category",
    "Book",
    "BookBorrowingRequest",
    "BookBorrowingRequestDetail",
    "UserActivityLog",
    "RefreshToken",
]

"""
Data Transfer Objects (DTO).

DTOs carry data between the application layer and the API and keep
ORM models out of responses.
"""

from .auth_dto import AuthResultDTO
from .book_dto import BookDTO, BookListItemDTO
from .borrowing_dto import BorrowingDetailDTO, BorrowingRequestDTO, OverdueBorrowingDTO
from .category_dto import CategoryDTO
from .common import PagedResultDTO
from .user_dto import ActivityLogDTO, UserDTO, UserInfoDTO

__all__ = [
    "AuthResultDTO",
    "BookDTO",
    "BookListItemDTO",
    "BorrowingDetailDTO",
    "BorrowingRequestDTO",
    "OverdueBorrowingDTO",
    "CategoryDTO",
    "PagedResultDTO",
    "ActivityLogDTO",
    "UserDTO",
    "UserInfoDTO",
]

"""
Queries.

Queries read data without changing state (CQRS read side) and return DTOs.
"""

from .base import PagedQuery, Query, QueryHandler
from .users import (
    GetAllUsersHandler,
    GetAllUsersQuery,
    GetCurrentUserHandler,
    GetCurrentUserQuery,
    GetUserActivityLogsHandler,
    GetUserActivityLogsQuery,
    GetUserByIdHandler,
    GetUserByIdQuery,
)
from .categories import (
    CountCategoriesHandler,
    CountCategoriesQuery,
    GetAllCategoriesHandler,
    GetAllCategoriesQuery,
    GetCategoryByIdHandler,
    GetCategoryByIdQuery,
)
from .books import (
    CountAvailableBooksHandler,
    CountAvailableBooksQuery,
    CountBooksByCategoryHandler,
    CountBooksByCategoryQuery,
    CountBooksHandler,
    CountBooksQuery,
    GetAllBooksHandler,
    GetAllBooksQuery,
    GetAvailableBooksHandler,
    GetAvailableBooksQuery,
    GetBookByIdHandler,
    GetBookByIdQuery,
    GetBooksByCategoryHandler,
    GetBooksByCategoryQuery,
)
from .borrowing import (
    CountBorrowingRequestsHandler,
    CountBorrowingRequestsQuery,
    GetAllRequestsHandler,
    GetAllRequestsQuery,
    GetBorrowingRequestByIdHandler,
    GetBorrowingRequestByIdQuery,
    GetOverdueBorrowingsHandler,
    GetOverdueBorrowingsQuery,
    GetPendingRequestsHandler,
    GetPendingRequestsQuery,
    GetUserBorrowingRequestsHandler,
    GetUserBorrowingRequestsQuery,
)

__all__ = [
    "PagedQuery",
    "Query",
    "QueryHandler",
    "GetAllUsersHandler",
    "GetAllUsersQuery",
    "GetCurrentUserHandler",
    "GetCurrentUserQuery",
    "GetUserActivityLogsHandler",
    "GetUserActivityLogsQuery",
    "GetUserByIdHandler",
    "GetUserByIdQuery",
    "CountCategoriesHandler",
    "CountCategoriesQuery",
    "GetAllCategoriesHandler",
    "GetAllCategoriesQuery",
    "GetCategoryByIdHandler",
    "GetCategoryByIdQuery",
    "CountAvailableBooksHandler",
    "CountAvailableBooksQuery",
    "CountBooksByCategoryHandler",
    "CountBooksByCategoryQuery",
    "CountBooksHandler",
    "CountBooksQuery",
    "GetAllBooksHandler",
    "GetAllBooksQuery",
    "GetAvailableBooksHandler",
    "GetAvailableBooksQuery",
    "GetBookByIdHandler",
    "GetBookByIdQuery",
    "GetBooksByCategoryHandler",
    "GetBooksByCategoryQuery",
    "CountBorrowingRequestsHandler",
    "CountBorrowingRequestsQuery",
    "GetAllRequestsHandler",
    "GetAllRequestsQuery",
    "GetBorrowingRequestByIdHandler",
    "GetBorrowingRequestByIdQuery",
    "GetOverdueBorrowingsHandler",
    "GetOverdueBorrowingsQuery",
    "GetPendingRequestsHandler",
    "GetPendingRequestsQuery",
    "GetUserBorrowingRequestsHandler",
    "GetUserBorrowingRequestsQuery",
]

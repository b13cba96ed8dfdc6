"""API v1 routers"""

from library_service.api.v1.routers.admin import router as admin_router
from library_service.api.v1.routers.auth import router as auth_router
from library_service.api.v1.routers.book import router as book_router
from library_service.api.v1.routers.borrowing import router as borrowing_router
from library_service.api.v1.routers.category import router as category_router
from library_service.api.v1.routers.user import router as user_router

__all__ = [
    "admin_router",
    "auth_router",
    "book_router",
    "borrowing_router",
    "category_router",
    "user_router",
]

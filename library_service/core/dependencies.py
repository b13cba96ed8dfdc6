"""FastAPI dependencies"""

from typing import Annotated, Callable, TypeVar

from fastapi import Depends, Request
from pydantic import BaseModel

from library_service.application.commands import (
    CreateBookHandler,
    CreateBorrowingRequestHandler,
    CreateCategoryHandler,
    DeleteBookHandler,
    DeleteCategoryHandler,
    DeleteUserHandler,
    ExtendBorrowingHandler,
    LoginHandler,
    LogoutHandler,
    RefreshTokenHandler,
    RegisterHandler,
    ReturnBookHandler,
    SetUserActiveHandler,
    UpdateBookHandler,
    UpdateBorrowingRequestStatusHandler,
    UpdateCategoryHandler,
    UpdatePasswordHandler,
    UpdateProfileHandler,
    UpdateUserRoleHandler,
)
from library_service.api.v1.errors import http_error
from library_service.application.queries import (
    CountAvailableBooksHandler,
    CountBooksByCategoryHandler,
    CountBooksHandler,
    CountBorrowingRequestsHandler,
    CountCategoriesHandler,
    GetAllBooksHandler,
    GetAllCategoriesHandler,
    GetAllRequestsHandler,
    GetAllUsersHandler,
    GetAvailableBooksHandler,
    GetBookByIdHandler,
    GetBooksByCategoryHandler,
    GetBorrowingRequestByIdHandler,
    GetCategoryByIdHandler,
    GetCurrentUserHandler,
    GetOverdueBorrowingsHandler,
    GetPendingRequestsHandler,
    GetUserActivityLogsHandler,
    GetUserBorrowingRequestsHandler,
    GetUserByIdHandler,
)
from library_service.core.errors import AuthenticationError, PermissionDeniedError
from library_service.infrastructure.persistence import UnitOfWork
from library_service.models.database import async_session_maker
from library_service.models.enums import UserType
from library_service.utils.network import get_client_ip

H = TypeVar("H")


def get_uow() -> UnitOfWork:
    """Get a unit of work bound to the application session factory"""
    return UnitOfWork(async_session_maker)


UoW = Annotated[UnitOfWork, Depends(get_uow)]


def handler_provider(handler_cls: Callable[[UnitOfWork], H]) -> Callable[[UnitOfWork], H]:
    """Build a dependency that constructs `handler_cls` with a fresh unit of work"""

    def provide(uow: UoW) -> H:
        return handler_cls(uow)

    provide.__name__ = f"get_{handler_cls.__name__}"
    return provide


# Command handlers
get_register_handler = handler_provider(RegisterHandler)
get_login_handler = handler_provider(LoginHandler)
get_refresh_token_handler = handler_provider(RefreshTokenHandler)
get_logout_handler = handler_provider(LogoutHandler)
get_update_profile_handler = handler_provider(UpdateProfileHandler)
get_update_password_handler = handler_provider(UpdatePasswordHandler)
get_update_user_role_handler = handler_provider(UpdateUserRoleHandler)
get_set_user_active_handler = handler_provider(SetUserActiveHandler)
get_delete_user_handler = handler_provider(DeleteUserHandler)
get_create_category_handler = handler_provider(CreateCategoryHandler)
get_update_category_handler = handler_provider(UpdateCategoryHandler)
get_delete_category_handler = handler_provider(DeleteCategoryHandler)
get_create_book_handler = handler_provider(CreateBookHandler)
get_update_book_handler = handler_provider(UpdateBookHandler)
get_delete_book_handler = handler_provider(DeleteBookHandler)
get_create_borrowing_request_handler = handler_provider(CreateBorrowingRequestHandler)
get_update_borrowing_status_handler = handler_provider(UpdateBorrowingRequestStatusHandler)
get_return_book_handler = handler_provider(ReturnBookHandler)
get_extend_borrowing_handler = handler_provider(ExtendBorrowingHandler)

# Query handlers
get_current_user_handler = handler_provider(GetCurrentUserHandler)
get_user_by_id_handler = handler_provider(GetUserByIdHandler)
get_all_users_handler = handler_provider(GetAllUsersHandler)
get_user_activity_logs_handler = handler_provider(GetUserActivityLogsHandler)
get_category_by_id_handler = handler_provider(GetCategoryByIdHandler)
get_all_categories_handler = handler_provider(GetAllCategoriesHandler)
get_count_categories_handler = handler_provider(CountCategoriesHandler)
get_book_by_id_handler = handler_provider(GetBookByIdHandler)
get_all_books_handler = handler_provider(GetAllBooksHandler)
get_books_by_category_handler = handler_provider(GetBooksByCategoryHandler)
get_available_books_handler = handler_provider(GetAvailableBooksHandler)
get_count_books_handler = handler_provider(CountBooksHandler)
get_count_books_by_category_handler = handler_provider(CountBooksByCategoryHandler)
get_count_available_books_handler = handler_provider(CountAvailableBooksHandler)
get_borrowing_request_by_id_handler = handler_provider(GetBorrowingRequestByIdHandler)
get_user_borrowing_requests_handler = handler_provider(GetUserBorrowingRequestsHandler)
get_pending_requests_handler = handler_provider(GetPendingRequestsHandler)
get_all_requests_handler = handler_provider(GetAllRequestsHandler)
get_overdue_borrowings_handler = handler_provider(GetOverdueBorrowingsHandler)
get_count_borrowing_requests_handler = handler_provider(CountBorrowingRequestsHandler)


class CurrentUser(BaseModel):
    """Principal resolved from the access token"""

    user_id: int
    username: str | None = None
    user_type: UserType

    @property
    def is_super_user(self) -> bool:
        return self.user_type == UserType.SUPER_USER


def get_current_user(request: Request) -> CurrentUser:
    """Read the principal stored by JWTAuthMiddleware"""
    user_id = getattr(request.state, "user_id", None)
    if user_id is None:
        raise http_error(AuthenticationError("Not authenticated"))

    try:
        user_type = UserType(getattr(request.state, "role", None))
    except ValueError as e:
        raise http_error(AuthenticationError("Invalid role claim")) from e

    return CurrentUser(
        user_id=user_id,
        username=getattr(request.state, "username", None),
        user_type=user_type,
    )


AuthUser = Annotated[CurrentUser, Depends(get_current_user)]


def require_super_user(user: AuthUser) -> CurrentUser:
    """Allow only SuperUser principals"""
    if not user.is_super_user:
        raise http_error(PermissionDeniedError("Administrator privileges required"))
    return user


SuperUser = Annotated[CurrentUser, Depends(require_super_user)]
ClientIP = Annotated[str, Depends(get_client_ip)]

"""
Commands.

Commands express an intent to change system state (CQRS write side).
Every handler runs inside one unit of work and records an activity row.
"""

from .base import Command, CommandHandler
from .auth import (
    LoginCommand,
    LoginHandler,
    LogoutCommand,
    LogoutHandler,
    RefreshTokenCommand,
    RefreshTokenHandler,
    RegisterCommand,
    RegisterHandler,
)
from .users import (
    DeleteUserCommand,
    DeleteUserHandler,
    SetUserActiveCommand,
    SetUserActiveHandler,
    UpdatePasswordCommand,
    UpdatePasswordHandler,
    UpdateProfileCommand,
    UpdateProfileHandler,
    UpdateUserRoleCommand,
    UpdateUserRoleHandler,
)
from .categories import (
    CreateCategoryCommand,
    CreateCategoryHandler,
    DeleteCategoryCommand,
    DeleteCategoryHandler,
    UpdateCategoryCommand,
    UpdateCategoryHandler,
)
from .books import (
    CreateBookCommand,
    CreateBookHandler,
    DeleteBookCommand,
    DeleteBookHandler,
    UpdateBookCommand,
    UpdateBookHandler,
)
from .borrowing import (
    CreateBorrowingRequestCommand,
    CreateBorrowingRequestHandler,
    ExtendBorrowingCommand,
    ExtendBorrowingHandler,
    ReturnBookCommand,
    ReturnBookHandler,
    UpdateBorrowingRequestStatusCommand,
    UpdateBorrowingRequestStatusHandler,
)

__all__ = [
    "Command",
    "CommandHandler",
    "LoginCommand",
    "LoginHandler",
    "LogoutCommand",
    "LogoutHandler",
    "RefreshTokenCommand",
    "RefreshTokenHandler",
    "RegisterCommand",
    "RegisterHandler",
    "DeleteUserCommand",
    "DeleteUserHandler",
    "SetUserActiveCommand",
    "SetUserActiveHandler",
    "UpdatePasswordCommand",
    "UpdatePasswordHandler",
    "UpdateProfileCommand",
    "UpdateProfileHandler",
    "UpdateUserRoleCommand",
    "UpdateUserRoleHandler",
    "CreateCategoryCommand",
    "CreateCategoryHandler",
    "DeleteCategoryCommand",
    "DeleteCategoryHandler",
    "UpdateCategoryCommand",
    "UpdateCategoryHandler",
    "CreateBookCommand",
    "CreateBookHandler",
    "DeleteBookCommand",
    "DeleteBookHandler",
    "UpdateBookCommand",
    "UpdateBookHandler",
    "CreateBorrowingRequestCommand",
    "CreateBorrowingRequestHandler",
    "ExtendBorrowingCommand",
    "ExtendBorrowingHandler",
    "ReturnBookCommand",
    "ReturnBookHandler",
    "UpdateBorrowingRequestStatusCommand",
    "UpdateBorrowingRequestStatusHandler",
]

"""
User commands: self-service profile/password changes and administration.
"""

import logging
from typing import Optional

from ...core.errors import (
    EntityNotFoundError,
    InvalidOperationError,
    ValidationError,
)
from ...infrastructure.persistence import UnitOfWork
from ...models.enums import UserType
from ...models.user import User
from ...services.activity_log_service import ActivityLogService, ActivityType, activity_log_service
from ...utils.crypto import hash_password, verify_password
from ...utils.validators import validate_email, validate_full_name, validate_password
from ..dto import UserDTO
from .base import Command, CommandHandler

logger = logging.getLogger("library-service.application.users")


async def _get_user_or_raise(uow: UnitOfWork, user_id: int) -> User:
    user = await uow.users.get(user_id)
    if user is None:
        raise EntityNotFoundError("User", user_id)
    return user


class UpdateProfileCommand(Command):
    """Update the caller's email and/or full name"""

    user_id: int
    email: Optional[str] = None
    full_name: Optional[str] = None
    ip_address: Optional[str] = None


class UpdateProfileHandler(CommandHandler[UserDTO]):
    """Handler for UpdateProfileCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: UpdateProfileCommand) -> UserDTO:
        """
        Raises:
            EntityNotFoundError: If the user does not exist
            ValidationError: If the email is invalid or taken, or the name is blank
        """
        errors: dict[str, list[str]] = {}
        if command.email is not None:
            is_valid, error = validate_email(command.email)
            if not is_valid:
                errors["email"] = [error]
        if command.full_name is not None:
            is_valid, error = validate_full_name(command.full_name)
            if not is_valid:
                errors["full_name"] = [error]

        async with self._uow as uow:
            user = await _get_user_or_raise(uow, command.user_id)

            if (
                command.email is not None
                and "email" not in errors
                and await uow.users.email_exists(command.email, exclude_user_id=user.id)
            ):
                errors["email"] = ["Email is already in use by another account"]

            if errors:
                raise ValidationError(errors)

            changed = []
            if command.email is not None and command.email != user.email:
                user.email = command.email
                changed.append("email")
            if command.full_name is not None and command.full_name.strip() != user.full_name:
                user.full_name = command.full_name.strip()
                changed.append("full_name")

            await self._activity_log.log_activity(
                uow,
                user_id=user.id,
                activity_type=ActivityType.PROFILE_UPDATED,
                details=f"Updated fields: {', '.join(changed) or 'none'}",
                ip_address=command.ip_address,
            )
            return UserDTO.from_entity(user)


class UpdatePasswordCommand(Command):
    """Change the caller's password"""

    user_id: int
    current_password: str
    new_password: str
    confirm_password: str
    ip_address: Optional[str] = None


class UpdatePasswordHandler(CommandHandler[bool]):
    """Handler for UpdatePasswordCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: UpdatePasswordCommand) -> bool:
        """
        Raises:
            EntityNotFoundError: If the user does not exist
            ValidationError: If the current password is wrong, the new one
                is weak, does not match the confirmation or equals the current
        """
        is_valid, error = validate_password(command.new_password)
        if not is_valid:
            raise ValidationError.single("new_password", error)
        if command.new_password != command.confirm_password:
            raise ValidationError.single("confirm_password", "Passwords do not match")
        if command.new_password == command.current_password:
            raise ValidationError.single(
                "new_password", "New password must be different from the current password"
            )

        async with self._uow as uow:
            user = await _get_user_or_raise(uow, command.user_id)

            if not verify_password(command.current_password, user.password_hash):
                raise ValidationError.single("current_password", "Current password is incorrect")

            user.password_hash = hash_password(command.new_password)

            await self._activity_log.log_activity(
                uow,
                user_id=user.id,
                activity_type=ActivityType.PASSWORD_CHANGED,
                details="Password changed",
                ip_address=command.ip_address,
            )
            return True


class UpdateUserRoleCommand(Command):
    """Change another user's role (administrators only)"""

    admin_id: int
    user_id: int
    user_type: UserType
    ip_address: Optional[str] = None


class UpdateUserRoleHandler(CommandHandler[UserDTO]):
    """Handler for UpdateUserRoleCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: UpdateUserRoleCommand) -> UserDTO:
        """
        Raises:
            InvalidOperationError: If the administrator targets their own account
            EntityNotFoundError: If the user does not exist
        """
        if command.admin_id == command.user_id:
            raise InvalidOperationError("You cannot change your own role")

        async with self._uow as uow:
            user = await _get_user_or_raise(uow, command.user_id)
            previous = user.user_type
            user.user_type = command.user_type

            await self._activity_log.log_activity(
                uow,
                user_id=command.admin_id,
                activity_type=ActivityType.USER_ROLE_UPDATED,
                details=(
                    f"Changed role of user {user.username} (id={user.id}) "
                    f"from {previous.value} to {command.user_type.value}"
                ),
                ip_address=command.ip_address,
            )
            return UserDTO.from_entity(user)


class SetUserActiveCommand(Command):
    """Activate or deactivate a user account (administrators only)"""

    admin_id: int
    user_id: int
    is_active: bool
    ip_address: Optional[str] = None


class SetUserActiveHandler(CommandHandler[UserDTO]):
    """
    Handler for SetUserActiveCommand.

    Idempotent: activating an active account only records the activity.
    """

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: SetUserActiveCommand) -> UserDTO:
        """
        Raises:
            InvalidOperationError: If the administrator deactivates themselves
            EntityNotFoundError: If the user does not exist
        """
        if not command.is_active and command.admin_id == command.user_id:
            raise InvalidOperationError("You cannot deactivate your own account")

        async with self._uow as uow:
            user = await _get_user_or_raise(uow, command.user_id)
            user.is_active = command.is_active

            activity_type = (
                ActivityType.USER_ACTIVATED if command.is_active else ActivityType.USER_DEACTIVATED
            )
            await self._activity_log.log_activity(
                uow,
                user_id=user.id,
                activity_type=activity_type,
                details=f"{activity_type} by administrator {command.admin_id}",
                ip_address=command.ip_address,
            )
            return UserDTO.from_entity(user)


class DeleteUserCommand(Command):
    """Permanently delete a user account (administrators only)"""

    admin_id: int
    user_id: int
    ip_address: Optional[str] = None


class DeleteUserHandler(CommandHandler[bool]):
    """Handler for DeleteUserCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: DeleteUserCommand) -> bool:
        """
        Raises:
            InvalidOperationError: If the administrator deletes themselves or
                the user has borrowing history
            EntityNotFoundError: If the user does not exist
        """
        if command.admin_id == command.user_id:
            raise InvalidOperationError("You cannot delete your own account")

        async with self._uow as uow:
            user = await _get_user_or_raise(uow, command.user_id)

            if await uow.borrowing_requests.user_has_requests(user.id):
                raise InvalidOperationError(
                    "Cannot delete a user with borrowing requests; deactivate the account instead"
                )

            username = user.username
            await uow.users.delete(user)

            await self._activity_log.log_activity(
                uow,
                user_id=command.admin_id,
                activity_type=ActivityType.USER_DELETED,
                details=f"Deleted user {username} (id={command.user_id})",
                ip_address=command.ip_address,
            )
            logger.info(f"User {username} (id={command.user_id}) deleted by {command.admin_id}")
            return True

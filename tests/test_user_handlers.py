"""
Tests for user profile and administration handlers.
"""

import pytest

from library_service.application.commands import (
    DeleteUserCommand,
    DeleteUserHandler,
    LoginCommand,
    LoginHandler,
    SetUserActiveCommand,
    SetUserActiveHandler,
    UpdatePasswordCommand,
    UpdatePasswordHandler,
    UpdateProfileCommand,
    UpdateProfileHandler,
    UpdateUserRoleCommand,
    UpdateUserRoleHandler,
)
from library_service.application.queries import (
    GetAllUsersHandler,
    GetAllUsersQuery,
    GetCurrentUserHandler,
    GetCurrentUserQuery,
    GetUserActivityLogsHandler,
    GetUserActivityLogsQuery,
    GetUserByIdHandler,
    GetUserByIdQuery,
)
from library_service.core.errors import (
    AuthenticationError,
    EntityNotFoundError,
    InvalidOperationError,
    ValidationError,
)
from library_service.models import UserType


@pytest.mark.asyncio
class TestUpdateProfileHandler:
    async def test_update_email_and_name(self, make_uow, reader):
        # Act
        user = await UpdateProfileHandler(make_uow()).handle(
            UpdateProfileCommand(user_id=reader.id, email="reader@example.com", full_name="  Avid Reader ")
        )

        # Assert
        assert user.email == "reader@example.com"
        assert user.full_name == "Avid Reader"

        logs = await GetUserActivityLogsHandler(make_uow()).handle(
            GetUserActivityLogsQuery(user_id=reader.id, activity_type="ProfileUpdated")
        )
        assert logs.total_count == 1
        assert "email" in logs.items[0].details

    async def test_email_taken_by_another_user(self, uow, reader):
        with pytest.raises(ValidationError) as exc_info:
            await UpdateProfileHandler(uow).handle(
                UpdateProfileCommand(user_id=reader.id, email="ADMIN@library.local")
            )

        assert "email" in exc_info.value.details["errors"]

    async def test_keeping_own_email_is_allowed(self, uow, reader):
        user = await UpdateProfileHandler(uow).handle(
            UpdateProfileCommand(user_id=reader.id, email="user1@library.local")
        )

        assert user.email == "user1@library.local"

    async def test_unknown_user(self, uow):
        with pytest.raises(EntityNotFoundError):
            await UpdateProfileHandler(uow).handle(UpdateProfileCommand(user_id=9999, full_name="Nobody"))


@pytest.mark.asyncio
class TestUpdatePasswordHandler:
    def command(self, user_id: int, **overrides) -> UpdatePasswordCommand:
        fields = {
            "user_id": user_id,
            "current_password": "User@123",
            "new_password": "Better@456",
            "confirm_password": "Better@456",
        }
        fields.update(overrides)
        return UpdatePasswordCommand(**fields)

    async def test_password_changed(self, make_uow, reader):
        # Act
        assert await UpdatePasswordHandler(make_uow()).handle(self.command(reader.id)) is True

        # Assert
        with pytest.raises(AuthenticationError):
            await LoginHandler(make_uow()).handle(LoginCommand(username="user1", password="User@123"))
        result = await LoginHandler(make_uow()).handle(
            LoginCommand(username="user1", password="Better@456")
        )
        assert result.user.user_id == reader.id

    async def test_wrong_current_password(self, uow, reader):
        with pytest.raises(ValidationError) as exc_info:
            await UpdatePasswordHandler(uow).handle(self.command(reader.id, current_password="Nope@123"))

        assert "current_password" in exc_info.value.details["errors"]

    async def test_confirmation_mismatch(self, uow, reader):
        with pytest.raises(ValidationError) as exc_info:
            await UpdatePasswordHandler(uow).handle(self.command(reader.id, confirm_password="Other@456"))

        assert "confirm_password" in exc_info.value.details["errors"]

    async def test_weak_new_password(self, uow, reader):
        with pytest.raises(ValidationError) as exc_info:
            await UpdatePasswordHandler(uow).handle(
                self.command(reader.id, new_password="weakpass", confirm_password="weakpass")
            )

        assert "new_password" in exc_info.value.details["errors"]

    async def test_new_password_equal_to_current(self, uow, reader):
        with pytest.raises(ValidationError):
            await UpdatePasswordHandler(uow).handle(
                self.command(reader.id, new_password="User@123", confirm_password="User@123")
            )


@pytest.mark.asyncio
class TestUserAdministration:
    async def test_promote_user(self, uow, admin, reader):
        user = await UpdateUserRoleHandler(uow).handle(
            UpdateUserRoleCommand(admin_id=admin.id, user_id=reader.id, user_type=UserType.SUPER_USER)
        )

        assert user.user_type == UserType.SUPER_USER

    async def test_admin_cannot_change_own_role(self, uow, admin):
        with pytest.raises(InvalidOperationError):
            await UpdateUserRoleHandler(uow).handle(
                UpdateUserRoleCommand(admin_id=admin.id, user_id=admin.id, user_type=UserType.NORMAL_USER)
            )

    async def test_activate_and_deactivate(self, make_uow, admin, create_user):
        # Arrange
        pending = await create_user("pending", is_active=False)

        # Act
        activated = await SetUserActiveHandler(make_uow()).handle(
            SetUserActiveCommand(admin_id=admin.id, user_id=pending.id, is_active=True)
        )
        again = await SetUserActiveHandler(make_uow()).handle(
            SetUserActiveCommand(admin_id=admin.id, user_id=pending.id, is_active=True)
        )
        deactivated = await SetUserActiveHandler(make_uow()).handle(
            SetUserActiveCommand(admin_id=admin.id, user_id=pending.id, is_active=False)
        )

        # Assert
        assert activated.is_active is True
        assert again.is_active is True
        assert deactivated.is_active is False

    async def test_admin_cannot_deactivate_self(self, uow, admin):
        with pytest.raises(InvalidOperationError):
            await SetUserActiveHandler(uow).handle(
                SetUserActiveCommand(admin_id=admin.id, user_id=admin.id, is_active=False)
            )

    async def test_delete_user(self, make_uow, admin, create_user):
        # Arrange
        doomed = await create_user("doomed")

        # Act
        assert await DeleteUserHandler(make_uow()).handle(
            DeleteUserCommand(admin_id=admin.id, user_id=doomed.id)
        ) is True

        # Assert
        with pytest.raises(EntityNotFoundError):
            await GetUserByIdHandler(make_uow()).handle(GetUserByIdQuery(user_id=doomed.id))

    async def test_cannot_delete_user_with_requests(self, make_uow, admin, reader, create_book, create_request):
        book = await create_book()
        await create_request(reader, [book.book_id])

        with pytest.raises(InvalidOperationError):
            await DeleteUserHandler(make_uow()).handle(DeleteUserCommand(admin_id=admin.id, user_id=reader.id))

    async def test_admin_cannot_delete_self(self, uow, admin):
        with pytest.raises(InvalidOperationError):
            await DeleteUserHandler(uow).handle(DeleteUserCommand(admin_id=admin.id, user_id=admin.id))


@pytest.mark.asyncio
class TestUserQueries:
    async def test_current_user(self, uow, reader):
        info = await GetCurrentUserHandler(uow).handle(GetCurrentUserQuery(user_id=reader.id))

        assert info.username == "user1"
        assert info.user_type == UserType.NORMAL_USER

    async def test_search_users(self, uow):
        result = await GetAllUsersHandler(uow).handle(GetAllUsersQuery(search_term="admin"))

        assert [u.username for u in result.items] == ["admin"]
        assert result.total_count == 1

    async def test_page_size_limit(self, uow):
        with pytest.raises(ValidationError):
            await GetAllUsersHandler(uow).handle(GetAllUsersQuery(page_size=101))

    async def test_activity_logs_for_unknown_user(self, uow):
        with pytest.raises(EntityNotFoundError):
            await GetUserActivityLogsHandler(uow).handle(GetUserActivityLogsQuery(user_id=9999))

"""User administration endpoints (SuperUser only)"""

from typing import Optional

from fastapi import APIRouter, Depends, Response

from library_service.api.v1.errors import http_error, set_paging_headers
from library_service.application.commands import (
    DeleteUserCommand,
    DeleteUserHandler,
    SetUserActiveCommand,
    SetUserActiveHandler,
    UpdateUserRoleCommand,
    UpdateUserRoleHandler,
)
from library_service.application.dto import ActivityLogDTO, PagedResultDTO, UserDTO
from library_service.application.queries import (
    GetAllUsersHandler,
    GetAllUsersQuery,
    GetUserActivityLogsHandler,
    GetUserActivityLogsQuery,
    GetUserByIdHandler,
    GetUserByIdQuery,
)
from library_service.core.dependencies import (
    ClientIP,
    SuperUser,
    get_all_users_handler,
    get_delete_user_handler,
    get_set_user_active_handler,
    get_update_user_role_handler,
    get_user_activity_logs_handler,
    get_user_by_id_handler,
)
from library_service.core.errors import LibraryServiceError
from library_service.schemas.common import MessageResponse
from library_service.schemas.user import UpdateUserRoleRequest, UserListResponse

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=UserListResponse)
async def list_users(
    admin: SuperUser,
    search_term: Optional[str] = None,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetAllUsersHandler = Depends(get_all_users_handler),
) -> UserListResponse:
    """Search users by username, email or full name"""
    try:
        result = await handler.handle(
            GetAllUsersQuery(search_term=search_term, page_number=page_number, page_size=page_size)
        )
    except LibraryServiceError as e:
        raise http_error(e) from e

    return UserListResponse(
        data=result.items,
        page=result.page_number,
        page_size=result.page_size,
        total_count=result.total_count,
        total_pages=result.total_pages,
    )


@router.get("/users/{user_id}", response_model=UserDTO)
async def get_user(
    user_id: int,
    admin: SuperUser,
    handler: GetUserByIdHandler = Depends(get_user_by_id_handler),
) -> UserDTO:
    try:
        return await handler.handle(GetUserByIdQuery(user_id=user_id))
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.get("/users/{user_id}/activity-logs", response_model=PagedResultDTO[ActivityLogDTO])
async def get_user_activity_logs(
    user_id: int,
    response: Response,
    admin: SuperUser,
    activity_type: Optional[str] = None,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetUserActivityLogsHandler = Depends(get_user_activity_logs_handler),
) -> PagedResultDTO[ActivityLogDTO]:
    try:
        result = await handler.handle(
            GetUserActivityLogsQuery(
                user_id=user_id,
                activity_type=activity_type,
                page_number=page_number,
                page_size=page_size,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e

    set_paging_headers(response, result.total_count, result.page_number, result.page_size)
    return result


@router.put("/users/{user_id}/role", response_model=UserDTO)
async def update_user_role(
    user_id: int,
    request: UpdateUserRoleRequest,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: UpdateUserRoleHandler = Depends(get_update_user_role_handler),
) -> UserDTO:
    try:
        return await handler.handle(
            UpdateUserRoleCommand(
                admin_id=admin.user_id,
                user_id=user_id,
                user_type=request.user_type,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


async def _set_active(
    handler: SetUserActiveHandler,
    admin_id: int,
    user_id: int,
    is_active: bool,
    client_ip: str,
) -> UserDTO:
    try:
        return await handler.handle(
            SetUserActiveCommand(
                admin_id=admin_id,
                user_id=user_id,
                is_active=is_active,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.put("/users/{user_id}/activate", response_model=UserDTO)
async def activate_user(
    user_id: int,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: SetUserActiveHandler = Depends(get_set_user_active_handler),
) -> UserDTO:
    return await _set_active(handler, admin.user_id, user_id, True, client_ip)


@router.put("/users/{user_id}/deactivate", response_model=UserDTO)
async def deactivate_user(
    user_id: int,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: SetUserActiveHandler = Depends(get_set_user_active_handler),
) -> UserDTO:
    return await _set_active(handler, admin.user_id, user_id, False, client_ip)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: DeleteUserHandler = Depends(get_delete_user_handler),
) -> MessageResponse:
    try:
        await handler.handle(DeleteUserCommand(admin_id=admin.user_id, user_id=user_id, ip_address=client_ip))
    except LibraryServiceError as e:
        raise http_error(e) from e
    return MessageResponse(message=f"User {user_id} deleted")

"""Self-service endpoints of the authenticated user"""

from typing import Optional

from fastapi import APIRouter, Depends, Response

from library_service.api.v1.errors import http_error, set_paging_headers
from library_service.application.commands import (
    UpdatePasswordCommand,
    UpdatePasswordHandler,
    UpdateProfileCommand,
    UpdateProfileHandler,
)
from library_service.application.dto import ActivityLogDTO, PagedResultDTO, UserDTO
from library_service.application.queries import (
    GetUserActivityLogsHandler,
    GetUserActivityLogsQuery,
    GetUserByIdHandler,
    GetUserByIdQuery,
)
from library_service.core.dependencies import (
    AuthUser,
    ClientIP,
    get_update_password_handler,
    get_update_profile_handler,
    get_user_activity_logs_handler,
    get_user_by_id_handler,
)
from library_service.core.errors import LibraryServiceError
from library_service.schemas.common import MessageResponse
from library_service.schemas.user import UpdatePasswordRequest, UpdateProfileRequest

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/profile", response_model=UserDTO)
async def get_profile(
    user: AuthUser,
    handler: GetUserByIdHandler = Depends(get_user_by_id_handler),
) -> UserDTO:
    try:
        return await handler.handle(GetUserByIdQuery(user_id=user.user_id))
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.put("/profile", response_model=UserDTO)
async def update_profile(
    request: UpdateProfileRequest,
    user: AuthUser,
    client_ip: ClientIP,
    handler: UpdateProfileHandler = Depends(get_update_profile_handler),
) -> UserDTO:
    """Update email and/or full name; omitted fields are left unchanged"""
    try:
        return await handler.handle(
            UpdateProfileCommand(
                user_id=user.user_id,
                email=request.email,
                full_name=request.full_name,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.put("/password", response_model=MessageResponse)
async def update_password(
    request: UpdatePasswordRequest,
    user: AuthUser,
    client_ip: ClientIP,
    handler: UpdatePasswordHandler = Depends(get_update_password_handler),
) -> MessageResponse:
    try:
        await handler.handle(
            UpdatePasswordCommand(
                user_id=user.user_id,
                current_password=request.current_password,
                new_password=request.new_password,
                confirm_password=request.confirm_password,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e
    return MessageResponse(message="Password updated successfully")


@router.get("/activity-logs", response_model=PagedResultDTO[ActivityLogDTO])
async def get_activity_logs(
    response: Response,
    user: AuthUser,
    activity_type: Optional[str] = None,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetUserActivityLogsHandler = Depends(get_user_activity_logs_handler),
) -> PagedResultDTO[ActivityLogDTO]:
    """The caller's own activity, newest first"""
    try:
        result = await handler.handle(
            GetUserActivityLogsQuery(
                user_id=user.user_id,
                activity_type=activity_type,
                page_number=page_number,
                page_size=page_size,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e

    set_paging_headers(response, result.total_count, result.page_number, result.page_size)
    return result

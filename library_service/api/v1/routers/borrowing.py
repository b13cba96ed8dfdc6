"""Borrowing request endpoints"""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from library_service.api.v1.errors import http_error, set_paging_headers
from library_service.application.commands import (
    CreateBorrowingRequestCommand,
    CreateBorrowingRequestHandler,
    ExtendBorrowingCommand,
    ExtendBorrowingHandler,
    ReturnBookCommand,
    ReturnBookHandler,
    UpdateBorrowingRequestStatusCommand,
    UpdateBorrowingRequestStatusHandler,
)
from library_service.application.dto import BorrowingDetailDTO, BorrowingRequestDTO, OverdueBorrowingDTO
from library_service.application.queries import (
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
from library_service.core.dependencies import (
    AuthUser,
    ClientIP,
    SuperUser,
    get_all_requests_handler,
    get_borrowing_request_by_id_handler,
    get_count_borrowing_requests_handler,
    get_create_borrowing_request_handler,
    get_extend_borrowing_handler,
    get_overdue_borrowings_handler,
    get_pending_requests_handler,
    get_return_book_handler,
    get_update_borrowing_status_handler,
    get_user_borrowing_requests_handler,
)
from library_service.core.errors import LibraryServiceError
from library_service.schemas.borrowing import (
    BorrowingRequestListResponse,
    CreateBorrowingRequest,
    ExtendBorrowingRequest,
    ReturnBookRequest,
    UpdateBorrowingStatusRequest,
)
from library_service.schemas.common import CountResponse

router = APIRouter(prefix="/borrowing", tags=["borrowing"])


@router.get("/pending", response_model=List[BorrowingRequestDTO])
async def list_pending_requests(
    response: Response,
    admin: SuperUser,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetPendingRequestsHandler = Depends(get_pending_requests_handler),
) -> List[BorrowingRequestDTO]:
    """Waiting requests, oldest first"""
    try:
        result = await handler.handle(GetPendingRequestsQuery(page_number=page_number, page_size=page_size))
    except LibraryServiceError as e:
        raise http_error(e) from e

    set_paging_headers(response, result.total_count, result.page_number, result.page_size)
    return result.items


@router.get("/all", response_model=BorrowingRequestListResponse)
async def list_all_requests(
    admin: SuperUser,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetAllRequestsHandler = Depends(get_all_requests_handler),
) -> BorrowingRequestListResponse:
    try:
        result = await handler.handle(GetAllRequestsQuery(page_number=page_number, page_size=page_size))
    except LibraryServiceError as e:
        raise http_error(e) from e

    return BorrowingRequestListResponse(
        total_count=result.total_count,
        page_number=result.page_number,
        page_size=result.page_size,
        results=result.items,
    )


@router.get("/overdue", response_model=List[OverdueBorrowingDTO])
async def list_overdue_borrowings(
    response: Response,
    admin: SuperUser,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetOverdueBorrowingsHandler = Depends(get_overdue_borrowings_handler),
) -> List[OverdueBorrowingDTO]:
    try:
        result = await handler.handle(GetOverdueBorrowingsQuery(page_number=page_number, page_size=page_size))
    except LibraryServiceError as e:
        raise http_error(e) from e

    set_paging_headers(response, result.total_count, result.page_number, result.page_size)
    return result.items


@router.get("/count", response_model=CountResponse)
async def count_requests(
    admin: SuperUser,
    handler: CountBorrowingRequestsHandler = Depends(get_count_borrowing_requests_handler),
) -> CountResponse:
    return CountResponse(count=await handler.handle(CountBorrowingRequestsQuery()))


@router.get("/user/{user_id}", response_model=List[BorrowingRequestDTO])
async def list_user_requests(
    user_id: int,
    response: Response,
    user: AuthUser,
    page_number: int = 1,
    page_size: int = 10,
    handler: GetUserBorrowingRequestsHandler = Depends(get_user_borrowing_requests_handler),
) -> List[BorrowingRequestDTO]:
    """Requests of one user, newest first; normal users may only list their own"""
    try:
        result = await handler.handle(
            GetUserBorrowingRequestsQuery(
                requestor_id=user_id,
                user_id=user.user_id,
                user_type=user.user_type,
                page_number=page_number,
                page_size=page_size,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e

    set_paging_headers(response, result.total_count, result.page_number, result.page_size)
    return result.items


@router.get("/{request_id}", response_model=BorrowingRequestDTO)
async def get_request(
    request_id: str,
    user: AuthUser,
    handler: GetBorrowingRequestByIdHandler = Depends(get_borrowing_request_by_id_handler),
) -> BorrowingRequestDTO:
    try:
        return await handler.handle(
            GetBorrowingRequestByIdQuery(request_id=request_id, user_id=user.user_id, user_type=user.user_type)
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.post("", response_model=BorrowingRequestDTO, status_code=status.HTTP_201_CREATED)
async def create_request(
    request: CreateBorrowingRequest,
    user: AuthUser,
    client_ip: ClientIP,
    handler: CreateBorrowingRequestHandler = Depends(get_create_borrowing_request_handler),
) -> BorrowingRequestDTO:
    """Request 1-5 books; the request waits for a librarian's decision"""
    try:
        return await handler.handle(
            CreateBorrowingRequestCommand(
                requestor_id=user.user_id,
                book_ids=request.book_ids,
                notes=request.notes,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.put("/{request_id}/status", response_model=BorrowingRequestDTO)
async def update_request_status(
    request_id: str,
    request: UpdateBorrowingStatusRequest,
    admin: SuperUser,
    client_ip: ClientIP,
    handler: UpdateBorrowingRequestStatusHandler = Depends(get_update_borrowing_status_handler),
) -> BorrowingRequestDTO:
    """Approve or reject a waiting request"""
    try:
        return await handler.handle(
            UpdateBorrowingRequestStatusCommand(
                approver_id=admin.user_id,
                request_id=request_id,
                status=request.status,
                notes=request.notes,
                due_days=request.due_days,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.put("/detail/{detail_id}/return", response_model=BorrowingDetailDTO)
async def return_book(
    detail_id: str,
    request: ReturnBookRequest,
    user: AuthUser,
    client_ip: ClientIP,
    handler: ReturnBookHandler = Depends(get_return_book_handler),
) -> BorrowingDetailDTO:
    try:
        return await handler.handle(
            ReturnBookCommand(
                user_id=user.user_id,
                user_type=user.user_type,
                detail_id=detail_id,
                notes=request.notes,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e


@router.put("/detail/{detail_id}/extend", response_model=BorrowingDetailDTO)
async def extend_borrowing(
    detail_id: str,
    request: ExtendBorrowingRequest,
    user: AuthUser,
    client_ip: ClientIP,
    handler: ExtendBorrowingHandler = Depends(get_extend_borrowing_handler),
) -> BorrowingDetailDTO:
    """Move the due date once, by at most 7 days past the current due date"""
    try:
        return await handler.handle(
            ExtendBorrowingCommand(
                user_id=user.user_id,
                user_type=user.user_type,
                detail_id=detail_id,
                new_due_date=request.new_due_date,
                notes=request.notes,
                ip_address=client_ip,
            )
        )
    except LibraryServiceError as e:
        raise http_error(e) from e

"""
Borrowing request queries.

Normal users only see their own requests; super users see everything.
"""

from ...core.errors import EntityNotFoundError, PermissionDeniedError
from ...infrastructure.persistence import UnitOfWork
from ...models.database import utcnow
from ...models.enums import UserType
from ..dto import BorrowingRequestDTO, OverdueBorrowingDTO, PagedResultDTO
from .base import PagedQuery, Query, QueryHandler

MAX_PENDING_PAGE_SIZE = 50


class GetBorrowingRequestByIdQuery(Query):
    """
    One request with its details.

    Attributes:
        request_id: Request to load
        user_id: Caller id
        user_type: Caller role
    """

    request_id: str
    user_id: int
    user_type: UserType


class GetBorrowingRequestByIdHandler(QueryHandler[BorrowingRequestDTO]):
    """
    Handler for GetBorrowingRequestByIdQuery.

    Raises:
        EntityNotFoundError: If the request does not exist
        PermissionDeniedError: If a normal user asks for another user's request
    """

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetBorrowingRequestByIdQuery) -> BorrowingRequestDTO:
        async with self._uow as uow:
            request = await uow.borrowing_requests.get(query.request_id)
            if request is None:
                raise EntityNotFoundError("BorrowingRequest", query.request_id)

            if query.user_type != UserType.SUPER_USER and request.requestor_id != query.user_id:
                raise PermissionDeniedError("You can only view your own borrowing requests")

            return BorrowingRequestDTO.from_entity(request)


class GetUserBorrowingRequestsQuery(PagedQuery):
    """Requests made by `requestor_id`, newest first"""

    requestor_id: int
    user_id: int
    user_type: UserType


class GetUserBorrowingRequestsHandler(QueryHandler[PagedResultDTO[BorrowingRequestDTO]]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetUserBorrowingRequestsQuery) -> PagedResultDTO[BorrowingRequestDTO]:
        if query.user_type != UserType.SUPER_USER and query.requestor_id != query.user_id:
            raise PermissionDeniedError("You can only view your own borrowing requests")
        query.ensure_valid_page(max_page_size=100)

        async with self._uow as uow:
            requests, total = await uow.borrowing_requests.get_by_user(
                query.requestor_id, query.page_number, query.page_size
            )
            return PagedResultDTO[BorrowingRequestDTO](
                items=[BorrowingRequestDTO.from_entity(r) for r in requests],
                total_count=total,
                page_number=query.page_number,
                page_size=query.page_size,
            )


class GetPendingRequestsQuery(PagedQuery):
    """Waiting requests, oldest first"""


class GetPendingRequestsHandler(QueryHandler[PagedResultDTO[BorrowingRequestDTO]]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetPendingRequestsQuery) -> PagedResultDTO[BorrowingRequestDTO]:
        query.ensure_valid_page(max_page_size=MAX_PENDING_PAGE_SIZE)

        async with self._uow as uow:
            requests, total = await uow.borrowing_requests.get_pending(query.page_number, query.page_size)
            return PagedResultDTO[BorrowingRequestDTO](
                items=[BorrowingRequestDTO.from_entity(r) for r in requests],
                total_count=total,
                page_number=query.page_number,
                page_size=query.page_size,
            )


class GetAllRequestsQuery(PagedQuery):
    """Every request, newest first"""


class GetAllRequestsHandler(QueryHandler[PagedResultDTO[BorrowingRequestDTO]]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetAllRequestsQuery) -> PagedResultDTO[BorrowingRequestDTO]:
        query.ensure_valid_page(max_page_size=100)

        async with self._uow as uow:
            requests = await uow.borrowing_requests.get_all(query.page_number, query.page_size)
            total = await uow.borrowing_requests.count()
            return PagedResultDTO[BorrowingRequestDTO](
                items=[BorrowingRequestDTO.from_entity(r) for r in requests],
                total_count=total,
                page_number=query.page_number,
                page_size=query.page_size,
            )


class GetOverdueBorrowingsQuery(PagedQuery):
    """Books on loan past their due date"""


class GetOverdueBorrowingsHandler(QueryHandler[PagedResultDTO[OverdueBorrowingDTO]]):
    """
    Handler for GetOverdueBorrowingsQuery.

    Borrowing and Extended details whose due date is before now,
    earliest due date first.
    """

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetOverdueBorrowingsQuery) -> PagedResultDTO[OverdueBorrowingDTO]:
        query.ensure_valid_page(max_page_size=100)

        now = utcnow()
        async with self._uow as uow:
            details, total = await uow.borrowing_details.get_overdue(now, query.page_number, query.page_size)
            return PagedResultDTO[OverdueBorrowingDTO](
                items=[OverdueBorrowingDTO.from_entity(d, now) for d in details],
                total_count=total,
                page_number=query.page_number,
                page_size=query.page_size,
            )


class CountBorrowingRequestsQuery(Query):
    pass


class CountBorrowingRequestsHandler(QueryHandler[int]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: CountBorrowingRequestsQuery) -> int:
        async with self._uow as uow:
            return await uow.borrowing_requests.count()

"""Borrowing request and request detail repositories"""

from datetime import datetime
from typing import Sequence

from sqlalchemy import func, or_, select

from ....models.borrowing import BookBorrowingRequest, BookBorrowingRequestDetail
from ....models.enums import BorrowingDetailStatus, BorrowingRequestStatus
from .base import SqlAlchemyRepository


class BorrowingRequestRepository(SqlAlchemyRepository[BookBorrowingRequest]):
    """Data access for borrowing requests"""

    model = BookBorrowingRequest

    async def get_by_user(
        self,
        user_id: int,
        page_number: int,
        page_size: int,
    ) -> tuple[Sequence[BookBorrowingRequest], int]:
        """A user's requests, newest first, with the total count"""
        stmt = select(BookBorrowingRequest).where(BookBorrowingRequest.requestor_id == user_id)
        total = await self._count(stmt)
        stmt = stmt.order_by(BookBorrowingRequest.request_date.desc(), BookBorrowingRequest.id)
        requests = await self._page(stmt, page_number, page_size)
        return requests, total

    async def get_pending(
        self,
        page_number: int,
        page_size: int,
    ) -> tuple[Sequence[BookBorrowingRequest], int]:
        """Waiting requests, oldest first, with the total count"""
        stmt = select(BookBorrowingRequest).where(
            BookBorrowingRequest.status == BorrowingRequestStatus.WAITING
        )
        total = await self._count(stmt)
        stmt = stmt.order_by(BookBorrowingRequest.request_date.asc(), BookBorrowingRequest.id)
        requests = await self._page(stmt, page_number, page_size)
        return requests, total

    async def get_all(self, page_number: int, page_size: int) -> Sequence[BookBorrowingRequest]:
        stmt = select(BookBorrowingRequest).order_by(
            BookBorrowingRequest.request_date.desc(), BookBorrowingRequest.id
        )
        return await self._page(stmt, page_number, page_size)

    async def count_user_requests_between(self, user_id: int, start: datetime, end: datetime) -> int:
        """Count requests made by a user with start <= request_date < end"""
        result = await self._db.execute(
            select(func.count(BookBorrowingRequest.id)).where(
                BookBorrowingRequest.requestor_id == user_id,
                BookBorrowingRequest.request_date >= start,
                BookBorrowingRequest.request_date < end,
            )
        )
        return result.scalar_one()

    async def has_active_loans(self, user_id: int) -> bool:
        """True if an approved request of the user still has an unreturned book"""
        result = await self._db.execute(
            select(BookBorrowingRequestDetail.id)
            .join(BookBorrowingRequest, BookBorrowingRequestDetail.request_id == BookBorrowingRequest.id)
            .where(
                BookBorrowingRequest.requestor_id == user_id,
                BookBorrowingRequest.status == BorrowingRequestStatus.APPROVED,
                BookBorrowingRequestDetail.return_date.is_(None),
            )
            .limit(1)
        )
        return result.first() is not None

    async def user_has_requests(self, user_id: int) -> bool:
        result = await self._db.execute(
            select(BookBorrowingRequest.id)
            .where(BookBorrowingRequest.requestor_id == user_id)
            .limit(1)
        )
        return result.first() is not None


class BorrowingDetailRepository(SqlAlchemyRepository[BookBorrowingRequestDetail]):
    """Data access for per-book borrowing rows"""

    model = BookBorrowingRequestDetail

    def _overdue(self, now: datetime):
        return select(BookBorrowingRequestDetail).where(
            or_(
                BookBorrowingRequestDetail.status == BorrowingDetailStatus.BORROWING,
                BookBorrowingRequestDetail.status == BorrowingDetailStatus.EXTENDED,
            ),
            BookBorrowingRequestDetail.due_date.is_not(None),
            BookBorrowingRequestDetail.due_date < now,
        )

    async def get_overdue(
        self,
        now: datetime,
        page_number: int,
        page_size: int,
    ) -> tuple[Sequence[BookBorrowingRequestDetail], int]:
        """Books on loan past their due date, earliest due first"""
        stmt = self._overdue(now)
        total = await self._count(stmt)
        stmt = stmt.order_by(BookBorrowingRequestDetail.due_date.asc(), BookBorrowingRequestDetail.id)
        details = await self._page(stmt, page_number, page_size)
        return details, total

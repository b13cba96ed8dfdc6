"""
Borrowing commands: request, approve/reject, return and extend.

Request status moves Waiting -> Approved | Rejected. Each detail of an
approved request moves Borrowing -> Returned, or Borrowing -> Extended
-> Returned. A book's available_copies drops on approval and rises on
return.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from pydantic import field_validator

from ...core.config import settings
from ...core.errors import (
    EntityNotFoundError,
    InvalidOperationError,
    PermissionDeniedError,
    ValidationError,
)
from ...infrastructure.persistence import UnitOfWork
from ...models.borrowing import BookBorrowingRequest, BookBorrowingRequestDetail
from ...models.database import utcnow
from ...models.enums import BorrowingDetailStatus, BorrowingRequestStatus, UserType
from ...services.activity_log_service import ActivityLogService, ActivityType, activity_log_service
from ..dto import BorrowingDetailDTO, BorrowingRequestDTO
from .base import Command, CommandHandler

logger = logging.getLogger("library-service.application.borrowing")

MAX_NOTES_LENGTH = 500


def month_bounds(now: datetime) -> tuple[datetime, datetime]:
    """Start of the month containing `now` and start of the next month"""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def append_notes(existing: Optional[str], notes: Optional[str]) -> Optional[str]:
    """Append notes on a new line, keeping the column limit"""
    if not notes or not notes.strip():
        return existing
    combined = f"{existing}\n{notes.strip()}" if existing else notes.strip()
    return combined[:MAX_NOTES_LENGTH]


class CreateBorrowingRequestCommand(Command):
    """Request to borrow 1-5 distinct books"""

    requestor_id: int
    book_ids: List[str]
    notes: Optional[str] = None
    ip_address: Optional[str] = None


class CreateBorrowingRequestHandler(CommandHandler[BorrowingRequestDTO]):
    """
    Handler for CreateBorrowingRequestCommand.

    Rules:
    - 1 to max_books_per_request distinct books
    - fewer than max_requests_per_month requests this calendar month
    - every book exists, is active and has an available copy
    - the requestor has no approved loan with an unreturned book
    """

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: CreateBorrowingRequestCommand) -> BorrowingRequestDTO:
        book_ids = command.book_ids
        if not book_ids:
            raise ValidationError.single("book_ids", "At least one book must be requested")
        if len(book_ids) > settings.max_books_per_request:
            raise ValidationError.single(
                "book_ids",
                f"A request may contain at most {settings.max_books_per_request} books",
            )
        if len(set(book_ids)) != len(book_ids):
            raise ValidationError.single("book_ids", "The same book cannot be requested twice")
        if command.notes and len(command.notes) > MAX_NOTES_LENGTH:
            raise ValidationError.single("notes", f"Notes are too long (max {MAX_NOTES_LENGTH} characters)")

        async with self._uow as uow:
            requestor = await uow.users.get(command.requestor_id)
            if requestor is None:
                raise EntityNotFoundError("User", command.requestor_id)

            now = utcnow()
            month_start, month_end = month_bounds(now)
            requests_this_month = await uow.borrowing_requests.count_user_requests_between(
                requestor.id, month_start, month_end
            )
            if requests_this_month >= settings.max_requests_per_month:
                raise InvalidOperationError(
                    f"You can make at most {settings.max_requests_per_month} borrowing requests per month",
                    details={"requests_this_month": requests_this_month},
                )

            if await uow.borrowing_requests.has_active_loans(requestor.id):
                raise InvalidOperationError(
                    "You must return your borrowed books before making a new request"
                )

            books = await uow.books.get_many(book_ids)
            errors: dict[str, list[str]] = {}
            for book_id in book_ids:
                book = books.get(book_id)
                if book is None:
                    errors.setdefault("book_ids", []).append(f"Book {book_id} does not exist")
                elif not book.is_available:
                    errors.setdefault("book_ids", []).append(f"Book '{book.title}' is not available")
            if errors:
                raise ValidationError(errors)

            request = BookBorrowingRequest(
                requestor_id=requestor.id,
                request_date=now,
                status=BorrowingRequestStatus.WAITING,
                notes=append_notes(None, command.notes),
            )
            request.requestor = requestor
            request.approver = None
            for book_id in book_ids:
                detail = BookBorrowingRequestDetail(
                    book_id=book_id,
                    status=BorrowingDetailStatus.BORROWING,
                )
                detail.book = books[book_id]
                request.details.append(detail)

            await uow.borrowing_requests.add(request)

            await self._activity_log.log_activity(
                uow,
                user_id=requestor.id,
                activity_type=ActivityType.BORROWING_REQUEST_CREATED,
                details=f"Requested {len(book_ids)} book(s), request {request.id}",
                ip_address=command.ip_address,
            )
            return BorrowingRequestDTO.from_entity(request)


class UpdateBorrowingRequestStatusCommand(Command):
    """Approve or reject a waiting request"""

    approver_id: int
    request_id: str
    status: BorrowingRequestStatus
    notes: Optional[str] = None
    due_days: Optional[int] = None
    ip_address: Optional[str] = None


class UpdateBorrowingRequestStatusHandler(CommandHandler[BorrowingRequestDTO]):
    """
    Handler for UpdateBorrowingRequestStatusCommand.

    Approval sets each detail's due date to now + due_days and takes one
    available copy of each book.
    """

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: UpdateBorrowingRequestStatusCommand) -> BorrowingRequestDTO:
        """
        Raises:
            EntityNotFoundError: If the request or approver does not exist
            InvalidOperationError: If the request was already processed or a
                book is no longer available
            ValidationError: If the status is not a decision or due_days is
                outside 1..max_due_days
        """
        if command.status == BorrowingRequestStatus.WAITING:
            raise ValidationError.single("status", "Status must be Approved or Rejected")
        due_days = command.due_days if command.due_days is not None else settings.default_due_days
        if due_days <= 0:
            raise ValidationError.single("due_days", "Due days must be greater than 0")
        if due_days > settings.max_due_days:
            raise ValidationError.single("due_days", f"Due days must be at most {settings.max_due_days}")

        async with self._uow as uow:
            request = await uow.borrowing_requests.get(command.request_id)
            if request is None:
                raise EntityNotFoundError("BorrowingRequest", command.request_id)

            if request.status != BorrowingRequestStatus.WAITING:
                raise InvalidOperationError(
                    f"Only waiting requests can be processed (current status: {request.status.value})"
                )

            approver = await uow.users.get(command.approver_id)
            if approver is None:
                raise EntityNotFoundError("User", command.approver_id)

            now = utcnow()
            approved = command.status == BorrowingRequestStatus.APPROVED

            if approved:
                unavailable = [d.book.title for d in request.details if not d.book.is_available]
                if unavailable:
                    raise InvalidOperationError(
                        "Some requested books are no longer available",
                        details={"books": unavailable},
                    )

                due_date = now + timedelta(days=due_days)
                for detail in request.details:
                    detail.due_date = due_date
                    detail.book.available_copies -= 1

            request.status = command.status
            request.approver_id = approver.id
            request.approver = approver
            request.approval_date = now
            request.notes = append_notes(request.notes, command.notes)

            activity_type = (
                ActivityType.BORROWING_REQUEST_APPROVED if approved
                else ActivityType.BORROWING_REQUEST_REJECTED
            )
            await self._activity_log.log_activity(
                uow,
                user_id=approver.id,
                activity_type=activity_type,
                details=f"{command.status.value} request {request.id} of user {request.requestor_id}",
                ip_address=command.ip_address,
            )
            return BorrowingRequestDTO.from_entity(request)


async def _get_loan_detail(
    uow: UnitOfWork,
    detail_id: str,
    user_id: int,
    user_type: UserType,
) -> BookBorrowingRequestDetail:
    """Load a detail of an approved request that the caller may act on"""
    detail = await uow.borrowing_details.get(detail_id)
    if detail is None:
        raise EntityNotFoundError("BorrowingDetail", detail_id)

    if user_type != UserType.SUPER_USER and detail.request.requestor_id != user_id:
        raise PermissionDeniedError("You can only manage your own borrowed books")

    if detail.request.status != BorrowingRequestStatus.APPROVED:
        raise InvalidOperationError("The borrowing request has not been approved")
    return detail


class ReturnBookCommand(Command):
    """Return one borrowed book"""

    user_id: int
    user_type: UserType
    detail_id: str
    notes: Optional[str] = None
    ip_address: Optional[str] = None


class ReturnBookHandler(CommandHandler[BorrowingDetailDTO]):
    """Handler for ReturnBookCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: ReturnBookCommand) -> BorrowingDetailDTO:
        """
        Raises:
            EntityNotFoundError: If the detail does not exist
            PermissionDeniedError: If a normal user returns someone else's book
            InvalidOperationError: If the book is not currently on loan
        """
        async with self._uow as uow:
            detail = await _get_loan_detail(uow, command.detail_id, command.user_id, command.user_type)

            if detail.status not in (BorrowingDetailStatus.BORROWING, BorrowingDetailStatus.EXTENDED):
                raise InvalidOperationError(
                    f"Book cannot be returned (current status: {detail.status.value})"
                )

            detail.status = BorrowingDetailStatus.RETURNED
            detail.return_date = utcnow()

            book = detail.book
            book.available_copies = min(book.available_copies + 1, book.total_copies)

            detail.request.notes = append_notes(detail.request.notes, command.notes)

            await self._activity_log.log_activity(
                uow,
                user_id=command.user_id,
                activity_type=ActivityType.BOOK_RETURNED,
                details=f"Returned '{book.title}' (detail {detail.id})",
                ip_address=command.ip_address,
            )
            return BorrowingDetailDTO.from_entity(detail)


class ExtendBorrowingCommand(Command):
    """Move the due date of a borrowed book once, by up to 7 days"""

    user_id: int
    user_type: UserType
    detail_id: str
    new_due_date: datetime
    notes: Optional[str] = None
    ip_address: Optional[str] = None

    @field_validator("new_due_date")
    @classmethod
    def normalize_to_naive_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value


class ExtendBorrowingHandler(CommandHandler[BorrowingDetailDTO]):
    """Handler for ExtendBorrowingCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: ExtendBorrowingCommand) -> BorrowingDetailDTO:
        """
        Raises:
            EntityNotFoundError: If the detail does not exist
            PermissionDeniedError: If a normal user extends someone else's loan
            InvalidOperationError: If the loan is not in Borrowing status or
                was already extended
            ValidationError: If the new due date is in the past or beyond
                the extension limit
        """
        async with self._uow as uow:
            detail = await _get_loan_detail(uow, command.detail_id, command.user_id, command.user_type)

            if detail.status != BorrowingDetailStatus.BORROWING or detail.extension_date is not None:
                raise InvalidOperationError("Only a borrowed book that was never extended can be extended")

            if detail.due_date is None:
                raise InvalidOperationError("The borrowed book has no due date")

            now = utcnow()
            latest = detail.due_date + timedelta(days=settings.max_extension_days)
            if command.new_due_date <= now:
                raise ValidationError.single("new_due_date", "New due date must be in the future")
            if command.new_due_date > latest:
                raise ValidationError.single(
                    "new_due_date",
                    f"Due date can be extended by at most {settings.max_extension_days} days",
                )

            previous_due = detail.due_date
            detail.due_date = command.new_due_date
            detail.extension_date = now
            detail.status = BorrowingDetailStatus.EXTENDED

            detail.request.notes = append_notes(detail.request.notes, command.notes)

            await self._activity_log.log_activity(
                uow,
                user_id=command.user_id,
                activity_type=ActivityType.BORROWING_EXTENDED,
                details=(
                    f"Extended '{detail.book.title}' from {previous_due:%Y-%m-%d} "
                    f"to {command.new_due_date:%Y-%m-%d}"
                ),
                ip_address=command.ip_address,
            )
            return BorrowingDetailDTO.from_entity(detail)

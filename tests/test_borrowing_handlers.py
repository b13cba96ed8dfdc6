"""
Tests for the borrowing workflow handlers.
"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import update

from library_service.application.commands import (
    ExtendBorrowingCommand,
    ExtendBorrowingHandler,
    ReturnBookCommand,
    ReturnBookHandler,
    UpdateBorrowingRequestStatusCommand,
    UpdateBorrowingRequestStatusHandler,
)
from library_service.application.commands.borrowing import append_notes, month_bounds
from library_service.application.queries import (
    GetBookByIdHandler,
    GetBookByIdQuery,
    GetBorrowingRequestByIdHandler,
    GetBorrowingRequestByIdQuery,
    GetOverdueBorrowingsHandler,
    GetOverdueBorrowingsQuery,
    GetPendingRequestsHandler,
    GetPendingRequestsQuery,
    GetUserBorrowingRequestsHandler,
    GetUserBorrowingRequestsQuery,
)
from library_service.core.errors import (
    EntityNotFoundError,
    InvalidOperationError,
    PermissionDeniedError,
    ValidationError,
)
from library_service.models import (
    BookBorrowingRequestDetail,
    BorrowingDetailStatus,
    BorrowingRequestStatus,
    UserType,
)
from library_service.models.database import utcnow


async def get_book(make_uow, book_id: str):
    return await GetBookByIdHandler(make_uow()).handle(GetBookByIdQuery(book_id=book_id))


class TestHelpers:
    def test_month_bounds(self):
        start, end = month_bounds(datetime(2024, 2, 29, 13, 45))

        assert start == datetime(2024, 2, 1)
        assert end == datetime(2024, 3, 1)

    def test_month_bounds_december(self):
        start, end = month_bounds(datetime(2024, 12, 31, 23, 59))

        assert start == datetime(2024, 12, 1)
        assert end == datetime(2025, 1, 1)

    def test_append_notes(self):
        assert append_notes(None, "  first ") == "first"
        assert append_notes("first", "second") == "first\nsecond"
        assert append_notes("first", "   ") == "first"
        assert len(append_notes("x" * 499, "more")) == 500


@pytest.mark.asyncio
class TestCreateBorrowingRequest:
    async def test_create_request(self, reader, create_book, create_request):
        # Arrange
        dune = await create_book(title="Dune")
        emma = await create_book(title="Emma")

        # Act
        request = await create_request(reader, [dune.book_id, emma.book_id], notes="For the holidays")

        # Assert
        assert request.status == BorrowingRequestStatus.WAITING
        assert request.requestor_id == reader.id
        assert request.requestor_name == "Sample Reader"
        assert request.notes == "For the holidays"
        assert {d.book_title for d in request.request_details} == {"Dune", "Emma"}
        assert all(d.status == BorrowingDetailStatus.BORROWING for d in request.request_details)
        assert all(d.due_date is None for d in request.request_details)

    async def test_waiting_request_keeps_copies_available(self, make_uow, reader, create_book, create_request):
        book = await create_book(total_copies=1)

        await create_request(reader, [book.book_id])

        assert (await get_book(make_uow, book.book_id)).available_copies == 1

    async def test_empty_request(self, reader, create_request):
        with pytest.raises(ValidationError):
            await create_request(reader, [])

    async def test_more_than_five_books(self, reader, create_book, create_request):
        books = [await create_book(title=f"Volume {i}") for i in range(6)]

        with pytest.raises(ValidationError) as exc_info:
            await create_request(reader, [b.book_id for b in books])

        assert "book_ids" in exc_info.value.details["errors"]

    async def test_duplicate_books(self, reader, create_book, create_request):
        book = await create_book()

        with pytest.raises(ValidationError):
            await create_request(reader, [book.book_id, book.book_id])

    async def test_unknown_book(self, reader, create_request):
        with pytest.raises(ValidationError) as exc_info:
            await create_request(reader, ["missing"])

        assert "book_ids" in exc_info.value.details["errors"]

    async def test_unavailable_book(
        self, librarian, reader, create_user, create_book, create_request, approve_request
    ):
        # Arrange: the only copy is on loan to someone else
        book = await create_book(total_copies=1)
        other = await create_user("otherreader")
        request = await create_request(other, [book.book_id])
        await approve_request(request.request_id)

        # Act / Assert
        with pytest.raises(ValidationError, match="Validation failed"):
            await create_request(reader, [book.book_id])

    async def test_fourth_request_in_a_month(self, reader, create_book, create_request):
        # Arrange
        book = await create_book(total_copies=5)
        for _ in range(3):
            await create_request(reader, [book.book_id])

        # Act / Assert
        with pytest.raises(InvalidOperationError, match="at most 3"):
            await create_request(reader, [book.book_id])

    async def test_rejected_requests_count_toward_monthly_limit(
        self, make_uow, librarian, reader, create_book, create_request
    ):
        # Arrange: three requests this month, all rejected
        book = await create_book()
        for _ in range(3):
            request = await create_request(reader, [book.book_id])
            await UpdateBorrowingRequestStatusHandler(make_uow()).handle(
                UpdateBorrowingRequestStatusCommand(
                    approver_id=librarian.id,
                    request_id=request.request_id,
                    status=BorrowingRequestStatus.REJECTED,
                )
            )

        # Act / Assert
        with pytest.raises(InvalidOperationError, match="at most 3"):
            await create_request(reader, [book.book_id])

    async def test_active_loan_blocks_new_request(self, reader, create_book, create_request, approve_request):
        book = await create_book()
        request = await create_request(reader, [book.book_id])
        await approve_request(request.request_id)

        with pytest.raises(InvalidOperationError, match="return your borrowed books"):
            await create_request(reader, [book.book_id])

    async def test_notes_too_long(self, reader, create_book, create_request):
        book = await create_book()

        with pytest.raises(ValidationError):
            await create_request(reader, [book.book_id], notes="n" * 501)


@pytest.mark.asyncio
class TestUpdateBorrowingRequestStatus:
    async def test_approve_takes_copies_and_sets_due_dates(
        self, make_uow, librarian, reader, create_book, create_request, approve_request
    ):
        # Arrange
        book = await create_book(total_copies=2)
        request = await create_request(reader, [book.book_id])
        before = utcnow()

        # Act
        approved = await approve_request(request.request_id, due_days=10)

        # Assert
        assert approved.status == BorrowingRequestStatus.APPROVED
        assert approved.approver_id == librarian.id
        assert approved.approval_date is not None
        due = approved.request_details[0].due_date
        assert before + timedelta(days=10) <= due <= utcnow() + timedelta(days=10)
        assert (await get_book(make_uow, book.book_id)).available_copies == 1

    async def test_default_due_days(self, reader, create_book, create_request, approve_request):
        book = await create_book()
        request = await create_request(reader, [book.book_id])

        approved = await approve_request(request.request_id)

        due = approved.request_details[0].due_date
        assert timedelta(days=13) < due - approved.approval_date <= timedelta(days=14)

    async def test_reject_leaves_copies(self, make_uow, librarian, reader, create_book, create_request):
        # Arrange
        book = await create_book(total_copies=1)
        request = await create_request(reader, [book.book_id])

        # Act
        rejected = await UpdateBorrowingRequestStatusHandler(make_uow()).handle(
            UpdateBorrowingRequestStatusCommand(
                approver_id=librarian.id,
                request_id=request.request_id,
                status=BorrowingRequestStatus.REJECTED,
                notes="Reference copy only",
            )
        )

        # Assert
        assert rejected.status == BorrowingRequestStatus.REJECTED
        assert rejected.notes == "Reference copy only"
        assert (await get_book(make_uow, book.book_id)).available_copies == 1

    async def test_waiting_is_not_a_decision(self, uow, librarian, reader, create_book, create_request):
        book = await create_book()
        request = await create_request(reader, [book.book_id])

        with pytest.raises(ValidationError) as exc_info:
            await UpdateBorrowingRequestStatusHandler(uow).handle(
                UpdateBorrowingRequestStatusCommand(
                    approver_id=librarian.id,
                    request_id=request.request_id,
                    status=BorrowingRequestStatus.WAITING,
                )
            )

        assert "status" in exc_info.value.details["errors"]

    async def test_non_positive_due_days(self, reader, create_book, create_request, approve_request):
        book = await create_book()
        request = await create_request(reader, [book.book_id])

        with pytest.raises(ValidationError):
            await approve_request(request.request_id, due_days=0)

    async def test_due_days_above_maximum(self, make_uow, reader, create_book, create_request, approve_request):
        # Arrange
        book = await create_book()
        request = await create_request(reader, [book.book_id])

        # Act
        with pytest.raises(ValidationError) as exc_info:
            await approve_request(request.request_id, due_days=999999999)

        # Assert
        assert "due_days" in exc_info.value.details["errors"]
        assert (await get_book(make_uow, book.book_id)).available_copies == book.available_copies
        assert (await approve_request(request.request_id, due_days=90)).status == BorrowingRequestStatus.APPROVED

    async def test_request_processed_once(self, reader, create_book, create_request, approve_request):
        book = await create_book()
        request = await create_request(reader, [book.book_id])
        await approve_request(request.request_id)

        with pytest.raises(InvalidOperationError):
            await approve_request(request.request_id)

    async def test_approve_when_copies_ran_out(
        self, make_uow, reader, create_user, create_book, create_request, approve_request
    ):
        # Arrange: two waiting requests for the only copy
        book = await create_book(total_copies=1)
        other = await create_user("otherreader")
        first = await create_request(reader, [book.book_id])
        second = await create_request(other, [book.book_id])
        await approve_request(first.request_id)

        # Act / Assert
        with pytest.raises(InvalidOperationError):
            await approve_request(second.request_id)
        assert (await get_book(make_uow, book.book_id)).available_copies == 0

    async def test_unknown_request(self, approve_request):
        with pytest.raises(EntityNotFoundError):
            await approve_request("missing")


@pytest.fixture
def loan(reader, create_book, create_request, approve_request):
    """Approve a one-book request for the reader and return its detail"""

    async def _loan(total_copies: int = 1, due_days: int | None = None):
        book = await create_book(total_copies=total_copies)
        request = await create_request(reader, [book.book_id])
        approved = await approve_request(request.request_id, due_days=due_days)
        return approved.request_details[0]

    return _loan


@pytest.mark.asyncio
class TestReturnBook:
    async def test_return_restores_copy(self, make_uow, reader, loan):
        # Arrange
        detail = await loan()

        # Act
        returned = await ReturnBookHandler(make_uow()).handle(
            ReturnBookCommand(
                user_id=reader.id,
                user_type=UserType.NORMAL_USER,
                detail_id=detail.detail_id,
                notes="Great read",
            )
        )

        # Assert
        assert returned.status == BorrowingDetailStatus.RETURNED
        assert returned.return_date is not None
        assert (await get_book(make_uow, detail.book_id)).available_copies == 1

    async def test_super_user_returns_for_reader(self, make_uow, librarian, loan):
        detail = await loan()

        returned = await ReturnBookHandler(make_uow()).handle(
            ReturnBookCommand(user_id=librarian.id, user_type=UserType.SUPER_USER, detail_id=detail.detail_id)
        )

        assert returned.status == BorrowingDetailStatus.RETURNED

    async def test_other_reader_cannot_return(self, make_uow, create_user, loan):
        detail = await loan()
        other = await create_user("otherreader")

        with pytest.raises(PermissionDeniedError):
            await ReturnBookHandler(make_uow()).handle(
                ReturnBookCommand(user_id=other.id, user_type=UserType.NORMAL_USER, detail_id=detail.detail_id)
            )

    async def test_return_twice(self, make_uow, reader, loan):
        detail = await loan()
        command = ReturnBookCommand(user_id=reader.id, user_type=UserType.NORMAL_USER, detail_id=detail.detail_id)
        await ReturnBookHandler(make_uow()).handle(command)

        with pytest.raises(InvalidOperationError):
            await ReturnBookHandler(make_uow()).handle(command)

    async def test_return_from_waiting_request(self, make_uow, reader, create_book, create_request):
        book = await create_book()
        request = await create_request(reader, [book.book_id])

        with pytest.raises(InvalidOperationError):
            await ReturnBookHandler(make_uow()).handle(
                ReturnBookCommand(
                    user_id=reader.id,
                    user_type=UserType.NORMAL_USER,
                    detail_id=request.request_details[0].detail_id,
                )
            )

    async def test_unknown_detail(self, uow, reader):
        with pytest.raises(EntityNotFoundError):
            await ReturnBookHandler(uow).handle(
                ReturnBookCommand(user_id=reader.id, user_type=UserType.NORMAL_USER, detail_id="missing")
            )


@pytest.mark.asyncio
class TestExtendBorrowing:
    def command(self, reader, detail, new_due_date: datetime) -> ExtendBorrowingCommand:
        return ExtendBorrowingCommand(
            user_id=reader.id,
            user_type=UserType.NORMAL_USER,
            detail_id=detail.detail_id,
            new_due_date=new_due_date,
        )

    async def test_extend_within_limit(self, make_uow, reader, loan):
        # Arrange
        detail = await loan()
        new_due = detail.due_date + timedelta(days=7)

        # Act
        extended = await ExtendBorrowingHandler(make_uow()).handle(self.command(reader, detail, new_due))

        # Assert
        assert extended.status == BorrowingDetailStatus.EXTENDED
        assert extended.due_date == new_due
        assert extended.extension_date is not None

    async def test_extend_beyond_limit(self, make_uow, reader, loan):
        detail = await loan()

        with pytest.raises(ValidationError) as exc_info:
            await ExtendBorrowingHandler(make_uow()).handle(
                self.command(reader, detail, detail.due_date + timedelta(days=8))
            )

        assert "new_due_date" in exc_info.value.details["errors"]

    async def test_extend_to_the_past(self, make_uow, reader, loan):
        detail = await loan()

        with pytest.raises(ValidationError):
            await ExtendBorrowingHandler(make_uow()).handle(
                self.command(reader, detail, utcnow() - timedelta(days=1))
            )

    async def test_extend_only_once(self, make_uow, reader, loan):
        detail = await loan()
        await ExtendBorrowingHandler(make_uow()).handle(
            self.command(reader, detail, detail.due_date + timedelta(days=3))
        )

        with pytest.raises(InvalidOperationError):
            await ExtendBorrowingHandler(make_uow()).handle(
                self.command(reader, detail, detail.due_date + timedelta(days=5))
            )

    async def test_extended_book_can_be_returned(self, make_uow, reader, loan):
        detail = await loan()
        await ExtendBorrowingHandler(make_uow()).handle(
            self.command(reader, detail, detail.due_date + timedelta(days=2))
        )

        returned = await ReturnBookHandler(make_uow()).handle(
            ReturnBookCommand(user_id=reader.id, user_type=UserType.NORMAL_USER, detail_id=detail.detail_id)
        )

        assert returned.status == BorrowingDetailStatus.RETURNED


@pytest.mark.asyncio
class TestBorrowingQueries:
    async def test_overdue_loans(self, make_uow, session_factory, reader, loan):
        # Arrange: push the due date into the past
        detail = await loan()
        async with session_factory() as session:
            await session.execute(
                update(BookBorrowingRequestDetail)
                .where(BookBorrowingRequestDetail.id == detail.detail_id)
                .values(due_date=utcnow() - timedelta(days=3, hours=1))
            )
            await session.commit()

        # Act
        result = await GetOverdueBorrowingsHandler(make_uow()).handle(GetOverdueBorrowingsQuery())

        # Assert
        assert result.total_count == 1
        overdue = result.items[0]
        assert overdue.detail_id == detail.detail_id
        assert overdue.requestor_id == reader.id
        assert overdue.days_overdue == 3

    async def test_extended_loan_past_new_due_date_is_overdue(self, make_uow, session_factory, reader, loan):
        # Arrange: extend, then let the new due date pass
        detail = await loan()
        await ExtendBorrowingHandler(make_uow()).handle(
            ExtendBorrowingCommand(
                user_id=reader.id,
                user_type=UserType.NORMAL_USER,
                detail_id=detail.detail_id,
                new_due_date=detail.due_date + timedelta(days=5),
            )
        )
        async with session_factory() as session:
            await session.execute(
                update(BookBorrowingRequestDetail)
                .where(BookBorrowingRequestDetail.id == detail.detail_id)
                .values(due_date=utcnow() - timedelta(days=1, hours=1))
            )
            await session.commit()

        # Act
        result = await GetOverdueBorrowingsHandler(make_uow()).handle(GetOverdueBorrowingsQuery())

        # Assert
        assert [d.detail_id for d in result.items] == [detail.detail_id]
        assert result.items[0].status == BorrowingDetailStatus.EXTENDED
        assert result.items[0].days_overdue == 1

    async def test_nothing_overdue(self, make_uow, loan):
        await loan()

        result = await GetOverdueBorrowingsHandler(make_uow()).handle(GetOverdueBorrowingsQuery())

        assert result.total_count == 0

    async def test_pending_requests(self, make_uow, reader, create_book, create_request, approve_request):
        book = await create_book(total_copies=3)
        first = await create_request(reader, [book.book_id])
        second = await create_request(reader, [book.book_id])
        await approve_request(first.request_id)

        result = await GetPendingRequestsHandler(make_uow()).handle(GetPendingRequestsQuery())

        assert [r.request_id for r in result.items] == [second.request_id]

    async def test_request_visible_to_owner_and_super_user(
        self, make_uow, reader, librarian, create_user, create_book, create_request
    ):
        book = await create_book()
        request = await create_request(reader, [book.book_id])
        other = await create_user("otherreader")

        own = await GetBorrowingRequestByIdHandler(make_uow()).handle(
            GetBorrowingRequestByIdQuery(
                request_id=request.request_id, user_id=reader.id, user_type=UserType.NORMAL_USER
            )
        )
        staff = await GetBorrowingRequestByIdHandler(make_uow()).handle(
            GetBorrowingRequestByIdQuery(
                request_id=request.request_id, user_id=librarian.id, user_type=UserType.SUPER_USER
            )
        )
        assert own.request_id == staff.request_id == request.request_id

        with pytest.raises(PermissionDeniedError):
            await GetBorrowingRequestByIdHandler(make_uow()).handle(
                GetBorrowingRequestByIdQuery(
                    request_id=request.request_id, user_id=other.id, user_type=UserType.NORMAL_USER
                )
            )

    async def test_user_requests_of_another_user(self, make_uow, reader, create_user):
        other = await create_user("otherreader")

        with pytest.raises(PermissionDeniedError):
            await GetUserBorrowingRequestsHandler(make_uow()).handle(
                GetUserBorrowingRequestsQuery(
                    requestor_id=reader.id, user_id=other.id, user_type=UserType.NORMAL_USER
                )
            )

"""
Integration tests for the repositories against in-memory SQLite.
"""

from datetime import timedelta

import pytest

from library_service.infrastructure.persistence import UnitOfWork
from library_service.models import BorrowingDetailStatus
from library_service.models.database import utcnow


class TestUserRepository:
    @pytest.mark.asyncio
    async def test_email_lookup_is_case_insensitive(self, uow: UnitOfWork):
        async with uow:
            user = await uow.users.get_by_email("ADMIN@library.local")

            assert user is not None
            assert user.username == "admin"

    @pytest.mark.asyncio
    async def test_email_exists_excludes_user(self, uow: UnitOfWork, admin):
        async with uow:
            assert await uow.users.email_exists("admin@library.local") is True
            assert await uow.users.email_exists("admin@library.local", exclude_user_id=admin.id) is False

    @pytest.mark.asyncio
    async def test_search_orders_by_id_and_counts(self, uow: UnitOfWork):
        async with uow:
            users, total = await uow.users.search("LIBRARIAN", page_number=1, page_size=10)

            assert total == 1
            assert [u.username for u in users] == ["librarian"]

            users, total = await uow.users.search("library.local", page_number=1, page_size=10)

            assert total == 3
            assert [u.username for u in users] == ["admin", "librarian", "user1"]

    @pytest.mark.asyncio
    async def test_search_pages(self, uow: UnitOfWork):
        async with uow:
            users, total = await uow.users.search(None, page_number=2, page_size=2)

            assert total == 3
            assert [u.username for u in users] == ["user1"]

    @pytest.mark.asyncio
    async def test_search_wildcards_match_literally(self, uow: UnitOfWork):
        async with uow:
            assert (await uow.users.search("%", page_number=1, page_size=10))[1] == 0
            assert (await uow.users.search("_", page_number=1, page_size=10))[1] == 0


class TestCategoryRepository:
    @pytest.mark.asyncio
    async def test_name_exists_is_case_insensitive(self, uow: UnitOfWork, categories):
        async with uow:
            assert await uow.categories.name_exists("fiction") is True
            assert await uow.categories.name_exists("FICTION", exclude_id=categories["Fiction"].id) is False

    @pytest.mark.asyncio
    async def test_get_all_sorted_by_name_desc(self, uow: UnitOfWork):
        async with uow:
            items = await uow.categories.get_all(1, 3, sort_by="name", sort_order="desc")

            assert [c.category_name for c in items] == ["Technology", "Science", "Non-Fiction"]

    @pytest.mark.asyncio
    async def test_search_matches_description(self, uow: UnitOfWork):
        async with uow:
            assert await uow.categories.count_matching("memoirs") == 1

    @pytest.mark.asyncio
    async def test_search_percent_is_not_a_wildcard(self, uow: UnitOfWork):
        async with uow:
            assert await uow.categories.count_matching("%") == 0


class TestBookRepository:
    @pytest.mark.asyncio
    async def test_filters_and_sorting(self, make_uow, create_book):
        await create_book("Dune", author="Frank Herbert")
        await create_book("Children of Dune", author="Frank Herbert")
        await create_book("Cosmos", author="Carl Sagan", category="Science")

        async with make_uow() as uow:
            books, total = await uow.books.get_all(1, 10, sort_by="title", title="dune")

            assert total == 2
            assert [b.title for b in books] == ["Children of Dune", "Dune"]

            books, total = await uow.books.get_all(1, 10, sort_by="category", sort_order="desc")

            assert total == 3
            assert books[0].title == "Cosmos"

    @pytest.mark.asyncio
    async def test_title_filter_escapes_like_wildcards(self, make_uow, create_book):
        await create_book("100% Wool")
        await create_book("1000 Wool Patterns")
        await create_book("snake_case Style", author="A_B Writer")
        await create_book("snakescase Style", author="AxB Writer")

        async with make_uow() as uow:
            books, total = await uow.books.get_all(1, 10, title="100%")
            assert total == 1
            assert books[0].title == "100% Wool"

            books, total = await uow.books.get_all(1, 10, title="e_c")
            assert [b.title for b in books] == ["snake_case Style"]

            books, total = await uow.books.get_all(1, 10, author="a_b")
            assert [b.author for b in books] == ["A_B Writer"]

    @pytest.mark.asyncio
    async def test_inactive_books_hidden_from_listings(self, make_uow, create_book):
        visible = await create_book("Visible")
        hidden = await create_book("Hidden")

        async with make_uow() as uow:
            book = await uow.books.get(hidden.book_id)
            book.is_active = False

        async with make_uow() as uow:
            books, total = await uow.books.get_all(1, 10)

            assert total == 1
            assert books[0].id == visible.book_id
            assert await uow.books.count_active() == 1
            assert await uow.books.get(hidden.book_id) is not None

    @pytest.mark.asyncio
    async def test_available_excludes_exhausted_books(self, make_uow, create_book):
        await create_book("Plenty", total_copies=2)
        scarce = await create_book("Scarce", total_copies=1)

        async with make_uow() as uow:
            book = await uow.books.get(scarce.book_id)
            book.available_copies = 0

        async with make_uow() as uow:
            available = await uow.books.get_available(1, 10)

            assert [b.title for b in available] == ["Plenty"]
            assert await uow.books.count_available() == 1


class TestBorrowingRepositories:
    @pytest.mark.asyncio
    async def test_active_loans_only_after_approval(
        self, make_uow, create_book, create_request, approve_request, reader
    ):
        book = await create_book()
        request = await create_request(reader, [book.book_id])

        async with make_uow() as uow:
            assert await uow.borrowing_requests.has_active_loans(reader.id) is False

        await approve_request(request.request_id)

        async with make_uow() as uow:
            assert await uow.borrowing_requests.has_active_loans(reader.id) is True
            assert await uow.books.has_active_borrowings(book.book_id) is True

    @pytest.mark.asyncio
    async def test_requests_counted_within_month(self, make_uow, create_book, create_request, reader):
        book = await create_book()
        await create_request(reader, [book.book_id])

        now = utcnow()
        async with make_uow() as uow:
            assert await uow.borrowing_requests.count_user_requests_between(
                reader.id, now - timedelta(days=1), now + timedelta(days=1)
            ) == 1
            assert await uow.borrowing_requests.count_user_requests_between(
                reader.id, now + timedelta(days=1), now + timedelta(days=2)
            ) == 0

    @pytest.mark.asyncio
    async def test_overdue_includes_extended_and_skips_returned(
        self, make_uow, create_book, create_request, approve_request, reader
    ):
        first = await create_book("First")
        second = await create_book("Second")
        third = await create_book("Third")
        request = await create_request(reader, [first.book_id, second.book_id, third.book_id])
        await approve_request(request.request_id)

        past = utcnow() - timedelta(days=3)
        async with make_uow() as uow:
            loaded = await uow.borrowing_requests.get(request.request_id)
            statuses = {
                first.book_id: BorrowingDetailStatus.BORROWING,
                second.book_id: BorrowingDetailStatus.EXTENDED,
                third.book_id: BorrowingDetailStatus.RETURNED,
            }
            for detail in loaded.details:
                detail.due_date = past
                detail.status = statuses[detail.book_id]
                if detail.status == BorrowingDetailStatus.RETURNED:
                    detail.return_date = utcnow()

        async with make_uow() as uow:
            details, total = await uow.borrowing_details.get_overdue(utcnow(), 1, 10)

            assert total == 2
            assert {d.book_id for d in details} == {first.book_id, second.book_id}

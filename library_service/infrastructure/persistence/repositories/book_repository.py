"""Book repository"""

from typing import Optional, Sequence

from sqlalchemy import func, select

from ....models.book import Book
from ....models.borrowing import BookBorrowingRequest, BookBorrowingRequestDetail
from ....models.category import Category
from ....models.enums import BorrowingDetailStatus, BorrowingRequestStatus
from .base import LIKE_ESCAPE, SqlAlchemyRepository, contains_pattern

SORT_COLUMNS = {
    "title": Book.title,
    "author": Book.author,
    "category": Category.category_name,
    "year": Book.published_year,
    "available": Book.available_copies,
    "publisher": Book.publisher,
}

# Detail statuses that keep a copy out of the library
ON_LOAN_STATUSES = (BorrowingDetailStatus.BORROWING, BorrowingDetailStatus.EXTENDED)


class BookRepository(SqlAlchemyRepository[Book]):
    """Data access for books"""

    model = Book

    async def get_many(self, book_ids: Sequence[str]) -> dict[str, Book]:
        """Load several books at once, keyed by id"""
        if not book_ids:
            return {}
        result = await self._db.execute(select(Book).where(Book.id.in_(book_ids)))
        return {book.id: book for book in result.scalars().all()}

    async def isbn_exists(self, isbn: str, exclude_id: Optional[str] = None) -> bool:
        stmt = select(Book.id).where(Book.isbn == isbn)
        if exclude_id is not None:
            stmt = stmt.where(Book.id != exclude_id)
        result = await self._db.execute(stmt.limit(1))
        return result.first() is not None

    async def has_active_borrowings(self, book_id: str) -> bool:
        """True if the book is on loan or requested in a waiting request"""
        result = await self._db.execute(
            select(BookBorrowingRequestDetail.id)
            .join(BookBorrowingRequest, BookBorrowingRequestDetail.request_id == BookBorrowingRequest.id)
            .where(
                BookBorrowingRequestDetail.book_id == book_id,
                BookBorrowingRequestDetail.status.in_(ON_LOAN_STATUSES),
                BookBorrowingRequest.status != BorrowingRequestStatus.REJECTED,
            )
            .limit(1)
        )
        return result.first() is not None

    async def has_borrowing_history(self, book_id: str) -> bool:
        result = await self._db.execute(
            select(BookBorrowingRequestDetail.id)
            .where(BookBorrowingRequestDetail.book_id == book_id)
            .limit(1)
        )
        return result.first() is not None

    def _filtered(
        self,
        title: Optional[str] = None,
        author: Optional[str] = None,
        category_id: Optional[str] = None,
        available_only: bool = False,
    ):
        stmt = (
            select(Book)
            .join(Category, Book.category_id == Category.id)
            .where(Book.is_active.is_(True))
        )
        if title and title.strip():
            stmt = stmt.where(func.lower(Book.title).like(contains_pattern(title), escape=LIKE_ESCAPE))
        if author and author.strip():
            stmt = stmt.where(func.lower(Book.author).like(contains_pattern(author), escape=LIKE_ESCAPE))
        if category_id:
            stmt = stmt.where(Book.category_id == category_id)
        if available_only:
            stmt = stmt.where(Book.available_copies > 0)
        return stmt

    async def get_all(
        self,
        page_number: int,
        page_size: int,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        title: Optional[str] = None,
        author: Optional[str] = None,
        category_id: Optional[str] = None,
        available_only: bool = False,
    ) -> tuple[Sequence[Book], int]:
        """
        List books with optional filters and sorting.

        Unknown or missing sort keys order by id.

        Returns:
            Tuple of (page of books, total matching count)
        """
        stmt = self._filtered(title, author, category_id, available_only)
        total = await self._count(stmt)

        column = SORT_COLUMNS.get((sort_by or "").lower())
        if column is None:
            stmt = stmt.order_by(Book.id)
        elif (sort_order or "").lower() == "desc":
            stmt = stmt.order_by(column.desc(), Book.id)
        else:
            stmt = stmt.order_by(column.asc(), Book.id)

        books = await self._page(stmt, page_number, page_size)
        return books, total

    async def get_by_category(self, category_id: str, page_number: int, page_size: int) -> Sequence[Book]:
        stmt = (
            select(Book)
            .where(Book.category_id == category_id, Book.is_active.is_(True))
            .order_by(Book.title, Book.id)
        )
        return await self._page(stmt, page_number, page_size)

    async def get_available(self, page_number: int, page_size: int) -> Sequence[Book]:
        stmt = (
            select(Book)
            .where(Book.available_copies > 0, Book.is_active.is_(True))
            .order_by(Book.title, Book.id)
        )
        return await self._page(stmt, page_number, page_size)

    async def count_by_category(self, category_id: str) -> int:
        result = await self._db.execute(
            select(func.count(Book.id)).where(Book.category_id == category_id, Book.is_active.is_(True))
        )
        return result.scalar_one()

    async def count_active(self) -> int:
        result = await self._db.execute(select(func.count(Book.id)).where(Book.is_active.is_(True)))
        return result.scalar_one()

    async def count_available(self) -> int:
        result = await self._db.execute(
            select(func.count(Book.id)).where(Book.available_copies > 0, Book.is_active.is_(True))
        )
        return result.scalar_one()

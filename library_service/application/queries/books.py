"""
Book catalog queries.

Deactivated books stay reachable by id but are left out of listings
and counts.
"""

from typing import Optional

from ...core.errors import EntityNotFoundError
from ...infrastructure.persistence import UnitOfWork
from ..dto import BookDTO, BookListItemDTO, PagedResultDTO
from .base import PagedQuery, Query, QueryHandler

MAX_BOOK_PAGE_SIZE = 50


class GetBookByIdQuery(Query):
    book_id: str


class GetBookByIdHandler(QueryHandler[BookDTO]):
    """
    Handler for GetBookByIdQuery.

    Raises:
        EntityNotFoundError: If the book does not exist
    """

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetBookByIdQuery) -> BookDTO:
        async with self._uow as uow:
            book = await uow.books.get(query.book_id)
            if book is None:
                raise EntityNotFoundError("Book", query.book_id)
            return BookDTO.from_entity(book)


class GetAllBooksQuery(PagedQuery):
    """
    Search the catalog.

    Attributes:
        sort_by: title, author, category, year, available or publisher;
            anything else orders by id
        sort_order: "asc" (default) or "desc"
        title: Case-insensitive substring of the title
        author: Case-insensitive substring of the author
        category_id: Exact category
        available_only: Only books with an available copy
    """

    sort_by: Optional[str] = None
    sort_order: Optional[str] = None
    title: Optional[str] = None
    author: Optional[str] = None
    category_id: Optional[str] = None
    available_only: bool = False


class GetAllBooksHandler(QueryHandler[PagedResultDTO[BookListItemDTO]]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetAllBooksQuery) -> PagedResultDTO[BookListItemDTO]:
        query.ensure_valid_page(max_page_size=MAX_BOOK_PAGE_SIZE)

        async with self._uow as uow:
            books, total = await uow.books.get_all(
                query.page_number,
                query.page_size,
                sort_by=query.sort_by,
                sort_order=query.sort_order,
                title=query.title,
                author=query.author,
                category_id=query.category_id,
                available_only=query.available_only,
            )
            return PagedResultDTO[BookListItemDTO](
                items=[BookListItemDTO.from_entity(b) for b in books],
                total_count=total,
                page_number=query.page_number,
                page_size=query.page_size,
            )


class GetBooksByCategoryQuery(PagedQuery):
    category_id: str


class GetBooksByCategoryHandler(QueryHandler[PagedResultDTO[BookListItemDTO]]):
    """
    Handler for GetBooksByCategoryQuery; books are ordered by title.

    Raises:
        EntityNotFoundError: If the category does not exist
    """

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetBooksByCategoryQuery) -> PagedResultDTO[BookListItemDTO]:
        query.ensure_valid_page(max_page_size=MAX_BOOK_PAGE_SIZE)

        async with self._uow as uow:
            if await uow.categories.get(query.category_id) is None:
                raise EntityNotFoundError("Category", query.category_id)

            books = await uow.books.get_by_category(query.category_id, query.page_number, query.page_size)
            total = await uow.books.count_by_category(query.category_id)
            return PagedResultDTO[BookListItemDTO](
                items=[BookListItemDTO.from_entity(b) for b in books],
                total_count=total,
                page_number=query.page_number,
                page_size=query.page_size,
            )


class GetAvailableBooksQuery(PagedQuery):
    pass


class GetAvailableBooksHandler(QueryHandler[PagedResultDTO[BookListItemDTO]]):
    """Active books with at least one available copy, ordered by title"""

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetAvailableBooksQuery) -> PagedResultDTO[BookListItemDTO]:
        query.ensure_valid_page(max_page_size=MAX_BOOK_PAGE_SIZE)

        async with self._uow as uow:
            books = await uow.books.get_available(query.page_number, query.page_size)
            total = await uow.books.count_available()
            return PagedResultDTO[BookListItemDTO](
                items=[BookListItemDTO.from_entity(b) for b in books],
                total_count=total,
                page_number=query.page_number,
                page_size=query.page_size,
            )


class CountBooksQuery(Query):
    pass


class CountBooksHandler(QueryHandler[int]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: CountBooksQuery) -> int:
        async with self._uow as uow:
            return await uow.books.count_active()


class CountBooksByCategoryQuery(Query):
    category_id: str


class CountBooksByCategoryHandler(QueryHandler[int]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: CountBooksByCategoryQuery) -> int:
        async with self._uow as uow:
            return await uow.books.count_by_category(query.category_id)


class CountAvailableBooksQuery(Query):
    pass


class CountAvailableBooksHandler(QueryHandler[int]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: CountAvailableBooksQuery) -> int:
        async with self._uow as uow:
            return await uow.books.count_available()

"""
Category queries.
"""

from typing import Optional

from ...core.errors import EntityNotFoundError
from ...infrastructure.persistence import UnitOfWork
from ..dto import CategoryDTO, PagedResultDTO
from .base import PagedQuery, Query, QueryHandler


class GetCategoryByIdQuery(Query):
    category_id: str


class GetCategoryByIdHandler(QueryHandler[CategoryDTO]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetCategoryByIdQuery) -> CategoryDTO:
        async with self._uow as uow:
            category = await uow.categories.get(query.category_id)
            if category is None:
                raise EntityNotFoundError("Category", query.category_id)
            return CategoryDTO.from_entity(category)


class GetAllCategoriesQuery(PagedQuery):
    """
    List categories.

    Attributes:
        search_term: Case-insensitive match on name or description
        sort_by: "name" (default) or "created"
        sort_order: "asc" (default) or "desc"
    """

    search_term: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


class GetAllCategoriesHandler(QueryHandler[PagedResultDTO[CategoryDTO]]):
    """Handler for GetAllCategoriesQuery"""

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetAllCategoriesQuery) -> PagedResultDTO[CategoryDTO]:
        query.ensure_valid_page(max_page_size=100)

        async with self._uow as uow:
            categories = await uow.categories.get_all(
                query.page_number,
                query.page_size,
                search_term=query.search_term,
                sort_by=query.sort_by,
                sort_order=query.sort_order,
            )
            total = await uow.categories.count_matching(query.search_term)
            return PagedResultDTO[CategoryDTO](
                items=[CategoryDTO.from_entity(c) for c in categories],
                total_count=total,
                page_number=query.page_number,
                page_size=query.page_size,
            )


class CountCategoriesQuery(Query):
    search_term: Optional[str] = None


class CountCategoriesHandler(QueryHandler[int]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: CountCategoriesQuery) -> int:
        async with self._uow as uow:
            return await uow.categories.count_matching(query.search_term)

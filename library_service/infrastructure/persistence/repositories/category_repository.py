"""Category repository"""

from typing import Optional, Sequence

from sqlalchemy import func, or_, select

from ....models.book import Book
from ....models.category import Category
from .base import LIKE_ESCAPE, SqlAlchemyRepository, contains_pattern

SORT_COLUMNS = {
    "name": Category.category_name,
    "created": Category.created_date,
}


class CategoryRepository(SqlAlchemyRepository[Category]):
    """Data access for categories"""

    model = Category

    async def name_exists(self, name: str, exclude_id: Optional[str] = None) -> bool:
        """Case-insensitive name uniqueness check"""
        stmt = select(Category.id).where(
            func.lower(Category.category_name) == name.strip().lower()
        )
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        result = await self._db.execute(stmt.limit(1))
        return result.first() is not None

    async def has_books(self, category_id: str) -> bool:
        result = await self._db.execute(
            select(Book.id).where(Book.category_id == category_id).limit(1)
        )
        return result.first() is not None

    def _search(self, search_term: Optional[str]):
        stmt = select(Category)
        if search_term and search_term.strip():
            pattern = contains_pattern(search_term)
            stmt = stmt.where(
                or_(
                    func.lower(Category.category_name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(Category.description).like(pattern, escape=LIKE_ESCAPE),
                )
            )
        return stmt

    async def get_all(
        self,
        page_number: int,
        page_size: int,
        search_term: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
    ) -> Sequence[Category]:
        """List categories; unknown sort keys fall back to name order"""
        column = SORT_COLUMNS.get((sort_by or "").lower(), Category.category_name)
        order = column.desc() if (sort_order or "").lower() == "desc" else column.asc()
        stmt = self._search(search_term).order_by(order, Category.id)
        return await self._page(stmt, page_number, page_size)

    async def count_matching(self, search_term: Optional[str] = None) -> int:
        return await self._count(self._search(search_term))

"""
Base repository for SQLAlchemy models.

Wraps an AsyncSession and provides the CRUD operations shared by
every concrete repository.
"""

from typing import Any, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ....models.database import Base

T = TypeVar("T", bound=Base)

LIKE_ESCAPE = "\\"


def contains_pattern(term: str) -> str:
    """Case-folded LIKE pattern matching `term` literally anywhere in a value"""
    term = term.strip().lower()
    for char in (LIKE_ESCAPE, "%", "_"):
        term = term.replace(char, LIKE_ESCAPE + char)
    return f"%{term}%"


class SqlAlchemyRepository(Generic[T]):
    """
    Generic repository bound to one model class.

    Attributes:
        model: Model class managed by the repository
        _db: Database session owned by the unit of work

    Example:
        >>> class CategoryRepository(SqlAlchemyRepository[Category]):
        ...     model = Category
    """

    model: Type[T]

    def __init__(self, db: AsyncSession):
        self._db = db

    async def get(self, id: Any) -> Optional[T]:
        """Get an entity by primary key, None if missing"""
        return await self._db.get(self.model, id)

    async def add(self, entity: T) -> T:
        """Add a new entity and flush so generated keys are populated"""
        self._db.add(entity)
        await self._db.flush()
        return entity

    async def delete(self, entity: T) -> None:
        await self._db.delete(entity)
        await self._db.flush()

    async def count(self) -> int:
        result = await self._db.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    async def _count(self, stmt: Select) -> int:
        """Count rows produced by a select statement"""
        count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
        result = await self._db.execute(count_stmt)
        return result.scalar_one()

    async def _page(self, stmt: Select, page_number: int, page_size: int) -> Sequence[T]:
        """Execute a select statement for one page of results"""
        stmt = stmt.offset((page_number - 1) * page_size).limit(page_size)
        result = await self._db.execute(stmt)
        return result.scalars().all()

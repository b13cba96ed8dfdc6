"""
Base classes for queries.

A query reads data without changing system state. A query handler
loads entities through repositories and maps them to DTOs.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

from ...core.errors import ValidationError
from ...utils.validators import validate_page

# Result type of a query handler
TResult = TypeVar('TResult')


class Query(BaseModel, ABC):
    """
    Base class for queries.

    Queries are immutable and carry every parameter of the read,
    including paging. They must never change state.

    Example:
        >>> class GetBookByIdQuery(Query):
        ...     book_id: str
    """

    model_config = ConfigDict(frozen=True)


class PagedQuery(Query):
    """Query with 1-based paging parameters"""

    page_number: int = 1
    page_size: int = 10

    def ensure_valid_page(self, max_page_size: int = 100) -> None:
        """Raise ValidationError if paging is out of range"""
        is_valid, error = validate_page(self.page_number, self.page_size, max_page_size)
        if not is_valid:
            raise ValidationError.single("page", error)


class QueryHandler(ABC, Generic[TResult]):
    """
    Base class for query handlers.

    Type Parameters:
        TResult: Result type of the query

    Example:
        >>> class GetBookByIdHandler(QueryHandler[Optional[BookDTO]]):
        ...     async def handle(self, query: GetBookByIdQuery) -> Optional[BookDTO]:
        ...         async with self._uow as uow:
        ...             book = await uow.books.get(query.book_id)
        ...             return BookDTO.from_entity(book) if book else None
    """

    @abstractmethod
    async def handle(self, query: Query) -> TResult:
        """
        Handle the query.

        Args:
            query: Query to handle

        Returns:
            Query result

        Raises:
            DomainError: When query parameters break a rule
        """
        pass

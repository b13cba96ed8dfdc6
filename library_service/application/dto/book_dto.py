"""
Data Transfer Objects for books.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...models.book import Book


class BookListItemDTO(BaseModel):
    """
    Book row used in lists.

    The category name is read through the book's category relationship,
    which must already be loaded.
    """

    book_id: str
    title: str
    author: str
    isbn: str
    published_year: Optional[int] = None
    publisher: Optional[str] = None
    total_copies: int
    available_copies: int
    category_id: str
    category_name: Optional[str] = None
    is_active: bool

    @classmethod
    def from_entity(cls, book: Book) -> "BookListItemDTO":
        return cls(
            book_id=book.id,
            title=book.title,
            author=book.author,
            isbn=book.isbn,
            published_year=book.published_year,
            publisher=book.publisher,
            total_copies=book.total_copies,
            available_copies=book.available_copies,
            category_id=book.category_id,
            category_name=book.category.category_name if book.category else None,
            is_active=book.is_active,
        )


class BookDTO(BookListItemDTO):
    """Full book details"""

    description: Optional[str] = None
    created_date: datetime

    @classmethod
    def from_entity(cls, book: Book) -> "BookDTO":
        base = BookListItemDTO.from_entity(book)
        return cls(
            **base.model_dump(),
            description=book.description,
            created_date=book.created_date,
        )

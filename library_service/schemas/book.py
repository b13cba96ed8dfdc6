"""Book schemas"""

from pydantic import BaseModel, Field


class BookRequest(BaseModel):
    """Schema for creating or updating a book"""

    title: str = Field(..., max_length=200)
    author: str = Field(..., max_length=100)
    category_id: str
    isbn: str = Field(..., max_length=13)
    published_year: int | None = None
    publisher: str | None = Field(None, max_length=100)
    description: str | None = Field(None, max_length=2000)
    total_copies: int

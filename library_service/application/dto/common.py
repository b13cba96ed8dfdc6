"""
Generic DTOs shared by several queries.
"""

import math
from typing import Generic, List, TypeVar

from pydantic import BaseModel, Field, computed_field

T = TypeVar("T")


class PagedResultDTO(BaseModel, Generic[T]):
    """
    One page of query results.

    Attributes:
        items: Items on the page
        total_count: Number of items across all pages
        page_number: 1-based page number
        page_size: Requested page size
    """

    items: List[T] = Field(default_factory=list)
    total_count: int
    page_number: int
    page_size: int

    @computed_field
    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

"""
Data Transfer Objects for categories.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ...models.category import Category


class CategoryDTO(BaseModel):
    """Category details"""

    category_id: str
    category_name: str
    description: Optional[str] = None
    created_date: datetime

    @classmethod
    def from_entity(cls, category: Category) -> "CategoryDTO":
        return cls(
            category_id=category.id,
            category_name=category.category_name,
            description=category.description,
            created_date=category.created_date,
        )

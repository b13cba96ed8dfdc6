"""Category schemas"""

from pydantic import BaseModel, Field


class CategoryRequest(BaseModel):
    """Schema for creating or updating a category"""

    category_name: str = Field(..., max_length=100)
    description: str | None = Field(None, max_length=500)

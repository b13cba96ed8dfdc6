"""User and administration schemas"""

from typing import List

from pydantic import BaseModel, EmailStr, Field

from library_service.application.dto import UserDTO
from library_service.models.enums import UserType


class UpdateProfileRequest(BaseModel):
    """Schema for updating the caller's profile"""

    email: EmailStr | None = None
    full_name: str | None = Field(None, max_length=100)


class UpdatePasswordRequest(BaseModel):
    """Schema for changing the caller's password"""

    current_password: str = Field(..., min_length=1, max_length=255)
    new_password: str = Field(..., max_length=255)
    confirm_password: str = Field(..., max_length=255)


class UpdateUserRoleRequest(BaseModel):
    """Schema for changing a user's role"""

    user_type: UserType


class UserListResponse(BaseModel):
    """One page of users"""

    data: List[UserDTO]
    page: int
    page_size: int
    total_count: int
    total_pages: int

"""
Data Transfer Objects for users and their activity logs.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ...models.activity_log import UserActivityLog
from ...models.enums import UserType
from ...models.user import User


class UserDTO(BaseModel):
    """
    Full user information, without credentials.

    Example:
        >>> dto = UserDTO.from_entity(user)
        >>> dto.user_type
        <UserType.NORMAL_USER: 'NormalUser'>
    """

    user_id: int
    username: str
    email: str
    full_name: str
    user_type: UserType
    is_active: bool
    created_date: datetime
    last_login_date: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> "UserDTO":
        return cls(
            user_id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            user_type=user.user_type,
            is_active=user.is_active,
            created_date=user.created_date,
            last_login_date=user.last_login_date,
        )


class UserInfoDTO(BaseModel):
    """Short user information returned with authentication results"""

    user_id: int
    username: str
    email: str
    full_name: str
    user_type: UserType

    @classmethod
    def from_entity(cls, user: User) -> "UserInfoDTO":
        return cls(
            user_id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            user_type=user.user_type,
        )


class ActivityLogDTO(BaseModel):
    """Single activity log entry"""

    log_id: int
    user_id: int
    activity_type: str
    activity_date: datetime
    details: Optional[str] = None
    ip_address: Optional[str] = Field(default=None, description="Client IP address")

    @classmethod
    def from_entity(cls, log: UserActivityLog) -> "ActivityLogDTO":
        return cls(
            log_id=log.id,
            user_id=log.user_id,
            activity_type=log.activity_type,
            activity_date=log.activity_date,
            details=log.details,
            ip_address=log.ip_address,
        )

"""
Data Transfer Objects for authentication results.
"""

from pydantic import BaseModel

from .user_dto import UserInfoDTO


class AuthResultDTO(BaseModel):
    """
    Result of a successful login or token refresh.

    Attributes:
        token: Access token (JWT)
        refresh_token: Refresh token (JWT)
        expires_in: Access token lifetime in seconds
        user: Authenticated user
    """

    token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int
    user: UserInfoDTO

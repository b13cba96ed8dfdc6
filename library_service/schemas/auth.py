"""Authentication request schemas"""

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    """Schema for registering an account"""

    username: str = Field(..., max_length=50)
    password: str = Field(..., max_length=255)
    email: EmailStr
    full_name: str = Field(..., max_length=100)


class LoginRequest(BaseModel):
    """Schema for logging in"""

    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=255)


class RefreshTokenRequest(BaseModel):
    """Schema for rotating a refresh token"""

    token: str = Field(..., min_length=1, description="Access token, may be expired")
    refresh_token: str = Field(..., min_length=1)


class LogoutRequest(BaseModel):
    """Schema for logging out"""

    refresh_token: str = Field(..., min_length=1)

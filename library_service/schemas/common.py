"""Shared response schemas"""

from pydantic import BaseModel


class CountResponse(BaseModel):
    count: int


class MessageResponse(BaseModel):
    success: bool = True
    message: str

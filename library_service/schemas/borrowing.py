"""Borrowing schemas"""

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from library_service.application.dto import BorrowingRequestDTO
from library_service.models.enums import BorrowingRequestStatus


class CreateBorrowingRequest(BaseModel):
    """Schema for requesting books"""

    book_ids: List[str] = Field(..., description="Ids of 1-5 distinct books")
    notes: str | None = Field(None, max_length=500)


class UpdateBorrowingStatusRequest(BaseModel):
    """Schema for approving or rejecting a request"""

    status: BorrowingRequestStatus
    notes: str | None = Field(None, max_length=500)
    due_days: int | None = Field(None, description="Loan length in days, defaults to 14")


class ReturnBookRequest(BaseModel):
    """Schema for returning a borrowed book"""

    notes: str | None = Field(None, max_length=500)


class ExtendBorrowingRequest(BaseModel):
    """Schema for extending a loan"""

    new_due_date: datetime
    notes: str | None = Field(None, max_length=500)


class BorrowingRequestListResponse(BaseModel):
    """One page of all borrowing requests"""

    total_count: int
    page_number: int
    page_size: int
    results: List[BorrowingRequestDTO]

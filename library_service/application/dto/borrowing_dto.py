"""
Data Transfer Objects for borrowing requests.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ...models.borrowing import BookBorrowingRequest, BookBorrowingRequestDetail
from ...models.enums import BorrowingDetailStatus, BorrowingRequestStatus


class BorrowingDetailDTO(BaseModel):
    """
    One borrowed book with its due, return and extension dates.

    Example:
        >>> dto = BorrowingDetailDTO.from_entity(detail)
        >>> dto.status
        <BorrowingDetailStatus.BORROWING: 'Borrowing'>
    """

    detail_id: str
    request_id: str
    book_id: str
    book_title: Optional[str] = None
    book_author: Optional[str] = None
    isbn: Optional[str] = None
    due_date: Optional[datetime] = None
    return_date: Optional[datetime] = None
    extension_date: Optional[datetime] = None
    status: BorrowingDetailStatus

    @classmethod
    def from_entity(cls, detail: BookBorrowingRequestDetail) -> "BorrowingDetailDTO":
        book = detail.book
        return cls(
            detail_id=detail.id,
            request_id=detail.request_id,
            book_id=detail.book_id,
            book_title=book.title if book else None,
            book_author=book.author if book else None,
            isbn=book.isbn if book else None,
            due_date=detail.due_date,
            return_date=detail.return_date,
            extension_date=detail.extension_date,
            status=detail.status,
        )


class BorrowingRequestDTO(BaseModel):
    """
    Borrowing request with requestor/approver names and its details.
    """

    request_id: str
    requestor_id: int
    requestor_name: Optional[str] = None
    request_date: datetime
    status: BorrowingRequestStatus
    approver_id: Optional[int] = None
    approver_name: Optional[str] = None
    approval_date: Optional[datetime] = None
    notes: Optional[str] = None
    request_details: List[BorrowingDetailDTO] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, request: BookBorrowingRequest) -> "BorrowingRequestDTO":
        return cls(
            request_id=request.id,
            requestor_id=request.requestor_id,
            requestor_name=request.requestor.full_name if request.requestor else None,
            request_date=request.request_date,
            status=request.status,
            approver_id=request.approver_id,
            approver_name=request.approver.full_name if request.approver else None,
            approval_date=request.approval_date,
            notes=request.notes,
            request_details=[BorrowingDetailDTO.from_entity(d) for d in request.details],
        )


class OverdueBorrowingDTO(BorrowingDetailDTO):
    """Overdue detail with the borrower's identity"""

    requestor_id: int
    requestor_name: Optional[str] = None
    days_overdue: int

    @classmethod
    def from_entity(cls, detail: BookBorrowingRequestDetail, now: datetime) -> "OverdueBorrowingDTO":
        base = BorrowingDetailDTO.from_entity(detail)
        request = detail.request
        return cls(
            **base.model_dump(),
            requestor_id=request.requestor_id,
            requestor_name=request.requestor.full_name if request.requestor else None,
            days_overdue=max((now - detail.due_date).days, 0) if detail.due_date else 0,
        )

"""Borrowing request models"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from library_service.models.book import Book
from library_service.models.database import Base, utcnow
from library_service.models.enums import BorrowingDetailStatus, BorrowingRequestStatus
from library_service.models.user import User


def _enum_column(enum_cls):
    return Enum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda e: [m.value for m in e],
    )


class BookBorrowingRequest(Base):
    """A user's request to borrow one or more books"""

    __tablename__ = "book_borrowing_requests"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    requestor_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    request_date: Mapped[datetime] = mapped_column(
        DateTime,
        default=utcnow,
        nullable=False,
        index=True,
    )
    status: Mapped[BorrowingRequestStatus] = mapped_column(
        _enum_column(BorrowingRequestStatus),
        default=BorrowingRequestStatus.WAITING,
        nullable=False,
        index=True,
    )
    approver_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    approval_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    requestor: Mapped[User] = relationship(foreign_keys=[requestor_id], lazy="selectin")
    approver: Mapped[User | None] = relationship(foreign_keys=[approver_id], lazy="selectin")
    details: Mapped[list["BookBorrowingRequestDetail"]] = relationship(
        back_populates="request",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<BookBorrowingRequest(id={self.id}, requestor_id={self.requestor_id}, status={self.status})>"


class BookBorrowingRequestDetail(Base):
    """One book within a borrowing request"""

    __tablename__ = "book_borrowing_request_details"
    __table_args__ = (
        UniqueConstraint("request_id", "book_id", name="uq_borrowing_detail_request_book"),
    )

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    request_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("book_borrowing_requests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("books.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    due_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)
    return_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    extension_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    status: Mapped[BorrowingDetailStatus] = mapped_column(
        _enum_column(BorrowingDetailStatus),
        default=BorrowingDetailStatus.BORROWING,
        nullable=False,
        index=True,
    )

    request: Mapped[BookBorrowingRequest] = relationship(back_populates="details", lazy="selectin")
    book: Mapped[Book] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<BookBorrowingRequestDetail(id={self.id}, book_id={self.book_id}, status={self.status})>"

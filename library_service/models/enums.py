"""Enumerations shared by models, DTOs and handlers"""

from enum import Enum


class UserType(str, Enum):
    """Role of a library user"""

    NORMAL_USER = "NormalUser"
    SUPER_USER = "SuperUser"


class BorrowingRequestStatus(str, Enum):
    """Lifecycle status of a borrowing request"""

    WAITING = "Waiting"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class BorrowingDetailStatus(str, Enum):
    """Status of a single borrowed book within a request"""

    BORROWING = "Borrowing"
    RETURNED = "Returned"
    EXTENDED = "Extended"

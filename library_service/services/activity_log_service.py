"""Activity log service for user actions"""

from library_service.core.config import logger
from library_service.infrastructure.persistence import UnitOfWork
from library_service.models.activity_log import UserActivityLog

MAX_DETAILS_LENGTH = 500
MAX_IP_LENGTH = 50


class ActivityType:
    """Activity type names stored in the log"""

    REGISTRATION = "Registration"
    LOGIN = "Login"
    LOGOUT = "Logout"
    TOKEN_REFRESH = "TokenRefresh"
    PROFILE_UPDATED = "ProfileUpdated"
    PASSWORD_CHANGED = "PasswordChanged"
    USER_ROLE_UPDATED = "UserRoleUpdated"
    USER_ACTIVATED = "UserActivated"
    USER_DEACTIVATED = "UserDeactivated"
    USER_DELETED = "UserDeleted"
    CATEGORY_CREATED = "CategoryCreated"
    CATEGORY_UPDATED = "CategoryUpdated"
    CATEGORY_DELETED = "CategoryDeleted"
    BOOK_CREATED = "BookCreated"
    BOOK_UPDATED = "BookUpdated"
    BOOK_DELETED = "BookDeleted"
    BORROWING_REQUEST_CREATED = "BorrowingRequestCreated"
    BORROWING_REQUEST_APPROVED = "BorrowingRequestApproved"
    BORROWING_REQUEST_REJECTED = "BorrowingRequestRejected"
    BOOK_RETURNED = "BookReturned"
    BORROWING_EXTENDED = "BorrowingExtended"


class ActivityLogService:
    """Service for user activity logging"""

    async def log_activity(
        self,
        uow: UnitOfWork,
        user_id: int,
        activity_type: str,
        details: str | None = None,
        ip_address: str | None = None,
    ) -> UserActivityLog:
        """
        Log a user activity inside the caller's transaction

        Args:
            uow: Active unit of work
            user_id: User the activity belongs to
            activity_type: Type of activity (see ActivityType)
            details: Free-text details, truncated to 500 characters
            ip_address: Client IP address

        Returns:
            Created UserActivityLog record
        """
        activity_log = UserActivityLog(
            user_id=user_id,
            activity_type=activity_type,
            details=details[:MAX_DETAILS_LENGTH] if details else details,
            ip_address=ip_address[:MAX_IP_LENGTH] if ip_address else ip_address,
        )
        await uow.activity_logs.add(activity_log)

        # Also log to application logs
        logger.info(
            f"Activity: {activity_type} (user_id={user_id})",
            extra={
                "activity_type": activity_type,
                "user_id": user_id,
                "ip_address": ip_address,
            },
        )

        return activity_log


# Global instance
activity_log_service = ActivityLogService()

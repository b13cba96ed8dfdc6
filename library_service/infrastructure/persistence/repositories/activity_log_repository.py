"""User activity log repository"""

from typing import Optional, Sequence

from sqlalchemy import select

from ....models.activity_log import UserActivityLog
from .base import SqlAlchemyRepository


class ActivityLogRepository(SqlAlchemyRepository[UserActivityLog]):
    """Data access for user activity logs"""

    model = UserActivityLog

    async def get_by_user(
        self,
        user_id: int,
        page_number: int,
        page_size: int,
        activity_type: Optional[str] = None,
    ) -> tuple[Sequence[UserActivityLog], int]:
        """
        Get activity logs of one user, newest first.

        Args:
            user_id: Owner of the logs
            page_number: 1-based page number
            page_size: Page size
            activity_type: Exact activity type filter, ignored when empty

        Returns:
            Tuple of (page of logs, total matching count)
        """
        stmt = select(UserActivityLog).where(UserActivityLog.user_id == user_id)
        if activity_type:
            stmt = stmt.where(UserActivityLog.activity_type == activity_type)
        total = await self._count(stmt)
        stmt = stmt.order_by(UserActivityLog.activity_date.desc(), UserActivityLog.id.desc())
        logs = await self._page(stmt, page_number, page_size)
        return logs, total

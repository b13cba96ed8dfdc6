"""
Unit of Work pattern for transaction management.

Every command and query handler runs inside one UnitOfWork: a single
database session shared by all repositories, committed on success and
rolled back on error.
"""

import logging
import time
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ...core.errors import DatabaseError
from .repositories import (
    ActivityLogRepository,
    BookRepository,
    BorrowingDetailRepository,
    BorrowingRequestRepository,
    CategoryRepository,
    RefreshTokenRepository,
    UserRepository,
)

logger = logging.getLogger("library-service.infrastructure.unit_of_work")

# Commits slower than this are logged as warnings
SLOW_TRANSACTION_THRESHOLD = 0.1


class UnitOfWork:
    """
    Unit of Work (Martin Fowler) for request-scoped transactions.

    Features:
    - Creates and owns a database session
    - Exposes repositories bound to that session
    - Commits on normal exit, rolls back when an exception escapes
    - Supports explicit commits for work that must persist even if the
      handler goes on to raise

    Usage:
        >>> async with UnitOfWork(session_factory=async_session_maker) as uow:
        ...     book = await uow.books.get(book_id)
        ...     book.available_copies -= 1
        ...     await uow.commit(operation="approve_request")

    Attributes:
        _session_factory: Factory creating AsyncSession instances
        _session: Current session, None outside the context
    """

    def __init__(self, session_factory: Callable[[], AsyncSession]):
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

        # Repositories (created in __aenter__)
        self.users: Optional[UserRepository] = None
        self.categories: Optional[CategoryRepository] = None
        self.books: Optional[BookRepository] = None
        self.borrowing_requests: Optional[BorrowingRequestRepository] = None
        self.borrowing_details: Optional[BorrowingDetailRepository] = None
        self.activity_logs: Optional[ActivityLogRepository] = None
        self.refresh_tokens: Optional[RefreshTokenRepository] = None

    async def __aenter__(self):
        self._session = self._session_factory()
        logger.debug("UnitOfWork: New session created")

        self.users = UserRepository(self._session)
        self.categories = CategoryRepository(self._session)
        self.books = BookRepository(self._session)
        self.borrowing_requests = BorrowingRequestRepository(self._session)
        self.borrowing_details = BorrowingDetailRepository(self._session)
        self.activity_logs = ActivityLogRepository(self._session)
        self.refresh_tokens = RefreshTokenRepository(self._session)

        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """
        Leave the context.

        Rolls back if an exception occurred, otherwise commits. The session
        is always closed.
        """
        if self._session is None:
            return

        try:
            if exc_type is not None:
                logger.debug(
                    f"UnitOfWork: Exception occurred ({exc_type.__name__}), "
                    f"rolling back transaction"
                )
                await self._session.rollback()
            else:
                await self.commit(operation="unit_of_work_exit")
        finally:
            await self._session.close()
            logger.debug("UnitOfWork: Session closed")
            self._session = None

            self.users = None
            self.categories = None
            self.books = None
            self.borrowing_requests = None
            self.borrowing_details = None
            self.activity_logs = None
            self.refresh_tokens = None

    @property
    def session(self) -> AsyncSession:
        """
        Current database session.

        Raises:
            RuntimeError: If the unit of work is not entered
        """
        if self._session is None:
            raise RuntimeError(
                "UnitOfWork is not in context. "
                "Use 'async with UnitOfWork(...) as uow:'"
            )
        return self._session

    async def commit(self, operation: str = "unknown"):
        """
        Commit the current transaction.

        Args:
            operation: Operation name used in log messages

        Raises:
            RuntimeError: If the unit of work is not entered
            DatabaseError: If the database rejects the commit
        """
        session = self.session

        start_time = time.time()
        try:
            await session.commit()
        except SQLAlchemyError as e:
            logger.error(
                f"UnitOfWork: Commit failed (operation={operation}): {e}",
                exc_info=True
            )
            await session.rollback()
            raise DatabaseError(operation=operation, reason=str(e.__class__.__name__)) from e

        duration = time.time() - start_time
        logger.debug(
            f"UnitOfWork: Transaction committed "
            f"(operation={operation}, duration={duration:.3f}s)"
        )
        if duration > SLOW_TRANSACTION_THRESHOLD:
            logger.warning(
                f"SLOW TRANSACTION: {operation} took {duration:.3f}s "
                f"(> {SLOW_TRANSACTION_THRESHOLD * 1000:.0f}ms threshold)"
            )

    async def flush(self):
        """Flush pending changes without committing"""
        await self.session.flush()
        logger.debug("UnitOfWork: Session flushed")

    async def rollback(self):
        """Roll back the current transaction"""
        await self.session.rollback()
        logger.debug("UnitOfWork: Transaction rolled back")

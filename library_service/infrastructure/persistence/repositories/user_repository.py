"""User repository"""

from typing import Optional, Sequence

from sqlalchemy import func, or_, select

from ....models.user import User
from .base import LIKE_ESCAPE, SqlAlchemyRepository, contains_pattern


class UserRepository(SqlAlchemyRepository[User]):
    """Data access for users"""

    model = User

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self._db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self._db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def username_exists(self, username: str) -> bool:
        return await self.get_by_username(username) is not None

    async def email_exists(self, email: str, exclude_user_id: Optional[int] = None) -> bool:
        """Check whether an email is taken, optionally ignoring one user"""
        stmt = select(User.id).where(func.lower(User.email) == email.lower())
        if exclude_user_id is not None:
            stmt = stmt.where(User.id != exclude_user_id)
        result = await self._db.execute(stmt.limit(1))
        return result.first() is not None

    def _search(self, search_term: Optional[str]):
        stmt = select(User)
        if search_term and search_term.strip():
            pattern = contains_pattern(search_term)
            stmt = stmt.where(
                or_(
                    func.lower(User.username).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(User.email).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(User.full_name).like(pattern, escape=LIKE_ESCAPE),
                )
            )
        return stmt

    async def search(
        self,
        search_term: Optional[str],
        page_number: int,
        page_size: int,
    ) -> tuple[Sequence[User], int]:
        """
        Search users by username, email or full name.

        Returns:
            Tuple of (page of users ordered by id, total matching count)
        """
        stmt = self._search(search_term)
        total = await self._count(stmt)
        users = await self._page(stmt.order_by(User.id), page_number, page_size)
        return users, total

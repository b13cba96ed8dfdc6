"""Refresh token repository"""

from typing import Optional, Sequence

from sqlalchemy import select

from ....models.refresh_token import RefreshToken
from .base import SqlAlchemyRepository


class RefreshTokenRepository(SqlAlchemyRepository[RefreshToken]):
    """Data access for persisted refresh token hashes"""

    model = RefreshToken

    async def get_by_jti_hash(self, jti_hash: str) -> Optional[RefreshToken]:
        result = await self._db.execute(
            select(RefreshToken).where(RefreshToken.jti_hash == jti_hash)
        )
        return result.scalar_one_or_none()

    async def get_active_for_user(self, user_id: int) -> Sequence[RefreshToken]:
        result = await self._db.execute(
            select(RefreshToken).where(
                RefreshToken.user_id == user_id,
                RefreshToken.revoked.is_(False),
            )
        )
        return result.scalars().all()

"""Refresh Token service for token rotation"""

from datetime import datetime, timezone

from library_service.core.config import logger
from library_service.infrastructure.persistence import UnitOfWork
from library_service.models.database import utcnow
from library_service.models.refresh_token import RefreshToken
from library_service.schemas.token import RefreshTokenPayload
from library_service.utils.crypto import hash_token_jti


class RefreshTokenService:
    """Service for refresh token management and rotation"""

    async def save_refresh_token(
        self,
        uow: UnitOfWork,
        payload: RefreshTokenPayload,
        parent_jti: str | None = None,
    ) -> RefreshToken:
        """
        Persist the hash of a newly issued refresh token

        Args:
            uow: Active unit of work
            payload: Refresh token payload
            parent_jti: Parent token JTI (for rotation chain)

        Returns:
            Created RefreshToken record
        """
        jti_hash = hash_token_jti(payload.jti)
        parent_jti_hash = hash_token_jti(parent_jti) if parent_jti else None

        refresh_token = RefreshToken(
            jti_hash=jti_hash,
            user_id=int(payload.sub),
            expires_at=datetime.fromtimestamp(payload.exp, tz=timezone.utc).replace(tzinfo=None),
            parent_jti_hash=parent_jti_hash,
        )
        await uow.refresh_tokens.add(refresh_token)

        logger.debug(f"Refresh token saved: {jti_hash[:16]}...")
        return refresh_token

    async def get_by_jti(self, uow: UnitOfWork, jti: str) -> RefreshToken | None:
        return await uow.refresh_tokens.get_by_jti_hash(hash_token_jti(jti))

    async def validate_refresh_token(
        self,
        uow: UnitOfWork,
        jti: str,
    ) -> tuple[bool, str | None]:
        """
        Validate refresh token

        Reuse of a revoked token revokes every active token of the user
        and commits immediately so the revocation survives the failed
        request.

        Args:
            uow: Active unit of work
            jti: JWT ID

        Returns:
            Tuple of (is_valid, error_message)
        """
        token = await self.get_by_jti(uow, jti)

        if not token:
            return False, "Refresh token not found"

        if token.revoked:
            logger.warning(
                f"SECURITY: Refresh token reuse detected! "
                f"jti={jti[:16]}..., user_id={token.user_id}"
            )
            await self.revoke_token_chain(uow, token)
            await uow.commit(operation="revoke_token_chain")
            return False, "Refresh token has been revoked (reuse detected)"

        if token.is_expired:
            return False, "Refresh token has expired"

        return True, None

    async def revoke_token(self, uow: UnitOfWork, jti: str) -> bool:
        """
        Revoke a refresh token

        Returns:
            True if revoked, False if not found
        """
        token = await self.get_by_jti(uow, jti)
        if not token:
            return False

        token.revoked = True
        token.revoked_at = utcnow()
        await uow.flush()

        logger.info(f"Refresh token revoked: {jti[:16]}...")
        return True

    async def revoke_token_chain(self, uow: UnitOfWork, token: RefreshToken) -> None:
        """Revoke a reused token and every other active token of its user"""
        token.revoked = True
        token.revoked_at = utcnow()

        tokens_to_revoke = await uow.refresh_tokens.get_active_for_user(token.user_id)
        for t in tokens_to_revoke:
            t.revoked = True
            t.revoked_at = utcnow()

        await uow.flush()

        logger.warning(
            f"SECURITY: Revoked {len(tokens_to_revoke)} tokens in chain "
            f"for user {token.user_id}"
        )


# Global instance
refresh_token_service = RefreshTokenService()

"""Application services"""

from library_service.services.activity_log_service import (
    ActivityLogService,
    ActivityType,
    activity_log_service,
)
from library_service.services.refresh_token_service import (
    RefreshTokenService,
    refresh_token_service,
)
from library_service.services.token_service import TokenService, token_service

__all__ = [
    "ActivityLogService",
    "ActivityType",
    "activity_log_service",
    "RefreshTokenService",
    "refresh_token_service",
    "TokenService",
    "token_service",
]

"""
User queries: profile, current principal, user search and activity logs.
"""

from typing import Optional

from ...core.errors import EntityNotFoundError
from ...infrastructure.persistence import UnitOfWork
from ..dto import ActivityLogDTO, PagedResultDTO, UserDTO, UserInfoDTO
from .base import PagedQuery, Query, QueryHandler


class GetUserByIdQuery(Query):
    """Full user record by id"""

    user_id: int


class GetUserByIdHandler(QueryHandler[UserDTO]):
    """
    Handler for GetUserByIdQuery.

    Raises:
        EntityNotFoundError: If the user does not exist
    """

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetUserByIdQuery) -> UserDTO:
        async with self._uow as uow:
            user = await uow.users.get(query.user_id)
            if user is None:
                raise EntityNotFoundError("User", query.user_id)
            return UserDTO.from_entity(user)


class GetCurrentUserQuery(Query):
    """Identity of the authenticated principal"""

    user_id: int


class GetCurrentUserHandler(QueryHandler[UserInfoDTO]):
    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetCurrentUserQuery) -> UserInfoDTO:
        async with self._uow as uow:
            user = await uow.users.get(query.user_id)
            if user is None:
                raise EntityNotFoundError("User", query.user_id)
            return UserInfoDTO.from_entity(user)


class GetAllUsersQuery(PagedQuery):
    """
    Search users.

    Attributes:
        search_term: Case-insensitive match on username, email or full name
    """

    search_term: Optional[str] = None


class GetAllUsersHandler(QueryHandler[PagedResultDTO[UserDTO]]):
    """Handler for GetAllUsersQuery; results are ordered by id"""

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetAllUsersQuery) -> PagedResultDTO[UserDTO]:
        query.ensure_valid_page(max_page_size=100)

        async with self._uow as uow:
            users, total = await uow.users.search(query.search_term, query.page_number, query.page_size)
            return PagedResultDTO[UserDTO](
                items=[UserDTO.from_entity(u) for u in users],
                total_count=total,
                page_number=query.page_number,
                page_size=query.page_size,
            )


class GetUserActivityLogsQuery(PagedQuery):
    """Activity logs of one user, newest first"""

    user_id: int
    activity_type: Optional[str] = None


class GetUserActivityLogsHandler(QueryHandler[PagedResultDTO[ActivityLogDTO]]):
    """
    Handler for GetUserActivityLogsQuery.

    Raises:
        ValidationError: If paging is out of range
        EntityNotFoundError: If the user does not exist
    """

    def __init__(self, uow: UnitOfWork):
        self._uow = uow

    async def handle(self, query: GetUserActivityLogsQuery) -> PagedResultDTO[ActivityLogDTO]:
        query.ensure_valid_page(max_page_size=100)

        async with self._uow as uow:
            if await uow.users.get(query.user_id) is None:
                raise EntityNotFoundError("User", query.user_id)

            logs, total = await uow.activity_logs.get_by_user(
                query.user_id,
                query.page_number,
                query.page_size,
                activity_type=query.activity_type,
            )
            return PagedResultDTO[ActivityLogDTO](
                items=[ActivityLogDTO.from_entity(log) for log in logs],
                total_count=total,
                page_number=query.page_number,
                page_size=query.page_size,
            )

"""
Category commands.
"""

import logging
from typing import Optional

from ...core.errors import EntityNotFoundError, InvalidOperationError, ValidationError
from ...infrastructure.persistence import UnitOfWork
from ...models.category import Category
from ...models.database import utcnow
from ...services.activity_log_service import ActivityLogService, ActivityType, activity_log_service
from ...utils.validators import validate_category_name, validate_length
from ..dto import CategoryDTO
from .base import Command, CommandHandler

logger = logging.getLogger("library-service.application.categories")


async def _validate_category(
    uow: UnitOfWork,
    name: str,
    description: Optional[str],
    exclude_id: Optional[str] = None,
) -> None:
    errors: dict[str, list[str]] = {}

    is_valid, error = validate_category_name(name)
    if not is_valid:
        errors["category_name"] = [error]
    elif await uow.categories.name_exists(name, exclude_id=exclude_id):
        errors["category_name"] = ["A category with this name already exists"]

    is_valid, error = validate_length(description, "Description", max_length=500)
    if not is_valid:
        errors["description"] = [error]

    if errors:
        raise ValidationError(errors)


class CreateCategoryCommand(Command):
    """Create a category"""

    actor_id: int
    category_name: str
    description: Optional[str] = None
    ip_address: Optional[str] = None


class CreateCategoryHandler(CommandHandler[CategoryDTO]):
    """Handler for CreateCategoryCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: CreateCategoryCommand) -> CategoryDTO:
        """
        Raises:
            ValidationError: If the name is invalid or already used (case-insensitive)
        """
        async with self._uow as uow:
            await _validate_category(uow, command.category_name, command.description)

            category = Category(
                category_name=command.category_name.strip(),
                description=command.description,
                created_date=utcnow(),
            )
            await uow.categories.add(category)

            await self._activity_log.log_activity(
                uow,
                user_id=command.actor_id,
                activity_type=ActivityType.CATEGORY_CREATED,
                details=f"Created category {category.category_name}",
                ip_address=command.ip_address,
            )
            return CategoryDTO.from_entity(category)


class UpdateCategoryCommand(Command):
    """Rename a category or change its description"""

    actor_id: int
    category_id: str
    category_name: str
    description: Optional[str] = None
    ip_address: Optional[str] = None


class UpdateCategoryHandler(CommandHandler[CategoryDTO]):
    """Handler for UpdateCategoryCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: UpdateCategoryCommand) -> CategoryDTO:
        """
        Raises:
            EntityNotFoundError: If the category does not exist
            ValidationError: If the name is invalid or used by another category
        """
        async with self._uow as uow:
            category = await uow.categories.get(command.category_id)
            if category is None:
                raise EntityNotFoundError("Category", command.category_id)

            await _validate_category(
                uow, command.category_name, command.description, exclude_id=category.id
            )

            category.category_name = command.category_name.strip()
            category.description = command.description

            await self._activity_log.log_activity(
                uow,
                user_id=command.actor_id,
                activity_type=ActivityType.CATEGORY_UPDATED,
                details=f"Updated category {category.category_name}",
                ip_address=command.ip_address,
            )
            return CategoryDTO.from_entity(category)


class DeleteCategoryCommand(Command):
    """Delete an empty category"""

    actor_id: int
    category_id: str
    ip_address: Optional[str] = None


class DeleteCategoryHandler(CommandHandler[bool]):
    """Handler for DeleteCategoryCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: DeleteCategoryCommand) -> bool:
        """
        Raises:
            EntityNotFoundError: If the category does not exist
            InvalidOperationError: If books still reference the category
        """
        async with self._uow as uow:
            category = await uow.categories.get(command.category_id)
            if category is None:
                raise EntityNotFoundError("Category", command.category_id)

            if await uow.categories.has_books(category.id):
                raise InvalidOperationError(
                    "Cannot delete a category that still contains books",
                    details={"category_id": category.id},
                )

            name = category.category_name
            await uow.categories.delete(category)

            await self._activity_log.log_activity(
                uow,
                user_id=command.actor_id,
                activity_type=ActivityType.CATEGORY_DELETED,
                details=f"Deleted category {name}",
                ip_address=command.ip_address,
            )
            logger.info(f"Category deleted: {name} ({command.category_id})")
            return True

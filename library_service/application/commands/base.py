"""
Base classes for commands.

A command expresses the intent to change system state. A command
handler executes it inside a unit of work.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

# Result type of a command handler
TResult = TypeVar('TResult')


class Command(BaseModel, ABC):
    """
    Base class for commands.

    Commands are named in the imperative (CreateBook, ReturnBook) and are:
    - Immutable
    - Self-contained (carry every value the handler needs)
    - Validated by Pydantic on construction

    Example:
        >>> class CreateCategoryCommand(Command):
        ...     actor_id: int
        ...     category_name: str
    """

    model_config = ConfigDict(frozen=True)


class CommandHandler(ABC, Generic[TResult]):
    """
    Base class for command handlers.

    A handler checks business rules, changes entities through the
    repositories of its unit of work, records an activity log entry
    and returns a DTO.

    Type Parameters:
        TResult: Result type of the command

    Example:
        >>> class CreateCategoryHandler(CommandHandler[CategoryDTO]):
        ...     async def handle(self, command: CreateCategoryCommand) -> CategoryDTO:
        ...         async with self._uow as uow:
        ...             ...
    """

    @abstractmethod
    async def handle(self, command: Command) -> TResult:
        """
        Handle the command.

        Args:
            command: Command to handle

        Returns:
            Result of the command

        Raises:
            DomainError: When a business rule is violated
            InfrastructureError: On database failures
        """
        pass

"""
Book commands.
"""

import logging
from typing import Optional

from ...core.errors import EntityNotFoundError, InvalidOperationError, ValidationError
from ...infrastructure.persistence import UnitOfWork
from ...models.book import Book
from ...models.category import Category
from ...models.database import utcnow
from ...services.activity_log_service import ActivityLogService, ActivityType, activity_log_service
from ...utils.validators import validate_isbn, validate_length, validate_published_year
from ..dto import BookDTO
from .base import Command, CommandHandler

logger = logging.getLogger("library-service.application.books")


class BookFields(Command):
    """Editable book fields shared by create and update"""

    title: str
    author: str
    category_id: str
    isbn: str
    published_year: Optional[int] = None
    publisher: Optional[str] = None
    description: Optional[str] = None
    total_copies: int


async def _validate_book(
    uow: UnitOfWork,
    command: BookFields,
    exclude_id: Optional[str] = None,
) -> Category:
    """
    Validate book fields against each other and the database.

    Returns:
        The referenced category

    Raises:
        ValidationError: With every failing field
    """
    errors: dict[str, list[str]] = {}

    def check(field: str, result: tuple[bool, Optional[str]]) -> None:
        is_valid, error = result
        if not is_valid:
            errors.setdefault(field, []).append(error)

    check("title", validate_length(command.title, "Title", 2, 200, required=True))
    check("author", validate_length(command.author, "Author", 2, 100, required=True))
    check("isbn", validate_isbn(command.isbn))
    check("published_year", validate_published_year(command.published_year))
    check("publisher", validate_length(command.publisher, "Publisher", max_length=100))
    check("description", validate_length(command.description, "Description", max_length=2000))
    if command.total_copies <= 0:
        errors.setdefault("total_copies", []).append("Total copies must be greater than 0")

    category = await uow.categories.get(command.category_id)
    if category is None:
        errors.setdefault("category_id", []).append("Category does not exist")

    if "isbn" not in errors and await uow.books.isbn_exists(command.isbn, exclude_id=exclude_id):
        errors.setdefault("isbn", []).append("A book with this ISBN already exists")

    if errors:
        raise ValidationError(errors)
    return category


class CreateBookCommand(BookFields):
    """Add a book to the catalog; all copies start available"""

    actor_id: int
    ip_address: Optional[str] = None


class CreateBookHandler(CommandHandler[BookDTO]):
    """Handler for CreateBookCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: CreateBookCommand) -> BookDTO:
        async with self._uow as uow:
            category = await _validate_book(uow, command)

            book = Book(
                title=command.title.strip(),
                author=command.author.strip(),
                category_id=category.id,
                isbn=command.isbn,
                published_year=command.published_year,
                publisher=command.publisher,
                description=command.description,
                total_copies=command.total_copies,
                available_copies=command.total_copies,
                is_active=True,
                created_date=utcnow(),
            )
            book.category = category
            await uow.books.add(book)

            await self._activity_log.log_activity(
                uow,
                user_id=command.actor_id,
                activity_type=ActivityType.BOOK_CREATED,
                details=f"Created book '{book.title}' (ISBN {book.isbn})",
                ip_address=command.ip_address,
            )
            return BookDTO.from_entity(book)


class UpdateBookCommand(BookFields):
    """
    Update a book.

    Changing total_copies shifts available_copies by the same amount,
    clamped to [0, total_copies].
    """

    actor_id: int
    book_id: str
    ip_address: Optional[str] = None


class UpdateBookHandler(CommandHandler[BookDTO]):
    """Handler for UpdateBookCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: UpdateBookCommand) -> BookDTO:
        """
        Raises:
            EntityNotFoundError: If the book does not exist
            ValidationError: If any field is invalid
        """
        async with self._uow as uow:
            book = await uow.books.get(command.book_id)
            if book is None:
                raise EntityNotFoundError("Book", command.book_id)

            category = await _validate_book(uow, command, exclude_id=book.id)

            delta = command.total_copies - book.total_copies
            book.available_copies = min(max(book.available_copies + delta, 0), command.total_copies)
            book.total_copies = command.total_copies

            book.title = command.title.strip()
            book.author = command.author.strip()
            book.category_id = category.id
            book.category = category
            book.isbn = command.isbn
            book.published_year = command.published_year
            book.publisher = command.publisher
            book.description = command.description

            await self._activity_log.log_activity(
                uow,
                user_id=command.actor_id,
                activity_type=ActivityType.BOOK_UPDATED,
                details=f"Updated book '{book.title}' ({book.id})",
                ip_address=command.ip_address,
            )
            return BookDTO.from_entity(book)


class DeleteBookCommand(Command):
    """Remove a book that has no copies on loan"""

    actor_id: int
    book_id: str
    ip_address: Optional[str] = None


class DeleteBookHandler(CommandHandler[bool]):
    """Handler for DeleteBookCommand"""

    def __init__(self, uow: UnitOfWork, activity_log: ActivityLogService = activity_log_service):
        self._uow = uow
        self._activity_log = activity_log

    async def handle(self, command: DeleteBookCommand) -> bool:
        """
        Raises:
            EntityNotFoundError: If the book does not exist
            InvalidOperationError: If copies are currently borrowed
        """
        async with self._uow as uow:
            book = await uow.books.get(command.book_id)
            if book is None:
                raise EntityNotFoundError("Book", command.book_id)

            if await uow.books.has_active_borrowings(book.id):
                raise InvalidOperationError(
                    "Cannot delete a book that is currently borrowed",
                    details={"book_id": book.id},
                )

            title = book.title
            if await uow.books.has_borrowing_history(book.id):
                # Returned loans still reference the book
                book.is_active = False
                details = f"Deactivated book '{title}' ({command.book_id}) with borrowing history"
            else:
                await uow.books.delete(book)
                details = f"Deleted book '{title}' ({command.book_id})"

            await self._activity_log.log_activity(
                uow,
                user_id=command.actor_id,
                activity_type=ActivityType.BOOK_DELETED,
                details=details,
                ip_address=command.ip_address,
            )
            logger.info(f"Book deleted: {title} ({command.book_id})")
            return True

"""
Pytest configuration and fixtures.

Every test gets a fresh in-memory SQLite database seeded with the
default accounts and categories.
"""

import os

os.environ.setdefault("LIBRARY_SERVICE__SEED_DATA", "false")
os.environ.setdefault("LIBRARY_SERVICE__ENVIRONMENT", "test")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from library_service.application.commands import (
    CreateBookCommand,
    CreateBookHandler,
    CreateBorrowingRequestCommand,
    CreateBorrowingRequestHandler,
    UpdateBorrowingRequestStatusCommand,
    UpdateBorrowingRequestStatusHandler,
)
from library_service.core.seed import seed_default_data
from library_service.infrastructure.persistence import UnitOfWork
from library_service.models import Base, BorrowingRequestStatus, Category, User, UserType
from library_service.models.database import enable_sqlite_foreign_keys, utcnow
from library_service.services.token_service import token_service
from library_service.utils.crypto import hash_password


@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with foreign keys enforced"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    await seed_default_data(factory)
    return factory


@pytest.fixture
def uow(session_factory):
    """Fresh unit of work for one handler"""
    return UnitOfWork(session_factory)


@pytest.fixture
def make_uow(session_factory):
    """Factory of units of work, for tests that call several handlers"""
    return lambda: UnitOfWork(session_factory)


async def _get_user(session_factory, username: str) -> User:
    async with session_factory() as session:
        result = await session.execute(select(User).where(User.username == username))
        return result.scalar_one()


@pytest_asyncio.fixture
async def admin(session_factory) -> User:
    return await _get_user(session_factory, "admin")


@pytest_asyncio.fixture
async def librarian(session_factory) -> User:
    return await _get_user(session_factory, "librarian")


@pytest_asyncio.fixture
async def reader(session_factory) -> User:
    return await _get_user(session_factory, "user1")


@pytest_asyncio.fixture
async def create_user(session_factory):
    """Insert an extra user directly"""

    async def _create(
        username: str,
        password: str = "Reader@123",
        user_type: UserType = UserType.NORMAL_USER,
        is_active: bool = True,
    ) -> User:
        async with session_factory() as session:
            user = User(
                username=username,
                password_hash=hash_password(password),
                email=f"{username}@example.com",
                full_name=f"{username.title()} Tester",
                user_type=user_type,
                is_active=is_active,
                created_date=utcnow(),
            )
            session.add(user)
            await session.commit()
            return user

    return _create


@pytest_asyncio.fixture
async def categories(session_factory) -> dict[str, Category]:
    """Seeded categories keyed by name"""
    async with session_factory() as session:
        result = await session.execute(select(Category))
        return {c.category_name: c for c in result.scalars().all()}


@pytest_asyncio.fixture
async def create_book(make_uow, admin, categories):
    """Create a book through CreateBookHandler"""
    counter = {"isbn": 9780000000000}

    async def _create(title: str = "Dune", total_copies: int = 2, category: str = "Fiction", **fields):
        counter["isbn"] += 1
        command = CreateBookCommand(
            actor_id=admin.id,
            title=title,
            author=fields.pop("author", "Frank Herbert"),
            category_id=categories[category].id,
            isbn=fields.pop("isbn", str(counter["isbn"])),
            total_copies=total_copies,
            **fields,
        )
        return await CreateBookHandler(make_uow()).handle(command)

    return _create


@pytest_asyncio.fixture
async def create_request(make_uow):
    """Create a borrowing request through CreateBorrowingRequestHandler"""

    async def _create(requestor: User, book_ids: list[str], notes: str | None = None):
        return await CreateBorrowingRequestHandler(make_uow()).handle(
            CreateBorrowingRequestCommand(requestor_id=requestor.id, book_ids=book_ids, notes=notes)
        )

    return _create


@pytest_asyncio.fixture
async def approve_request(make_uow, librarian):
    """Approve a waiting request"""

    async def _approve(request_id: str, due_days: int | None = None):
        return await UpdateBorrowingRequestStatusHandler(make_uow()).handle(
            UpdateBorrowingRequestStatusCommand(
                approver_id=librarian.id,
                request_id=request_id,
                status=BorrowingRequestStatus.APPROVED,
                due_days=due_days,
            )
        )

    return _approve


@pytest.fixture
def auth_headers():
    """Build an Authorization header for a user"""

    def _headers(user: User) -> dict[str, str]:
        token, _ = token_service.create_access_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client bound to the app, with units of work on the test database"""
    from library_service.core.dependencies import get_uow
    from library_service.main import app

    app.dependency_overrides[get_uow] = lambda: UnitOfWork(session_factory)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()

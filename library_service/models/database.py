"""Database configuration and base models"""

from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from library_service.core.config import settings


class Base(DeclarativeBase):
    """Base class for all database models"""

    pass


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (SQLite stores no offset)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_async_url(db_url: str) -> str:
    """Convert a sync SQLite URL to its aiosqlite form"""
    if db_url.startswith("sqlite:///"):
        return db_url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)
    return db_url


def enable_sqlite_foreign_keys(engine) -> None:
    """Turn on foreign key enforcement for every new SQLite connection"""

    @event.listens_for(engine.sync_engine, "connect")
    def set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    to_async_url(settings.db_url),
    echo=settings.db_echo,
    future=True,
)

if "sqlite" in settings.db_url:
    enable_sqlite_foreign_keys(engine)

# Create async session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def init_db():
    """Initialize database (create tables)"""
    if engine.url.database and "sqlite" in engine.url.drivername:
        Path(engine.url.database).parent.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    """Close database connections"""
    await engine.dispose()

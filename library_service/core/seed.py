"""Database seeding with default users and categories"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from library_service.core.config import logger
from library_service.models import Category, User, UserType, utcnow
from library_service.models.database import async_session_maker
from library_service.utils.crypto import hash_password

DEFAULT_USERS = (
    ("admin", "Admin@123", "admin@library.local", "System Administrator", UserType.SUPER_USER),
    ("librarian", "Librarian@123", "librarian@library.local", "Head Librarian", UserType.SUPER_USER),
    ("user1", "User@123", "user1@library.local", "Sample Reader", UserType.NORMAL_USER),
)

DEFAULT_CATEGORIES = (
    ("Fiction", "Novels, short stories and other imaginative literature"),
    ("Non-Fiction", "Factual writing, essays and general knowledge"),
    ("Science", "Physics, chemistry, biology and the natural sciences"),
    ("Technology", "Computing, engineering and applied technology"),
    ("History", "World, regional and cultural history"),
    ("Biography", "Biographies, autobiographies and memoirs"),
)


async def seed_default_data(session_factory: async_sessionmaker[AsyncSession] | None = None) -> bool:
    """
    Create the default accounts and categories on an empty database.

    Returns:
        True if data was inserted, False if users already existed
    """
    session_factory = session_factory or async_session_maker
    async with session_factory() as db:
        try:
            user_count = (await db.execute(select(func.count(User.id)))).scalar_one()
            if user_count:
                logger.debug("Users already exist, skipping seed")
                return False

            await _create_default_users(db)
            await _create_default_categories(db)
            await db.commit()
        except Exception as e:
            logger.error(f"Failed to seed default data: {e}")
            await db.rollback()
            raise

    logger.info("✓ Default users and categories created")
    return True


async def _create_default_users(db: AsyncSession) -> None:
    now = utcnow()
    for username, password, email, full_name, user_type in DEFAULT_USERS:
        db.add(
            User(
                username=username,
                password_hash=hash_password(password),
                email=email,
                full_name=full_name,
                user_type=user_type,
                is_active=True,
                created_date=now,
            )
        )
        logger.info(f"✓ User created: {username} ({user_type.value})")


async def _create_default_categories(db: AsyncSession) -> None:
    existing = set((await db.execute(select(Category.category_name))).scalars().all())
    now = utcnow()
    for name, description in DEFAULT_CATEGORIES:
        if name in existing:
            continue
        db.add(Category(category_name=name, description=description, created_date=now))
    logger.info(f"✓ {len(DEFAULT_CATEGORIES)} categories ensured")

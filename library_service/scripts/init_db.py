#!/usr/bin/env python3
"""Create tables and seed default data: python -m library_service.scripts.init_db"""

import asyncio
import sys

from library_service.core.config import logger, settings
from library_service.core.seed import DEFAULT_USERS, seed_default_data
from library_service.models import close_db, init_db


async def main():
    """Main initialization function"""
    print("=" * 60)
    print("Library Service - Database Initialization")
    print("=" * 60)

    try:
        logger.info(f"Initializing database at {settings.db_url}...")
        await init_db()
        logger.info("✓ Database initialized")

        if await seed_default_data():
            print("\n✓ Default accounts:")
            for username, password, _, _, user_type in DEFAULT_USERS:
                print(f"  {username} / {password} ({user_type.value})")
        else:
            print("\nUsers already exist, nothing seeded")

        print("\n" + "=" * 60)
        print("✓ Database initialization completed successfully!")
        print("=" * 60)

    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        print(f"\n✗ Error: {e}")
        sys.exit(1)
    finally:
        await close_db()


if __name__ == "__main__":
    asyncio.run(main())

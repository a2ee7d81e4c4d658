"""
Скрипт для инициализации базы данных.

Создаёт все таблицы напрямую через SQLAlchemy (без миграций).

    python init_db.py            # создать таблицы
    python init_db.py --seed     # + демо-данные на пустой БД
    python init_db.py --reset    # удалить и создать заново
"""

import argparse
import asyncio

from taskboard.core.config import settings
from taskboard.core.database import AsyncSessionLocal, drop_db, init_db
from taskboard.core.logging import get_logger, setup_logging
from taskboard.services import seed_database

logger = get_logger("taskboard.init_db")


async def main(seed: bool, reset: bool) -> None:
    if reset:
        await drop_db()
        logger.info("Tables dropped", extra={"database_url": settings.DATABASE_URL})

    await init_db()
    logger.info("Tables created", extra={"database_url": settings.DATABASE_URL})

    if seed:
        async with AsyncSessionLocal() as session:
            seeded = await seed_database(session)
            await session.commit()
        logger.info("Seed finished", extra={"seeded": seeded})


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create taskboard tables")
    parser.add_argument("--seed", action="store_true", help="insert demo data into an empty DB")
    parser.add_argument("--reset", action="store_true", help="drop all tables first")
    args = parser.parse_args()

    setup_logging(log_level=settings.LOG_LEVEL, log_format="simple")
    asyncio.run(main(seed=args.seed, reset=args.reset))

"""Create the schema and seed default data.

Creates the admin account and the default service type catalog. Safe to
run repeatedly: existing rows are left untouched.

Usage:
    python -m urbanease.seed
"""

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from urbanease.core.config import settings
from urbanease.core.security import hash_password
from urbanease.models import Base, UserRole
from urbanease.repositories.service_type_repository import ServiceTypeRepository
from urbanease.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_TYPES: tuple[str, ...] = (
    "Haircut",
    "Hair Coloring",
    "Manicure",
    "Pedicure",
    "Facial",
    "Massage",
    "Waxing",
    "Makeup",
    "Eyebrows & Lashes",
)


@dataclass
class SeedStats:
    """What a seed run created."""

    admin_created: bool = False
    service_types_created: int = 0


async def create_schema(engine: AsyncEngine) -> None:
    """Create all tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_defaults(db: AsyncSession) -> SeedStats:
    """Insert the admin account and default service types when missing.

    Args:
        db: Async database session. The caller commits.

    Returns:
        SeedStats describing what was created.
    """
    stats = SeedStats()

    if await UserRepository.get_by_email(db, settings.seed_admin_email) is None:
        await UserRepository.create(
            db,
            email=settings.seed_admin_email,
            password=hash_password(settings.seed_admin_password.get_secret_value()),
            role=UserRole.ADMIN,
            is_email_verified=True,
        )
        stats.admin_created = True
        logger.info("Admin user created")
    else:
        logger.info("Admin user already exists")

    for name in DEFAULT_SERVICE_TYPES:
        if await ServiceTypeRepository.get_by_name(db, name) is None:
            await ServiceTypeRepository.create(db, name=name)
            stats.service_types_created += 1
            logger.info("Service type created: %s", name)

    return stats


async def main() -> None:
    """CLI entry point: create tables and seed the configured database."""
    from urbanease.core.database import async_session_factory, engine
    from urbanease.core.logging import configure_logging

    configure_logging()

    await create_schema(engine)
    async with async_session_factory() as session:
        stats = await seed_defaults(session)
        await session.commit()

    await engine.dispose()
    logger.info("Seeding complete: %s", stats)


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())

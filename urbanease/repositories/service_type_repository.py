"""Repository for the service type catalog."""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.core.errors import ConflictError
from urbanease.models.service_type import ServiceType

logger = logging.getLogger(__name__)


async def _flush_unique_name(db: AsyncSession, name: str) -> None:
    """Flush pending catalog changes, mapping a name clash to 409.

    Raises:
        ConflictError: DUPLICATE_SERVICE_TYPE. The session is rolled back
            before raising.
    """
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        logger.info("Duplicate service type rejected by unique constraint")
        raise ConflictError(
            code="DUPLICATE_SERVICE_TYPE",
            message=f"Service type '{name}' already exists",
        ) from exc


class ServiceTypeRepository:
    """Stateless repository for service_types."""

    @staticmethod
    async def list_all(db: AsyncSession) -> list[ServiceType]:
        """List the catalog ordered by name."""
        result = await db.execute(select(ServiceType).order_by(ServiceType.name))
        return list(result.scalars().all())

    @staticmethod
    async def get_by_id(
        db: AsyncSession, service_type_id: uuid.UUID
    ) -> ServiceType | None:
        return await db.get(ServiceType, service_type_id)

    @staticmethod
    async def get_by_name(db: AsyncSession, name: str) -> ServiceType | None:
        result = await db.execute(select(ServiceType).where(ServiceType.name == name))
        return result.scalar_one_or_none()

    @staticmethod
    async def create(db: AsyncSession, *, name: str) -> ServiceType:
        service_type = ServiceType(name=name)
        db.add(service_type)
        await _flush_unique_name(db, name)
        await db.refresh(service_type)
        return service_type

    @staticmethod
    async def rename(
        db: AsyncSession, service_type: ServiceType, name: str
    ) -> ServiceType:
        service_type.name = name
        await _flush_unique_name(db, name)
        await db.refresh(service_type)
        return service_type

    @staticmethod
    async def delete(db: AsyncSession, service_type: ServiceType) -> None:
        """Delete a service type and every business offering of it."""
        await db.delete(service_type)
        await db.flush()

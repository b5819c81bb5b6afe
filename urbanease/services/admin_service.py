"""Admin read surfaces and service type catalog management.

Also home to get_account_overview(), the identity-plus-profile view that
backs GET /users/profile for every role.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.core.errors import ConflictError, NotFoundError
from urbanease.models.business import BusinessProfile
from urbanease.models.customer import CustomerProfile
from urbanease.models.service_type import ServiceType
from urbanease.models.user import User
from urbanease.repositories.business_repository import BusinessRepository
from urbanease.repositories.customer_repository import CustomerRepository
from urbanease.repositories.service_type_repository import ServiceTypeRepository
from urbanease.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass
class AccountOverview:
    """An identity with whichever profile its role carries."""

    user: User
    customer_profile: CustomerProfile | None = None
    business_profile: BusinessProfile | None = None


async def get_account_overview(db: AsyncSession, user_id: uuid.UUID) -> AccountOverview:
    """Load an identity and its profile.

    Args:
        db: Async database session.
        user_id: Identity to load.

    Returns:
        AccountOverview for the identity.

    Raises:
        NotFoundError: If the identity does not exist.
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise NotFoundError("User", str(user_id))
    return AccountOverview(
        user=user,
        customer_profile=await CustomerRepository.get_profile_by_user_id(db, user_id),
        business_profile=await BusinessRepository.get_profile_by_user_id(db, user_id),
    )


class AdminService:
    """Admin-only operations.

    Args:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self._db = db

    # -----------------------------------------------------------------------
    # Users
    # -----------------------------------------------------------------------

    async def list_users(self) -> list[User]:
        return await UserRepository.list_all(self._db)

    async def get_user(self, user_id: uuid.UUID) -> AccountOverview:
        return await get_account_overview(self._db, user_id)

    # -----------------------------------------------------------------------
    # Service types
    # -----------------------------------------------------------------------

    async def list_service_types(self) -> list[ServiceType]:
        return await ServiceTypeRepository.list_all(self._db)

    async def _ensure_name_free(self, name: str) -> None:
        if await ServiceTypeRepository.get_by_name(self._db, name) is not None:
            raise ConflictError(
                code="DUPLICATE_SERVICE_TYPE",
                message=f"Service type '{name}' already exists",
            )

    async def create_service_type(self, name: str) -> ServiceType:
        """Add a catalog entry.

        Raises:
            ConflictError: DUPLICATE_SERVICE_TYPE if the name is taken.
        """
        await self._ensure_name_free(name)
        service_type = await ServiceTypeRepository.create(self._db, name=name)
        logger.info("Created service type %s", service_type.id)
        return service_type

    async def update_service_type(
        self, service_type_id: uuid.UUID, name: str
    ) -> ServiceType:
        """Rename a catalog entry.

        Raises:
            NotFoundError: If the service type does not exist.
            ConflictError: DUPLICATE_SERVICE_TYPE if another entry has the name.
        """
        service_type = await ServiceTypeRepository.get_by_id(self._db, service_type_id)
        if service_type is None:
            raise NotFoundError("Service type", str(service_type_id))
        if name != service_type.name:
            await self._ensure_name_free(name)
        return await ServiceTypeRepository.rename(self._db, service_type, name)

    async def delete_service_type(self, service_type_id: uuid.UUID) -> None:
        """Remove a catalog entry and every business offering of it.

        Raises:
            NotFoundError: If the service type does not exist.
        """
        service_type = await ServiceTypeRepository.get_by_id(self._db, service_type_id)
        if service_type is None:
            raise NotFoundError("Service type", str(service_type_id))
        await ServiceTypeRepository.delete(self._db, service_type)
        logger.info("Deleted service type %s", service_type_id)

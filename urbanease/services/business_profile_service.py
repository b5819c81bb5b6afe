"""Business profile, photo gallery and offered-service management."""

import logging
import uuid
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.core.errors import ConflictError, NotFoundError
from urbanease.models.business import BusinessPhoto, BusinessProfile, BusinessService
from urbanease.models.service_type import ServiceType
from urbanease.repositories.business_repository import BusinessRepository
from urbanease.repositories.service_type_repository import ServiceTypeRepository

logger = logging.getLogger(__name__)

_NULLABLE_PROFILE_FIELDS = frozenset(
    {"whatsapp_number", "instagram_id", "latitude", "longitude"}
)


class BusinessProfileService:
    """Operations on the authenticated business's own data.

    Args:
        db: Async database session.
        user_id: Identity of the authenticated business.
    """

    def __init__(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        self._db = db
        self._user_id = user_id

    async def get_profile(self) -> BusinessProfile:
        """Return the caller's profile.

        Raises:
            NotFoundError: If the identity has no business profile.
        """
        profile = await BusinessRepository.get_profile_by_user_id(
            self._db, self._user_id
        )
        if profile is None:
            raise NotFoundError("Business profile")
        return profile

    async def update_profile(self, **fields: str | Decimal | None) -> BusinessProfile:
        """Apply the given profile fields; omitted fields are left unchanged.

        whatsapp_number, instagram_id and the coordinates may be cleared with
        None. None for any other field is ignored.
        """
        changes = {
            field: value
            for field, value in fields.items()
            if value is not None or field in _NULLABLE_PROFILE_FIELDS
        }
        profile = await self.get_profile()
        return await BusinessRepository.update_profile(self._db, profile, **changes)

    # -----------------------------------------------------------------------
    # Photos
    # -----------------------------------------------------------------------

    async def add_photo(self, photo_url: str) -> BusinessPhoto:
        profile = await self.get_profile()
        return await BusinessRepository.create_photo(
            self._db, business_id=profile.id, photo_url=photo_url
        )

    async def list_photos(self) -> list[BusinessPhoto]:
        profile = await self.get_profile()
        return await BusinessRepository.list_photos(self._db, profile.id)

    async def delete_photo(self, photo_id: uuid.UUID) -> None:
        """Delete a gallery photo.

        Raises:
            NotFoundError: Unknown photo or one owned by another business.
        """
        profile = await self.get_profile()
        photo = await BusinessRepository.get_photo(self._db, profile.id, photo_id)
        if photo is None:
            raise NotFoundError("Photo", str(photo_id))
        await BusinessRepository.delete(self._db, photo)

    # -----------------------------------------------------------------------
    # Services
    # -----------------------------------------------------------------------

    async def list_service_types(self) -> list[ServiceType]:
        """The catalog a business can choose services from."""
        return await ServiceTypeRepository.list_all(self._db)

    async def add_service(self, service_type_id: uuid.UUID) -> BusinessService:
        """Offer a catalog service type.

        Args:
            service_type_id: Catalog entry to offer.

        Returns:
            The created BusinessService.

        Raises:
            NotFoundError: If the service type does not exist.
            ConflictError: SERVICE_ALREADY_ADDED if the business already
                offers it.
        """
        profile = await self.get_profile()
        service_type = await ServiceTypeRepository.get_by_id(self._db, service_type_id)
        if service_type is None:
            raise NotFoundError("Service type", str(service_type_id))

        existing = await BusinessRepository.get_service_by_type(
            self._db, profile.id, service_type_id
        )
        if existing is not None:
            raise ConflictError(
                code="SERVICE_ALREADY_ADDED",
                message=f"Service '{service_type.name}' already added to this business",
            )

        service = await BusinessRepository.create_service(
            self._db, business_id=profile.id, service_type_id=service_type_id
        )
        logger.info("Business %s added service type %s", profile.id, service_type_id)
        return service

    async def list_services(self) -> list[tuple[BusinessService, ServiceType]]:
        """List offered services together with their catalog entries."""
        profile = await self.get_profile()
        services = await BusinessRepository.list_services(self._db, profile.id)
        catalog = {st.id: st for st in await ServiceTypeRepository.list_all(self._db)}
        return [(service, catalog[service.service_type_id]) for service in services]

    async def delete_service(self, service_id: uuid.UUID) -> None:
        """Stop offering a service.

        Raises:
            NotFoundError: Unknown service or one owned by another business.
        """
        profile = await self.get_profile()
        service = await BusinessRepository.get_service(self._db, profile.id, service_id)
        if service is None:
            raise NotFoundError("Service", str(service_id))
        await BusinessRepository.delete(self._db, service)

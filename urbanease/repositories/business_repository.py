"""Repository for business profiles, photos and offered services."""

import logging
import uuid
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.core.errors import ConflictError
from urbanease.models.business import BusinessPhoto, BusinessProfile, BusinessService

logger = logging.getLogger(__name__)

# Security: user_id and id are never updatable through this path.
_PROFILE_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "business_name",
        "phone_number",
        "whatsapp_number",
        "instagram_id",
        "owner_name",
        "owner_phone",
        "building",
        "street",
        "city",
        "latitude",
        "longitude",
    }
)


class BusinessRepository:
    """Stateless repository for the business_* tables.

    Lookups of photos and services are always scoped by business_id, so a
    business can never read or delete another business's rows.
    """

    @staticmethod
    async def get_profile_by_user_id(
        db: AsyncSession, user_id: uuid.UUID
    ) -> BusinessProfile | None:
        result = await db.execute(
            select(BusinessProfile).where(BusinessProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_profile(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        business_name: str,
        phone_number: str,
        owner_name: str,
        owner_phone: str,
        building: str,
        street: str,
        city: str,
    ) -> BusinessProfile:
        """Create the profile row for a new business identity.

        Returns:
            Created BusinessProfile.
        """
        profile = BusinessProfile(
            user_id=user_id,
            business_name=business_name,
            phone_number=phone_number,
            owner_name=owner_name,
            owner_phone=owner_phone,
            building=building,
            street=street,
            city=city,
        )
        db.add(profile)
        await db.flush()
        await db.refresh(profile)
        return profile

    @staticmethod
    async def update_profile(
        db: AsyncSession,
        profile: BusinessProfile,
        **kwargs: str | Decimal | None,
    ) -> BusinessProfile:
        """Apply whitelisted field changes to a profile.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        unknown = set(kwargs) - _PROFILE_UPDATABLE_FIELDS
        if unknown:
            msg = f"Unknown fields: {', '.join(sorted(unknown))}"
            raise ValueError(msg)
        for field, value in kwargs.items():
            setattr(profile, field, value)
        await db.flush()
        await db.refresh(profile)
        return profile

    # =========================================================================
    # Photos
    # =========================================================================

    @staticmethod
    async def list_photos(
        db: AsyncSession, business_id: uuid.UUID
    ) -> list[BusinessPhoto]:
        result = await db.execute(
            select(BusinessPhoto)
            .where(BusinessPhoto.business_id == business_id)
            .order_by(BusinessPhoto.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_photo(
        db: AsyncSession, business_id: uuid.UUID, photo_id: uuid.UUID
    ) -> BusinessPhoto | None:
        result = await db.execute(
            select(BusinessPhoto).where(
                BusinessPhoto.id == photo_id,
                BusinessPhoto.business_id == business_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_photo(
        db: AsyncSession, *, business_id: uuid.UUID, photo_url: str
    ) -> BusinessPhoto:
        photo = BusinessPhoto(business_id=business_id, photo_url=photo_url)
        db.add(photo)
        await db.flush()
        await db.refresh(photo)
        return photo

    # =========================================================================
    # Services
    # =========================================================================

    @staticmethod
    async def list_services(
        db: AsyncSession, business_id: uuid.UUID
    ) -> list[BusinessService]:
        """List the services a business offers, oldest first."""
        result = await db.execute(
            select(BusinessService)
            .where(BusinessService.business_id == business_id)
            .order_by(BusinessService.created_at)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_service(
        db: AsyncSession, business_id: uuid.UUID, service_id: uuid.UUID
    ) -> BusinessService | None:
        result = await db.execute(
            select(BusinessService).where(
                BusinessService.id == service_id,
                BusinessService.business_id == business_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_service_by_type(
        db: AsyncSession, business_id: uuid.UUID, service_type_id: uuid.UUID
    ) -> BusinessService | None:
        result = await db.execute(
            select(BusinessService).where(
                BusinessService.business_id == business_id,
                BusinessService.service_type_id == service_type_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_service(
        db: AsyncSession, *, business_id: uuid.UUID, service_type_id: uuid.UUID
    ) -> BusinessService:
        """Offer a service type.

        Raises:
            ConflictError: SERVICE_ALREADY_ADDED if the business already
                offers the type. The session is rolled back before raising.
        """
        service = BusinessService(
            business_id=business_id, service_type_id=service_type_id
        )
        db.add(service)
        try:
            await db.flush()
        except IntegrityError as exc:
            await db.rollback()
            logger.info("Duplicate business service rejected by unique constraint")
            raise ConflictError(
                code="SERVICE_ALREADY_ADDED",
                message="Service already added to this business",
            ) from exc
        await db.refresh(service)
        return service

    @staticmethod
    async def delete(db: AsyncSession, row: BusinessPhoto | BusinessService) -> None:
        """Delete a photo or service row."""
        await db.delete(row)
        await db.flush()

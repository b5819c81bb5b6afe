"""Repository for customer profiles and addresses."""

import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.models.customer import CustomerAddress, CustomerProfile

_PROFILE_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "first_name",
        "last_name",
        "phone_number",
        "whatsapp_number",
        "profile_photo_url",
    }
)

_ADDRESS_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {"house", "street", "city", "is_default"}
)


def _reject_unknown(fields: dict, allowed: frozenset[str]) -> None:
    unknown = set(fields) - allowed
    if unknown:
        msg = f"Unknown fields: {', '.join(sorted(unknown))}"
        raise ValueError(msg)


class CustomerRepository:
    """Stateless repository for customer_profiles and customer_addresses."""

    @staticmethod
    async def get_profile_by_user_id(
        db: AsyncSession, user_id: uuid.UUID
    ) -> CustomerProfile | None:
        result = await db.execute(
            select(CustomerProfile).where(CustomerProfile.user_id == user_id)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def create_profile(
        db: AsyncSession,
        *,
        user_id: uuid.UUID,
        first_name: str,
        last_name: str,
        phone_number: str,
    ) -> CustomerProfile:
        """Create the profile row for a new customer identity.

        Args:
            db: Async database session.
            user_id: Owning identity.
            first_name: Given name.
            last_name: Family name.
            phone_number: Contact number.

        Returns:
            Created CustomerProfile.
        """
        profile = CustomerProfile(
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
        )
        db.add(profile)
        await db.flush()
        await db.refresh(profile)
        return profile

    @staticmethod
    async def update_profile(
        db: AsyncSession,
        profile: CustomerProfile,
        **kwargs: str | None,
    ) -> CustomerProfile:
        """Apply whitelisted field changes to a profile.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        _reject_unknown(kwargs, _PROFILE_UPDATABLE_FIELDS)
        for field, value in kwargs.items():
            setattr(profile, field, value)
        await db.flush()
        await db.refresh(profile)
        return profile

    # =========================================================================
    # Addresses
    # =========================================================================

    @staticmethod
    async def list_addresses(
        db: AsyncSession, customer_id: uuid.UUID
    ) -> list[CustomerAddress]:
        """List a customer's addresses, default first."""
        result = await db.execute(
            select(CustomerAddress)
            .where(CustomerAddress.customer_id == customer_id)
            .order_by(
                CustomerAddress.is_default.desc(),
                CustomerAddress.created_at.desc(),
            )
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_address(
        db: AsyncSession,
        customer_id: uuid.UUID,
        address_id: uuid.UUID,
    ) -> CustomerAddress | None:
        """Fetch an address only if it belongs to the given customer."""
        result = await db.execute(
            select(CustomerAddress).where(
                CustomerAddress.id == address_id,
                CustomerAddress.customer_id == customer_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def clear_default(
        db: AsyncSession,
        customer_id: uuid.UUID,
        *,
        keep_id: uuid.UUID | None = None,
    ) -> None:
        """Unset is_default on every address of the customer except keep_id."""
        stmt = (
            update(CustomerAddress)
            .where(
                CustomerAddress.customer_id == customer_id,
                CustomerAddress.is_default.is_(True),
            )
            .values(is_default=False)
        )
        if keep_id is not None:
            stmt = stmt.where(CustomerAddress.id != keep_id)
        await db.execute(stmt)

    @staticmethod
    async def create_address(
        db: AsyncSession,
        *,
        customer_id: uuid.UUID,
        house: str,
        street: str,
        city: str,
        is_default: bool = False,
    ) -> CustomerAddress:
        address = CustomerAddress(
            customer_id=customer_id,
            house=house,
            street=street,
            city=city,
            is_default=is_default,
        )
        db.add(address)
        await db.flush()
        await db.refresh(address)
        return address

    @staticmethod
    async def update_address(
        db: AsyncSession,
        address: CustomerAddress,
        **kwargs: str | bool,
    ) -> CustomerAddress:
        """Apply whitelisted field changes to an address.

        Raises:
            ValueError: If an unknown field name is passed.
        """
        _reject_unknown(kwargs, _ADDRESS_UPDATABLE_FIELDS)
        for field, value in kwargs.items():
            setattr(address, field, value)
        await db.flush()
        await db.refresh(address)
        return address

    @staticmethod
    async def delete_address(db: AsyncSession, address: CustomerAddress) -> None:
        await db.delete(address)
        await db.flush()

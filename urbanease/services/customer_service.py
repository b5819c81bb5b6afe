"""Customer profile and address management.

Addresses are always resolved through the caller's own profile, so an
address id belonging to another customer behaves exactly like an unknown id.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.core.errors import NotFoundError
from urbanease.models.customer import CustomerAddress, CustomerProfile
from urbanease.repositories.customer_repository import CustomerRepository

logger = logging.getLogger(__name__)

_REQUIRED_PROFILE_FIELDS = frozenset({"first_name", "last_name", "phone_number"})


class CustomerService:
    """Operations on the authenticated customer's own data.

    Args:
        db: Async database session.
        user_id: Identity of the authenticated customer.
    """

    def __init__(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        self._db = db
        self._user_id = user_id

    async def get_profile(self) -> CustomerProfile:
        """Return the caller's profile.

        Raises:
            NotFoundError: If the identity has no customer profile.
        """
        profile = await CustomerRepository.get_profile_by_user_id(
            self._db, self._user_id
        )
        if profile is None:
            raise NotFoundError("Customer profile")
        return profile

    async def update_profile(self, **fields: str | None) -> CustomerProfile:
        """Apply the given profile fields; omitted fields are left unchanged.

        Optional contact fields may be cleared with None. None for a
        required field is ignored.
        """
        changes = {
            field: value
            for field, value in fields.items()
            if value is not None or field not in _REQUIRED_PROFILE_FIELDS
        }
        profile = await self.get_profile()
        return await CustomerRepository.update_profile(self._db, profile, **changes)

    # -----------------------------------------------------------------------
    # Addresses
    # -----------------------------------------------------------------------

    async def list_addresses(self) -> list[CustomerAddress]:
        profile = await self.get_profile()
        return await CustomerRepository.list_addresses(self._db, profile.id)

    async def _get_address(
        self, profile: CustomerProfile, address_id: uuid.UUID
    ) -> CustomerAddress:
        address = await CustomerRepository.get_address(self._db, profile.id, address_id)
        if address is None:
            raise NotFoundError("Address", str(address_id))
        return address

    async def add_address(
        self,
        *,
        house: str,
        street: str,
        city: str,
        is_default: bool = False,
    ) -> CustomerAddress:
        """Add an address. A new default address demotes the previous one.

        Args:
            house: House or flat identifier.
            street: Street name.
            city: City.
            is_default: Make this the customer's default address.

        Returns:
            The created address.

        Raises:
            NotFoundError: If the identity has no customer profile.
        """
        profile = await self.get_profile()
        if is_default:
            await CustomerRepository.clear_default(self._db, profile.id)
        return await CustomerRepository.create_address(
            self._db,
            customer_id=profile.id,
            house=house,
            street=street,
            city=city,
            is_default=is_default,
        )

    async def update_address(
        self,
        address_id: uuid.UUID,
        **fields: str | bool,
    ) -> CustomerAddress:
        """Update an address the caller owns.

        Setting is_default to True demotes every other address of the
        customer. Omitted fields are left unchanged.

        Raises:
            NotFoundError: Unknown address or one owned by another customer.
        """
        profile = await self.get_profile()
        address = await self._get_address(profile, address_id)
        if fields.get("is_default") is True and not address.is_default:
            await CustomerRepository.clear_default(
                self._db, profile.id, keep_id=address.id
            )
        return await CustomerRepository.update_address(self._db, address, **fields)

    async def delete_address(self, address_id: uuid.UUID) -> None:
        """Delete an address the caller owns.

        Raises:
            NotFoundError: Unknown address or one owned by another customer.
        """
        profile = await self.get_profile()
        address = await self._get_address(profile, address_id)
        await CustomerRepository.delete_address(self._db, address)
        logger.info("Customer %s deleted address %s", self._user_id, address_id)

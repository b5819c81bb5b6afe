"""Tests for ServiceTypeRepository.

The unique name constraint is the last line of defence when two admins
add the same service type at once; it must surface as a 409, not a 500.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from urbanease.core.errors import ConflictError
from urbanease.repositories.service_type_repository import ServiceTypeRepository


class TestUniqueName:
    async def test_duplicate_create_maps_to_conflict(self, db_session: AsyncSession):
        await ServiceTypeRepository.create(db_session, name="Massage")
        await db_session.commit()

        with pytest.raises(ConflictError) as exc_info:
            await ServiceTypeRepository.create(db_session, name="Massage")

        assert exc_info.value.code == "DUPLICATE_SERVICE_TYPE"
        assert exc_info.value.status_code == 409
        assert [st.name for st in await ServiceTypeRepository.list_all(db_session)] == [
            "Massage"
        ]

    async def test_rename_onto_existing_name_maps_to_conflict(
        self, db_session: AsyncSession
    ):
        await ServiceTypeRepository.create(db_session, name="Facial")
        massage = await ServiceTypeRepository.create(db_session, name="Massage")
        await db_session.commit()

        with pytest.raises(ConflictError) as exc_info:
            await ServiceTypeRepository.rename(db_session, massage, "Facial")

        assert exc_info.value.code == "DUPLICATE_SERVICE_TYPE"
        names = [st.name for st in await ServiceTypeRepository.list_all(db_session)]
        assert names == ["Facial", "Massage"]

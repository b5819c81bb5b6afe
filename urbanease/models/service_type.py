"""ServiceType model - the admin-managed service catalog."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from urbanease.models.base import Base, CreatedAtMixin, uuid_primary_key

if TYPE_CHECKING:
    from urbanease.models.business import BusinessService


class ServiceType(Base, CreatedAtMixin):
    """Catalog entry such as "Haircut" or "Massage". Names are unique."""

    __tablename__ = "service_types"

    id: Mapped[uuid.UUID] = uuid_primary_key()
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    business_services: Mapped[list["BusinessService"]] = relationship(
        back_populates="service_type",
        cascade="all, delete-orphan",
    )

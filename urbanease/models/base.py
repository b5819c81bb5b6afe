"""SQLAlchemy base classes and common mixins.

Defines the declarative base and the timestamp mixin shared by all models.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    type_annotation_map = {
        datetime: DateTime(timezone=True),
        uuid.UUID: Uuid(),
    }


def uuid_primary_key() -> Mapped[uuid.UUID]:
    """UUID primary key column generated on the application side."""
    return mapped_column(Uuid(), primary_key=True, default=uuid.uuid4)


class CreatedAtMixin:
    """Mixin that adds a created_at column.

    Attributes:
        created_at: Timestamp when the record was created. Set automatically
            by the database on insert.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )


class TimestampMixin(CreatedAtMixin):
    """Mixin that adds created_at and updated_at columns.

    Attributes:
        updated_at: Timestamp when the record was last modified. Updated
            automatically on each update.
    """

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

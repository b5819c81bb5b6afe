"""SQLAlchemy ORM models for Urban Ease.

All models are exported from this module for convenient imports:
    from urbanease.models import User, CustomerProfile, ...

Models are organized by domain:
- user.py: User, UserRole (identity)
- customer.py: CustomerProfile, CustomerAddress
- business.py: BusinessProfile, BusinessPhoto, BusinessService
- service_type.py: ServiceType (catalog)
"""

from urbanease.models.base import Base, CreatedAtMixin, TimestampMixin
from urbanease.models.business import BusinessPhoto, BusinessProfile, BusinessService
from urbanease.models.customer import CustomerAddress, CustomerProfile
from urbanease.models.service_type import ServiceType
from urbanease.models.user import User, UserRole

__all__ = [
    # Base classes
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    # Identity
    "User",
    "UserRole",
    # Customer
    "CustomerProfile",
    "CustomerAddress",
    # Business
    "BusinessProfile",
    "BusinessPhoto",
    "BusinessService",
    # Catalog
    "ServiceType",
]

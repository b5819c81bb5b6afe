"""Account overview and customer self-service endpoints.

GET /users/profile is open to every role; everything under /users/customer
requires the CUSTOMER role.
"""

import uuid

from fastapi import APIRouter

from urbanease.api.deps import CurrentUserId, CustomerPrincipal, DbSession
from urbanease.core.responses import ApiResponse
from urbanease.schemas.admin import AccountOverviewResponse, AccountResponse
from urbanease.schemas.business import BusinessProfileResponse
from urbanease.schemas.customer import (
    AddressCreate,
    AddressResponse,
    AddressUpdate,
    CustomerProfileResponse,
    CustomerProfileUpdate,
)
from urbanease.services.admin_service import AccountOverview, get_account_overview
from urbanease.services.customer_service import CustomerService

router = APIRouter()


def overview_response(overview: AccountOverview) -> AccountOverviewResponse:
    """Build AccountOverviewResponse without touching lazy relationships."""
    account = AccountResponse.model_validate(overview.user)
    return AccountOverviewResponse(
        **account.model_dump(),
        customer_profile=(
            CustomerProfileResponse.model_validate(overview.customer_profile)
            if overview.customer_profile is not None
            else None
        ),
        business_profile=(
            BusinessProfileResponse.model_validate(overview.business_profile)
            if overview.business_profile is not None
            else None
        ),
    )


@router.get("/profile")
async def get_profile(
    user_id: CurrentUserId,
    db: DbSession,
) -> ApiResponse[AccountOverviewResponse]:
    """Current identity with its profile. Secrets are never included."""
    overview = await get_account_overview(db, user_id)
    return ApiResponse(data=overview_response(overview))


# =============================================================================
# Customer profile
# =============================================================================


@router.put("/customer/profile")
async def update_customer_profile(
    principal: CustomerPrincipal,
    body: CustomerProfileUpdate,
    db: DbSession,
) -> ApiResponse[CustomerProfileResponse]:
    service = CustomerService(db, principal.user_id)
    profile = await service.update_profile(**body.model_dump(exclude_unset=True))
    return ApiResponse(
        message="Profile updated successfully",
        data=CustomerProfileResponse.model_validate(profile),
    )


# =============================================================================
# Customer addresses
# =============================================================================


@router.get("/customer/addresses")
async def list_addresses(
    principal: CustomerPrincipal,
    db: DbSession,
) -> ApiResponse[list[AddressResponse]]:
    addresses = await CustomerService(db, principal.user_id).list_addresses()
    return ApiResponse(data=[AddressResponse.model_validate(a) for a in addresses])


@router.post("/customer/addresses", status_code=201)
async def add_address(
    principal: CustomerPrincipal,
    body: AddressCreate,
    db: DbSession,
) -> ApiResponse[AddressResponse]:
    address = await CustomerService(db, principal.user_id).add_address(
        house=body.house,
        street=body.street,
        city=body.city,
        is_default=body.is_default,
    )
    return ApiResponse(
        message="Address added successfully",
        data=AddressResponse.model_validate(address),
    )


@router.put("/customer/addresses/{address_id}")
async def update_address(
    address_id: uuid.UUID,
    principal: CustomerPrincipal,
    body: AddressUpdate,
    db: DbSession,
) -> ApiResponse[AddressResponse]:
    address = await CustomerService(db, principal.user_id).update_address(
        address_id, **body.model_dump(exclude_unset=True, exclude_none=True)
    )
    return ApiResponse(
        message="Address updated successfully",
        data=AddressResponse.model_validate(address),
    )


@router.delete("/customer/addresses/{address_id}")
async def delete_address(
    address_id: uuid.UUID,
    principal: CustomerPrincipal,
    db: DbSession,
) -> ApiResponse[None]:
    await CustomerService(db, principal.user_id).delete_address(address_id)
    return ApiResponse(message="Address deleted successfully")

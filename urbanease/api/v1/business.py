"""Business self-service endpoints.

All endpoints require the BUSINESS role. Photos and services are looked up
through the caller's own profile, so foreign ids answer 404.
"""

import uuid

from fastapi import APIRouter

from urbanease.api.deps import BusinessPrincipal, DbSession
from urbanease.core.responses import ApiResponse
from urbanease.models.business import BusinessService
from urbanease.models.service_type import ServiceType
from urbanease.schemas.business import (
    BusinessProfileResponse,
    BusinessProfileUpdate,
    BusinessServiceResponse,
    PhotoCreate,
    PhotoResponse,
    ServiceCreate,
    ServiceTypeResponse,
)
from urbanease.services.business_profile_service import BusinessProfileService

router = APIRouter()


def _service_response(
    service: BusinessService, service_type: ServiceType | None = None
) -> BusinessServiceResponse:
    """Build BusinessServiceResponse from ORM rows."""
    return BusinessServiceResponse(
        id=service.id,
        business_id=service.business_id,
        service_type_id=service.service_type_id,
        service_type=(
            ServiceTypeResponse.model_validate(service_type)
            if service_type is not None
            else None
        ),
        created_at=service.created_at,
    )


@router.put("/profile")
async def update_profile(
    principal: BusinessPrincipal,
    body: BusinessProfileUpdate,
    db: DbSession,
) -> ApiResponse[BusinessProfileResponse]:
    service = BusinessProfileService(db, principal.user_id)
    profile = await service.update_profile(**body.model_dump(exclude_unset=True))
    return ApiResponse(
        message="Business profile updated successfully",
        data=BusinessProfileResponse.model_validate(profile),
    )


# =============================================================================
# Photos
# =============================================================================


@router.get("/photos")
async def list_photos(
    principal: BusinessPrincipal,
    db: DbSession,
) -> ApiResponse[list[PhotoResponse]]:
    photos = await BusinessProfileService(db, principal.user_id).list_photos()
    return ApiResponse(data=[PhotoResponse.model_validate(p) for p in photos])


@router.post("/photos", status_code=201)
async def add_photo(
    principal: BusinessPrincipal,
    body: PhotoCreate,
    db: DbSession,
) -> ApiResponse[PhotoResponse]:
    photo = await BusinessProfileService(db, principal.user_id).add_photo(
        body.photo_url
    )
    return ApiResponse(
        message="Photo added successfully",
        data=PhotoResponse.model_validate(photo),
    )


@router.delete("/photos/{photo_id}")
async def delete_photo(
    photo_id: uuid.UUID,
    principal: BusinessPrincipal,
    db: DbSession,
) -> ApiResponse[None]:
    await BusinessProfileService(db, principal.user_id).delete_photo(photo_id)
    return ApiResponse(message="Photo deleted successfully")


# =============================================================================
# Services
# =============================================================================


@router.get("/service-types")
async def list_service_types(
    principal: BusinessPrincipal,
    db: DbSession,
) -> ApiResponse[list[ServiceTypeResponse]]:
    """Catalog of service types a business can offer."""
    service_types = await BusinessProfileService(
        db, principal.user_id
    ).list_service_types()
    return ApiResponse(
        data=[ServiceTypeResponse.model_validate(st) for st in service_types]
    )


@router.get("/services")
async def list_services(
    principal: BusinessPrincipal,
    db: DbSession,
) -> ApiResponse[list[BusinessServiceResponse]]:
    services = await BusinessProfileService(db, principal.user_id).list_services()
    return ApiResponse(
        data=[_service_response(service, st) for service, st in services]
    )


@router.post("/services", status_code=201)
async def add_service(
    principal: BusinessPrincipal,
    body: ServiceCreate,
    db: DbSession,
) -> ApiResponse[BusinessServiceResponse]:
    service = await BusinessProfileService(db, principal.user_id).add_service(
        body.service_type_id
    )
    return ApiResponse(
        message="Service added successfully",
        data=_service_response(service),
    )


@router.delete("/services/{service_id}")
async def delete_service(
    service_id: uuid.UUID,
    principal: BusinessPrincipal,
    db: DbSession,
) -> ApiResponse[None]:
    await BusinessProfileService(db, principal.user_id).delete_service(service_id)
    return ApiResponse(message="Service removed successfully")

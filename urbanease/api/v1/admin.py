"""Admin API router.

User inspection and service type catalog management. All endpoints
require the ADMIN role (AdminPrincipal).
"""

import uuid

from fastapi import APIRouter

from urbanease.api.deps import AdminPrincipal, DbSession
from urbanease.api.v1.users import overview_response
from urbanease.core.responses import ApiResponse
from urbanease.schemas.admin import (
    AccountOverviewResponse,
    AccountResponse,
    ServiceTypeWrite,
)
from urbanease.schemas.business import ServiceTypeResponse
from urbanease.services.admin_service import AdminService

router = APIRouter()


# =============================================================================
# Users
# =============================================================================


@router.get("/users")
async def list_users(
    _admin: AdminPrincipal,
    db: DbSession,
) -> ApiResponse[list[AccountResponse]]:
    users = await AdminService(db).list_users()
    return ApiResponse(data=[AccountResponse.model_validate(u) for u in users])


@router.get("/users/{user_id}")
async def get_user(
    user_id: uuid.UUID,
    _admin: AdminPrincipal,
    db: DbSession,
) -> ApiResponse[AccountOverviewResponse]:
    overview = await AdminService(db).get_user(user_id)
    return ApiResponse(data=overview_response(overview))


# =============================================================================
# Service types
# =============================================================================


@router.get("/service-types")
async def list_service_types(
    _admin: AdminPrincipal,
    db: DbSession,
) -> ApiResponse[list[ServiceTypeResponse]]:
    service_types = await AdminService(db).list_service_types()
    return ApiResponse(
        data=[ServiceTypeResponse.model_validate(st) for st in service_types]
    )


@router.post("/service-types", status_code=201)
async def create_service_type(
    body: ServiceTypeWrite,
    _admin: AdminPrincipal,
    db: DbSession,
) -> ApiResponse[ServiceTypeResponse]:
    service_type = await AdminService(db).create_service_type(body.name)
    return ApiResponse(
        message="Service type created successfully",
        data=ServiceTypeResponse.model_validate(service_type),
    )


@router.put("/service-types/{service_type_id}")
async def update_service_type(
    service_type_id: uuid.UUID,
    body: ServiceTypeWrite,
    _admin: AdminPrincipal,
    db: DbSession,
) -> ApiResponse[ServiceTypeResponse]:
    service_type = await AdminService(db).update_service_type(
        service_type_id, body.name
    )
    return ApiResponse(
        message="Service type updated successfully",
        data=ServiceTypeResponse.model_validate(service_type),
    )


@router.delete("/service-types/{service_type_id}")
async def delete_service_type(
    service_type_id: uuid.UUID,
    _admin: AdminPrincipal,
    db: DbSession,
) -> ApiResponse[None]:
    await AdminService(db).delete_service_type(service_type_id)
    return ApiResponse(message="Service type deleted successfully")

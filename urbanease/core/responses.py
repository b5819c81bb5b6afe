"""Response envelope models.

Consistent response format for all API endpoints:
``{"success": bool, "message"?: str, "data"?: ...}``. Errors use the same
envelope with ``success=false`` plus a machine-readable ``code``.

WHY RESPONSE ENVELOPES:
- Consistent structure across all endpoints
- Clients branch on ``success`` without inspecting status codes
- Type-safe response building in endpoints
"""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard response envelope for successful calls.

    Usage:
        @router.get("/customer/addresses")
        async def list_addresses(...) -> ApiResponse[list[AddressResponse]]:
            addresses = await service.list_addresses()
            return ApiResponse(data=addresses)
    """

    success: bool = True
    message: str | None = None
    data: T | None = None


class ErrorResponse(BaseModel):
    """Standard error response envelope.

    Usage in exception handlers:
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(code=exc.code, message=exc.message).model_dump(
                exclude_none=True
            ),
        )

    Attributes:
        success: Always False.
        message: Human-readable error message.
        code: Machine-readable error code (e.g., "NOT_FOUND").
        details: Optional list of field-level errors (for validation).
    """

    success: bool = False
    message: str
    code: str
    details: list[dict] | None = None

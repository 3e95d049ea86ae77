"""API routes implementation."""

from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, Request, HTTPException, status

from url_shortener_client.lib.common.validators import validate_field
from url_shortener_client.lib.storage.base import StorageError
from .schemas import (
    ValidateFieldRequest,
    ValidateFieldResponse,
    ResultListResponse,
    ShortenResultResponse,
    HealthResponse,
    ErrorResponse,
)

router = APIRouter()


@router.post(
    "/validate",
    response_model=ValidateFieldResponse,
    summary="Validate a form field",
    description="Run the live validation rule for one entry field.",
)
async def validate_form_field(body: ValidateFieldRequest):
    """Validate one field value while it is being edited."""
    message = validate_field(body.field, body.value)
    return ValidateFieldResponse(field=body.field, valid=message is None, message=message)


@router.get(
    "/results",
    response_model=ResultListResponse,
    responses={
        503: {"model": ErrorResponse, "description": "Store unavailable"},
    },
    summary="List shortened URLs",
    description="List every shortened URL persisted by this client, in creation order.",
)
async def list_results(request: Request):
    """List persisted results."""
    result_store = request.app.state.result_store

    try:
        results = await result_store.load()
    except StorageError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e),
        )

    return ResultListResponse(
        count=len(results),
        results=[ShortenResultResponse(**asdict(r)) for r in results],
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the key-value store is reachable.",
)
async def health_check(request: Request):
    """Health check endpoint for monitoring."""
    result_store = request.app.state.result_store

    healthy = await result_store.store.health_check()

    return HealthResponse(
        status="healthy" if healthy else "unhealthy",
        store="healthy" if healthy else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )

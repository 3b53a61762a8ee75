"""Webhook routes.

Endpoints (paths kept from the first deployment of the service):
- POST /webhooks/collections_create: issue a code for a new collection
- POST /webhooks/collections_update: restore the prefix after a rename
- POST /webhooks/seller_update: rebuild the title after a seller rename

Every endpoint answers with a coarse ``{"status": "ok" | "error"}``. Failures
are logged with full detail and answered with 500 so the sender retries.
"""

import json
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from boothcode.core.logging import LoggingContext, get_logger
from boothcode.domain.exceptions import BoothCodeError, NotFoundError
from boothcode.domain.services.booth_sync_service import SyncResult
from boothcode.infrastructure.api.dependencies import SyncService, VerifiedBody
from boothcode.infrastructure.api.schemas.webhook_schemas import (
    CollectionCreatedPayload,
    CollectionUpdatedPayload,
    SellerRenamedPayload,
    WebhookResponse,
)

router = APIRouter()
logger = get_logger(__name__)


def _error_response(status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=WebhookResponse(status="error").model_dump(exclude_none=True),
    )


def _invalid_payload(webhook: str, error: ValidationError | ValueError) -> JSONResponse:
    logger.warning("Webhook rejected: invalid payload", webhook=webhook, error=str(error))
    return _error_response(status.HTTP_400_BAD_REQUEST)


def _handler_failed(webhook: str, error: BoothCodeError) -> JSONResponse:
    if isinstance(error, NotFoundError):
        logger.error("Webhook failed: lookup found nothing", webhook=webhook, error=str(error))
    else:
        logger.error(
            "Webhook failed",
            webhook=webhook,
            error=str(error),
            exc_type=type(error).__name__,
        )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR)


def _ok(result: SyncResult) -> WebhookResponse:
    return WebhookResponse(status="ok", outcome=result.outcome.value)


@router.post("/collections_create", response_model=WebhookResponse)
async def collection_created(body: VerifiedBody, sync_service: SyncService):
    """Assign a booth code to a newly created collection."""
    webhook = "collections/create"
    try:
        payload = CollectionCreatedPayload.model_validate_json(body)
    except ValidationError as e:
        return _invalid_payload(webhook, e)

    with LoggingContext(webhook=webhook, collection_id=payload.id, handle=payload.handle):
        logger.info("Webhook received", title=payload.title)
        try:
            result = await sync_service.handle_collection_created(
                collection_id=payload.id,
                title=payload.title,
                handle=payload.handle,
            )
        except BoothCodeError as e:
            return _handler_failed(webhook, e)

    return _ok(result)


@router.post("/collections_update", response_model=WebhookResponse)
async def collection_renamed(body: VerifiedBody, sync_service: SyncService):
    """Re-apply the booth code prefix after a collection update."""
    webhook = "collections/update"
    try:
        payload = CollectionUpdatedPayload.model_validate_json(body)
    except ValidationError as e:
        return _invalid_payload(webhook, e)

    with LoggingContext(webhook=webhook, collection_id=payload.id):
        logger.info("Webhook received", title=payload.title)
        try:
            result = await sync_service.handle_collection_renamed(
                collection_id=payload.id,
                title=payload.title,
            )
        except BoothCodeError as e:
            return _handler_failed(webhook, e)

    return _ok(result)


async def _read_seller_body(request: Request) -> dict[str, Any]:
    """Read a seller webhook sent as a form (the usual case) or as JSON."""
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        data = json.loads(await request.body() or b"{}")
        if not isinstance(data, dict):
            raise ValueError("Seller webhook body must be a JSON object")
        return data

    form = await request.form()
    return {key: value for key, value in form.items() if isinstance(value, str)}


@router.post("/seller_update", response_model=WebhookResponse)
async def seller_renamed(request: Request, sync_service: SyncService):
    """Rebuild the collection title after a seller renamed its shop."""
    webhook = "seller/update"
    try:
        payload = SellerRenamedPayload.model_validate(await _read_seller_body(request))
    except (ValidationError, ValueError) as e:
        return _invalid_payload(webhook, e)

    with LoggingContext(webhook=webhook, handle=payload.handle):
        logger.info("Webhook received", name=payload.name)
        try:
            result = await sync_service.handle_seller_renamed(
                handle=payload.handle,
                name=payload.name,
            )
        except BoothCodeError as e:
            return _handler_failed(webhook, e)

    return _ok(result)

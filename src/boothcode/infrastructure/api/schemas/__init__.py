"""API schemas for BoothCode."""

from boothcode.infrastructure.api.schemas.webhook_schemas import (
    CollectionCreatedPayload,
    CollectionUpdatedPayload,
    SellerRenamedPayload,
    WebhookResponse,
)

__all__ = [
    "CollectionCreatedPayload",
    "CollectionUpdatedPayload",
    "SellerRenamedPayload",
    "WebhookResponse",
]

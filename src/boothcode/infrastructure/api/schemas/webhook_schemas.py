"""Pydantic schemas for webhook payloads and responses.

Webhook bodies carry many more fields than BoothCode needs; unknown fields
are ignored.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WebhookPayload(BaseModel):
    """Base schema for inbound webhook bodies."""

    model_config = ConfigDict(extra="ignore")


class CollectionWebhookPayload(WebhookPayload):
    """Fields shared by collection webhooks."""

    id: str = Field(..., description="Collection id (numeric or global id)")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> object:
        """Accept numeric ids, which the platform sends as JSON numbers."""
        if isinstance(v, bool):
            raise ValueError("Collection id must be a number or string")
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Collection id cannot be empty")
        return v


class CollectionCreatedPayload(CollectionWebhookPayload):
    """Body of the collection-created webhook."""

    title: str | None = Field(None, description="Collection title as created")
    handle: str = Field(..., min_length=1, description="Collection handle, shared with the seller")

    @field_validator("handle")
    @classmethod
    def validate_handle(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Handle cannot be blank")
        return v


class CollectionUpdatedPayload(CollectionWebhookPayload):
    """Body of the collection-updated webhook."""

    title: str = Field(..., description="Collection title after the update")


class SellerRenamedPayload(WebhookPayload):
    """Body of the seller-updated webhook."""

    handle: str = Field(..., min_length=1, description="Seller handle")
    name: str | None = Field(None, description="New shop name")

    @field_validator("handle")
    @classmethod
    def validate_handle(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Handle cannot be blank")
        return v


class WebhookResponse(BaseModel):
    """Coarse webhook acknowledgement; details are logged, not returned."""

    status: Literal["ok", "error"]
    outcome: str | None = None

"""API Routes for BoothCode."""

from boothcode.infrastructure.api.routes.webhooks_router import router as webhooks_router

__all__ = ["webhooks_router"]

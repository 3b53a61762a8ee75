"""Webhook authenticity checks."""

from boothcode.infrastructure.auth.webhook_verifier import HMAC_HEADER, WebhookVerifier

__all__ = ["HMAC_HEADER", "WebhookVerifier"]

"""Webhook signature verification.

Shopify signs each webhook body with the app's shared secret and sends the
result in the ``X-Shopify-Hmac-Sha256`` header: base64(HMAC-SHA256(secret, body)).
"""

import base64
import hmac
from hashlib import sha256

from boothcode.domain.exceptions import WebhookVerificationError

HMAC_HEADER = "X-Shopify-Hmac-Sha256"


class WebhookVerifier:
    """Verify webhook bodies against their HMAC-SHA256 signature."""

    def __init__(self, secret: str) -> None:
        if not secret:
            raise ValueError("Webhook secret must not be empty")
        self._secret = secret.encode("utf-8")

    def sign(self, body: bytes) -> str:
        """Compute the base64 signature for a raw body."""
        digest = hmac.new(self._secret, body, sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def verify(self, body: bytes, signature: str | None) -> None:
        """Check a signature using constant-time comparison.

        Raises:
            WebhookVerificationError: If the signature is missing or does not match.
        """
        if not signature:
            raise WebhookVerificationError(f"Missing {HMAC_HEADER} header")

        try:
            actual = base64.b64decode(signature.strip(), validate=True)
        except (ValueError, TypeError) as e:
            raise WebhookVerificationError("Invalid signature encoding") from e

        expected = hmac.new(self._secret, body, sha256).digest()
        if not hmac.compare_digest(actual, expected):
            raise WebhookVerificationError("Invalid webhook signature")

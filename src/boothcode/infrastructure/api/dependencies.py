"""FastAPI dependencies for the webhook routes.

Long-lived components are built once in the application lifespan and kept
on ``app.state``; these dependencies hand them to the routes.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from boothcode.core.logging import get_logger
from boothcode.domain.exceptions import WebhookVerificationError
from boothcode.domain.services.booth_sync_service import BoothCodeSyncService
from boothcode.infrastructure.auth.webhook_verifier import HMAC_HEADER, WebhookVerifier

logger = get_logger(__name__)


def get_sync_service(request: Request) -> BoothCodeSyncService:
    """Return the sync service created at startup.

    Raises:
        HTTPException: 503 if the application has not finished starting.
    """
    sync_service = getattr(request.app.state, "sync_service", None)
    if sync_service is None:
        logger.error("Sync service requested before startup completed")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is not ready",
        )
    return sync_service


SyncService = Annotated[BoothCodeSyncService, Depends(get_sync_service)]


async def verified_body(request: Request) -> bytes:
    """Read the raw request body and check its HMAC signature.

    Verification is skipped when no webhook secret is configured.

    Raises:
        HTTPException: 401 if the signature is missing or wrong.
    """
    body = await request.body()
    verifier: WebhookVerifier | None = getattr(request.app.state, "webhook_verifier", None)
    if verifier is None:
        return body

    try:
        verifier.verify(body, request.headers.get(HMAC_HEADER))
    except WebhookVerificationError as e:
        logger.warning(
            "Webhook rejected: signature verification failed",
            path=str(request.url.path),
            error=str(e),
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid webhook signature",
        )
    return body


VerifiedBody = Annotated[bytes, Depends(verified_body)]

"""Webkul multi-vendor seller directory provider.

Queries the public sellers endpoint, filtered by shop and seller handle:

    GET /api/v2/public/sellers.json?shop_name=<shop>&filter={"handle": "<handle>"}
"""

import json
from typing import Any

import httpx

from boothcode.core.config import Settings
from boothcode.core.logging import get_logger
from boothcode.domain.entities.seller import Seller
from boothcode.domain.exceptions import RemoteServiceError, SellerNotFoundError
from boothcode.infrastructure.services.seller_directory_provider import SellerDirectoryProvider

logger = get_logger(__name__)

SERVICE_NAME = "webkul"


class WebkulSellerDirectoryProvider(SellerDirectoryProvider):
    """Seller directory backed by the Webkul public sellers API."""

    def __init__(
        self,
        base_url: str,
        shop_name: str,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url
        self.shop_name = shop_name
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls, settings: Settings, client: httpx.AsyncClient | None = None
    ) -> "WebkulSellerDirectoryProvider":
        return cls(
            base_url=settings.seller_directory_url,
            shop_name=settings.shop_domain,
            timeout=settings.http_timeout_seconds,
            client=client,
        )

    async def lookup_by_handle(self, handle: str) -> Seller:
        params = {
            "shop_name": self.shop_name,
            "filter": json.dumps({"handle": handle}),
        }
        try:
            response = await self._client.get(self.base_url, params=params)
        except httpx.HTTPError as e:
            logger.error("Seller directory request failed", handle=handle, error=str(e))
            raise RemoteServiceError(SERVICE_NAME, f"Request failed: {e}") from e

        if not response.is_success:
            logger.error(
                "Seller directory returned an error status",
                handle=handle,
                status_code=response.status_code,
            )
            raise RemoteServiceError(
                SERVICE_NAME, "Failed to fetch seller", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteServiceError(SERVICE_NAME, "Response is not valid JSON") from e

        seller = self._first_seller(data)
        if seller is None or seller.get("seller_id") in (None, ""):
            logger.info("No seller matches handle", handle=handle)
            raise SellerNotFoundError(handle)

        try:
            seller_id = int(seller["seller_id"])
            return Seller(
                seller_id=seller_id,
                handle=seller.get("handle") or handle,
                name=seller.get("shop_name") or seller.get("sp_store_name"),
            )
        except (TypeError, ValueError) as e:
            raise RemoteServiceError(
                SERVICE_NAME, f"Invalid seller id {seller['seller_id']!r} for handle '{handle}'"
            ) from e

    @staticmethod
    def _first_seller(data: Any) -> dict[str, Any] | None:
        if not isinstance(data, dict):
            return None
        sellers = data.get("sellers")
        if not isinstance(sellers, list) or not sellers:
            return None
        first = sellers[0]
        return first if isinstance(first, dict) else None

    async def aclose(self) -> None:
        await self._client.aclose()

"""Shopify collection provider implementation.

Talks to the Shopify Admin GraphQL API through a long-lived httpx client.
The booth code lives in a single-line text metafield on the collection
(``custom.booth_s_number`` by default).
"""

from typing import Any

import httpx

from boothcode.core.config import Settings
from boothcode.core.logging import get_logger
from boothcode.domain.entities.collection import Collection
from boothcode.domain.exceptions import RemoteServiceError
from boothcode.infrastructure.services.collection_provider import CollectionProvider

logger = get_logger(__name__)

SERVICE_NAME = "shopify"

COLLECTION_UPDATE_MUTATION = """
mutation updateCollection($input: CollectionInput!) {
  collectionUpdate(input: $input) {
    collection {
      id
      title
    }
    userErrors {
      field
      message
    }
  }
}
"""

COLLECTION_CODE_QUERY = """
query collectionCode($id: ID!, $namespace: String!, $key: String!) {
  collection(id: $id) {
    id
    metafield(namespace: $namespace, key: $key) {
      value
    }
  }
}
"""

COLLECTION_BY_HANDLE_QUERY = """
query collectionByHandle($query: String!, $namespace: String!, $key: String!) {
  collections(first: 1, query: $query) {
    nodes {
      id
      title
      handle
      metafield(namespace: $namespace, key: $key) {
        value
      }
    }
  }
}
"""


def to_collection_gid(collection_id: int | str) -> str:
    """Convert a numeric webhook id into a collection global id.

    Examples:
        >>> to_collection_gid(42)
        'gid://shopify/Collection/42'
        >>> to_collection_gid("gid://shopify/Collection/42")
        'gid://shopify/Collection/42'
    """
    collection_id = str(collection_id).strip()
    if collection_id.startswith("gid://"):
        return collection_id
    return f"gid://shopify/Collection/{collection_id}"


class ShopifyCollectionProvider(CollectionProvider):
    """Collection provider backed by the Shopify Admin GraphQL API."""

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = "2025-01",
        metafield_namespace: str = "custom",
        metafield_key: str = "booth_s_number",
        metafield_type: str = "single_line_text_field",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Shopify provider.

        Args:
            shop_domain: Shop domain, e.g. my-shop.myshopify.com.
            access_token: Admin API access token.
            api_version: Admin API version segment of the endpoint URL.
            metafield_namespace: Namespace of the booth code metafield.
            metafield_key: Key of the booth code metafield.
            metafield_type: Metafield type used when writing the code.
            timeout: Request timeout in seconds for the owned client.
            client: Optional pre-built client (tests inject a mock transport).
        """
        self.shop_domain = shop_domain
        self.access_token = access_token
        self.api_version = api_version
        self.metafield_namespace = metafield_namespace
        self.metafield_key = metafield_key
        self.metafield_type = metafield_type
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls, settings: Settings, client: httpx.AsyncClient | None = None
    ) -> "ShopifyCollectionProvider":
        return cls(
            shop_domain=settings.shop_domain,
            access_token=settings.admin_api_token,
            api_version=settings.admin_api_version,
            metafield_namespace=settings.metafield_namespace,
            metafield_key=settings.metafield_key,
            metafield_type=settings.metafield_type,
            timeout=settings.http_timeout_seconds,
            client=client,
        )

    @property
    def graphql_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"

    async def _execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Run a GraphQL document and return its ``data`` object.

        Raises:
            RemoteServiceError: On transport failure, non-200 status,
                undecodable body or top-level GraphQL errors.
        """
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.access_token,
        }
        try:
            response = await self._client.post(
                self.graphql_url,
                json={"query": query, "variables": variables},
                headers=headers,
            )
        except httpx.HTTPError as e:
            logger.error("Shopify request failed", error=str(e))
            raise RemoteServiceError(SERVICE_NAME, f"Request failed: {e}") from e

        if response.status_code != 200:
            logger.error(
                "Shopify returned an error status",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise RemoteServiceError(
                SERVICE_NAME, "Unexpected response status", status_code=response.status_code
            )

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteServiceError(SERVICE_NAME, "Response is not valid JSON") from e

        errors = body.get("errors")
        if errors:
            messages = (
                "; ".join(str(err.get("message", err)) for err in errors)
                if isinstance(errors, list)
                else str(errors)
            )
            logger.error("Shopify GraphQL errors", errors=messages)
            raise RemoteServiceError(SERVICE_NAME, f"GraphQL errors: {messages}")

        return body.get("data") or {}

    async def _update_collection(self, collection_input: dict[str, Any]) -> None:
        data = await self._execute(COLLECTION_UPDATE_MUTATION, {"input": collection_input})
        payload = data.get("collectionUpdate") or {}

        user_errors = payload.get("userErrors") or []
        if user_errors:
            messages = "; ".join(
                f"{'.'.join(err.get('field') or [])}: {err.get('message')}" for err in user_errors
            )
            logger.error(
                "Shopify rejected collection update",
                collection_id=collection_input["id"],
                user_errors=messages,
            )
            raise RemoteServiceError(SERVICE_NAME, f"Collection update rejected: {messages}")

        if not payload.get("collection"):
            raise RemoteServiceError(
                SERVICE_NAME, f"Collection {collection_input['id']} was not updated"
            )

    async def update_title_and_code(self, collection_id: str, title: str, code: str) -> None:
        gid = to_collection_gid(collection_id)
        await self._update_collection(
            {
                "id": gid,
                "title": title,
                "metafields": [
                    {
                        "namespace": self.metafield_namespace,
                        "key": self.metafield_key,
                        "type": self.metafield_type,
                        "value": code,
                    }
                ],
            }
        )
        logger.info("Collection title and code updated", collection_id=gid, title=title, code=code)

    async def update_title(self, collection_id: str, title: str) -> None:
        gid = to_collection_gid(collection_id)
        await self._update_collection({"id": gid, "title": title})
        logger.info("Collection title updated", collection_id=gid, title=title)

    async def get_stored_code(self, collection_id: str) -> str | None:
        gid = to_collection_gid(collection_id)
        data = await self._execute(
            COLLECTION_CODE_QUERY,
            {"id": gid, "namespace": self.metafield_namespace, "key": self.metafield_key},
        )
        collection = data.get("collection")
        if not collection:
            logger.info("Collection not found while reading code", collection_id=gid)
            return None
        return self._metafield_value(collection)

    async def find_by_handle(self, handle: str) -> Collection | None:
        data = await self._execute(
            COLLECTION_BY_HANDLE_QUERY,
            {
                "query": f"handle:{handle}",
                "namespace": self.metafield_namespace,
                "key": self.metafield_key,
            },
        )
        nodes = (data.get("collections") or {}).get("nodes") or []

        # The search syntax can match loosely; only an exact handle counts
        for node in nodes:
            if node.get("handle") == handle:
                return Collection(
                    id=node["id"],
                    title=node.get("title") or "",
                    handle=node["handle"],
                    code=self._metafield_value(node),
                )
        return None

    @staticmethod
    def _metafield_value(node: dict[str, Any]) -> str | None:
        metafield = node.get("metafield") or {}
        value = metafield.get("value")
        return value or None

    async def aclose(self) -> None:
        await self._client.aclose()

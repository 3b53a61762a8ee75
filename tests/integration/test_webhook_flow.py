"""Integration tests for the webhook flow.

Runs the real application lifespan against a file registry, with the
commerce platform and seller directory simulated with respx.
"""

import json
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
import respx
from httpx import ASGITransport, AsyncClient

from boothcode.core.config import Settings
from boothcode.infrastructure.api.app import create_app

COLLECTION_GID = "gid://shopify/Collection/1001"


class FakeShop:
    """Minimal in-memory stand-in for the Admin GraphQL API."""

    def __init__(self) -> None:
        self.collections: dict[str, dict] = {}
        self.updates: list[dict] = []

    def add_collection(self, gid: str, title: str, handle: str) -> None:
        self.collections[gid] = {"title": title, "handle": handle, "code": None}

    def _node(self, gid: str) -> dict:
        collection = self.collections[gid]
        metafield = {"value": collection["code"]} if collection["code"] else None
        return {
            "id": gid,
            "title": collection["title"],
            "handle": collection["handle"],
            "metafield": metafield,
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        query, variables = body["query"], body["variables"]

        if "collectionUpdate" in query:
            collection_input = variables["input"]
            collection = self.collections[collection_input["id"]]
            collection["title"] = collection_input["title"]
            for metafield in collection_input.get("metafields", []):
                collection["code"] = metafield["value"]
            self.updates.append(collection_input)
            return httpx.Response(
                200,
                json={
                    "data": {
                        "collectionUpdate": {
                            "collection": {"id": collection_input["id"], "title": collection["title"]},
                            "userErrors": [],
                        }
                    }
                },
            )

        if "collectionByHandle" in query:
            handle = variables["query"].split(":", 1)[1]
            nodes = [self._node(gid) for gid, c in self.collections.items() if c["handle"] == handle]
            return httpx.Response(200, json={"data": {"collections": {"nodes": nodes}}})

        gid = variables["id"]
        node = self._node(gid) if gid in self.collections else None
        return httpx.Response(200, json={"data": {"collection": node}})


def seller_directory(request: httpx.Request) -> httpx.Response:
    handle = json.loads(request.url.params["filter"])["handle"]
    sellers = {"handmade-jewelry": 482913}
    if handle not in sellers:
        return httpx.Response(200, json={"sellers": []})
    return httpx.Response(
        200, json={"sellers": [{"seller_id": sellers[handle], "handle": handle}]}
    )


@pytest.fixture
def shop() -> FakeShop:
    fake = FakeShop()
    fake.add_collection(COLLECTION_GID, "Handmade Jewelry", "handmade-jewelry")
    return fake


@pytest.fixture
def flow_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        environment="testing",
        shop_domain="test-shop.myshopify.com",
        admin_api_token="shpat_test_token",
        registry_backend="file",
        registry_path=str(tmp_path / "used_codes.json"),
        log_format="console",
    )


@pytest_asyncio.fixture
async def client(flow_settings, shop) -> AsyncGenerator[AsyncClient, None]:
    """Client for an application whose lifespan has run."""
    app = create_app(flow_settings)
    graphql_url = (
        f"https://{flow_settings.shop_domain}/admin/api/"
        f"{flow_settings.admin_api_version}/graphql.json"
    )

    with respx.mock(assert_all_called=False) as remote:
        remote.post(graphql_url).mock(side_effect=shop.handler)
        remote.get(flow_settings.seller_directory_url).mock(side_effect=seller_directory)

        async with app.router.lifespan_context(app):
            async with AsyncClient(
                transport=ASGITransport(app=app), base_url="http://test"
            ) as ac:
                yield ac


@pytest.mark.asyncio
class TestWebhookFlow:
    """End-to-end behavior of the three webhooks."""

    async def test_full_lifecycle(self, client, shop, tmp_path):
        """Create, echo, rename and seller rename keep the prefix in place."""
        created = await client.post(
            "/webhooks/collections_create",
            json={"id": 1001, "title": "Handmade Jewelry", "handle": "handmade-jewelry"},
        )
        assert created.json() == {"status": "ok", "outcome": "updated"}
        assert shop.collections[COLLECTION_GID]["title"] == "B58 | Handmade Jewelry"
        assert shop.collections[COLLECTION_GID]["code"] == "B58"

        # The platform echoes our own write back as an update
        echoed = await client.post(
            "/webhooks/collections_update",
            json={"id": 1001, "title": "B58 | Handmade Jewelry"},
        )
        assert echoed.json() == {"status": "ok", "outcome": "unchanged"}
        assert len(shop.updates) == 1

        # A merchant renames the collection and drops the prefix
        renamed = await client.post(
            "/webhooks/collections_update",
            json={"id": 1001, "title": "Handmade Jewelry (New)"},
        )
        assert renamed.json() == {"status": "ok", "outcome": "updated"}
        assert shop.collections[COLLECTION_GID]["title"] == "B58 | Handmade Jewelry (New)"

        # The seller renames its shop
        seller = await client.post(
            "/webhooks/seller_update",
            data={"handle": "handmade-jewelry", "name": "Fine Jewelry"},
        )
        assert seller.json() == {"status": "ok", "outcome": "updated"}
        assert shop.collections[COLLECTION_GID]["title"] == "B58 | Fine Jewelry"

        registry_file = tmp_path / "used_codes.json"
        assert json.loads(registry_file.read_text(encoding="utf-8")) == ["B58"]

    async def test_redelivered_create_does_not_issue_twice(self, client, shop, tmp_path):
        body = {"id": 1001, "title": "Handmade Jewelry", "handle": "handmade-jewelry"}

        first = await client.post("/webhooks/collections_create", json=body)
        second = await client.post("/webhooks/collections_create", json=body)

        assert first.json()["outcome"] == "updated"
        assert second.json()["outcome"] == "updated"
        assert shop.collections[COLLECTION_GID]["title"] == "B58 | Handmade Jewelry"
        assert json.loads((tmp_path / "used_codes.json").read_text(encoding="utf-8")) == ["B58"]

    async def test_unknown_seller(self, client, shop, tmp_path):
        shop.add_collection("gid://shopify/Collection/2002", "Mystery", "mystery")

        response = await client.post(
            "/webhooks/collections_create",
            json={"id": 2002, "title": "Mystery", "handle": "mystery"},
        )

        assert response.status_code == 500
        assert response.json() == {"status": "error"}
        assert shop.collections["gid://shopify/Collection/2002"]["title"] == "Mystery"
        assert not (tmp_path / "used_codes.json").exists()

    async def test_ready_after_startup(self, client):
        response = await client.get("/ready")

        assert response.status_code == 200
        assert response.json()["registry_backend"] == "file"

"""Unit tests for the webhook routes."""

import json
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from boothcode.domain.entities import Collection, Seller
from boothcode.domain.exceptions import RemoteServiceError, SellerNotFoundError
from boothcode.infrastructure.api.app import create_app
from boothcode.infrastructure.auth import HMAC_HEADER, WebhookVerifier

COLLECTION_GID = "gid://shopify/Collection/1001"
CREATED_BODY = {"id": 1001, "title": "Handmade Jewelry", "handle": "handmade-jewelry"}


@pytest.fixture
def app(settings, sync_service, registry):
    """Application with the sync service wired in place of the lifespan."""
    application = create_app(settings)
    application.state.registry = registry
    application.state.sync_service = sync_service
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.mark.asyncio
class TestCollectionsCreate:
    """Tests for POST /webhooks/collections_create."""

    async def test_code_assigned(self, client, collections, sellers):
        sellers.lookup_by_handle.return_value = Seller(seller_id=482913, handle="handmade-jewelry")

        response = await client.post("/webhooks/collections_create", json=CREATED_BODY)

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "outcome": "updated"}
        collections.update_title_and_code.assert_awaited_once_with(
            "1001", "B58 | Handmade Jewelry", "B58"
        )

    async def test_global_id_passed_through(self, client, collections, sellers):
        sellers.lookup_by_handle.return_value = Seller(seller_id=482913, handle="h")

        response = await client.post(
            "/webhooks/collections_create",
            json={"id": COLLECTION_GID, "title": "Shop", "handle": "h"},
        )

        assert response.status_code == 200
        collections.update_title_and_code.assert_awaited_once_with(
            COLLECTION_GID, "B58 | Shop", "B58"
        )

    async def test_extra_fields_ignored(self, client, sellers):
        sellers.lookup_by_handle.return_value = Seller(seller_id=482913, handle="h")
        body = {**CREATED_BODY, "body_html": "<p>hi</p>", "published_at": None}

        response = await client.post("/webhooks/collections_create", json=body)

        assert response.status_code == 200

    @pytest.mark.parametrize(
        "body",
        [
            {"title": "No id", "handle": "h"},
            {"id": 1001, "title": "No handle"},
            {"id": 1001, "title": "Blank handle", "handle": "   "},
            {"id": True, "handle": "h"},
            {"id": "", "handle": "h"},
        ],
    )
    async def test_invalid_payload(self, client, collections, body):
        response = await client.post("/webhooks/collections_create", json=body)

        assert response.status_code == 400
        assert response.json() == {"status": "error"}
        collections.update_title_and_code.assert_not_awaited()

    async def test_malformed_json(self, client):
        response = await client.post(
            "/webhooks/collections_create",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"status": "error"}

    async def test_unknown_seller_is_an_error(self, client, sellers):
        sellers.lookup_by_handle.side_effect = SellerNotFoundError("handmade-jewelry")

        response = await client.post("/webhooks/collections_create", json=CREATED_BODY)

        assert response.status_code == 500
        assert response.json() == {"status": "error"}

    async def test_remote_failure_is_an_error(self, client, collections, sellers):
        sellers.lookup_by_handle.return_value = Seller(seller_id=482913, handle="h")
        collections.update_title_and_code.side_effect = RemoteServiceError("shopify", "down", 503)

        response = await client.post("/webhooks/collections_create", json=CREATED_BODY)

        assert response.status_code == 500
        assert response.json() == {"status": "error"}


@pytest.mark.asyncio
class TestCollectionsUpdate:
    """Tests for POST /webhooks/collections_update."""

    async def test_prefix_restored(self, client, collections):
        collections.get_stored_code.return_value = "C07"

        response = await client.post(
            "/webhooks/collections_update",
            json={"id": 1001, "title": "Handmade Jewelry (New)"},
        )

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "outcome": "updated"}
        collections.update_title.assert_awaited_once_with("1001", "C07 | Handmade Jewelry (New)")

    async def test_echo_of_own_update_is_a_no_op(self, client, collections):
        collections.get_stored_code.return_value = "C07"

        response = await client.post(
            "/webhooks/collections_update",
            json={"id": 1001, "title": "C07 | Handmade Jewelry"},
        )

        assert response.json() == {"status": "ok", "outcome": "unchanged"}
        collections.update_title.assert_not_awaited()

    async def test_collection_without_code(self, client, collections):
        response = await client.post(
            "/webhooks/collections_update", json={"id": 1001, "title": "Anything"}
        )

        assert response.json() == {"status": "ok", "outcome": "no_code"}

    async def test_title_required(self, client):
        response = await client.post("/webhooks/collections_update", json={"id": 1001})

        assert response.status_code == 400


@pytest.mark.asyncio
class TestSellerUpdate:
    """Tests for POST /webhooks/seller_update."""

    async def test_form_body(self, client, collections):
        collections.find_by_handle.return_value = Collection(
            id=COLLECTION_GID, title="C07 | Old Name", handle="shop", code="C07"
        )

        response = await client.post(
            "/webhooks/seller_update", data={"handle": "shop", "name": "New Name"}
        )

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "outcome": "updated"}
        collections.find_by_handle.assert_awaited_once_with("shop")
        collections.update_title.assert_awaited_once_with(COLLECTION_GID, "C07 | New Name")

    async def test_json_body(self, client, collections):
        collections.find_by_handle.return_value = Collection(
            id=COLLECTION_GID, title="C07 | Old Name", handle="shop", code="C07"
        )

        response = await client.post(
            "/webhooks/seller_update", json={"handle": "shop", "name": "New Name"}
        )

        assert response.status_code == 200
        collections.update_title.assert_awaited_once_with(COLLECTION_GID, "C07 | New Name")

    async def test_unknown_handle(self, client):
        response = await client.post(
            "/webhooks/seller_update", data={"handle": "ghost", "name": "Ghost"}
        )

        assert response.json() == {"status": "ok", "outcome": "no_collection"}

    async def test_handle_required(self, client):
        response = await client.post("/webhooks/seller_update", data={"name": "No Handle"})

        assert response.status_code == 400
        assert response.json() == {"status": "error"}

    async def test_json_body_must_be_object(self, client):
        response = await client.post("/webhooks/seller_update", json=["shop"])

        assert response.status_code == 400


@pytest.mark.asyncio
class TestSignatureVerification:
    """Tests for HMAC verification on collection webhooks."""

    @pytest_asyncio.fixture
    async def signed_client(self, settings, sync_service) -> AsyncGenerator[AsyncClient, None]:
        application = create_app(settings.model_copy(update={"webhook_secret": "whsec_test"}))
        application.state.sync_service = sync_service
        async with AsyncClient(
            transport=ASGITransport(app=application), base_url="http://test"
        ) as ac:
            yield ac

    async def test_missing_signature_rejected(self, signed_client, sellers):
        response = await signed_client.post("/webhooks/collections_create", json=CREATED_BODY)

        assert response.status_code == 401
        sellers.lookup_by_handle.assert_not_awaited()

    async def test_wrong_signature_rejected(self, signed_client):
        body = json.dumps(CREATED_BODY).encode()
        signature = WebhookVerifier("another_secret").sign(body)

        response = await signed_client.post(
            "/webhooks/collections_create",
            content=body,
            headers={"Content-Type": "application/json", HMAC_HEADER: signature},
        )

        assert response.status_code == 401

    async def test_valid_signature_accepted(self, signed_client, sellers):
        sellers.lookup_by_handle.return_value = Seller(seller_id=482913, handle="h")
        body = json.dumps(CREATED_BODY).encode()

        response = await signed_client.post(
            "/webhooks/collections_create",
            content=body,
            headers={
                "Content-Type": "application/json",
                HMAC_HEADER: WebhookVerifier("whsec_test").sign(body),
            },
        )

        assert response.status_code == 200


@pytest.mark.asyncio
class TestAppWiring:
    """Tests for health endpoints and request plumbing."""

    async def test_not_ready_before_startup(self, settings):
        application = create_app(settings)
        async with AsyncClient(
            transport=ASGITransport(app=application), base_url="http://test"
        ) as ac:
            ready = await ac.get("/ready")
            webhook = await ac.post("/webhooks/collections_update", json={"id": 1, "title": "X"})

        assert ready.status_code == 503
        assert webhook.status_code == 503

    async def test_ready_reports_registry(self, client, registry):
        await registry.add("B58")

        response = await client.get("/ready")

        assert response.status_code == 200
        assert response.json()["issued_codes"] == 1
        assert response.json()["registry_backend"] == "memory"

    async def test_health_and_live(self, client):
        assert (await client.get("/health")).json()["status"] == "healthy"
        assert (await client.get("/live")).json()["status"] == "alive"

    async def test_correlation_id_echoed(self, client):
        response = await client.get("/health", headers={"X-Correlation-ID": "cid_abc123"})

        assert response.headers["X-Correlation-ID"] == "cid_abc123"

    async def test_correlation_id_generated(self, client):
        response = await client.get("/health")

        assert response.headers["X-Correlation-ID"].startswith("cid_")

"""Unit tests for the Webkul seller directory provider."""

import json

import httpx
import pytest
import respx

from boothcode.domain.exceptions import RemoteServiceError, SellerNotFoundError
from boothcode.infrastructure.services.webkul_provider import WebkulSellerDirectoryProvider

BASE_URL = "https://mvmapi.webkul.com/api/v2/public/sellers.json"


@pytest.fixture
def provider() -> WebkulSellerDirectoryProvider:
    return WebkulSellerDirectoryProvider(base_url=BASE_URL, shop_name="test-shop.myshopify.com")


@pytest.mark.asyncio
@respx.mock
async def test_seller_found(provider):
    route = respx.get(BASE_URL).respond(
        status_code=200,
        json={
            "sellers": [
                {"seller_id": 482913, "handle": "handmade-jewelry", "shop_name": "Handmade Jewelry"}
            ]
        },
    )

    seller = await provider.lookup_by_handle("handmade-jewelry")

    assert seller.seller_id == 482913
    assert seller.handle == "handmade-jewelry"
    assert seller.name == "Handmade Jewelry"

    params = route.calls.last.request.url.params
    assert params["shop_name"] == "test-shop.myshopify.com"
    assert json.loads(params["filter"]) == {"handle": "handmade-jewelry"}


@pytest.mark.asyncio
@respx.mock
async def test_string_seller_id_is_converted(provider):
    respx.get(BASE_URL).respond(status_code=200, json={"sellers": [{"seller_id": "482913"}]})

    seller = await provider.lookup_by_handle("handmade-jewelry")

    assert seller.seller_id == 482913
    assert seller.handle == "handmade-jewelry"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [{"sellers": []}, {}, {"sellers": [{"handle": "x"}]}, {"sellers": [{"seller_id": ""}]}, []],
)
@respx.mock
async def test_no_seller(provider, body):
    respx.get(BASE_URL).respond(status_code=200, json=body)

    with pytest.raises(SellerNotFoundError) as exc_info:
        await provider.lookup_by_handle("ghost")

    assert exc_info.value.handle == "ghost"


@pytest.mark.asyncio
@respx.mock
async def test_non_numeric_seller_id(provider):
    respx.get(BASE_URL).respond(status_code=200, json={"sellers": [{"seller_id": "abc"}]})

    with pytest.raises(RemoteServiceError):
        await provider.lookup_by_handle("odd")


@pytest.mark.asyncio
@respx.mock
async def test_error_status(provider):
    respx.get(BASE_URL).respond(status_code=503)

    with pytest.raises(RemoteServiceError) as exc_info:
        await provider.lookup_by_handle("handmade-jewelry")

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
@respx.mock
async def test_invalid_json(provider):
    respx.get(BASE_URL).respond(status_code=200, text="<html>")

    with pytest.raises(RemoteServiceError):
        await provider.lookup_by_handle("handmade-jewelry")


@pytest.mark.asyncio
@respx.mock
async def test_transport_failure(provider):
    respx.get(BASE_URL).mock(side_effect=httpx.ReadTimeout("timed out"))

    with pytest.raises(RemoteServiceError):
        await provider.lookup_by_handle("handmade-jewelry")

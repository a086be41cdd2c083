"""Catalog HTTP Client — tests against httpx.MockTransport.

Tests cover:
    - get_json decodes JSON bodies and sends the JSON content type
    - Status and transport failures surface as classified StorefrontError
    - Undecodable bodies are validation errors; empty bodies decode to None
    - Per-call timeout overrides the client default
"""

import httpx
import pytest

from storefront.core.errors import ErrorCode, ErrorKind, StorefrontError
from storefront.infrastructure.catalog_client import CatalogHttpClient

BASE_URL = "https://catalog.test"


def _client(handler) -> CatalogHttpClient:
    return CatalogHttpClient(BASE_URL, transport=httpx.MockTransport(handler))


async def test_get_json_decodes_body():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(200, json={"data": {"products": []}})

    async with _client(handler) as client:
        assert await client.get_json("/products.json") == {"data": {"products": []}}
    assert seen == {
        "url": "https://catalog.test/products.json",
        "content_type": "application/json",
    }


async def test_server_error_is_classified():
    async with _client(lambda request: httpx.Response(502)) as client:
        with pytest.raises(StorefrontError) as exc_info:
            await client.get_json("/products.json")
    assert exc_info.value.kind is ErrorKind.SERVER
    assert exc_info.value.status == 502


async def test_connection_failure_is_classified():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(StorefrontError) as exc_info:
            await client.get_json("/products.json")
    assert exc_info.value.code is ErrorCode.NETWORK_ERROR


async def test_malformed_json_is_validation_error():
    async with _client(lambda request: httpx.Response(200, text="{oops")) as client:
        with pytest.raises(StorefrontError) as exc_info:
            await client.get_json("/products.json")
    assert exc_info.value.kind is ErrorKind.VALIDATION
    assert not exc_info.value.is_retryable


async def test_empty_body_decodes_to_none():
    async with _client(lambda request: httpx.Response(200)) as client:
        assert await client.get_json("/products.json") is None


async def test_probe_uses_per_call_timeout():
    seen = {}

    def handler(request):
        seen["timeout"] = request.extensions["timeout"]
        return httpx.Response(200, json={})

    async with _client(handler) as client:
        assert await client.probe("/products.json", timeout_ms=5000) == 200
    assert seen["timeout"]["read"] == 5.0


async def test_default_timeout_is_ten_seconds():
    seen = {}

    def handler(request):
        seen["timeout"] = request.extensions["timeout"]
        return httpx.Response(200, json={"ok": True})

    async with _client(handler) as client:
        await client.get_json("/products.json")
    assert seen["timeout"]["read"] == 10.0

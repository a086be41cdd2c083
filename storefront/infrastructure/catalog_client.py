"""Catalog HTTP Client — wraps httpx.AsyncClient with timeouts, logging, and error mapping.

Invariants:
    - Default timeout 10s per request; callers may pass a shorter per-call timeout
    - Transport and HTTP status failures leave this module as classified
      StorefrontError (infrastructure/classify.py), never as raw httpx exceptions
    - An undecodable JSON body is a validation error (not retryable)
    - No retries here: retry policy belongs to ErrorHandler.retry_with_backoff

Design Decisions:
    - httpx event hooks log every request and response at debug level
    - transport is injectable so tests run against httpx.MockTransport
"""

import logging
from typing import Any

import httpx

from storefront.core.errors import validation_error
from storefront.infrastructure.classify import classify_failure

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10_000


async def _log_request(request: httpx.Request) -> None:
    logger.debug(
        f"API request: {request.method} {request.url}",
        extra={"url": str(request.url)},
    )


async def _log_response(response: httpx.Response) -> None:
    logger.debug(
        f"API response: {response.status_code} {response.request.url}",
        extra={"status": response.status_code, "url": str(response.request.url)},
    )


class CatalogHttpClient:
    """Thin async HTTP client for the catalog endpoint."""

    def __init__(
        self,
        base_url: str,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_ms / 1000,
            headers={"Content-Type": "application/json"},
            transport=transport,
            event_hooks={"request": [_log_request], "response": [_log_response]},
        )

    async def __aenter__(self) -> "CatalogHttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _get(self, path: str, timeout_ms: int | None) -> httpx.Response:
        timeout = httpx.USE_CLIENT_DEFAULT if timeout_ms is None else timeout_ms / 1000
        try:
            response = await self.client.get(path, timeout=timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            error = classify_failure(exc)
            logger.warning(
                f"Catalog request failed: {error.message}",
                extra={"url": path, **error.to_log_context()},
            )
            raise error from exc
        return response

    async def get_json(self, path: str, timeout_ms: int | None = None) -> Any:
        """GET path and decode its JSON body."""
        response = await self._get(path, timeout_ms)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise validation_error("Malformed JSON received from catalog") from exc

    async def probe(self, path: str, timeout_ms: int | None = None) -> int:
        """GET path and return its (2xx) status code; any other status raises."""
        response = await self._get(path, timeout_ms)
        return response.status_code

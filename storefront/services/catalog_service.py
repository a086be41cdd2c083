"""Catalog Access Service — fetches the product catalog and enforces its schema.

Invariants:
    - Non-production reads the packaged JSON fixture directly, never retried
    - Production fetches over HTTP inside ErrorHandler.retry_with_backoff; whether
      another attempt happens is decided by classification, not by this module
    - Envelope must be {"data": {"products": [...]}} and every product must carry
      id, sku, title, price, availableSizes, otherwise ValidationError (not retryable)
    - Each payload entry becomes a Product through validate_product; entries that
      fail validation are dropped and logged
    - get_product_by_id / get_products_by_size derive from one get_products() call
    - check_api_health never raises
    - Every failure leaves as StorefrontError, already classified
"""

import logging
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from storefront.config import DEFAULT_FIXTURE_PATH
from storefront.core.catalog_filter import filter_by_sizes
from storefront.core.errors import network_error, validation_error
from storefront.core.product import Product
from storefront.core.sanitize import safe_json_parse
from storefront.core.validate_fields import validate_product_id
from storefront.core.validate_product import validate_product
from storefront.infrastructure.catalog_client import CatalogHttpClient
from storefront.infrastructure.classify import classify_failure
from storefront.infrastructure.performance import PerformanceMonitor
from storefront.infrastructure.retry import ErrorHandler

logger = logging.getLogger(__name__)

REQUIRED_PRODUCT_FIELDS: tuple[str, ...] = ("id", "sku", "title", "price", "availableSizes")


class CatalogService:
    """Reads the catalog from the fixture or the remote endpoint."""

    def __init__(
        self,
        error_handler: ErrorHandler,
        monitor: PerformanceMonitor,
        *,
        client: CatalogHttpClient | None = None,
        is_production: bool = False,
        catalog_path: str = "/products.json",
        fixture_path: Path = DEFAULT_FIXTURE_PATH,
        health_timeout_ms: int = 5_000,
    ):
        if is_production and client is None:
            raise ValueError("Production catalog access requires an HTTP client")
        self.error_handler = error_handler
        self.monitor = monitor
        self.client = client
        self.is_production = is_production
        self.catalog_path = catalog_path
        self.fixture_path = Path(fixture_path)
        self.health_timeout_ms = health_timeout_ms

    async def get_products(self) -> tuple[Product, ...]:
        """Full validated catalog, or a classified StorefrontError."""
        stop = self.monitor.start_timer("get_products")
        try:
            if self.is_production:
                raw = await self.error_handler.retry_with_backoff(self._fetch_remote)
            else:
                raw = self._load_fixture()
            return self._to_products(raw)
        except Exception as exc:
            error = classify_failure(exc)
            self.error_handler.log_error(error, "get_products")
            if error is exc:
                raise
            raise error from exc
        finally:
            stop()

    async def get_product_by_id(self, product_id: Any) -> Product:
        wanted = validate_product_id(product_id)
        products = await self.get_products()
        for product in products:
            if product.id == wanted:
                return product
        raise validation_error(f"Product with ID {product_id} not found")

    async def get_products_by_size(self, sizes: Iterable[str] | None) -> tuple[Product, ...]:
        products = await self.get_products()
        return filter_by_sizes(products, sizes)

    async def check_api_health(self) -> bool:
        """Lightweight reachability probe with the short health timeout."""
        if not self.is_production:
            return True
        try:
            status = await self.client.probe(
                self.catalog_path, timeout_ms=self.health_timeout_ms,
            )
        except Exception as e:
            self.error_handler.log_error(
                network_error(f"API health check failed: {e}"), "check_api_health",
            )
            return False
        return status == 200

    # ─── Internals ────────────────────────────────────────────────

    def _load_fixture(self) -> list:
        try:
            text = self.fixture_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise validation_error("Failed to load local products data") from exc
        payload = safe_json_parse(text)
        if payload is None:
            raise validation_error("Failed to load local products data")
        data = payload.get("data") if isinstance(payload, Mapping) else None
        products = data.get("products") if isinstance(data, Mapping) else None
        return products if isinstance(products, list) else []

    async def _fetch_remote(self) -> list:
        payload = await self.client.get_json(self.catalog_path)
        body = self.error_handler.validate_response(payload, ["data"])
        data = body["data"]
        products = data.get("products") if isinstance(data, Mapping) else None
        if not isinstance(products, list):
            raise validation_error("Invalid products data structure received")

        incomplete = [
            p for p in products
            if not isinstance(p, Mapping)
            or any(f not in p for f in REQUIRED_PRODUCT_FIELDS)
        ]
        if incomplete:
            raise validation_error(
                f"Invalid product data: {len(incomplete)} products missing required fields",
            )
        return products

    def _to_products(self, raw: list) -> tuple[Product, ...]:
        products: list[Product] = []
        for item in raw:
            result = validate_product(item)
            if not result.is_valid:
                logger.warning(
                    "Dropping invalid catalog product",
                    extra={
                        "product_id": item.get("id") if isinstance(item, Mapping) else None,
                        "errors": list(result.errors),
                    },
                )
                continue
            products.append(result.to_product())
        return tuple(products)

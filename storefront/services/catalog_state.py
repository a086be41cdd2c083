"""Catalog State Controller — owns the cached catalog, the size filter, and the error slot.

Invariants:
    - The cache is replaced whole on each successful fetch, never partially mutated,
      and never invalidated except by an explicit fetch
    - Each network fetch takes a request token; only the newest token may publish
      its products or its error, stale responses are discarded
    - filter_products uses the cache when populated (no network call) and is
      idempotent for an unchanged cache
    - is_fetching is true while any fetch is in flight; the flag always clears
      on completion, success or failure
    - retry_fetch only proceeds when the stored error is retryable
    - Accessors return tuples; callers never hold a live reference to state
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from storefront.core.catalog_filter import filter_by_sizes
from storefront.core.errors import DisplayError, StorefrontError
from storefront.core.product import Product
from storefront.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


@dataclass
class CatalogCache:
    """Owned, versioned cell holding the last unfiltered catalog."""
    products: tuple[Product, ...] = ()
    version: int = 0

    @property
    def is_populated(self) -> bool:
        return self.version > 0

    def replace(self, products: Iterable[Product]) -> None:
        self.products = tuple(products)
        self.version += 1


class CatalogStateController:
    """Fetch, cache, and filter the catalog for the presentation layer."""

    def __init__(self, service: CatalogService):
        self.service = service
        self._cache = CatalogCache()
        self._visible: tuple[Product, ...] = ()
        self._filters: tuple[str, ...] = ()
        self._in_flight = 0
        self._is_retrying = False
        self._error: DisplayError | None = None
        self._is_initialized = False
        self._latest_token = 0

    # ─── Read accessors ───────────────────────────────────────────

    @property
    def products(self) -> tuple[Product, ...]:
        return self._visible

    @property
    def filters(self) -> tuple[str, ...]:
        return self._filters

    @property
    def product_count(self) -> int:
        return len(self._visible)

    @property
    def has_products(self) -> bool:
        return bool(self._visible)

    @property
    def is_fetching(self) -> bool:
        return self._in_flight > 0

    @property
    def is_retrying(self) -> bool:
        return self._is_retrying

    @property
    def is_loading(self) -> bool:
        return self.is_fetching or self.is_retrying

    @property
    def error(self) -> DisplayError | None:
        return self._error

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    @property
    def cache_version(self) -> int:
        return self._cache.version

    # ─── Operations ───────────────────────────────────────────────

    async def fetch_products(self) -> None:
        """Fetch the catalog, replace the cache, and publish it."""
        self._in_flight += 1
        try:
            await self._load()
        finally:
            self._in_flight -= 1

    async def filter_products(self, new_filters: Iterable[str] | None) -> None:
        """Apply a size selection, fetching first only if the cache is empty."""
        filters = tuple(new_filters or ())
        self._in_flight += 1
        try:
            if not self._cache.is_populated:
                await self._load()
        finally:
            self._in_flight -= 1
        if not self._cache.is_populated:
            return
        self._filters = filters
        self._publish(self._cache.products)

    async def retry_fetch(self) -> None:
        if self._error is None or not self._error.is_retryable:
            return
        self._is_retrying = True
        try:
            await self.fetch_products()
        finally:
            self._is_retrying = False

    def clear_error(self) -> None:
        self._error = None

    # ─── Internals ────────────────────────────────────────────────

    async def _load(self) -> None:
        """Fetch once under a fresh token; only the newest token publishes."""
        self._latest_token += 1
        token = self._latest_token
        try:
            products = await self.service.get_products()
        except StorefrontError as error:
            if token != self._latest_token:
                logger.info(
                    "Discarding stale catalog error", extra={"request_token": token},
                )
                return
            self._error = DisplayError.from_error(error)
            return

        if token != self._latest_token:
            logger.info(
                "Discarding stale catalog response", extra={"request_token": token},
            )
            return

        self._cache.replace(products)
        self._publish(self._cache.products)
        self._error = None
        self._is_initialized = True
        logger.info(
            f"Catalog loaded: {len(products)} products",
            extra={"request_token": token},
        )

    def _publish(self, products: tuple[Product, ...]) -> None:
        self._visible = filter_by_sizes(products, self._filters)

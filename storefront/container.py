"""Composition Root — builds and tears down the storefront service graph.

Invariants:
    - One ErrorHandler, PerformanceMonitor and HTTP client per storefront instance,
      injected into the services that use them (no module-level singletons)
    - The HTTP client exists only in production and is closed on exit
    - Logging handler installed on entry and removed on exit
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from storefront.config import Settings, get_settings
from storefront.infrastructure.catalog_client import CatalogHttpClient
from storefront.infrastructure.observability import setup_logging
from storefront.infrastructure.performance import PerformanceMonitor
from storefront.infrastructure.retry import ErrorHandler, RetryConfig
from storefront.services.cart_state import CartStateController
from storefront.services.catalog_service import CatalogService
from storefront.services.catalog_state import CatalogStateController

logger = logging.getLogger(__name__)


@dataclass
class Storefront:
    settings: Settings
    error_handler: ErrorHandler
    monitor: PerformanceMonitor
    catalog_service: CatalogService
    catalog: CatalogStateController
    cart: CartStateController


def build_retry_config(settings: Settings) -> RetryConfig:
    return RetryConfig(
        max_retries=settings.max_retries,
        base_delay_ms=settings.base_delay_ms,
        backoff_multiplier=settings.backoff_multiplier,
        max_delay_ms=settings.max_delay_ms,
    )


@asynccontextmanager
async def create_storefront(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[Storefront]:
    """Startup/shutdown lifecycle for one storefront instance."""
    settings = settings or get_settings()
    log_handler = setup_logging(settings.log_level, settings.log_format)

    error_handler = ErrorHandler(build_retry_config(settings))
    monitor = PerformanceMonitor()
    client = None
    if settings.is_production:
        client = CatalogHttpClient(
            settings.catalog_base_url,
            timeout_ms=settings.request_timeout_ms,
            transport=transport,
        )
    catalog_service = CatalogService(
        error_handler,
        monitor,
        client=client,
        is_production=settings.is_production,
        catalog_path=settings.catalog_path,
        fixture_path=settings.catalog_fixture_path,
        health_timeout_ms=settings.health_timeout_ms,
    )
    storefront = Storefront(
        settings=settings,
        error_handler=error_handler,
        monitor=monitor,
        catalog_service=catalog_service,
        catalog=CatalogStateController(catalog_service),
        cart=CartStateController(),
    )
    logger.info(f"Storefront started ({settings.environment})")
    try:
        yield storefront
    finally:
        if client is not None:
            await client.aclose()
        logger.info("Storefront shutting down")
        logging.root.removeHandler(log_handler)

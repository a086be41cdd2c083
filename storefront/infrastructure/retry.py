"""Retry Engine — exponential backoff around async operations, with classification.

Invariants:
    - Each failure is classified once (classify_failure) before the retry decision
    - Non-retryable errors propagate immediately; retryable ones are retried until
      retry_count reaches max_retries, so an always-failing operation runs
      max_retries + 1 times
    - Delay before retry n (0-based) = min(base_delay_ms * multiplier**n, max_delay_ms)
    - Attempts run strictly one after another; the propagated error's retry_count
      is the number of retries performed
    - CancelledError (BaseException) is never caught

Design Decisions:
    - ErrorHandler is constructed and injected by the composition root, one per
      application, instead of a module-level singleton
    - No jitter: delays are deterministic for a given retry_count
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from storefront.core.errors import StorefrontError, validation_error
from storefront.infrastructure.classify import classify_failure

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryConfig:
    max_retries: int = 3
    base_delay_ms: int = 1000
    backoff_multiplier: float = 2
    max_delay_ms: int = 10_000


DEFAULT_RETRY_CONFIG = RetryConfig()


class ErrorHandler:
    """Classifies failures, retries transient ones, and validates response envelopes."""

    def __init__(self, retry_config: RetryConfig = DEFAULT_RETRY_CONFIG):
        self.retry_config = retry_config

    def compute_delay_ms(self, retry_count: int) -> int:
        cfg = self.retry_config
        delay = cfg.base_delay_ms * (cfg.backoff_multiplier ** retry_count)
        return int(min(delay, cfg.max_delay_ms))

    async def retry_with_backoff(
        self,
        operation: Callable[[], Awaitable[T]],
        retry_count: int = 0,
    ) -> T:
        """Run operation, retrying retryable failures with exponential backoff."""
        while True:
            try:
                return await operation()
            except Exception as exc:
                error = classify_failure(exc)
                if (
                    not error.is_retryable
                    or retry_count >= self.retry_config.max_retries
                ):
                    error.retry_count = retry_count
                    if error is exc:
                        raise
                    raise error from exc

                delay = self.compute_delay_ms(retry_count)
                logger.warning(
                    f"Retrying operation ({retry_count + 1}/"
                    f"{self.retry_config.max_retries}) after {delay}ms: {error.message}",
                    extra={
                        "attempt": retry_count + 1,
                        "delay_ms": delay,
                        "error_code": error.code.value,
                    },
                )
                await asyncio.sleep(delay / 1000)
                retry_count += 1

    def validate_response(
        self, data: Any, expected_fields: Iterable[str] | None = None,
    ) -> Any:
        """Reject empty bodies and bodies missing any expected top-level field."""
        if not data:
            raise validation_error("Empty response received")
        if expected_fields:
            missing = [
                f for f in expected_fields
                if not isinstance(data, Mapping) or f not in data
            ]
            if missing:
                raise validation_error(
                    f"Missing required fields: {', '.join(missing)}",
                )
        return data

    def log_error(self, error: StorefrontError, context: str | None = None) -> None:
        where = f" ({context})" if context else ""
        logger.error(
            f"API error{where}: {error.message}",
            extra={"operation": context, **error.to_log_context()},
        )

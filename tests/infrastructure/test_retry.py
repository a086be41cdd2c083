"""Retry Engine — tests for backoff, termination, and response validation.

Tests cover:
    - Success on first attempt makes exactly one call and never sleeps
    - Always-retryable failure runs max_retries + 1 attempts, then propagates
    - Non-retryable failure propagates after one attempt
    - Delays follow min(base * multiplier**n, max)
    - Raw exceptions are classified before propagation
    - validate_response rejects empty bodies and missing fields

Design Decisions:
    - asyncio.sleep monkeypatched with AsyncMock: no real waiting, delays asserted
"""

from unittest.mock import AsyncMock

import httpx
import pytest

from storefront.core.errors import ErrorCode, ErrorKind, StorefrontError, network_error, validation_error
from storefront.infrastructure.retry import DEFAULT_RETRY_CONFIG, ErrorHandler, RetryConfig


@pytest.fixture
def sleep(monkeypatch):
    mock = AsyncMock()
    monkeypatch.setattr("asyncio.sleep", mock)
    return mock


class _Flaky:
    """Fails with the given errors in order, then returns value."""

    def __init__(self, errors, value="ok"):
        self.errors = list(errors)
        self.value = value
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return self.value


def test_default_config():
    assert DEFAULT_RETRY_CONFIG == RetryConfig(3, 1000, 2, 10_000)


async def test_success_first_try(sleep):
    op = _Flaky([])
    assert await ErrorHandler().retry_with_backoff(op) == "ok"
    assert op.calls == 1
    sleep.assert_not_called()


async def test_recovers_after_transient_failures(sleep):
    op = _Flaky([network_error(), network_error()])
    assert await ErrorHandler().retry_with_backoff(op) == "ok"
    assert op.calls == 3
    assert sleep.await_count == 2


async def test_always_failing_retryable_runs_max_retries_plus_one(sleep):
    op = _Flaky([network_error() for _ in range(10)])
    handler = ErrorHandler(RetryConfig(max_retries=3))

    with pytest.raises(StorefrontError) as exc_info:
        await handler.retry_with_backoff(op)

    assert op.calls == 4
    assert exc_info.value.kind is ErrorKind.NETWORK
    assert exc_info.value.retry_count == 3


async def test_non_retryable_propagates_immediately(sleep):
    op = _Flaky([validation_error("bad data")])
    with pytest.raises(StorefrontError) as exc_info:
        await ErrorHandler().retry_with_backoff(op)
    assert op.calls == 1
    assert exc_info.value.retry_count == 0
    sleep.assert_not_called()


async def test_backoff_delays_are_exponential_and_capped(sleep):
    handler = ErrorHandler(RetryConfig(
        max_retries=5, base_delay_ms=1000, backoff_multiplier=2, max_delay_ms=8000,
    ))
    op = _Flaky([network_error() for _ in range(10)])

    with pytest.raises(StorefrontError):
        await handler.retry_with_backoff(op)

    delays = [call.args[0] for call in sleep.await_args_list]
    assert delays == [1.0, 2.0, 4.0, 8.0, 8.0]


def test_compute_delay_ms():
    handler = ErrorHandler(RetryConfig(base_delay_ms=1000, backoff_multiplier=2, max_delay_ms=10_000))
    assert [handler.compute_delay_ms(n) for n in range(5)] == [1000, 2000, 4000, 8000, 10_000]


async def test_initial_retry_count_counts_toward_limit(sleep):
    op = _Flaky([network_error() for _ in range(10)])
    with pytest.raises(StorefrontError):
        await ErrorHandler(RetryConfig(max_retries=3)).retry_with_backoff(op, retry_count=2)
    assert op.calls == 2


async def test_raw_exceptions_are_classified(sleep):
    request = httpx.Request("GET", "https://catalog.test/products.json")
    op = _Flaky([httpx.ConnectError("refused", request=request) for _ in range(5)])

    with pytest.raises(StorefrontError) as exc_info:
        await ErrorHandler(RetryConfig(max_retries=1)).retry_with_backoff(op)

    assert exc_info.value.code is ErrorCode.NETWORK_ERROR
    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert op.calls == 2


# ─── validate_response ───────────────────────────────────────────

def test_validate_response_rejects_empty_body():
    for empty in (None, {}, ""):
        with pytest.raises(StorefrontError, match="Empty response received"):
            ErrorHandler().validate_response(empty)


def test_validate_response_reports_missing_fields():
    with pytest.raises(StorefrontError, match="Missing required fields: data, meta") as exc_info:
        ErrorHandler().validate_response({"other": 1}, ["data", "meta"])
    assert exc_info.value.kind is ErrorKind.VALIDATION


def test_validate_response_returns_body():
    body = {"data": {"products": []}}
    assert ErrorHandler().validate_response(body, ["data"]) is body

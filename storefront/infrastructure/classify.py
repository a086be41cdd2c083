"""Failure Classification — maps raw transport failures onto StorefrontError.

Invariants:
    - Already-classified StorefrontError passes through unchanged (never re-classified)
    - Timeouts -> network/TIMEOUT_ERROR; other request failures -> network/NETWORK_ERROR
    - HTTP status failures -> core.errors.classify_status
    - Anything else -> api/UNEXPECTED_ERROR, status 500, retryable
"""

import httpx

from storefront.core.errors import (
    ERROR_MESSAGES,
    ErrorCode,
    StorefrontError,
    api_error,
    classify_status,
    network_error,
)

UNEXPECTED_MESSAGE = "An unexpected error occurred while fetching products"


def _response_body(response: httpx.Response) -> object:
    try:
        return response.json()
    except ValueError:
        return None


def classify_failure(exc: BaseException) -> StorefrontError:
    """Classify any exception raised while talking to the catalog."""
    if isinstance(exc, StorefrontError):
        return exc
    if isinstance(exc, httpx.TimeoutException):
        return network_error(ERROR_MESSAGES["TIMEOUT_ERROR"], ErrorCode.TIMEOUT_ERROR)
    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        return classify_status(response.status_code, _response_body(response))
    if isinstance(exc, httpx.RequestError):
        return network_error(ERROR_MESSAGES["NETWORK_ERROR"])
    return api_error(
        UNEXPECTED_MESSAGE, ErrorCode.UNEXPECTED_ERROR,
        status=500, is_retryable=True,
    )

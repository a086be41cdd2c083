"""Error Taxonomy — one tagged error type for every catalog and cart failure mode.

Invariants:
    - Every error has a kind (ErrorKind), code (ErrorCode), message, is_retryable
    - network and server kinds are always retryable; validation never is
    - api kind carries retryability decided by HTTP status (401/403/404 no, 429 yes,
      unknown status yes)
    - classify_status is PURE: HTTP status in, StorefrontError out, nothing raised
    - DisplayError.type is one of network, validation, server, unknown

Design Decisions:
    - Single StorefrontError with a `kind` discriminant instead of a subclass per
      failure: classification is a function from raw failure to value, callers
      branch on `kind`
    - Factories (network_error, validation_error, ...) fix the per-kind retryability
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Failure families — drive retry decisions and display type."""
    NETWORK = "network"
    VALIDATION = "validation"
    SERVER = "server"
    API = "api"


class ErrorCode(str, Enum):
    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    RATE_LIMIT = "RATE_LIMIT"
    SERVER_ERROR = "SERVER_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
    # Cart-local rejections
    INVALID_PRODUCT = "INVALID_PRODUCT"
    CART_FULL = "CART_FULL"


ERROR_MESSAGES: dict[str, str] = {
    "NETWORK_ERROR": "Unable to connect to the server. Please check your internet connection.",
    "TIMEOUT_ERROR": "Request timed out. Please try again.",
    "SERVER_ERROR": "Server is temporarily unavailable. Please try again later.",
    "VALIDATION_ERROR": "Invalid data received. Please refresh the page.",
    "UNAUTHORIZED": "You are not authorized to perform this action.",
    "NOT_FOUND": "The requested resource was not found.",
    "RATE_LIMIT": "Too many requests. Please wait a moment before trying again.",
    "UNKNOWN_ERROR": "An unexpected error occurred. Please try again.",
}

SERVER_STATUSES: frozenset[int] = frozenset({500, 502, 503, 504})


class StorefrontError(Exception):
    """Classified failure from the catalog boundary or a cart operation."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        code: ErrorCode,
        *,
        status: int | None = None,
        is_retryable: bool = False,
        retry_count: int = 0,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.code = code
        self.status = status
        self.is_retryable = is_retryable
        self.retry_count = retry_count

    def __repr__(self) -> str:
        return (
            f"StorefrontError(kind={self.kind.value!r}, code={self.code.value!r}, "
            f"status={self.status!r}, message={self.message!r})"
        )

    def to_log_context(self) -> dict[str, Any]:
        """Fields surfaced by the JSON log formatter."""
        return {
            "error_kind": self.kind.value,
            "error_code": self.code.value,
            "status": self.status,
            "is_retryable": self.is_retryable,
            "retry_count": self.retry_count,
        }


# ─── Factories ──────────────────────────────────────────────────

def network_error(
    message: str = "Network connection failed",
    code: ErrorCode = ErrorCode.NETWORK_ERROR,
    retry_count: int = 0,
) -> StorefrontError:
    return StorefrontError(
        message, ErrorKind.NETWORK, code,
        is_retryable=True, retry_count=retry_count,
    )


def validation_error(
    message: str = "Invalid data received",
    code: ErrorCode = ErrorCode.VALIDATION_ERROR,
) -> StorefrontError:
    return StorefrontError(
        message, ErrorKind.VALIDATION, code, status=400, is_retryable=False,
    )


def server_error(
    message: str = "Server error occurred", status: int = 500,
) -> StorefrontError:
    return StorefrontError(
        message, ErrorKind.SERVER, ErrorCode.SERVER_ERROR,
        status=status, is_retryable=True,
    )


def api_error(
    message: str,
    code: ErrorCode,
    *,
    status: int | None = None,
    is_retryable: bool = False,
) -> StorefrontError:
    return StorefrontError(
        message, ErrorKind.API, code, status=status, is_retryable=is_retryable,
    )


# ─── Status mapping ─────────────────────────────────────────────

def message_for_status(status: int, body: Any = None) -> str:
    """User-facing message for an HTTP status; a server `message` wins."""
    if isinstance(body, dict) and isinstance(body.get("message"), str) and body["message"]:
        return body["message"]
    if status == 400:
        return ERROR_MESSAGES["VALIDATION_ERROR"]
    if status in (401, 403):
        return ERROR_MESSAGES["UNAUTHORIZED"]
    if status == 404:
        return ERROR_MESSAGES["NOT_FOUND"]
    if status == 429:
        return ERROR_MESSAGES["RATE_LIMIT"]
    if status in SERVER_STATUSES:
        return ERROR_MESSAGES["SERVER_ERROR"]
    return ERROR_MESSAGES["UNKNOWN_ERROR"]


def classify_status(status: int, body: Any = None) -> StorefrontError:
    """Map an HTTP error status to its classified error. Pure."""
    message = message_for_status(status, body)
    if status == 400:
        return validation_error(message)
    if status == 401:
        return api_error(message, ErrorCode.UNAUTHORIZED, status=status)
    if status == 403:
        return api_error(message, ErrorCode.FORBIDDEN, status=status)
    if status == 404:
        return api_error(message, ErrorCode.NOT_FOUND, status=status)
    if status == 429:
        return api_error(message, ErrorCode.RATE_LIMIT, status=status, is_retryable=True)
    if status in SERVER_STATUSES:
        return server_error(message, status)
    return api_error(message, ErrorCode.UNKNOWN_ERROR, status=status, is_retryable=True)


# ─── Display ────────────────────────────────────────────────────

_DISPLAY_TYPES: dict[ErrorKind, str] = {
    ErrorKind.NETWORK: "network",
    ErrorKind.VALIDATION: "validation",
    ErrorKind.SERVER: "server",
    ErrorKind.API: "unknown",
}


@dataclass(frozen=True)
class DisplayError:
    """The single error a presentation layer shows: retry only if is_retryable."""
    message: str
    type: str
    is_retryable: bool
    retry_count: int = 0

    @classmethod
    def from_error(cls, error: StorefrontError) -> "DisplayError":
        return cls(
            message=error.message,
            type=_DISPLAY_TYPES[error.kind],
            is_retryable=error.is_retryable,
            retry_count=error.retry_count,
        )

    def to_response(self) -> dict:
        """camelCase envelope for the presentation layer."""
        return {
            "message": self.message,
            "type": self.type,
            "isRetryable": self.is_retryable,
            "retryCount": self.retry_count,
        }

"""Field Validators — coerce one untrusted product field into a bounded value.

Invariants:
    - Every validator returns the normalized value or None (sizes: empty list); never raises
    - Numeric coercion accepts int, float, and numeric strings; bool, None, blank
      strings and everything else are rejected
    - Prices are rounded half-up to 2 decimals on their decimal representation

Design Decisions:
    - Decimal rounding: round(19.995, 2) gives 19.99 on binary floats, quantize gives 20.0
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any
from urllib.parse import urlparse

from storefront.core.domain_types import (
    ALLOWED_IMAGE_DOMAINS,
    LOCAL_IMAGE_PREFIX,
    MAX_CURRENCY_FORMAT_LENGTH,
    MAX_PRICE,
    MAX_QUANTITY,
    MAX_SAFE_INTEGER,
    MAX_SIZES,
    MAX_STYLE_LENGTH,
    REMOTE_IMAGE_PREFIX,
    VALID_CURRENCIES,
    VALID_SIZES,
)
from storefront.core.sanitize import sanitize_html

_CENT = Decimal("0.01")


# ─── Numeric coercion ────────────────────────────────────────────

def _to_number(value: Any) -> int | float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return None
    return None


def _to_integer(value: Any) -> int | None:
    number = _to_number(value)
    if number is None:
        return None
    if isinstance(number, float):
        if not math.isfinite(number) or not number.is_integer():
            return None
        return int(number)
    return number


def _bounded_integer(value: Any, upper: int) -> int | None:
    number = _to_integer(value)
    if number is not None and 0 < number <= upper:
        return number
    return None


# ─── Identity & amounts ──────────────────────────────────────────

def validate_product_id(product_id: Any) -> int | None:
    return _bounded_integer(product_id, MAX_SAFE_INTEGER)


def validate_product_sku(sku: Any) -> int | None:
    return _bounded_integer(sku, MAX_SAFE_INTEGER)


def validate_product_price(price: Any) -> float | None:
    """Finite price in [0, MAX_PRICE], rounded half-up to cents."""
    number = _to_number(price)
    # NaN and inf fail the range check; huge ints never reach a float conversion.
    if number is None or not 0 <= number <= MAX_PRICE:
        return None
    rounded = Decimal(str(number)).quantize(_CENT, rounding=ROUND_HALF_UP)
    return float(rounded) + 0.0  # normalizes -0.0


def validate_product_quantity(quantity: Any) -> int | None:
    return _bounded_integer(quantity, MAX_QUANTITY)


# ─── Currency ────────────────────────────────────────────────────

def validate_currency_id(currency_id: Any) -> str | None:
    if not isinstance(currency_id, str):
        return None
    normalized = currency_id.upper().strip()
    return normalized if normalized in VALID_CURRENCIES else None


def validate_currency_format(currency_format: Any) -> str | None:
    if not isinstance(currency_format, str):
        return None
    sanitized = sanitize_html(currency_format.strip())
    if 0 < len(sanitized) <= MAX_CURRENCY_FORMAT_LENGTH:
        return sanitized
    return None


# ─── Presentation fields ─────────────────────────────────────────

def validate_available_sizes(sizes: Any) -> list[str]:
    """Keep whitelisted sizes (case-insensitive), upper-cased, at most MAX_SIZES."""
    if not isinstance(sizes, (list, tuple)):
        return []
    accepted = [
        size.upper() for size in sizes
        if isinstance(size, str) and size.upper() in VALID_SIZES
    ]
    return accepted[:MAX_SIZES]


def validate_product_style(style: Any) -> str | None:
    if not isinstance(style, str):
        return None
    sanitized = sanitize_html(style.strip())
    if 0 < len(sanitized) <= MAX_STYLE_LENGTH:
        return sanitized
    return None


def validate_boolean(value: Any) -> bool:
    return bool(value)


def validate_image_source(src: Any) -> str | None:
    """Allow local static assets, or https URLs on a whitelisted host."""
    if not isinstance(src, str):
        return None
    if src.startswith(LOCAL_IMAGE_PREFIX):
        return src
    if not src.startswith(REMOTE_IMAGE_PREFIX):
        return None
    try:
        hostname = urlparse(src).hostname
    except ValueError:
        return None
    if not hostname:
        return None
    if any(domain in hostname for domain in ALLOWED_IMAGE_DOMAINS):
        return src
    return None


def cart_image_source(sku: Any) -> str | None:
    """Thumbnail path for a cart line, None when the SKU is not valid."""
    valid_sku = validate_product_sku(sku)
    if valid_sku is None:
        return None
    return validate_image_source(f"{LOCAL_IMAGE_PREFIX}products/{valid_sku}-1-cart.webp")

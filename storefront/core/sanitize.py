"""Sanitization — turns untrusted strings into display-safe, bounded text.

Invariants:
    - sanitize_html escapes & < > " ' / ` = in a single pass
    - Every & is escaped, including one that already starts an entity, so the
      displayed text always matches the source text
    - Title output length <= MAX_TITLE_LENGTH + 3, description <= MAX_DESCRIPTION_LENGTH + 3
    - Non-string input never raises: title -> "Unknown Product", others -> ""
"""

import json
import re
from typing import Any

from storefront.core.domain_types import (
    MAX_DESCRIPTION_LENGTH,
    MAX_TITLE_LENGTH,
    TRUNCATION_SUFFIX,
    UNKNOWN_PRODUCT_TITLE,
)


HTML_ENTITIES: dict[str, str] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
    "`": "&#x60;",
    "=": "&#x3D;",
}

_ENTITY_PATTERN = re.compile(r"[&<>\"'`=/]")
_TAG_PATTERN = re.compile(r"<[^>]*>")

DEFAULT_CATALOG_ORIGIN = "https://react-shopping-cart-67954.firebaseio.com"


def sanitize_html(value: Any) -> str:
    """Entity-encode characters that could open markup or attributes."""
    if not isinstance(value, str):
        return ""
    return _ENTITY_PATTERN.sub(lambda m: HTML_ENTITIES[m.group(0)], value)


def _strip_and_truncate(value: str, limit: int) -> str:
    cleaned = sanitize_html(_TAG_PATTERN.sub("", value))
    if len(cleaned) > limit:
        return cleaned[:limit] + TRUNCATION_SUFFIX
    return cleaned


def sanitize_product_title(title: Any) -> str:
    if not isinstance(title, str):
        return UNKNOWN_PRODUCT_TITLE
    return _strip_and_truncate(title, MAX_TITLE_LENGTH)


def sanitize_product_description(description: Any) -> str:
    if not isinstance(description, str):
        return ""
    return _strip_and_truncate(description, MAX_DESCRIPTION_LENGTH)


def safe_json_parse(text: Any) -> Any:
    """Parse JSON text; malformed or non-text input yields None."""
    if not isinstance(text, (str, bytes, bytearray)):
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def get_csp_directives(catalog_origin: str = DEFAULT_CATALOG_ORIGIN) -> str:
    """Content-Security-Policy header value for pages rendering catalog data."""
    return "; ".join([
        "default-src 'self'",
        "script-src 'self' 'unsafe-inline' 'unsafe-eval'",
        "style-src 'self' 'unsafe-inline'",
        "img-src 'self' data: https:",
        "font-src 'self'",
        f"connect-src 'self' {catalog_origin}",
        "frame-ancestors 'none'",
        "base-uri 'self'",
        "form-action 'self'",
    ])

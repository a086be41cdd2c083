"""Domain Types — enums and bounds shared by validation, catalog, and cart.

Invariants:
    - CurrencyId has exactly 8 members, Size exactly 7
    - All numeric bounds live here — validators and controllers import them
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders (wire payloads are JSON)
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class CurrencyId(str, Enum):
    """ISO-like currency codes accepted from the catalog."""
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    CAD = "CAD"
    AUD = "AUD"
    JPY = "JPY"
    CHF = "CHF"
    CNY = "CNY"


class Size(str, Enum):
    """Garment sizes a product may be offered in (filter checkboxes use this order)."""
    XS = "XS"
    S = "S"
    M = "M"
    ML = "ML"
    L = "L"
    XL = "XL"
    XXL = "XXL"


VALID_CURRENCIES: frozenset[str] = frozenset(c.value for c in CurrencyId)
VALID_SIZES: frozenset[str] = frozenset(s.value for s in Size)


# ─── Bounds ──────────────────────────────────────────────────────

MAX_SAFE_INTEGER: int = 2**53 - 1
MAX_TITLE_LENGTH: int = 100
MAX_DESCRIPTION_LENGTH: int = 500
MAX_PRICE: int = 1_000_000
MAX_QUANTITY: int = 1000
MAX_SIZES: int = 10
MAX_CURRENCY_FORMAT_LENGTH: int = 10
MAX_STYLE_LENGTH: int = 50
MAX_CART_LINES: int = 100

TRUNCATION_SUFFIX: str = "..."


# ─── Fallbacks ───────────────────────────────────────────────────

UNKNOWN_PRODUCT_TITLE: str = "Unknown Product"
INVALID_PRODUCT_TITLE: str = "Invalid Product"
DEFAULT_CURRENCY_ID: str = CurrencyId.USD.value
DEFAULT_CURRENCY_FORMAT: str = "$"
DEFAULT_STYLE: str = "Unknown"


# ─── Image sources ───────────────────────────────────────────────

LOCAL_IMAGE_PREFIX: str = "static/"
REMOTE_IMAGE_PREFIX: str = "https://"
ALLOWED_IMAGE_DOMAINS: tuple[str, ...] = ("localhost", "127.0.0.1", "firebaseio.com")

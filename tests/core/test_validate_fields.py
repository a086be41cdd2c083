"""Field Validators — tests for numeric coercion, whitelists, and image sources.

Tests cover:
    - id / sku accept positive integers up to MAX_SAFE_INTEGER, incl. numeric strings
    - price bounds and half-up rounding to cents
    - quantity range 1..1000
    - currency id / format, sizes, style whitelists and bounds
    - image source prefix and domain whitelist
    - numeric validators return None for huge, infinite and NaN input, never raise
"""

import math

import pytest

from storefront.core.domain_types import MAX_SAFE_INTEGER
from storefront.core.validate_fields import (
    cart_image_source,
    validate_available_sizes,
    validate_boolean,
    validate_currency_format,
    validate_currency_id,
    validate_image_source,
    validate_product_id,
    validate_product_price,
    validate_product_quantity,
    validate_product_sku,
    validate_product_style,
)


# ─── id / sku ────────────────────────────────────────────────────

@pytest.mark.parametrize("value, expected", [
    (1, 1),
    ("42", 42),
    (7.0, 7),
    (MAX_SAFE_INTEGER, MAX_SAFE_INTEGER),
])
def test_product_id_accepts_positive_integers(value, expected):
    assert validate_product_id(value) == expected


@pytest.mark.parametrize("value", [
    0, -1, 1.5, "abc", "", None, True, MAX_SAFE_INTEGER + 1, math.inf, math.nan, [1],
])
def test_product_id_rejects_everything_else(value):
    assert validate_product_id(value) is None


def test_product_sku_shares_id_rules():
    assert validate_product_sku("12") == 12
    assert validate_product_sku(0) is None


# ─── price ───────────────────────────────────────────────────────

def test_price_rounds_half_up_to_cents():
    assert validate_product_price(19.995) == 20.0
    assert validate_product_price(10.904) == 10.9
    assert validate_product_price("5.555") == 5.56


def test_price_bounds():
    assert validate_product_price(0) == 0.0
    assert validate_product_price(1_000_000) == 1_000_000.0
    assert validate_product_price(-1) is None
    assert validate_product_price(1_000_001) is None


@pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan, "free", None, False])
def test_price_rejects_non_finite_and_non_numeric(value):
    assert validate_product_price(value) is None


@pytest.mark.parametrize("value", [0, 0.01, 3.14159, 999_999.999, "12.345", 1e6])
def test_price_result_is_bounded_and_two_decimal(value):
    result = validate_product_price(value)
    assert result is not None
    assert 0 <= result <= 1_000_000
    assert round(result, 2) == result


@pytest.mark.parametrize("value", [10**400, "9" * 400, -(10**400)])
def test_price_rejects_huge_integers(value):
    assert validate_product_price(value) is None


# ─── extreme numeric input ───────────────────────────────────────

EXTREME_NUMBERS = [
    10**400,
    -(10**400),
    "9" * 400,
    "9" * 5000,
    "1e400",
    "-1e400",
    "inf",
    "-inf",
    "nan",
    float("inf"),
    float("nan"),
    1e308 * 10,
]


@pytest.mark.parametrize("validator", [
    validate_product_id,
    validate_product_sku,
    validate_product_price,
    validate_product_quantity,
])
@pytest.mark.parametrize("value", EXTREME_NUMBERS)
def test_numeric_validators_reject_extremes_without_raising(validator, value):
    assert validator(value) is None


# ─── quantity ────────────────────────────────────────────────────

def test_quantity_range():
    assert validate_product_quantity(1) == 1
    assert validate_product_quantity(1000) == 1000
    assert validate_product_quantity(0) is None
    assert validate_product_quantity(1001) is None
    assert validate_product_quantity(2.5) is None


# ─── currency ────────────────────────────────────────────────────

def test_currency_id_is_case_insensitive_and_whitelisted():
    assert validate_currency_id("usd") == "USD"
    assert validate_currency_id(" eur ") == "EUR"
    assert validate_currency_id("xyz") is None
    assert validate_currency_id(840) is None


def test_currency_format_bounds():
    assert validate_currency_format(" $ ") == "$"
    assert validate_currency_format("€") == "€"
    assert validate_currency_format("") is None
    assert validate_currency_format("   ") is None
    assert validate_currency_format("x" * 11) is None
    assert validate_currency_format(None) is None


def test_currency_format_length_counts_escaped_text():
    # "<" becomes "&lt;" (4 chars), so 3 of them exceed 10
    assert validate_currency_format("<<<") is None


# ─── sizes / style / boolean ─────────────────────────────────────

def test_available_sizes_filters_and_normalizes():
    assert validate_available_sizes(["m", "zz", "L"]) == ["M", "L"]


def test_available_sizes_drops_non_strings_and_caps_length():
    assert validate_available_sizes(["S", 3, None, "xl"]) == ["S", "XL"]
    assert len(validate_available_sizes(["S"] * 25)) == 10


def test_available_sizes_non_list_yields_empty():
    assert validate_available_sizes("S,M") == []
    assert validate_available_sizes(None) == []


def test_style_bounds():
    assert validate_product_style("  Grey ") == "Grey"
    assert validate_product_style("") is None
    assert validate_product_style("s" * 51) is None
    assert validate_product_style(5) is None


def test_boolean_uses_truthiness():
    assert validate_boolean(1) is True
    assert validate_boolean("yes") is True
    assert validate_boolean(0) is False
    assert validate_boolean(None) is False


# ─── image sources ───────────────────────────────────────────────

def test_image_source_accepts_local_static_paths():
    assert validate_image_source("static/products/1-1-cart.webp") == "static/products/1-1-cart.webp"


def test_image_source_accepts_whitelisted_https_hosts():
    url = "https://react-shopping-cart-67954.firebaseio.com/img.png"
    assert validate_image_source(url) == url
    assert validate_image_source("https://localhost:3000/a.png") == "https://localhost:3000/a.png"


@pytest.mark.parametrize("src", [
    "https://evil.example.com/a.png",
    "http://localhost/a.png",
    "javascript:alert(1)",
    "https://",
    "https://[::1/a.png",
    None,
])
def test_image_source_rejects_other_sources(src):
    assert validate_image_source(src) is None


def test_cart_image_source_builds_local_thumbnail_path():
    assert cart_image_source(876661122392077) == "static/products/876661122392077-1-cart.webp"
    assert cart_image_source(0) is None

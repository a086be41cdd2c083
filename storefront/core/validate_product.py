"""Product Validation — orchestrates field validators over an untrusted product object.

Invariants:
    - Required fields (id, sku, title, price, currencyId, currencyFormat, style) each
      append one error string when invalid
    - currencyId, currencyFormat and style fall back to "USD", "$", "Unknown" even
      when invalid, so the sanitized dict always carries them
    - description, availableSizes, installments, isFreeShipping never block validity
    - validate_cart_product returns the base result unchanged when the product fails
    - Input is read by camelCase wire keys; output dict uses snake_case attribute names

Design Decisions:
    - Asymmetric fallbacks kept as-is: callers rely on currency/style always being present
    - Pydantic records accepted as input: validation re-runs on their wire dump
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from storefront.core.domain_types import (
    DEFAULT_CURRENCY_FORMAT,
    DEFAULT_CURRENCY_ID,
    DEFAULT_STYLE,
    UNKNOWN_PRODUCT_TITLE,
)
from storefront.core.product import CartProduct, Product
from storefront.core.sanitize import (
    sanitize_product_description,
    sanitize_product_title,
)
from storefront.core.validate_fields import (
    validate_available_sizes,
    validate_boolean,
    validate_currency_format,
    validate_currency_id,
    validate_product_id,
    validate_product_price,
    validate_product_quantity,
    validate_product_sku,
    validate_product_style,
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating one product: flag, sanitized fields, reasons."""
    is_valid: bool
    sanitized_product: dict[str, Any] | None = None
    errors: tuple[str, ...] = field(default_factory=tuple)

    def to_product(self) -> Product:
        if not self.is_valid or self.sanitized_product is None:
            raise ValueError(f"Cannot build product from invalid data: {self.errors}")
        return Product.model_validate(self.sanitized_product)

    def to_cart_product(self) -> CartProduct:
        if not self.is_valid or self.sanitized_product is None:
            raise ValueError(f"Cannot build cart product from invalid data: {self.errors}")
        return CartProduct.model_validate(self.sanitized_product)


def _as_mapping(product: Any) -> Mapping | None:
    if isinstance(product, BaseModel):
        return product.model_dump(by_alias=True)
    if isinstance(product, Mapping):
        return product
    return None


def validate_product(product: Any) -> ValidationResult:
    """Validate and sanitize every product field. Never raises."""
    data = _as_mapping(product)
    if data is None:
        return ValidationResult(False, None, ("Invalid product data",))

    errors: list[str] = []
    sanitized: dict[str, Any] = {}

    product_id = validate_product_id(data.get("id"))
    if product_id is None:
        errors.append("Invalid product ID")
    else:
        sanitized["id"] = product_id

    sku = validate_product_sku(data.get("sku"))
    if sku is None:
        errors.append("Invalid product SKU")
    else:
        sanitized["sku"] = sku

    title = sanitize_product_title(data.get("title"))
    if not title or title == UNKNOWN_PRODUCT_TITLE:
        errors.append("Invalid product title")
    else:
        sanitized["title"] = title

    sanitized["description"] = sanitize_product_description(data.get("description"))

    price = validate_product_price(data.get("price"))
    if price is None:
        errors.append("Invalid product price")
    else:
        sanitized["price"] = price

    sanitized["installments"] = validate_product_quantity(data.get("installments")) or 0

    currency_id = validate_currency_id(data.get("currencyId"))
    if currency_id is None:
        errors.append("Invalid currency ID")
    sanitized["currency_id"] = currency_id or DEFAULT_CURRENCY_ID

    currency_format = validate_currency_format(data.get("currencyFormat"))
    if currency_format is None:
        errors.append("Invalid currency format")
    sanitized["currency_format"] = currency_format or DEFAULT_CURRENCY_FORMAT

    sanitized["available_sizes"] = validate_available_sizes(data.get("availableSizes"))

    style = validate_product_style(data.get("style"))
    if style is None:
        errors.append("Invalid product style")
    sanitized["style"] = style or DEFAULT_STYLE

    sanitized["is_free_shipping"] = validate_boolean(data.get("isFreeShipping"))

    return ValidationResult(not errors, sanitized, tuple(errors))


def validate_cart_product(cart_product: Any) -> ValidationResult:
    """validate_product plus a quantity check in 1..1000."""
    base = validate_product(cart_product)
    if not base.is_valid:
        return base

    sanitized = dict(base.sanitized_product or {})
    errors = list(base.errors)

    data = _as_mapping(cart_product) or {}
    quantity = validate_product_quantity(data.get("quantity"))
    if quantity is None:
        errors.append("Invalid product quantity")
    else:
        sanitized["quantity"] = quantity

    return ValidationResult(not errors, sanitized, tuple(errors))

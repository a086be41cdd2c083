"""Cart State Controller — owns the cart line items and recomputes totals on every change.

Invariants:
    - Every operation validates its input via validate_cart_product before touching state
    - At most MAX_CART_LINES lines; each product id appears once (adds merge quantities)
    - Line quantities stay within 1..MAX_QUANTITY; out-of-range results leave the line
      unchanged (a decrease below 1 is a no-op, not a removal)
    - add_product raises StorefrontError(kind=validation) for invalid input or a full
      cart; remove/increase/decrease log invalid input and do nothing
    - remove_product also drops any stored line that no longer validates
    - products is the sanitized projection: lines that fail validation appear as a
      zeroed "Invalid Product" placeholder, so length and order are stable
    - Lines are stored as given (mappings copied) and sanitized only when projected,
      so a title is escaped exactly once however many operations touch its line
    - Every mutation replaces the line tuple and recomputes the total
"""

import logging
from collections.abc import Callable, Iterable
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from storefront.core.cart_total import CartTotal, compute_cart_total
from storefront.core.domain_types import MAX_CART_LINES, MAX_QUANTITY
from storefront.core.errors import ErrorCode, validation_error
from storefront.core.product import CartProduct, invalid_cart_placeholder
from storefront.core.validate_product import ValidationResult, validate_cart_product

logger = logging.getLogger(__name__)

TotalCalculator = Callable[[Iterable[CartProduct]], CartTotal]


def _own(line: Any) -> Any:
    return dict(line) if isinstance(line, Mapping) else line


def _with_quantity(line: Any, quantity: int) -> Any:
    if isinstance(line, BaseModel):
        return line.model_copy(update={"quantity": quantity})
    return {**line, "quantity": quantity}


class CartStateController:
    """Single owner of the cart line-item collection."""

    def __init__(
        self,
        initial_lines: Iterable[Any] = (),
        total_calculator: TotalCalculator = compute_cart_total,
    ):
        self._total_calculator = total_calculator
        self._lines: tuple[Any, ...] = ()
        self._snapshot: tuple[CartProduct, ...] = ()
        self._total = CartTotal()
        self._commit(tuple(_own(line) for line in initial_lines))

    # ─── Read accessors ───────────────────────────────────────────

    @property
    def products(self) -> tuple[CartProduct, ...]:
        return self._snapshot

    @property
    def total(self) -> CartTotal:
        return self._total

    @property
    def line_count(self) -> int:
        return len(self._lines)

    # ─── Operations ───────────────────────────────────────────────

    def add_product(self, product: Any) -> None:
        """Add a line, or merge its quantity into the line with the same id."""
        validation = validate_cart_product(product)
        if not validation.is_valid:
            logger.error(
                "Invalid product data rejected",
                extra={"operation": "add_product", "errors": list(validation.errors)},
            )
            raise validation_error(
                f"Invalid product data: {', '.join(validation.errors)}",
                ErrorCode.INVALID_PRODUCT,
            )
        incoming_id = validation.sanitized_product["id"]
        incoming_quantity = validation.sanitized_product["quantity"]

        index = self._find_line(incoming_id)
        if index is None:
            if len(self._lines) >= MAX_CART_LINES:
                logger.error(
                    "Cart limit exceeded",
                    extra={"operation": "add_product", "product_id": incoming_id},
                )
                raise validation_error(
                    "Cart is full. Please remove some items before adding more.",
                    ErrorCode.CART_FULL,
                )
            self._commit(self._lines + (_own(product),))
            return

        lines = list(self._lines)
        current = validate_cart_product(lines[index]).sanitized_product
        merged = current["quantity"] + incoming_quantity
        if merged > MAX_QUANTITY:
            logger.error(
                "Quantity limit exceeded",
                extra={"operation": "add_product", "product_id": incoming_id},
            )
        else:
            lines[index] = _with_quantity(lines[index], merged)
        self._commit(tuple(lines))

    def remove_product(self, product: Any) -> None:
        validation = self._validate_target(product, "remove_product")
        if validation is None:
            return
        target_id = validation.sanitized_product["id"]

        kept = []
        for line in self._lines:
            line_validation = validate_cart_product(line)
            if not line_validation.is_valid:
                logger.error(
                    "Invalid product in cart dropped during removal",
                    extra={"errors": list(line_validation.errors)},
                )
                continue
            if line_validation.sanitized_product["id"] != target_id:
                kept.append(line)
        self._commit(tuple(kept))

    def increase_product_quantity(self, product: Any) -> None:
        self._change_quantity(product, 1, "increase_product_quantity")

    def decrease_product_quantity(self, product: Any) -> None:
        self._change_quantity(product, -1, "decrease_product_quantity")

    def validate_cart_state(self) -> bool:
        """True when every stored line still validates."""
        for line in self._lines:
            validation = validate_cart_product(line)
            if not validation.is_valid:
                logger.error(
                    "Invalid product in cart state",
                    extra={"errors": list(validation.errors)},
                )
                return False
        return True

    # ─── Internals ────────────────────────────────────────────────

    def _validate_target(self, product: Any, operation: str) -> ValidationResult | None:
        validation = validate_cart_product(product)
        if not validation.is_valid:
            logger.error(
                f"Invalid product data for {operation}",
                extra={"operation": operation, "errors": list(validation.errors)},
            )
            return None
        return validation

    def _find_line(self, product_id: int) -> int | None:
        for index, line in enumerate(self._lines):
            validation = validate_cart_product(line)
            if not validation.is_valid:
                continue
            if validation.sanitized_product["id"] == product_id:
                return index
        return None

    def _change_quantity(self, product: Any, delta: int, operation: str) -> None:
        validation = self._validate_target(product, operation)
        if validation is None:
            return
        target_id = validation.sanitized_product["id"]
        self._commit(tuple(
            self._apply_delta(line, target_id, delta) for line in self._lines
        ))

    def _apply_delta(self, line: Any, target_id: int, delta: int) -> Any:
        validation = validate_cart_product(line)
        if not validation.is_valid:
            logger.error(
                "Invalid product in cart left unchanged",
                extra={"errors": list(validation.errors)},
            )
            return line
        current = validation.sanitized_product
        if current["id"] != target_id:
            return line
        quantity = current["quantity"] + delta
        if not 1 <= quantity <= MAX_QUANTITY:
            logger.warning(
                "Quantity change out of range ignored",
                extra={"product_id": current["id"], "delta": delta},
            )
            return line
        return _with_quantity(line, quantity)

    def _commit(self, lines: tuple[Any, ...]) -> None:
        self._lines = lines
        self._snapshot = tuple(
            v.to_cart_product() if v.is_valid else invalid_cart_placeholder()
            for v in map(validate_cart_product, lines)
        )
        self._total = self._total_calculator(self._snapshot)

"""Cart Total — pure fold over cart lines.

Invariants:
    - product_quantity = sum of line quantities
    - installments = max installments across lines (0 for an empty cart)
    - total_price = sum(price * quantity), summed in Decimal and rounded to cents
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from storefront.core.domain_types import DEFAULT_CURRENCY_FORMAT, DEFAULT_CURRENCY_ID
from storefront.core.product import CartProduct


@dataclass(frozen=True)
class CartTotal:
    product_quantity: int = 0
    installments: int = 0
    total_price: float = 0.0
    currency_id: str = DEFAULT_CURRENCY_ID
    currency_format: str = DEFAULT_CURRENCY_FORMAT


def compute_cart_total(lines: Iterable[CartProduct]) -> CartTotal:
    quantity = 0
    installments = 0
    total = Decimal("0")
    for line in lines:
        quantity += line.quantity
        installments = max(installments, line.installments)
        total += Decimal(str(line.price)) * line.quantity
    return CartTotal(
        product_quantity=quantity,
        installments=installments,
        total_price=float(total.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)),
    )

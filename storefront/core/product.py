"""Product Records — immutable, typed snapshots of validated catalog and cart data.

Invariants:
    - Product and CartProduct are frozen: updates go through model_copy(update=...)
    - Attributes are snake_case; wire aliases are camelCase (currencyId, availableSizes, ...)
    - Records are built from validate_product / validate_cart_product output only;
      the models themselves do not re-check bounds

Design Decisions:
    - Pydantic BaseModel with alias_generator: one model serves Python callers
      and the JSON wire shape
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from storefront.core.domain_types import (
    DEFAULT_CURRENCY_FORMAT,
    DEFAULT_CURRENCY_ID,
    DEFAULT_STYLE,
    INVALID_PRODUCT_TITLE,
)


class Product(BaseModel):
    """A validated catalog product."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True,
    )

    id: int
    sku: int
    title: str
    description: str = ""
    price: float
    installments: int = 0
    currency_id: str = DEFAULT_CURRENCY_ID
    currency_format: str = DEFAULT_CURRENCY_FORMAT
    available_sizes: tuple[str, ...] = ()
    style: str = DEFAULT_STYLE
    is_free_shipping: bool = False

    def to_wire(self) -> dict:
        """camelCase dict, the shape the catalog endpoint serves."""
        return self.model_dump(by_alias=True, mode="json")


class CartProduct(Product):
    """A product line in the cart."""

    quantity: int


def invalid_cart_placeholder() -> CartProduct:
    """Zeroed line shown in place of a cart entry that no longer validates."""
    return CartProduct(
        id=0,
        sku=0,
        title=INVALID_PRODUCT_TITLE,
        description="",
        price=0.0,
        installments=0,
        currency_id=DEFAULT_CURRENCY_ID,
        currency_format=DEFAULT_CURRENCY_FORMAT,
        available_sizes=(),
        style=DEFAULT_STYLE,
        is_free_shipping=False,
        quantity=0,
    )

"""Catalog Filter — size-based product selection.

Invariants:
    - A product passes if any of its available_sizes is in the selection
    - An empty selection passes every product
    - O(n) in catalog size: the selection is hashed once per call
    - Output preserves catalog order and is a new tuple
"""

from collections.abc import Iterable

from storefront.core.product import Product


def filter_by_sizes(products: Iterable[Product], sizes: Iterable[str] | None) -> tuple[Product, ...]:
    selection = frozenset(sizes or ())
    if not selection:
        return tuple(products)
    return tuple(
        p for p in products
        if not selection.isdisjoint(p.available_sizes)
    )

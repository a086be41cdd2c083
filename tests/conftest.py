"""Root conftest — shared product builders and environment isolation.

Invariants:
    - Tests never read a developer's .env catalog URL or production flag
    - make_product / make_cart_product return fresh camelCase wire dicts
"""

import os

import pytest

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_LEVEL", "DEBUG")


def _product(**overrides) -> dict:
    product = {
        "id": 1,
        "sku": 8552515751438644,
        "title": "Cat Tee White T-Shirt",
        "description": "Soft cotton tee",
        "availableSizes": ["S", "M"],
        "style": "White with black stripes",
        "price": 10.9,
        "installments": 9,
        "currencyId": "USD",
        "currencyFormat": "$",
        "isFreeShipping": True,
    }
    product.update(overrides)
    return product


@pytest.fixture
def make_product():
    return _product


@pytest.fixture
def make_cart_product():
    def build(quantity: int = 1, **overrides) -> dict:
        return _product(quantity=quantity, **overrides)
    return build


@pytest.fixture
def catalog_payload(make_product):
    """A three-product catalog envelope as served by the remote endpoint."""
    return {
        "data": {
            "products": [
                make_product(id=1, availableSizes=["S", "M"]),
                make_product(id=2, sku=2, title="Danger Knife Grey", availableSizes=["L"]),
                make_product(id=3, sku=3, title="Skuul", availableSizes=["XL", "XXL"]),
            ],
        },
    }

"""
Pytest configuration for pos-discount tests.
"""
from __future__ import annotations

import sys
from decimal import Decimal
from itertools import count
from pathlib import Path

import pytest

# Add package source to path
package_src = Path(__file__).parent.parent / "src"
if str(package_src) not in sys.path:
    sys.path.insert(0, str(package_src))

from pos_discount.config import load_settings  # noqa: E402
from pos_discount.models import CartContext, Product  # noqa: E402


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Keep environment settings from leaking between tests."""
    for name in ("POS_DISCOUNT_VALIDATION_MODE", "POS_DISCOUNT_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


@pytest.fixture
def make_product():
    """Factory for products with sequential ids."""
    ids = count(1)

    def _make(price, tags=(), sku=None, name=None, **kwargs):
        product_id = next(ids)
        return Product(
            id=product_id,
            sku=sku or f"SKU{product_id:03d}",
            name=name or f"Product {product_id}",
            price=Decimal(str(price)),
            tags=frozenset(tags),
            **kwargs,
        )

    return _make


@pytest.fixture
def make_cart():
    """Build a cart from products."""
    def _make(*products):
        cart = CartContext()
        cart.add_products(products)
        return cart

    return _make

"""Property-based tests for checkout bookkeeping."""
from __future__ import annotations

from decimal import Decimal

import pytest

hypothesis = pytest.importorskip("hypothesis")
st = hypothesis.strategies
given = hypothesis.given
settings = hypothesis.settings

from pos_discount.engine import CheckoutEngine  # noqa: E402
from pos_discount.models import CartContext, Product  # noqa: E402
from pos_discount.rules import (  # noqa: E402
    BuyMoreBoxesDiscountRule,
    ComboDiscountRule,
    ComplexDiscountRule,
    RankedPairPercentRule,
    SameSkuBuyMoreRule,
    SecondItemPercentOffRule,
    TotalPriceDiscountRule,
)

TAGS = ["add-on", "hot", "combo/39/drink", "combo/39/food", "combo/49/drink", "combo/59/food"]

product_specs = st.lists(
    st.tuples(
        st.decimals(min_value=0, max_value=500, places=2, allow_nan=False, allow_infinity=False),
        st.sets(st.sampled_from(TAGS), max_size=3),
        st.sampled_from(["A", "B", "C"]),
    ),
    max_size=12,
)


def build_cart(specs):
    cart = CartContext()
    cart.add_products(
        Product(id=i + 1, sku=sku, name=f"p{i}", price=price, tags=frozenset(tags))
        for i, (price, tags, sku) in enumerate(specs)
    )
    return cart


def build_rules():
    return [
        ComplexDiscountRule(
            SameSkuBuyMoreRule("add-on", 10, exclusive_tag="add-on"),
            RankedPairPercentRule("hot", 12, exclusive_tag="hot"),
            priority=1,
        ),
        ComboDiscountRule("combo", exclusive_tag="combo", priority=2),
        SecondItemPercentOffRule("hot", 50, priority=3),
        BuyMoreBoxesDiscountRule(3, 5, priority=4),
        TotalPriceDiscountRule(100, 30, priority=5),
    ]


@given(specs=product_specs)
@settings(max_examples=150, deadline=None)
def test_totals_agree(specs) -> None:
    cart = build_cart(specs)
    result = CheckoutEngine(build_rules(), validation_mode="clamp").checkout_process(cart)

    discount_total = sum((d.amount for d in result.discounts), Decimal("0"))
    assert result.total_price == cart.subtotal - discount_total
    assert result.total_price == sum(p.price - p.discount for p in cart.purchased_items)
    assert all(p.net_price >= 0 for p in cart.purchased_items)
    assert all(d.amount >= 0 for d in result.discounts)


@given(specs=product_specs)
@settings(max_examples=100, deadline=None)
def test_rerun_is_identical(specs) -> None:
    cart = build_cart(specs)
    engine = CheckoutEngine(build_rules(), validation_mode="clamp")
    first = engine.checkout_process(cart)
    second = engine.checkout_process(cart)

    assert [d.to_dict() for d in first.discounts] == [d.to_dict() for d in second.discounts]
    assert first.total_price == second.total_price


@given(specs=product_specs)
@settings(max_examples=100, deadline=None)
def test_exclusive_products_not_rediscounted(specs) -> None:
    cart = build_cart(specs)
    result = CheckoutEngine(build_rules(), validation_mode="clamp").checkout_process(cart)

    combo_touched = set()
    for discount in result.discounts:
        if discount.rule.exclusive_tag == "combo":
            combo_touched.update(id(p) for p in discount.products)
        else:
            assert not combo_touched & {id(p) for p in discount.products}


@given(size=st.integers(min_value=0, max_value=20), bundle=st.integers(min_value=1, max_value=6))
@settings(max_examples=100, deadline=None)
def test_bundle_count(size, bundle) -> None:
    cart = build_cart([(Decimal("10"), set(), "A")] * size)
    result = CheckoutEngine([BuyMoreBoxesDiscountRule(bundle, 10)], validation_mode="clamp").checkout_process(cart)
    assert len(result.discounts) == size // bundle

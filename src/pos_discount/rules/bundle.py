"""Fixed-bundle discount: every N visible products get a percentage off."""
from __future__ import annotations

from typing import Iterator, List, Optional

from pos_discount.models import ZERO, Discount, Product
from pos_discount.rules.base import RuleBase, percent_of, require_count, require_percent
from pos_discount.view import CartView


class BuyMoreBoxesDiscountRule(RuleBase):
    """Buy any `box_count` products, get `percent_off` percent off all of them.

    Products are grouped in visible cart order. A trailing group smaller than
    `box_count` is not discounted.
    """

    proportional_split = True

    def __init__(
        self,
        box_count: int,
        percent_off: int,
        name: Optional[str] = None,
        note: str = "",
        **kwargs,
    ):
        self.box_count = require_count(box_count, "box_count")
        self.percent_off = require_percent(percent_off)
        super().__init__(
            name=name or f"Any {box_count} boxes, {percent_off}% off",
            note=note,
            **kwargs,
        )

    def process(self, cart: CartView) -> Iterator[Discount]:
        matched: List[Product] = []
        for product in self.candidates(cart):
            matched.append(product)
            if len(matched) == self.box_count:
                subtotal = sum((cart.net_price(p) for p in matched), ZERO)
                yield self._discount(matched, percent_of(subtotal, self.percent_off))
                matched = []

"""Sequential composition of two rules over overlapping products."""
from __future__ import annotations

from typing import List, Optional

from pos_discount.models import Discount
from pos_discount.rules.base import RuleBase
from pos_discount.view import CartView


class ComplexDiscountRule(RuleBase):
    """Run `first`, then give `second` a pass over the same products.

    Products the first rule claimed exclusively stay hidden from the second
    rule unless they also carry the second rule's target tag. The second rule
    sees net prices that already include the first rule's amounts, so two
    discounts can stack on one product without either rule knowing about the
    other.
    """

    def __init__(
        self,
        first: RuleBase,
        second: RuleBase,
        name: Optional[str] = None,
        note: Optional[str] = None,
        **kwargs,
    ):
        self.first = first
        self.second = second
        super().__init__(
            name=name or f"{first.name} + {second.name}",
            note=note if note is not None else f"{first.note};{second.note}",
            **kwargs,
        )

    def process(self, cart: CartView) -> List[Discount]:
        first_discounts = list(self.first.process(cart))

        hide = []
        if self.first.exclusive_tag:
            seen = set()
            for discount in first_discounts:
                for product in discount.products:
                    if id(product) not in seen and not self.second.matches(product):
                        seen.add(id(product))
                        hide.append(product)

        second_view = cart.with_applied(first_discounts, hide=hide)
        return first_discounts + list(self.second.process(second_view))

"""Second-item percent off for products sharing a tag."""
from __future__ import annotations

from typing import Iterator, List, Optional

from pos_discount.models import Discount, Product
from pos_discount.rules.base import RuleBase, percent_of, require_percent
from pos_discount.view import CartView


class SecondItemPercentOffRule(RuleBase):
    """Buy two tagged products, the second one gets `percent_off` percent off.

    Both products are part of the discount record, only the second one's
    price drives the amount.
    """

    def __init__(
        self,
        target_tag: str,
        percent_off: int,
        name: Optional[str] = None,
        note: str = "",
        **kwargs,
    ):
        self.percent_off = require_percent(percent_off)
        super().__init__(
            name=name or f"Second {target_tag} {percent_off}% off",
            note=note,
            target_tag=target_tag,
            **kwargs,
        )

    def process(self, cart: CartView) -> Iterator[Discount]:
        matched: List[Product] = []
        for product in self.candidates(cart):
            matched.append(product)
            if len(matched) == 2:
                yield self._discount(matched, percent_of(cart.net_price(matched[-1]), self.percent_off))
                matched = []

"""Ranked pair discount: the most expensive tagged products pair up first."""
from __future__ import annotations

from typing import Iterator, Optional

from pos_discount.models import ZERO, Discount
from pos_discount.rules.base import RuleBase, percent_of, require_percent
from pos_discount.view import CartView


class RankedPairPercentRule(RuleBase):
    """Pairs of tagged products get `percent_off` percent off, priciest first.

    Candidates are ordered by descending net price before pairing; equal
    prices keep cart order. An odd product left over is not discounted.
    """

    proportional_split = True

    def __init__(
        self,
        target_tag: str,
        percent_off: int,
        name: Optional[str] = None,
        note: Optional[str] = None,
        **kwargs,
    ):
        self.percent_off = require_percent(percent_off)
        super().__init__(
            name=name or f"Any two {target_tag}, {percent_off}% off",
            note=note if note is not None else f"{target_tag} pair {percent_off}% off",
            target_tag=target_tag,
            **kwargs,
        )

    def process(self, cart: CartView) -> Iterator[Discount]:
        ranked = sorted(self.candidates(cart), key=cart.net_price, reverse=True)
        for i in range(1, len(ranked), 2):
            pair = ranked[i - 1:i + 1]
            subtotal = sum((cart.net_price(p) for p in pair), ZERO)
            yield self._discount(pair, percent_of(subtotal, self.percent_off))

"""Same-SKU add-on: the second unit of a product sells at a special price."""
from __future__ import annotations

from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from pos_discount.models import Discount, Product
from pos_discount.rules.base import RuleBase, require_non_negative
from pos_discount.view import CartView


class SameSkuBuyMoreRule(RuleBase):
    """Every second unit of the same SKU costs `special_price`.

    Units are grouped by SKU (groups in order of first appearance, units in
    cart order) and paired inside each group. The amount brings the second
    unit of each pair down to the special price; it is never a flat amount.
    """

    def __init__(
        self,
        target_tag: str,
        special_price: Decimal | int,
        name: Optional[str] = None,
        note: Optional[str] = None,
        **kwargs,
    ):
        self.special_price = require_non_negative(special_price, "special_price")
        super().__init__(
            name=name or "Same item add-on",
            note=note if note is not None else f"Add {self.special_price} for one more",
            target_tag=target_tag,
            **kwargs,
        )

    def process(self, cart: CartView) -> Iterator[Discount]:
        groups: Dict[str, List[Product]] = {}
        for product in self.candidates(cart):
            groups.setdefault(product.sku, []).append(product)

        for units in groups.values():
            for i in range(1, len(units), 2):
                pair = units[i - 1:i + 1]
                yield self._discount(pair, cart.net_price(pair[-1]) - self.special_price)

"""Threshold discounts: a flat amount off once a spend level is reached."""
from __future__ import annotations

from decimal import Decimal
from typing import Iterator, List, Optional

from pos_discount.models import ZERO, Discount, Product
from pos_discount.rules.base import RuleBase, require_count, require_non_negative
from pos_discount.view import CartView


class TotalPriceDiscountRule(RuleBase):
    """Spend more than `min_price` on visible products, get `discount_amount` off.

    Emits at most one discount per run, covering every visible product.
    """

    def __init__(
        self,
        min_price: Decimal | int,
        discount_amount: Decimal | int,
        name: Optional[str] = None,
        note: str = "",
        **kwargs,
    ):
        self.min_price = require_non_negative(min_price, "min_price")
        self.discount_amount = require_non_negative(discount_amount, "discount_amount")
        super().__init__(
            name=name or f"Spend over {self.min_price}, get {self.discount_amount} off",
            note=note,
            **kwargs,
        )

    def process(self, cart: CartView) -> List[Discount]:
        products = self.candidates(cart)
        if not products:
            return []
        if cart.visible_total(self.target_tag) <= self.min_price:
            return []
        return [self._discount(products, self.discount_amount)]


class BuyMoreAmountOffRule(RuleBase):
    """Every `count` tagged products worth at least `min_price` get a flat amount off.

    Products carrying the target tag are grouped in visible cart order; each
    full group whose net total reaches `min_price` earns `discount_amount`.
    """

    def __init__(
        self,
        target_tag: str,
        count: int,
        min_price: Decimal | int,
        discount_amount: Decimal | int,
        name: Optional[str] = None,
        note: str = "",
        **kwargs,
    ):
        self.count = require_count(count, "count")
        self.min_price = require_non_negative(min_price, "min_price")
        self.discount_amount = require_non_negative(discount_amount, "discount_amount")
        super().__init__(
            name=name or f"Every {count} {target_tag} over {self.min_price}, {self.discount_amount} off",
            note=note,
            target_tag=target_tag,
            **kwargs,
        )

    def process(self, cart: CartView) -> Iterator[Discount]:
        matched: List[Product] = []
        for product in self.candidates(cart):
            matched.append(product)
            if len(matched) == self.count:
                if sum((cart.net_price(p) for p in matched), ZERO) >= self.min_price:
                    yield self._discount(matched, self.discount_amount)
                matched = []

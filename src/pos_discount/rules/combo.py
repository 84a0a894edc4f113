"""Meal combo pairing across drink and food price tiers."""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterator, List, Optional, Sequence, Set, Tuple

from pos_discount.exceptions import RuleConfigurationError
from pos_discount.models import Discount, Product
from pos_discount.rules.base import RuleBase, require_non_negative
from pos_discount.view import CartView


@dataclass(frozen=True)
class ComboEntry:
    """One allowed pairing: a drink tier, a food tier and the combo price."""
    drink_tier: str
    food_tier: str
    combo_price: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "combo_price", require_non_negative(self.combo_price, "combo_price")
        )


# Entries are tried in order; for a 49 drink a 59 food is preferred over a 49
# food, for a 59 drink a 49 food over a 59 food.
DEFAULT_COMBO_TABLE: Tuple[ComboEntry, ...] = (
    ComboEntry("39", "39", Decimal("39")),
    ComboEntry("49", "59", Decimal("49")),
    ComboEntry("49", "49", Decimal("49")),
    ComboEntry("59", "49", Decimal("59")),
    ComboEntry("59", "59", Decimal("59")),
)


class ComboDiscountRule(RuleBase):
    """Pair a drink and a food from the combo table and charge the combo price.

    Products are tagged `{target_tag}/{tier}/{category}`, e.g.
    `combo/39/drink`. For each table entry the remaining drinks and foods of
    the entry's tiers are ranked by descending net price and paired
    positionally. A product pairs at most once per call.
    """

    def __init__(
        self,
        target_tag: str,
        table: Sequence[ComboEntry] = DEFAULT_COMBO_TABLE,
        drink_category: str = "drink",
        food_category: str = "food",
        name: Optional[str] = None,
        note: Optional[str] = None,
        **kwargs,
    ):
        if not table:
            raise RuleConfigurationError("combo table must not be empty", parameter="table")
        self.table: Tuple[ComboEntry, ...] = tuple(table)
        self.drink_category = drink_category
        self.food_category = food_category
        super().__init__(
            name=name or f"{target_tag} meal combo",
            note=note if note is not None else target_tag,
            target_tag=target_tag,
            **kwargs,
        )

    def tier_tag(self, tier: str, category: str) -> str:
        return f"{self.target_tag}/{tier}/{category}"

    def matches(self, product: Product) -> bool:
        prefix = f"{self.target_tag}/"
        return any(tag.startswith(prefix) for tag in product.tags)

    def _ranked(self, cart: CartView, tag: str, consumed: Set[int]) -> List[Product]:
        remaining = [p for p in cart.visible_products(tag) if id(p) not in consumed]
        return sorted(remaining, key=cart.net_price, reverse=True)

    def process(self, cart: CartView) -> Iterator[Discount]:
        consumed: Set[int] = set()
        for entry in self.table:
            drinks = self._ranked(cart, self.tier_tag(entry.drink_tier, self.drink_category), consumed)
            foods = self._ranked(cart, self.tier_tag(entry.food_tier, self.food_category), consumed)
            for drink, food in zip(drinks, foods):
                if id(drink) in consumed or id(food) in consumed:
                    continue
                consumed.update((id(drink), id(food)))
                amount = cart.net_price(drink) + cart.net_price(food) - entry.combo_price
                yield self._discount((drink, food), amount)

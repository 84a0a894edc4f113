"""Base discount rule interface."""
from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable, Optional

from pos_discount.exceptions import RuleConfigurationError
from pos_discount.models import DEFAULT_RULE_PRIORITY, Discount, Product
from pos_discount.view import CartView


class RuleBase(ABC):
    """Abstract interface for discount rules.

    A rule holds read-only configuration only. `process` inspects a CartView
    and returns the discounts it matched; the checkout engine applies the
    amounts and exclusivity marks afterwards.
    """

    # Amounts computed as a percentage of several products' sum are split
    # across them in proportion to their net prices
    proportional_split = False

    def __init__(
        self,
        name: str,
        note: str = "",
        target_tag: Optional[str] = None,
        priority: Optional[int] = None,
        exclusive_tag: Optional[str] = None,
        enabled: bool = True,
        rule_id: Optional[str] = None,
    ):
        self.name = name
        self.note = note
        self.target_tag = target_tag
        self.priority = priority
        self.exclusive_tag = exclusive_tag
        self.enabled = enabled
        self.rule_id = rule_id or name

    @abstractmethod
    def process(self, cart: CartView) -> Iterable[Discount]:
        """
        Match visible products and emit discounts.

        Args:
            cart: Read-only view of the cart for this rule

        Returns:
            Discount records, in the order they were matched
        """
        pass

    @property
    def sort_priority(self) -> int:
        return DEFAULT_RULE_PRIORITY if self.priority is None else self.priority

    @property
    def label(self) -> str:
        """Text written to product notes when this rule discounts them."""
        return self.note or self.name

    def matches(self, product: Product) -> bool:
        return self.target_tag is None or product.has_tag(self.target_tag)

    def candidates(self, cart: CartView) -> list[Product]:
        """Visible products carrying the target tag, in cart order."""
        return cart.visible_products(self.target_tag)

    def _discount(self, products: Iterable[Product], amount: Decimal) -> Discount:
        return Discount(rule=self, products=tuple(products), amount=amount)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={self.priority})"


def percent_of(amount: Decimal, percent_off: int | Decimal) -> Decimal:
    """Exact percentage of an amount."""
    return amount * Decimal(percent_off) / 100


def require_percent(percent_off: int | Decimal) -> int | Decimal:
    if not 0 <= percent_off <= 100:
        raise RuleConfigurationError(
            f"percent_off must be between 0 and 100, got {percent_off}",
            parameter="percent_off",
        )
    return percent_off


def require_count(count: int, parameter: str, minimum: int = 1) -> int:
    if count < minimum:
        raise RuleConfigurationError(
            f"{parameter} must be at least {minimum}, got {count}",
            parameter=parameter,
        )
    return count


def require_non_negative(amount: Decimal | int, parameter: str) -> Decimal:
    amount = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
    if amount < 0:
        raise RuleConfigurationError(
            f"{parameter} must not be negative, got {amount}",
            parameter=parameter,
        )
    return amount

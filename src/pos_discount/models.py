"""Cart, product and discount data models."""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Tuple

if TYPE_CHECKING:
    from pos_discount.rules.base import RuleBase
    from pos_discount.validation import ValidationIssue


ZERO = Decimal("0")

# Rules without an explicit priority run after every prioritized rule
# below this value, in insertion order.
DEFAULT_RULE_PRIORITY = 100


@dataclass(eq=False)
class Product:
    """A single purchased unit in the cart.

    Products compare by identity: the same SKU may appear several times to
    represent several units, and each unit is discounted on its own.
    """
    id: int
    sku: str
    name: str
    price: Decimal
    tags: frozenset = field(default_factory=frozenset)
    discount: Decimal = ZERO
    # Per-run state, owned by the checkout engine
    exclusive_marks: set = field(default_factory=set)
    notes: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if isinstance(self.price, (int, float)) and not isinstance(self.price, bool):
            self.price = Decimal(str(self.price))
        if isinstance(self.discount, (int, float)) and not isinstance(self.discount, bool):
            self.discount = Decimal(str(self.discount))
        if self.tags is not None and not isinstance(self.tags, frozenset):
            self.tags = frozenset(self.tags)

    @property
    def net_price(self) -> Decimal:
        return self.price - self.discount

    @property
    def is_discounted(self) -> bool:
        """True once a rule with an exclusivity tag touched this product."""
        return bool(self.exclusive_marks)

    @property
    def tags_value(self) -> str:
        if not self.tags:
            return ""
        return ",".join("#" + t for t in sorted(self.tags))

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def reset(self) -> None:
        """Drop everything a previous checkout run wrote to this product."""
        self.discount = ZERO
        self.exclusive_marks.clear()
        self.notes.clear()


@dataclass(frozen=True)
class Discount:
    """A discount emitted by a rule for the products it matched."""
    rule: "RuleBase"
    products: Tuple[Product, ...]
    amount: Decimal
    discount_id: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.discount_id,
            "rule": self.rule.name,
            "note": self.rule.note,
            "products": [p.id for p in self.products],
            "amount": str(self.amount),
        }


@dataclass
class CartContext:
    """Purchased items plus the discounts applied by the last checkout run."""
    purchased_items: List[Product] = field(default_factory=list)
    applied_discounts: List[Discount] = field(default_factory=list)
    total_price: Decimal = ZERO

    def add_products(self, products: Iterable[Product]) -> None:
        self.purchased_items.extend(products)

    @property
    def subtotal(self) -> Decimal:
        """Sum of unit prices, before any discount."""
        return sum((p.price for p in self.purchased_items), ZERO)

    @property
    def net_total(self) -> Decimal:
        """Sum of per-product net prices."""
        return sum((p.net_price for p in self.purchased_items), ZERO)

    @property
    def discount_total(self) -> Decimal:
        return sum((d.amount for d in self.applied_discounts), ZERO)

    def reset(self) -> None:
        self.applied_discounts.clear()
        for product in self.purchased_items:
            product.reset()
        self.total_price = self.subtotal


@dataclass
class CheckoutResult:
    """Outcome of one checkout run."""
    total_price: Decimal
    discounts: Tuple[Discount, ...] = ()
    issues: Tuple["ValidationIssue", ...] = ()
    subtotal: Optional[Decimal] = None

    @property
    def discount_total(self) -> Decimal:
        return sum((d.amount for d in self.discounts), ZERO)

    def to_dict(self) -> dict[str, Any]:
        return {
            "subtotal": str(self.subtotal) if self.subtotal is not None else None,
            "total_price": str(self.total_price),
            "discounts": [d.to_dict() for d in self.discounts],
            "issues": [i.to_dict() for i in self.issues],
        }

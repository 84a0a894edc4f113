"""Read-only cart view handed to discount rules.

Rules never touch product discount fields. They receive a CartView built by
the checkout engine from the committed cart state, scan the products it
reports as visible and return Discount records. Composite rules derive a
new view with `with_applied` to let a later sub-rule observe the amounts an
earlier sub-rule produced, without writing anything back to the cart.
"""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pos_discount.models import ZERO, CartContext, Discount, Product


NetPrice = Callable[[Product], Decimal]

CENT = Decimal("0.01")


def clamp_amount(amount: Decimal, products: Sequence[Product], net_price: NetPrice) -> Decimal:
    """Bound an amount to [0, sum of the products' net prices]."""
    ceiling = sum((max(net_price(p), ZERO) for p in products), ZERO)
    return min(max(amount, ZERO), ceiling)


def allocate_amount(
    products: Sequence[Product],
    amount: Decimal,
    net_price: NetPrice,
    proportional: bool = False,
) -> List[Tuple[Product, Decimal]]:
    """Split a discount amount across the products it covers.

    By default the amount is assigned starting from the last matched product,
    each product taking at most its current net price. With `proportional`,
    each product takes a share of the amount in proportion to its net price,
    rounded to cents, and the last product absorbs the rounding difference.
    Returned shares keep the products' original order.
    """
    if proportional:
        return _allocate_proportional(products, amount, net_price)
    return _allocate_last_first(products, amount, net_price)


def _allocate_last_first(
    products: Sequence[Product],
    amount: Decimal,
    net_price: NetPrice,
) -> List[Tuple[Product, Decimal]]:
    remaining = amount
    shares: List[Tuple[Product, Decimal]] = []
    for product in reversed(products):
        if remaining <= ZERO:
            break
        share = min(remaining, max(net_price(product), ZERO))
        if share > ZERO:
            shares.append((product, share))
            remaining -= share
    shares.reverse()
    return shares


def _allocate_proportional(
    products: Sequence[Product],
    amount: Decimal,
    net_price: NetPrice,
) -> List[Tuple[Product, Decimal]]:
    capacities = [max(net_price(p), ZERO) for p in products]
    total = sum(capacities, ZERO)
    if amount <= ZERO or total <= ZERO:
        return []

    allocated = [ZERO] * len(products)
    remaining = amount
    for i in range(len(products) - 1):
        share = (amount * capacities[i] / total).quantize(CENT, rounding=ROUND_HALF_UP)
        share = min(share, capacities[i], remaining)
        allocated[i] = share
        remaining -= share

    # Whatever rounding left over goes to the last product, then backwards
    for i in reversed(range(len(products))):
        if remaining <= ZERO:
            break
        extra = min(remaining, capacities[i] - allocated[i])
        allocated[i] += extra
        remaining -= extra

    return [(p, s) for p, s in zip(products, allocated) if s > ZERO]


class CartView:
    """Snapshot of cart products, their visibility and net prices."""

    def __init__(
        self,
        products: Sequence[Product],
        hidden: Iterable[Product] = (),
        pending: Optional[Mapping[int, Decimal]] = None,
    ):
        self._products: Tuple[Product, ...] = tuple(products)
        self._hidden = frozenset(id(p) for p in hidden)
        # Amounts not yet committed to the cart, keyed by product identity
        self._pending: Dict[int, Decimal] = dict(pending or {})

    @classmethod
    def from_cart(cls, cart: CartContext) -> "CartView":
        return cls(
            cart.purchased_items,
            hidden=[p for p in cart.purchased_items if p.is_discounted],
        )

    @property
    def products(self) -> Tuple[Product, ...]:
        return self._products

    def is_visible(self, product: Product) -> bool:
        return id(product) not in self._hidden

    def visible_products(self, tag: Optional[str] = None) -> List[Product]:
        """Visible products in cart order, optionally restricted to a tag."""
        return [
            p for p in self._products
            if self.is_visible(p) and (tag is None or p.has_tag(tag))
        ]

    def net_price(self, product: Product) -> Decimal:
        return product.net_price - self._pending.get(id(product), ZERO)

    def visible_total(self, tag: Optional[str] = None) -> Decimal:
        return sum((self.net_price(p) for p in self.visible_products(tag)), ZERO)

    def with_applied(
        self,
        discounts: Iterable[Discount],
        hide: Iterable[Product] = (),
    ) -> "CartView":
        """Return a view with the discounts folded into net prices."""
        view = CartView(
            self._products,
            hidden=[p for p in self._products if not self.is_visible(p)] + list(hide),
            pending=self._pending,
        )
        for discount in discounts:
            amount = clamp_amount(discount.amount, discount.products, view.net_price)
            for product, share in allocate_amount(
                discount.products, amount, view.net_price, discount.rule.proportional_split
            ):
                view._pending[id(product)] = view._pending.get(id(product), ZERO) + share
        return view

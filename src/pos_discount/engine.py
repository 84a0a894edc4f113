"""
Checkout orchestration.

CheckoutEngine owns every write to the cart during a run:
- Reset discounts, notes and exclusivity marks left by the previous run
- Run each active rule, in priority order, against a fresh CartView
- Validate each returned discount and fold it into product discounts,
  the applied-discount list and the running total
- Mark products touched by exclusive rules so later rules skip them

Rules only ever observe effects of rules that ran before them.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional

from pos_discount.config import EngineSettings, load_settings
from pos_discount.exceptions import CheckoutIntegrityError
from pos_discount.models import CartContext, CheckoutResult, Discount
from pos_discount.rules.base import RuleBase
from pos_discount.validation import (
    DiscountValidator,
    ValidationIssue,
    ValidationMode,
    validate_cart,
)
from pos_discount.view import CartView, allocate_amount

logger = logging.getLogger(__name__)


class CheckoutEngine:
    """
    Applies an ordered set of discount rules to a cart.

    Rules with a lower priority run first; rules without a priority run in
    insertion order after prioritized ones (see DEFAULT_RULE_PRIORITY).
    Equal priorities keep insertion order. The engine keeps no state between
    runs, so checking out the same cart twice yields identical results.
    """

    def __init__(
        self,
        rules: Optional[Iterable[RuleBase]] = None,
        validation_mode: Optional[ValidationMode | str] = None,
        settings: Optional[EngineSettings] = None,
    ):
        self._rules: List[RuleBase] = list(rules or [])
        if validation_mode is None:
            validation_mode = (settings or load_settings()).validation_mode
        self.validator = DiscountValidator(validation_mode)

    def add_rule(self, rule: RuleBase) -> None:
        """Add a discount rule."""
        self._rules.append(rule)
        logger.debug(f"Registered discount rule: {rule.name}")

    def remove_rule(self, rule_id: str) -> bool:
        """Remove the first rule with the given id."""
        for i, rule in enumerate(self._rules):
            if rule.rule_id == rule_id:
                del self._rules[i]
                logger.debug(f"Removed discount rule: {rule.name}")
                return True
        return False

    @property
    def rules(self) -> List[RuleBase]:
        return list(self._rules)

    @property
    def active_rules(self) -> List[RuleBase]:
        """Enabled rules in execution order."""
        return sorted(
            (r for r in self._rules if r.enabled),
            key=lambda r: r.sort_priority,
        )

    def checkout_process(self, cart: CartContext) -> CheckoutResult:
        """
        Price the cart.

        Args:
            cart: Cart to price; its discounts and total are rewritten

        Returns:
            CheckoutResult with the final total, applied discounts and any
            validation issues that were corrected along the way

        Raises:
            InvalidCartError: if any purchased item is malformed
            DiscountValidationError: in strict mode, on an invalid discount
        """
        validate_cart(cart)
        cart.reset()

        issues: List[ValidationIssue] = []
        for rule in self.active_rules:
            # Materialize before folding: the view must not be re-read after
            # the cart starts changing.
            discounts = list(rule.process(CartView.from_cart(cart)))
            applied = 0
            for discount in discounts:
                checked, issue = self.validator.check(discount)
                if issue is not None:
                    issues.append(issue)
                if checked is None:
                    continue
                self._apply(cart, rule, checked)
                applied += 1
            logger.debug(
                f"Rule {rule.name!r}: {applied} discount(s), "
                f"running total {cart.total_price}"
            )

        net_total = cart.net_total
        if cart.total_price != net_total or cart.total_price != cart.subtotal - cart.discount_total:
            raise CheckoutIntegrityError(
                f"Cart total {cart.total_price} disagrees with product net total {net_total}",
                details={
                    "total_price": str(cart.total_price),
                    "net_total": str(net_total),
                    "subtotal": str(cart.subtotal),
                    "discount_total": str(cart.discount_total),
                },
            )

        logger.info(
            f"Checkout complete: items={len(cart.purchased_items)}, "
            f"discounts={len(cart.applied_discounts)}, issues={len(issues)}, "
            f"total={cart.total_price}",
            extra={"data": {
                "subtotal": str(cart.subtotal),
                "discount_total": str(cart.discount_total),
                "total_price": str(cart.total_price),
            }},
        )

        return CheckoutResult(
            total_price=cart.total_price,
            discounts=tuple(cart.applied_discounts),
            issues=tuple(issues),
            subtotal=cart.subtotal,
        )

    def _apply(self, cart: CartContext, rule: RuleBase, discount: Discount) -> None:
        """Fold one validated discount into the cart."""
        for product, share in allocate_amount(
            discount.products,
            discount.amount,
            lambda p: p.net_price,
            proportional=discount.rule.proportional_split,
        ):
            product.discount += share

        marks = {t for t in (discount.rule.exclusive_tag, rule.exclusive_tag) if t}
        for product in discount.products:
            product.exclusive_marks.update(marks)
            product.notes.append(discount.rule.label)

        discount = replace(discount, discount_id=len(cart.applied_discounts) + 1)
        cart.applied_discounts.append(discount)
        cart.total_price -= discount.amount

"""
Cart and discount validation.

Two kinds of checks guard a checkout run:
- Cart validation runs before anything is mutated. A product without a
  usable price or tag set aborts the whole checkout with InvalidCartError.
- Discount validation runs on every record a rule returns. A negative
  amount, an amount above the net price of the matched products, or a
  record matching nothing is a data-integrity problem. In "clamp" mode the
  record is corrected (or skipped) and the problem is reported as a
  ValidationIssue; in "strict" mode DiscountValidationError is raised.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional, Tuple

from pos_discount.exceptions import DiscountValidationError, InvalidCartError
from pos_discount.models import ZERO, CartContext, Discount, Product
from pos_discount.view import clamp_amount

logger = logging.getLogger(__name__)


class ValidationMode(str, Enum):
    """How invalid discount records are handled."""
    CLAMP = "clamp"
    STRICT = "strict"


class IssueCode(str, Enum):
    """Data-integrity problems found on discount records."""
    NEGATIVE_AMOUNT = "negative_amount"
    EXCEEDS_NET_PRICE = "exceeds_net_price"
    EMPTY_MATCH = "empty_match"


@dataclass(frozen=True)
class ValidationIssue:
    """A discount record that had to be corrected or dropped."""
    code: IssueCode
    rule_name: str
    original_amount: Decimal
    adjusted_amount: Optional[Decimal]
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "rule": self.rule_name,
            "original_amount": str(self.original_amount),
            "adjusted_amount": str(self.adjusted_amount) if self.adjusted_amount is not None else None,
            "message": self.message,
        }


def _product_problems(index: int, product: Any) -> List[str]:
    if not isinstance(product, Product):
        return [f"item {index}: expected Product, got {type(product).__name__}"]

    problems = []
    label = f"item {index} (id={product.id!r})"
    if not isinstance(product.id, int) or isinstance(product.id, bool):
        problems.append(f"{label}: id must be an integer")
    if not isinstance(product.sku, str):
        problems.append(f"{label}: sku must be a string")
    if product.price is None:
        problems.append(f"{label}: missing price")
    elif not isinstance(product.price, Decimal) or not product.price.is_finite():
        problems.append(f"{label}: price must be a finite Decimal")
    elif product.price < 0:
        problems.append(f"{label}: price must not be negative")
    if product.tags is None:
        problems.append(f"{label}: missing tag set")
    elif not all(isinstance(t, str) for t in product.tags):
        problems.append(f"{label}: tags must be strings")
    return problems


def validate_cart(cart: CartContext) -> None:
    """
    Check every purchased item before a checkout run.

    Raises:
        InvalidCartError: listing every malformed item found
    """
    problems: List[str] = []
    for index, product in enumerate(cart.purchased_items):
        problems.extend(_product_problems(index, product))

    if problems:
        raise InvalidCartError(
            f"Cart has {len(problems)} invalid item field(s)",
            problems=problems,
        )


class DiscountValidator:
    """Validates discount records against the cart's current net prices."""

    def __init__(self, mode: ValidationMode | str = ValidationMode.CLAMP):
        self.mode = ValidationMode(mode)

    def check(self, discount: Discount) -> Tuple[Optional[Discount], Optional[ValidationIssue]]:
        """
        Validate one record against committed product net prices.

        Returns:
            (discount to apply or None to skip it, issue found or None)

        Raises:
            DiscountValidationError: in strict mode, for any issue
        """
        issue: Optional[ValidationIssue] = None
        result: Optional[Discount] = discount

        if not discount.products:
            issue = ValidationIssue(
                code=IssueCode.EMPTY_MATCH,
                rule_name=discount.rule.name,
                original_amount=discount.amount,
                adjusted_amount=None,
                message="discount matched no products and was skipped",
            )
            result = None
        else:
            net_total = sum((p.net_price for p in discount.products), ZERO)
            bounded = clamp_amount(discount.amount, discount.products, lambda p: p.net_price)
            if discount.amount < ZERO:
                issue = ValidationIssue(
                    code=IssueCode.NEGATIVE_AMOUNT,
                    rule_name=discount.rule.name,
                    original_amount=discount.amount,
                    adjusted_amount=bounded,
                    message=f"negative discount {discount.amount} clamped to {bounded}",
                )
            elif discount.amount > bounded:
                issue = ValidationIssue(
                    code=IssueCode.EXCEEDS_NET_PRICE,
                    rule_name=discount.rule.name,
                    original_amount=discount.amount,
                    adjusted_amount=bounded,
                    message=(
                        f"discount {discount.amount} exceeds matched net price "
                        f"{net_total}, clamped to {bounded}"
                    ),
                )
            if issue is not None:
                result = Discount(
                    rule=discount.rule,
                    products=discount.products,
                    amount=bounded,
                    discount_id=discount.discount_id,
                )

        if issue is not None:
            if self.mode == ValidationMode.STRICT:
                raise DiscountValidationError(
                    f"Invalid discount from rule {discount.rule.name!r}: {issue.message}",
                    issue=issue,
                )
            logger.warning(f"Discount from rule {discount.rule.name!r}: {issue.message}")

        return result, issue

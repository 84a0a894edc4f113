"""Ready-made rule sets for the command line and demos."""
from __future__ import annotations

from decimal import Decimal
from typing import Callable, Dict, List

from pos_discount.rules import (
    BuyMoreBoxesDiscountRule,
    ComboDiscountRule,
    ComplexDiscountRule,
    RankedPairPercentRule,
    RuleBase,
    SameSkuBuyMoreRule,
    TotalPriceDiscountRule,
)


def boxes_rules() -> List[RuleBase]:
    """Any 2 boxes, 12% off."""
    return [BuyMoreBoxesDiscountRule(2, 12, note="Hot drinks, limited time")]


def threshold_rules() -> List[RuleBase]:
    """Spend over 1000, get 100 off."""
    return [TotalPriceDiscountRule(Decimal("1000"), Decimal("100"))]


def combo_rules() -> List[RuleBase]:
    """Same-item add-on stacked with hot drink pairs, then meal combos."""
    add_on = SameSkuBuyMoreRule("add-on", Decimal("10"), exclusive_tag="add-on")
    hot_drinks = RankedPairPercentRule("hot-drinks", 12, exclusive_tag="hot-drinks")
    return [
        ComplexDiscountRule(add_on, hot_drinks, priority=10),
        ComboDiscountRule("combo", exclusive_tag="combo", priority=20),
    ]


PRESETS: Dict[str, Callable[[], List[RuleBase]]] = {
    "boxes": boxes_rules,
    "threshold": threshold_rules,
    "combo": combo_rules,
}

"""Discount rule implementations."""
from pos_discount.rules.base import RuleBase
from pos_discount.rules.bundle import BuyMoreBoxesDiscountRule
from pos_discount.rules.combo import DEFAULT_COMBO_TABLE, ComboDiscountRule, ComboEntry
from pos_discount.rules.composite import ComplexDiscountRule
from pos_discount.rules.paired import SecondItemPercentOffRule
from pos_discount.rules.ranked import RankedPairPercentRule
from pos_discount.rules.same_sku import SameSkuBuyMoreRule
from pos_discount.rules.threshold import BuyMoreAmountOffRule, TotalPriceDiscountRule

__all__ = [
    "RuleBase",
    "BuyMoreBoxesDiscountRule",
    "TotalPriceDiscountRule",
    "BuyMoreAmountOffRule",
    "SecondItemPercentOffRule",
    "SameSkuBuyMoreRule",
    "RankedPairPercentRule",
    "ComboDiscountRule",
    "ComboEntry",
    "DEFAULT_COMBO_TABLE",
    "ComplexDiscountRule",
]

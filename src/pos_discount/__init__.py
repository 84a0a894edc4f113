"""
Checkout discount rule engine.

This package prices a cart of tagged products by running an ordered list of
discount rules against it. Each rule matches products by tag or SKU and
returns discount records; the checkout engine folds those records into the
cart total and marks products so later rules do not discount them twice.

Rule variants:
- Fixed bundles (any N products, X% off)
- Spend thresholds (flat amount off)
- Second item X% off
- Same-SKU add-on at a special price
- Ranked pairs, most expensive first
- Drink/food meal combos from a tier table
- Sequential composition of two rules
"""

from pos_discount.engine import CheckoutEngine
from pos_discount.models import (
    CartContext,
    CheckoutResult,
    Discount,
    Product,
    DEFAULT_RULE_PRIORITY,
)
from pos_discount.view import CartView
from pos_discount.validation import (
    DiscountValidator,
    IssueCode,
    ValidationIssue,
    ValidationMode,
    validate_cart,
)
from pos_discount.exceptions import (
    CheckoutIntegrityError,
    DiscountEngineError,
    DiscountValidationError,
    InvalidCartError,
    ProductLoadError,
    RuleConfigurationError,
)
from pos_discount.rules import (
    RuleBase,
    BuyMoreBoxesDiscountRule,
    TotalPriceDiscountRule,
    BuyMoreAmountOffRule,
    SecondItemPercentOffRule,
    SameSkuBuyMoreRule,
    RankedPairPercentRule,
    ComboDiscountRule,
    ComboEntry,
    DEFAULT_COMBO_TABLE,
    ComplexDiscountRule,
)
from pos_discount.config import EngineSettings, load_settings
from pos_discount.loader import load_products, parse_products

__all__ = [
    # Engine
    "CheckoutEngine",
    # Models
    "CartContext",
    "CheckoutResult",
    "Discount",
    "Product",
    "CartView",
    "DEFAULT_RULE_PRIORITY",
    # Validation
    "DiscountValidator",
    "IssueCode",
    "ValidationIssue",
    "ValidationMode",
    "validate_cart",
    # Errors
    "DiscountEngineError",
    "InvalidCartError",
    "ProductLoadError",
    "RuleConfigurationError",
    "DiscountValidationError",
    "CheckoutIntegrityError",
    # Rules
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
    # Configuration
    "EngineSettings",
    "load_settings",
    # Loading
    "load_products",
    "parse_products",
]

__version__ = "0.1.0"

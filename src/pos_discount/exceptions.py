"""Exception hierarchy for the discount engine.

All engine-specific exceptions inherit from DiscountEngineError, so callers
can catch one type at the edge and still get a machine-readable code:

    from pos_discount.exceptions import DiscountEngineError

    try:
        result = engine.checkout_process(cart)
    except DiscountEngineError as e:
        report(e.to_dict())

All exceptions have:
- error_code: Machine-readable error code (e.g., "INVALID_CART")
- message: Human-readable error message
- details: Optional additional context dictionary
- to_dict(): Convert to a serializable error payload
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from pos_discount.validation import ValidationIssue


class DiscountEngineError(Exception):
    """Base exception for all discount engine errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        details: Optional additional context
    """

    error_code: str = "DISCOUNT_ENGINE_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to an error payload."""
        result = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Input Errors
# =============================================================================

class InvalidCartError(DiscountEngineError):
    """Cart holds malformed products; checkout aborts before any mutation."""

    error_code = "INVALID_CART"

    def __init__(
        self,
        message: str,
        problems: Optional[list[str]] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if problems:
            details["problems"] = list(problems)
        super().__init__(message, details=details)
        self.problems = list(problems or [])


class ProductLoadError(InvalidCartError):
    """Product data could not be parsed into cart products."""

    error_code = "PRODUCT_LOAD_ERROR"


class RuleConfigurationError(DiscountEngineError):
    """A rule was constructed with unusable parameters."""

    error_code = "RULE_CONFIGURATION_ERROR"

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if parameter:
            details["parameter"] = parameter
        super().__init__(message, details=details)


# =============================================================================
# Data Integrity Errors
# =============================================================================

class DiscountValidationError(DiscountEngineError):
    """A discount record failed validation under strict mode."""

    error_code = "DISCOUNT_VALIDATION_ERROR"

    def __init__(self, message: str, issue: "ValidationIssue") -> None:
        super().__init__(message, details=issue.to_dict())
        self.issue = issue


class CheckoutIntegrityError(DiscountEngineError):
    """Cart totals disagree after a run."""

    error_code = "CHECKOUT_INTEGRITY_ERROR"


__all__ = [
    "DiscountEngineError",
    "InvalidCartError",
    "ProductLoadError",
    "RuleConfigurationError",
    "DiscountValidationError",
    "CheckoutIntegrityError",
]

"""
moneypattern — Money value object with exact allocation and conversion

An immutable amount + currency pair that never loses a subunit and never
mixes currencies.

================================================================================
QUICK START
================================================================================

Basic usage:

    from moneypattern import Money, EUR, USD, lookup_by_locale

    price = Money("12.0", lookup_by_locale("en_US"))
    total = price + Money("2.0")            # 14.0 USD
    double = price * 2                      # 24.0 USD

Allocation (sum of parts ALWAYS equals the original):

    Money("0.05").allocate(2)               # [0.03 USD, 0.02 USD]
    Money(1).allocate([70, 30])             # [0.70 USD, 0.30 USD]

Conversion (caller supplies the rate):

    Money(20, EUR).convert_to(USD, "1.1234")   # 22.47 USD

Invalid input is accepted and fails on first use:

    bad = Money("Random &^Ugjh2 string")
    bad.is_valid()                          # False
    bad + Money(1)                          # raises InvalidAmountError

================================================================================
"""

from .allocation import MAX_ALLOCATION_PARTS, allocate, allocate_by_ratios
from .conversion import convert
from .core import Money, Ordering
from .currency import (
    EUR,
    GBP,
    JPY,
    KWD,
    TND,
    USD,
    Currency,
    all_currencies,
    default_currency,
    lookup_by_code,
    lookup_by_locale,
)
from .decimals import RoundingMode
from .exceptions import (
    CurrencyMismatchError,
    DivisionByZeroError,
    InvalidAmountError,
    InvalidConversionError,
    MoneyError,
    UnknownCurrencyError,
)

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Core
    "Money",
    "Ordering",
    "RoundingMode",
    # Currency
    "Currency",
    "lookup_by_code",
    "lookup_by_locale",
    "default_currency",
    "all_currencies",
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "KWD",
    "TND",
    # Algorithms
    "allocate",
    "allocate_by_ratios",
    "convert",
    "MAX_ALLOCATION_PARTS",
    # Errors
    "MoneyError",
    "UnknownCurrencyError",
    "InvalidAmountError",
    "CurrencyMismatchError",
    "DivisionByZeroError",
    "InvalidConversionError",
]

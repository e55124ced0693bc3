"""
exceptions.py — Error taxonomy for money operations

Every failure is a caller-recoverable condition tied to a single operation.
Each class also derives from the closest builtin exception, so code that
already catches TypeError / ValueError / ZeroDivisionError keeps working.
"""


class MoneyError(Exception):
    """Base class for all errors raised by moneypattern."""


class UnknownCurrencyError(MoneyError, LookupError):
    """A currency code or locale has no entry in the registry."""


class InvalidAmountError(MoneyError, ValueError):
    """An operation needed a number but the amount is the invalid sentinel."""


class CurrencyMismatchError(MoneyError, TypeError):
    """Two Money values with different currencies were combined or compared."""


class DivisionByZeroError(MoneyError, ZeroDivisionError):
    """Allocation with zero recipients or a zero total ratio."""


class InvalidConversionError(MoneyError, ValueError):
    """Conversion to the same currency or with a non-positive rate."""

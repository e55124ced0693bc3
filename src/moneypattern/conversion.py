"""
conversion.py — Conversione di valuta con tasso di cambio esplicito

Il tasso lo fornisce il chiamante: reperirlo non è compito di questo modulo.
Il prodotto amount * rate è calcolato esatto e arrotondato una sola volta,
al subunit della valuta di destinazione.

    convert(Money(20, EUR), USD, "1.1234")  ->  22.47 USD  (22.468, half-up)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .currency import Currency
from .decimals import (
    MONEY_CONTEXT,
    DecimalLike,
    RoundingMode,
    exact_arithmetic,
    quantize_to_exponent,
    to_decimal,
)
from .exceptions import InvalidAmountError, InvalidConversionError

if TYPE_CHECKING:
    from .core import Money

logger = logging.getLogger(__name__)


def convert(
    money: Money,
    target: Currency,
    rate: DecimalLike,
    rounding: RoundingMode = RoundingMode.HALF_UP,
) -> Money:
    """
    Nuovo Money in `target`, pari a money.amount * rate.

    Raises:
        InvalidConversionError: target è la valuta di origine, oppure il tasso
            è zero, negativo o non numerico
        InvalidAmountError: money non ha un importo valido, o il risultato
            supera MONEY_PRECISION cifre
    """
    if not isinstance(target, Currency):
        raise TypeError(f"target must be a Currency instance, got: {type(target).__name__}")
    if target == money.currency:
        raise InvalidConversionError(f"Cannot convert to the same currency: {target.code}")

    rate_value = to_decimal(rate)
    if rate_value.is_nan():
        raise InvalidConversionError(f"Cannot convert using an invalid rate: {rate!r}")
    if rate_value <= 0:
        raise InvalidConversionError(f"Cannot convert using a non-positive rate: {rate_value}")

    if not money.is_valid():
        raise InvalidAmountError(f"Cannot convert {money!r}: amount is not a valid number")

    with exact_arithmetic("convert"):
        product = MONEY_CONTEXT.multiply(money.amount, rate_value)
    converted = quantize_to_exponent(product, target.exponent, rounding)
    logger.debug(f"Converted {money} to {converted} {target.code} at rate {rate_value}")
    return type(money)(converted, target)

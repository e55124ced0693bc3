"""
decimals.py — Primitiva Decimal Amount

================================================================================
DESIGN
================================================================================

Gli importi sono semplici decimal.Decimal. Decimal offre già quello che
serve al denaro:

- rappresentazione decimale esatta (0.1 + 0.2 == 0.3)
- costanti di arrotondamento esplicite
- un valore "not a number" nativo, usato qui come sentinella INVALID

L'aritmetica passa per MONEY_CONTEXT e non per il context thread-local:
un chiamante che modifica decimal.getcontext() non cambia i risultati.

================================================================================
ESATTEZZA
================================================================================

MONEY_CONTEXT intercetta Inexact: una somma o un prodotto che non sta in
MONEY_PRECISION cifre significative solleva InvalidAmountError invece di
perdere silenziosamente un subunit. L'unico arrotondamento voluto passa per
quantize_to_exponent(), che usa ROUNDING_CONTEXT (Inexact non intercettato).

    with exact_arithmetic("add"):
        MONEY_CONTEXT.add(left, right)

================================================================================
"""

from __future__ import annotations

import decimal
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Iterator, TypeAlias, Union

from .exceptions import InvalidAmountError


DecimalLike: TypeAlias = Union[Decimal, int, float, str]

# Cifre significative disponibili per un importo o un risultato intermedio.
MONEY_PRECISION = 100

MONEY_CONTEXT = decimal.Context(
    prec=MONEY_PRECISION,
    rounding=decimal.ROUND_HALF_UP,
    traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow, decimal.Inexact],
)

# Come MONEY_CONTEXT, ma l'arrotondamento al subunit è ammesso.
ROUNDING_CONTEXT = decimal.Context(
    prec=MONEY_PRECISION,
    rounding=decimal.ROUND_HALF_UP,
    traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow],
)

# Sentinella per importi non parsabili.
INVALID_AMOUNT = Decimal("NaN")


@contextmanager
def exact_arithmetic(operation: str) -> Iterator[None]:
    """Traduce i segnali di decimal in InvalidAmountError."""
    try:
        yield
    except decimal.DecimalException as exc:
        raise InvalidAmountError(
            f"Cannot {operation}: result does not fit in {MONEY_PRECISION} significant digits"
        ) from exc


# ==============================================================================
# ROUNDING STRATEGIES
# ==============================================================================

class RoundingMode(Enum):
    """
    Strategie di arrotondamento, mappate sulle costanti del modulo decimal.

    - HALF_UP: arrotondamento commerciale (0.5 -> 1), default per conversione
      e conteggio dei subunit
    - HALF_EVEN: banker's rounding, minimizza il bias statistico
    - DOWN: verso zero (troncamento)
    - UP: lontano da zero
    - HALF_DOWN: 0.5 -> 0
    - CEILING / FLOOR: verso +inf / -inf
    """
    HALF_UP = decimal.ROUND_HALF_UP
    HALF_EVEN = decimal.ROUND_HALF_EVEN
    DOWN = decimal.ROUND_DOWN
    UP = decimal.ROUND_UP
    HALF_DOWN = decimal.ROUND_HALF_DOWN
    CEILING = decimal.ROUND_CEILING
    FLOOR = decimal.ROUND_FLOOR


def to_decimal(value: object) -> Decimal:
    """
    Converte uno scalare in Decimal, senza mai sollevare eccezioni.

    I float passano da str() per evitare rumore binario (0.1 -> Decimal("0.1")).
    Tutto ciò che non è un numero finito diventa INVALID_AMOUNT.
    """
    if isinstance(value, bool):
        return INVALID_AMOUNT

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, float):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            return INVALID_AMOUNT
    else:
        return INVALID_AMOUNT

    if not result.is_finite():
        return INVALID_AMOUNT
    return result


def quantize_to_exponent(
    value: Decimal,
    exponent: int,
    rounding: RoundingMode = RoundingMode.HALF_UP,
) -> Decimal:
    """
    Arrotonda value a `exponent` decimali (2 -> passi da 0.01).

    Raises:
        InvalidAmountError: se il risultato supera MONEY_PRECISION cifre
    """
    with exact_arithmetic("round"):
        return value.quantize(
            Decimal(1).scaleb(-exponent),
            rounding=rounding.value,
            context=ROUNDING_CONTEXT,
        )

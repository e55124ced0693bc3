"""
allocation.py — Dividere denaro senza perdere un subunit

================================================================================
ALGORITMO
================================================================================

Le quote uguali sono il caso particolare di n ratio tutti pari a 1.

1. total = money.amount_in_subunits()
2. per ogni destinatario: base_i = floor(|total| * r_i / sum(r))
   (aritmetica razionale esatta, nessun floating point)
3. leftover = |total| - sum(base_i), sempre < numero di destinatari
   con ratio diverso da zero
4. il leftover viene distribuito un subunit alla volta, in ordine di
   indice, saltando i destinatari con ratio 0
5. il segno di total viene applicato a ogni parte

INVARIANTI:
- sum(parts) == Money.of_subunits(total), cioè == money quando money è
  già sulla griglia dei subunit
- |part_i - ideal_i| <= 1 subunit: una quota ideale intera può ricevere
  un subunit di resto (6 su [2, 1, 1] -> [4, 1, 1])
- i primi destinatari ricevono i subunit extra: 0.05 / 2 -> [0.03, 0.02]
- un importo negativo si divide come lo specchio del suo modulo

================================================================================
"""

from __future__ import annotations

from decimal import Decimal
from fractions import Fraction
from typing import TYPE_CHECKING, Iterable

from .decimals import DecimalLike, to_decimal
from .exceptions import DivisionByZeroError

if TYPE_CHECKING:
    from .core import Money


# Numero massimo di parti per allocazione (protezione DoS)
MAX_ALLOCATION_PARTS: int = 10_000


def _as_weight(ratio: DecimalLike) -> Fraction:
    if isinstance(ratio, bool) or not isinstance(ratio, (int, Decimal, float, str, Fraction)):
        raise TypeError(f"Ratio must be a number, got: {type(ratio).__name__}")

    if isinstance(ratio, Fraction):
        weight = ratio
    else:
        value = to_decimal(ratio)
        if value.is_nan():
            raise ValueError(f"Ratio must be a finite number, got: {ratio!r}")
        weight = Fraction(value)

    if weight < 0:
        raise ValueError(f"Ratios cannot be negative, got: {ratio!r}")
    return weight


def _split(total: int, weights: list[Fraction]) -> list[int]:
    """Divide un numero intero di subunit in proporzione ai pesi."""
    weight_sum = sum(weights, Fraction(0))
    magnitude = abs(total)

    shares = [magnitude * w // weight_sum for w in weights]
    leftover = magnitude - sum(shares)

    for i, w in enumerate(weights):
        if leftover == 0:
            break
        if w > 0:
            shares[i] += 1
            leftover -= 1

    sign = -1 if total < 0 else 1
    return [sign * s for s in shares]


def allocate(money: Money, n: int) -> list[Money]:
    """
    Divide money in n parti uguali, le prime assorbono il resto.

    Raises:
        DivisionByZeroError: se n == 0
        ValueError: se n < 0 o n > MAX_ALLOCATION_PARTS
        InvalidAmountError: se money non ha un importo valido
    """
    if isinstance(n, bool) or not isinstance(n, int):
        raise TypeError(f"Number of recipients must be int, got: {type(n).__name__}")
    if n == 0:
        raise DivisionByZeroError("Cannot allocate to zero recipients")
    if n < 0:
        raise ValueError(f"Number of recipients must be > 0, got: {n}")
    if n > MAX_ALLOCATION_PARTS:
        raise ValueError(f"Number of recipients exceeds the limit of {MAX_ALLOCATION_PARTS}")

    return _build(money, [Fraction(1)] * n)


def allocate_by_ratios(money: Money, ratios: Iterable[DecimalLike]) -> list[Money]:
    """
    Divide money in proporzione a ratio non negativi.

        Money(1).allocate([70, 30]) -> [0.70 USD, 0.30 USD]

    Raises:
        DivisionByZeroError: se ratios è vuoto o tutti i ratio sono 0
        ValueError: se un ratio è negativo o non è un numero finito
        InvalidAmountError: se money non ha un importo valido
    """
    if isinstance(ratios, (str, bytes)):
        raise TypeError("Ratios must be a sequence of numbers, not a string")

    ratios = list(ratios)
    if not ratios:
        raise DivisionByZeroError("Cannot allocate using an empty list of ratios")
    if len(ratios) > MAX_ALLOCATION_PARTS:
        raise ValueError(f"Number of ratios exceeds the limit of {MAX_ALLOCATION_PARTS}")

    weights = [_as_weight(r) for r in ratios]
    if sum(weights, Fraction(0)) == 0:
        raise DivisionByZeroError("Cannot allocate when the sum of ratios is zero")

    return _build(money, weights)


def _build(money: Money, weights: list[Fraction]) -> list[Money]:
    total = money.amount_in_subunits()
    return [money.of_subunits(s, money.currency) for s in _split(total, weights)]

"""
core.py — Money value object

================================================================================
DESIGN PRINCIPLES
================================================================================

1. RAPPRESENTAZIONE INTERNA
   L'importo è un decimal.Decimal, mai un float. I float in input vengono
   convertiti tramite str() una sola volta, alla costruzione.

2. TYPE SAFETY
   Operazioni tra valute diverse sollevano CurrencyMismatchError.
   Nessuna conversione implicita.

3. IMMUTABILITA
   Frozen dataclass. Ogni operazione restituisce nuova istanza.
   Nessun side effect, safe per concorrenza.

4. FALLIMENTO DIFFERITO
   Un importo non parsabile viene conservato come sentinella (NaN).
   La costruzione non fallisce mai per colpa dell'importo: la prima
   operazione che ha bisogno del numero solleva InvalidAmountError.

5. ROUNDING ESPLICITO
   L'aritmetica è esatta: un risultato che non sta nella precisione di
   MONEY_CONTEXT solleva InvalidAmountError, non viene arrotondato.
   L'arrotondamento al subunit avviene solo in amount_in_subunits(),
   allocate(), convert_to() e rounded(), ognuno con strategia documentata.

================================================================================
USAGE
================================================================================

    from moneypattern import Money, EUR, USD

    Money()                    # 0 USD
    Money("4.23")              # 4.23 USD
    Money(currency=EUR)        # 0 EUR
    Money("1 €", EUR)          # 1 EUR
    Money("$1")                # 1 USD

    Money("0.05").allocate(2)              # [0.03 USD, 0.02 USD]
    Money(1).allocate([70, 30])            # [0.70 USD, 0.30 USD]
    Money(20, EUR).convert_to(USD, "1.1234")   # 22.47 USD

================================================================================
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import IntEnum
from typing import Iterable, Optional, Union

from .allocation import allocate, allocate_by_ratios
from .conversion import convert
from .currency import Currency, default_currency, known_symbols
from .decimals import (
    INVALID_AMOUNT,
    MONEY_CONTEXT,
    DecimalLike,
    RoundingMode,
    exact_arithmetic,
    quantize_to_exponent,
    to_decimal,
)
from .exceptions import CurrencyMismatchError, InvalidAmountError

logger = logging.getLogger(__name__)


AmountLike = Union[DecimalLike, None]


class Ordering(IntEnum):
    """Risultato di Money.compare_to(), stessa convenzione di segno di cmp()."""
    ASCENDING = -1
    SAME = 0
    DESCENDING = 1


# ==============================================================================
# PARSING
# ==============================================================================

@functools.lru_cache(maxsize=None)
def _symbol_candidates(currency: Currency) -> tuple[str, ...]:
    """Simboli e codice della valuta più i simboli registrati, i più lunghi prima."""
    own = (currency.symbol, currency.code)
    symbols = set(own) | set(known_symbols())
    # a parità di lunghezza vince la valuta di destinazione
    return tuple(sorted(symbols, key=lambda s: (-len(s), s not in own, s)))


def _strip_symbol(text: str, currency: Currency) -> str:
    """Rimuove una decorazione di valuta iniziale o finale ("$1", "1 €", "EUR 5")."""
    for symbol in _symbol_candidates(currency):
        if text.startswith(symbol):
            return text[len(symbol):].strip()
        if text.endswith(symbol):
            return text[:-len(symbol)].strip()
    return text


def _parse_text(text: str, currency: Currency) -> Decimal:
    text = text.strip()
    sign = ""
    # "-$4.23": segno prima del simbolo
    if text[:1] in ("-", "+"):
        sign, text = text[0], text[1:].strip()
    text = _strip_symbol(text, currency)
    if sign and text[:1] in ("-", "+"):
        return INVALID_AMOUNT
    return to_decimal(sign + text)


def _parse_amount(value: AmountLike, currency: Currency) -> Decimal:
    if value is None:
        return Decimal(0)
    if isinstance(value, str):
        result = _parse_text(value, currency)
    else:
        result = to_decimal(value)
    if result.is_nan():
        logger.debug(f"Amount {value!r} is not a valid number, stored as invalid sentinel")
    return result


def _operand(value: object, operation: str) -> Decimal:
    """Operando decimale grezzo: un input non valido fallisce subito."""
    if not isinstance(value, (Decimal, int, float, str)) or isinstance(value, bool):
        raise TypeError(f"Cannot {operation} Money and {type(value).__name__}")
    result = to_decimal(value)
    if result.is_nan():
        raise InvalidAmountError(f"Cannot {operation}: {value!r} is not a valid number")
    return result


# ==============================================================================
# MONEY CLASS
# ==============================================================================

@dataclass(frozen=True, slots=True, init=False, order=False)
class Money:
    """
    Importo + valuta, immutabile.

    INVARIANTI:
    1. currency è sempre una Currency (USD se omessa)
    2. amount è un Decimal finito o la sentinella, mai forzato a 0
    3. operazioni tra valute diverse sollevano CurrencyMismatchError
    4. allocate() garantisce sum(parts) == self

    Forme di costruzione:
        Money()                  -> 0, valuta di default
        Money(amount)            -> amount, valuta di default
        Money(currency=c)        -> 0 in c (funziona anche Money(c))
        Money(amount, c)
    amount può essere Decimal, int, float, stringa semplice o stringa
    decorata con simbolo ("$1", "1 €").
    """
    amount: Decimal
    currency: Currency

    def __init__(self, amount: Union[AmountLike, Currency] = None, currency: Optional[Currency] = None):
        if isinstance(amount, Currency) and currency is None:
            amount, currency = None, amount
        if currency is None:
            currency = default_currency()
        elif not isinstance(currency, Currency):
            raise TypeError(f"currency must be a Currency instance, got: {type(currency).__name__}")

        object.__setattr__(self, "amount", _parse_amount(amount, currency))
        object.__setattr__(self, "currency", currency)

    # -------------------------------------------------------------------------
    # Costruttori
    # -------------------------------------------------------------------------

    @classmethod
    def zero(cls, currency: Optional[Currency] = None) -> Money:
        """Zero per una data valuta. Utile come valore iniziale per sum()."""
        return cls(0, currency)

    @classmethod
    def of_subunits(cls, subunits: int, currency: Optional[Currency] = None) -> Money:
        """
        Costruttore da subunit (centesimi, fils, ecc.).

        Money.of_subunits(423) == Money("4.23")
        """
        if isinstance(subunits, bool) or not isinstance(subunits, int):
            raise TypeError(f"subunits must be int, got: {type(subunits).__name__}")
        if currency is None:
            currency = default_currency()
        with exact_arithmetic("build from subunits"):
            amount = Decimal(subunits).scaleb(-currency.exponent, context=MONEY_CONTEXT)
        return cls(amount, currency)

    @staticmethod
    def default_currency() -> Currency:
        return default_currency()

    # -------------------------------------------------------------------------
    # Predicati e valori derivati
    # -------------------------------------------------------------------------

    def _require_valid(self, operation: str) -> Decimal:
        if self.amount.is_nan():
            raise InvalidAmountError(f"Cannot {operation} {self!r}: amount is not a valid number")
        return self.amount

    def is_valid(self) -> bool:
        """False se l'importo è la sentinella. Non solleva mai eccezioni."""
        return not self.amount.is_nan()

    def is_zero(self) -> bool:
        return self._require_valid("test sign of") == 0

    def is_positive(self) -> bool:
        return self._require_valid("test sign of") > 0

    def is_negative(self) -> bool:
        return self._require_valid("test sign of") < 0

    def absolute_amount(self) -> Money:
        amount = self._require_valid("take absolute value of")
        with exact_arithmetic("take absolute value of"):
            return Money(MONEY_CONTEXT.abs(amount), self.currency)

    def amount_in_subunits(self) -> int:
        """
        Importo scalato di 10**exponent, arrotondato half-up a intero.

        4.23 USD -> 423, 0.005 USD -> 1

        Raises:
            InvalidAmountError: importo non valido, o troppe cifre per
                MONEY_PRECISION
        """
        amount = self._require_valid("count subunits of")
        with exact_arithmetic("count subunits of"):
            scaled = amount.scaleb(self.currency.exponent, context=MONEY_CONTEXT)
        return int(quantize_to_exponent(scaled, 0, RoundingMode.HALF_UP))

    def one_subunit(self) -> Decimal:
        """Il più piccolo importo rappresentabile nella valuta (0.01 per USD)."""
        return self.currency.one_subunit()

    def rounded(self, rounding: RoundingMode = RoundingMode.HALF_UP) -> Money:
        """Stesso importo arrotondato al subunit della valuta."""
        amount = self._require_valid("round")
        return Money(quantize_to_exponent(amount, self.currency.exponent, rounding), self.currency)

    # -------------------------------------------------------------------------
    # Allocazione e conversione
    # -------------------------------------------------------------------------

    def allocate(self, recipients: Union[int, Iterable[DecimalLike]]) -> list[Money]:
        """
        Divide in parti la cui somma è esattamente self.

        allocate(n) produce n quote uguali, allocate([r0, r1, ...]) quote
        proporzionali ai ratio. I subunit di resto vanno ai primi
        destinatari: Money("0.05").allocate(2) == [0.03, 0.02].
        """
        if isinstance(recipients, int) and not isinstance(recipients, bool):
            return allocate(self, recipients)
        return allocate_by_ratios(self, recipients)

    def convert_to(
        self,
        currency: Currency,
        rate: DecimalLike,
        rounding: RoundingMode = RoundingMode.HALF_UP,
    ) -> Money:
        """amount * rate nella valuta di destinazione, arrotondato al suo subunit."""
        return convert(self, currency, rate, rounding)

    # -------------------------------------------------------------------------
    # Confronto
    # -------------------------------------------------------------------------

    def _check_same_currency(self, other: Money, operation: str) -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot {operation} Money and {type(other).__name__}")
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                f"Cannot {operation} different currencies: "
                f"{self.currency.code} vs {other.currency.code}"
            )

    def equals(self, other: object) -> bool:
        """
        Stessa valuta e importo numericamente uguale (0.0 == 0.00).

        Due importi non validi nella stessa valuta sono uguali tra loro,
        così l'uguaglianza resta riflessiva. Non solleva mai eccezioni.
        """
        if not isinstance(other, Money):
            return False
        if self.currency != other.currency:
            return False
        if self.amount.is_nan() or other.amount.is_nan():
            return self.amount.is_nan() and other.amount.is_nan()
        return self.amount == other.amount

    def compare_to(self, other: Money) -> Ordering:
        self._check_same_currency(other, "compare")
        left = self._require_valid("compare")
        right = other._require_valid("compare")
        if left < right:
            return Ordering.ASCENDING
        if left > right:
            return Ordering.DESCENDING
        return Ordering.SAME

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        amount = None if self.amount.is_nan() else self.amount
        return hash((amount, self.currency))

    def __lt__(self, other: Money) -> bool:
        return self.compare_to(other) is Ordering.ASCENDING

    def __le__(self, other: Money) -> bool:
        return self.compare_to(other) is not Ordering.DESCENDING

    def __gt__(self, other: Money) -> bool:
        return self.compare_to(other) is Ordering.DESCENDING

    def __ge__(self, other: Money) -> bool:
        return self.compare_to(other) is not Ordering.ASCENDING

    # -------------------------------------------------------------------------
    # Aritmetica
    # -------------------------------------------------------------------------

    def add(self, other: Union[Money, DecimalLike]) -> Money:
        """
        Money + Money (stessa valuta) oppure Money + importo grezzo.

        Precisione decimale piena, nessun arrotondamento al subunit.
        """
        if isinstance(other, Money):
            self._check_same_currency(other, "add")
            right = other._require_valid("add")
        else:
            right = _operand(other, "add")
        left = self._require_valid("add")
        with exact_arithmetic("add"):
            return Money(MONEY_CONTEXT.add(left, right), self.currency)

    def subtract(self, other: Union[Money, DecimalLike]) -> Money:
        if isinstance(other, Money):
            self._check_same_currency(other, "subtract")
            right = other._require_valid("subtract")
        else:
            right = _operand(other, "subtract")
        left = self._require_valid("subtract")
        with exact_arithmetic("subtract"):
            return Money(MONEY_CONTEXT.subtract(left, right), self.currency)

    def multiply(self, factor: DecimalLike) -> Money:
        """
        Money * scalare. Money * Money non ha senso e solleva TypeError.
        """
        if isinstance(factor, Money):
            raise TypeError("Cannot multiply Money by Money")
        right = _operand(factor, "multiply")
        left = self._require_valid("multiply")
        with exact_arithmetic("multiply"):
            return Money(MONEY_CONTEXT.multiply(left, right), self.currency)

    def __add__(self, other: Union[Money, DecimalLike]) -> Money:
        if not isinstance(other, (Money, Decimal, int, float, str)):
            return NotImplemented
        return self.add(other)

    def __radd__(self, other: DecimalLike) -> Money:
        # sum() parte da 0
        if not isinstance(other, (Decimal, int, float, str)):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Union[Money, DecimalLike]) -> Money:
        if not isinstance(other, (Money, Decimal, int, float, str)):
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other: DecimalLike) -> Money:
        if not isinstance(other, (Decimal, int, float, str)):
            return NotImplemented
        return (-self).add(other)

    def __mul__(self, factor: DecimalLike) -> Money:
        if not isinstance(factor, (Decimal, int, float, str)):
            return NotImplemented
        return self.multiply(factor)

    def __rmul__(self, factor: DecimalLike) -> Money:
        return self.__mul__(factor)

    def __neg__(self) -> Money:
        return self.multiply(-1)

    def __abs__(self) -> Money:
        return self.absolute_amount()

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def __repr__(self) -> str:
        return f"Money('{self.amount}', {self.currency.code})"

    def __str__(self) -> str:
        return f"{self.amount} {self.currency.code}"

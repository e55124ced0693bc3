"""
currency.py — Descrittore Currency e registry in sola lettura

================================================================================
REGISTRY
================================================================================

Il registry è una tabella fissa indicizzata per codice ISO 4217, popolata una
sola volta all'import dai dati Unicode CLDR (tramite Babel) e mai modificata.

    lookup_by_code("EUR")        -> Currency(code='EUR', exponent=2, symbol='€')
    lookup_by_locale("fr_TN")    -> Currency(code='TND', exponent=3, ...)
    lookup_by_code("???")        -> None

I lookup non sollevano mai eccezioni per "non trovato": restituiscono None.
Chi preferisce un'eccezione usa Currency.from_code().

Ogni Currency restituita dal registry è un'unica istanza condivisa per codice:
i Money ne tengono un riferimento senza possederla.

================================================================================
"""

from __future__ import annotations

import functools
import logging
import re
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping, Optional

from babel import Locale, UnknownLocaleError
from babel.numbers import (
    get_currency_precision,
    get_currency_symbol,
    get_territory_currencies,
    list_currencies,
)

from .exceptions import UnknownCurrencyError

logger = logging.getLogger(__name__)


DEFAULT_CURRENCY_CODE = "USD"

# Locale whose CLDR symbols are used as the display glyph of each currency.
SYMBOL_LOCALE = "en_US"

_ISO_CODE = re.compile(r"[A-Z]{3}")


# ==============================================================================
# CURRENCY
# ==============================================================================

@dataclass(frozen=True, slots=True)
class Currency:
    """
    Immutable currency descriptor.

    - code: ISO 4217 alphabetic code (EUR, USD, ...)
    - exponent: number of decimals of the subunit (EUR=2, JPY=0, TND=3)
    - symbol: display glyph, only used to strip decorated input strings
    """
    code: str
    exponent: int
    symbol: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.code, str) or not _ISO_CODE.fullmatch(self.code):
            raise ValueError(f"Currency code must be 3 uppercase letters, got: {self.code!r}")
        if isinstance(self.exponent, bool) or not isinstance(self.exponent, int) or self.exponent < 0:
            raise ValueError(f"Currency exponent must be a non-negative int, got: {self.exponent!r}")
        if not self.symbol:
            object.__setattr__(self, "symbol", self.code)

    @property
    def subunits_per_unit(self) -> int:
        """Conversion factor major -> minor unit (100 for EUR)."""
        return 10 ** self.exponent

    def one_subunit(self) -> Decimal:
        """Smallest representable amount (0.01 for exponent 2)."""
        return Decimal(1).scaleb(-self.exponent)

    @classmethod
    def from_code(cls, code: str) -> Currency:
        """Strict lookup: like lookup_by_code() but raises when not found."""
        currency = lookup_by_code(code)
        if currency is None:
            raise UnknownCurrencyError(f"Currency with code {code!r} not found in registry")
        return currency

    def __str__(self) -> str:
        return self.code


# ==============================================================================
# REGISTRY POPULATION
# ==============================================================================

def _load_cldr_currencies() -> dict[str, Currency]:
    locale = Locale.parse(SYMBOL_LOCALE)
    table: dict[str, Currency] = {}
    for code in sorted(list_currencies()):
        if not _ISO_CODE.fullmatch(code):
            continue
        table[code] = Currency(
            code=code,
            exponent=get_currency_precision(code),
            symbol=get_currency_symbol(code, locale=locale),
        )
    return table


_REGISTRY: Mapping[str, Currency] = MappingProxyType(_load_cldr_currencies())
logger.debug(f"Currency registry loaded with {len(_REGISTRY)} currencies")

# Decorations stripped from amount strings, longest first so "CA$" wins over "$".
_SYMBOLS: tuple[str, ...] = tuple(sorted(
    {c.symbol for c in _REGISTRY.values() if c.symbol != c.code and not any(ch.isdigit() for ch in c.symbol)},
    key=lambda s: (-len(s), s),
))


# ==============================================================================
# LOOKUPS
# ==============================================================================

def lookup_by_code(code: str) -> Optional[Currency]:
    """Exact, case-sensitive match against the registered ISO codes."""
    if not isinstance(code, str):
        return None
    return _REGISTRY.get(code)


def lookup_by_locale(locale_identifier: str) -> Optional[Currency]:
    """
    Currency of the locale's territory ("en_US" -> USD, "de_DE" -> EUR).

    Accepts "_" or "-" as separator. Returns None for unknown locales and
    for locales without a territory ("fr").
    """
    if not isinstance(locale_identifier, str) or not locale_identifier.strip():
        return None
    return _currency_for_locale(locale_identifier.strip().replace("-", "_"))


@functools.lru_cache(maxsize=256)
def _currency_for_locale(identifier: str) -> Optional[Currency]:
    try:
        locale = Locale.parse(identifier)
    except (UnknownLocaleError, ValueError, TypeError):
        return None

    if not locale.territory:
        return None

    for code in get_territory_currencies(locale.territory):
        currency = _REGISTRY.get(code)
        if currency is not None:
            return currency
    return None


def default_currency() -> Currency:
    """Currency used whenever a Money is built without one (USD)."""
    return _REGISTRY[DEFAULT_CURRENCY_CODE]


def all_currencies() -> tuple[Currency, ...]:
    """Every registered currency, sorted by code."""
    return tuple(_REGISTRY[code] for code in sorted(_REGISTRY))


def known_symbols() -> tuple[str, ...]:
    """Registered display symbols that differ from their ISO code."""
    return _SYMBOLS


# Shorthand for common currencies
USD = _REGISTRY["USD"]
EUR = _REGISTRY["EUR"]
GBP = _REGISTRY["GBP"]
JPY = _REGISTRY["JPY"]
KWD = _REGISTRY["KWD"]
TND = _REGISTRY["TND"]

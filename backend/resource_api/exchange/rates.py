"""
Exchange-rate conversions and the state types that carry a rate.

Amounts travel as plain text; a rate converts USD to GBP by multiplication
(``usd * rate``) and back by division.
"""

import math
import threading
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable

from resource_api.errors import InvalidAmountError


def parse_amount(raw: str) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError):
        raise InvalidAmountError(raw) from None


def format_amount(value: float) -> str:
    """Shortest round-trip digits in plain positional notation.

    Integral values drop the trailing ``.0`` and small or large values are
    never written with an exponent (``0.0000001``, not ``1e-07``).
    """
    if not math.isfinite(value):
        return repr(value)
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def parse_rate(raw: str) -> float:
    """A usable exchange rate: finite and strictly positive."""
    rate = parse_amount(raw)
    if not math.isfinite(rate) or rate <= 0:
        raise InvalidAmountError(raw)
    return rate


def convert_usd_to_gbp(usd: str, gbp_to_usd_rate: float) -> str:
    return format_amount(parse_amount(usd) * gbp_to_usd_rate)


def convert_gbp_to_usd(gbp: str, gbp_to_usd_rate: float) -> str:
    return format_amount(parse_amount(gbp) / gbp_to_usd_rate)


def convert_usd_to_eur(usd: str, eur_to_usd_rate: float) -> str:
    return format_amount(parse_amount(usd) * eur_to_usd_rate)


def convert_eur_to_usd(eur: str, eur_to_usd_rate: float) -> str:
    return format_amount(parse_amount(eur) / eur_to_usd_rate)


class SharedRate:
    """A mutable rate shared by every handler that holds this object."""

    def __init__(self, rate: float):
        self._lock = threading.Lock()
        self._rate = rate

    def get(self) -> float:
        with self._lock:
            return self._rate

    def set(self, rate: float) -> None:
        with self._lock:
            self._rate = rate

    def __repr__(self):
        return f"SharedRate({self.get()!r})"


@runtime_checkable
class ProvidesGbpToUsd(Protocol):
    def gbp_to_usd(self) -> "GbpToUsd": ...


@runtime_checkable
class ProvidesEurToUsd(Protocol):
    def eur_to_usd(self) -> "EurToUsd": ...


@dataclass(frozen=True)
class GbpToUsd:
    rate: float

    def gbp_to_usd(self) -> "GbpToUsd":
        return self


@dataclass(frozen=True)
class EurToUsd:
    rate: float

    def eur_to_usd(self) -> "EurToUsd":
        return self


@dataclass(frozen=True)
class AllExchangeRates:
    """Composite state serving both the GBP and the EUR route groups."""

    gbp: GbpToUsd
    eur: EurToUsd

    def gbp_to_usd(self) -> GbpToUsd:
        return self.gbp

    def eur_to_usd(self) -> EurToUsd:
        return self.eur

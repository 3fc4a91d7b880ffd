"""Currency rounding applied where values leave the engine."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ..config import get_config

RATE_PLACES = 4


def _exponent(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


def to_currency(value: Decimal, places: int | None = None) -> Decimal:
    """Round half-up to the configured number of currency places (cents by default)."""

    if places is None:
        places = get_config().CURRENCY_PLACES
    return Decimal(value).quantize(_exponent(places), rounding=ROUND_HALF_UP)


def to_rate(value: Decimal) -> Decimal:
    return Decimal(value).quantize(_exponent(RATE_PLACES), rounding=ROUND_HALF_UP)


ZERO = Decimal(0)
CENT = Decimal("0.01")


def settles(due: Decimal, payment: Decimal) -> bool:
    """True when ``payment`` clears ``due`` to within half a currency unit."""

    return payment >= due or to_currency(due - payment) == 0


def require_finite(value: Decimal, label: str) -> Decimal:
    value = Decimal(value)
    if not value.is_finite():
        raise ValueError(f"{label} must be a finite amount, got {value}")
    return value

"""Recurrence normalization.

Amounts are converted through their annual total: weekly x52, biweekly x26,
monthly x12, yearly x1, then divided by the target cadence's periods per
year. No days-per-month assumption is involved, so conversions do not drift.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Union

from ..errors import InvalidFrequency
from ..models import BudgetItem, Frequency, SalaryConfig

FrequencyLike = Union[Frequency, str]

PERIODS_PER_YEAR: dict[Frequency, int] = {
    Frequency.WEEKLY: 52,
    Frequency.BIWEEKLY: 26,
    Frequency.MONTHLY: 12,
    Frequency.YEARLY: 1,
}


def coerce_frequency(value: FrequencyLike) -> Frequency:
    """Return the ``Frequency`` member for ``value`` or raise ``InvalidFrequency``."""

    if isinstance(value, Frequency):
        return value
    if isinstance(value, str):
        try:
            return Frequency(value.strip().lower())
        except ValueError:
            pass
    raise InvalidFrequency(value)


def periods_per_year(frequency: FrequencyLike) -> int:
    return PERIODS_PER_YEAR[coerce_frequency(frequency)]


def annualize(amount: Decimal, frequency: FrequencyLike) -> Decimal:
    return Decimal(amount) * periods_per_year(frequency)


def normalize(amount: Decimal, source: FrequencyLike, target: FrequencyLike) -> Decimal:
    """Convert ``amount`` recurring every ``source`` into its ``target`` equivalent.

    Full Decimal precision is kept; rounding belongs to whoever reports the value.
    """

    source_freq = coerce_frequency(source)
    target_freq = coerce_frequency(target)
    if source_freq is target_freq:
        return Decimal(amount)
    return annualize(amount, source_freq) / PERIODS_PER_YEAR[target_freq]


def normalize_item(
    item: BudgetItem, salary: SalaryConfig | None = None, target: FrequencyLike | None = None
) -> Decimal:
    """Per-period amount of ``item``; the period defaults to the salary's cadence."""

    return normalize(item.amount, item.frequency, _resolve_target(salary, target))


def normalize_salary(salary: SalaryConfig, target: FrequencyLike | None = None) -> Decimal:
    return normalize(salary.amount, salary.frequency, target or salary.frequency)


def _resolve_target(salary: SalaryConfig | None, target: FrequencyLike | None) -> Frequency:
    if target is not None:
        return coerce_frequency(target)
    if salary is not None:
        return salary.frequency
    return Frequency.MONTHLY

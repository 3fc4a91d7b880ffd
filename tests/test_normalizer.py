"""Tests for recurrence normalization."""

from __future__ import annotations

from decimal import Decimal

import pytest

from hmsbudget.errors import InvalidFrequency
from hmsbudget.models import Frequency
from hmsbudget.services.normalizer import (
    annualize,
    normalize,
    normalize_item,
    normalize_salary,
    periods_per_year,
)
from tests.conftest import assert_decimal_equal, make_item, make_salary


@pytest.mark.parametrize(
    ("frequency", "expected"),
    [("weekly", 52), ("biweekly", 26), ("monthly", 12), ("yearly", 1)],
)
def test_periods_per_year(frequency, expected):
    assert periods_per_year(frequency) == expected
    assert periods_per_year(Frequency(frequency)) == expected


def test_monthly_to_biweekly():
    assert_decimal_equal(normalize(Decimal("500"), "monthly", "biweekly"), "230.77")


def test_weekly_to_biweekly_is_exact():
    assert normalize(Decimal("50"), Frequency.WEEKLY, Frequency.BIWEEKLY) == Decimal("100")


def test_yearly_to_monthly():
    assert normalize(Decimal("1200"), "yearly", "monthly") == Decimal("100")


def test_same_frequency_is_identity():
    assert normalize(Decimal("123.45"), "monthly", "monthly") == Decimal("123.45")


def test_annualize():
    assert annualize(Decimal("10"), "weekly") == Decimal("520")


@pytest.mark.parametrize("source", list(Frequency))
@pytest.mark.parametrize("target", list(Frequency))
def test_round_trip_returns_original(source, target):
    amount = Decimal("123.45")
    there = normalize(amount, source, target)
    back = normalize(there, target, source)
    assert abs(back - amount) < Decimal("1e-6")


@pytest.mark.parametrize("value", ["daily", "", None, 12])
def test_invalid_frequency(value):
    with pytest.raises(InvalidFrequency):
        normalize(Decimal("1"), value, "monthly")


def test_invalid_frequency_is_a_value_error():
    with pytest.raises(ValueError):
        periods_per_year("fortnightly")


def test_item_defaults_to_salary_period():
    item = make_item(amount=Decimal("500"), frequency=Frequency.MONTHLY)
    salary = make_salary(frequency=Frequency.BIWEEKLY)
    assert normalize_item(item, salary) == normalize(Decimal("500"), "monthly", "biweekly")


def test_item_with_explicit_target():
    item = make_item(amount=Decimal("50"), frequency=Frequency.WEEKLY)
    assert normalize_item(item, make_salary(), target="yearly") == Decimal("2600")


def test_item_without_salary_uses_monthly():
    item = make_item(amount=Decimal("1200"), frequency=Frequency.YEARLY)
    assert normalize_item(item) == Decimal("100")


def test_salary_identity_and_conversion():
    salary = make_salary("2000", Frequency.BIWEEKLY)
    assert normalize_salary(salary) == Decimal("2000")
    assert_decimal_equal(normalize_salary(salary, "monthly"), "4333.33")

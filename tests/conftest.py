"""Pytest configuration and shared factories for hmsbudget tests.

Factories build validated entities with sensible defaults so each test only
spells out the fields it cares about.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from itertools import count

import pytest

from hmsbudget.config import get_config
from hmsbudget.logging_config import ROOT_LOGGER
from hmsbudget.models import (
    BudgetEntry,
    BudgetItem,
    Category,
    CategoryType,
    DebtDetails,
    Frequency,
    SalaryConfig,
    Scenario,
)

_ids = count(1000)


@pytest.fixture(autouse=True)
def _isolate_config_and_logging():
    """Rebuild configuration from the (monkeypatched) environment for every test."""

    get_config.cache_clear()
    yield
    get_config.cache_clear()
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


# =============================================================================
# Factories
# =============================================================================

_CATEGORY_IDS = {
    CategoryType.EXPENSE: 1,
    CategoryType.DEBT: 2,
    CategoryType.SUBSCRIPTION: 3,
}


def make_category(kind: CategoryType = CategoryType.EXPENSE, **overrides) -> Category:
    data = {
        "id": _CATEGORY_IDS[kind],
        "name": kind.value.title(),
        "type": kind,
    }
    data.update(overrides)
    return Category(**data)


def make_item(category: Category | None = None, **overrides) -> BudgetItem:
    category = category or make_category()
    data = {
        "id": next(_ids),
        "category_id": category.id,
        "name": "Item",
        "amount": Decimal("100"),
        "frequency": Frequency.MONTHLY,
    }
    data.update(overrides)
    return BudgetItem(**data)


def make_debt(item_id: int, **overrides) -> DebtDetails:
    data = {
        "budget_item_id": item_id,
        "principal": Decimal("1000"),
        "interest_rate": Decimal("0.12"),
        "minimum_payment": Decimal("100"),
        "current_balance": Decimal("1000"),
    }
    data.update(overrides)
    return DebtDetails(**data)


def make_entry(kind: CategoryType = CategoryType.EXPENSE, *, debt: dict | None = None, **item_fields) -> BudgetEntry:
    category = make_category(kind)
    item = make_item(category, **item_fields)
    details = make_debt(item.id, **debt) if debt is not None else None
    return BudgetEntry(item=item, category=category, debt=details)


def make_salary(amount: str = "2000", frequency: Frequency = Frequency.BIWEEKLY) -> SalaryConfig:
    return SalaryConfig(amount=Decimal(amount), frequency=frequency, currency="USD")


def make_scenario(item_states: dict | None = None, **overrides) -> Scenario:
    data = {"id": 1, "name": "What if", "item_states": item_states or {}}
    data.update(overrides)
    return Scenario(**data)


# =============================================================================
# Assertion helpers
# =============================================================================


def assert_decimal_equal(actual, expected, tolerance: str = "0.01") -> None:
    """Assert two amounts are equal within ``tolerance``."""

    diff = abs(Decimal(actual) - Decimal(expected))
    assert diff <= Decimal(tolerance), f"Expected {expected}, got {actual} (diff {diff})"


@pytest.fixture
def salary() -> SalaryConfig:
    return make_salary()


@pytest.fixture
def budget_document_data() -> dict:
    """A small but complete budget document as decoded JSON."""

    return {
        "salary": {"amount": "2000", "frequency": "biweekly", "currency": "usd"},
        "categories": [
            {"id": 1, "name": "Housing", "type": "expense"},
            {"id": 2, "name": "Loans", "type": "debt"},
            {"id": 3, "name": "Streaming", "type": "subscription", "icon": "tv"},
        ],
        "items": [
            {"id": 1, "category_id": 1, "name": "Rent", "amount": "500", "frequency": "monthly"},
            {"id": 2, "category_id": 2, "name": "Car loan", "amount": "100", "frequency": "monthly"},
            {
                "id": 3,
                "category_id": 3,
                "name": "Music",
                "amount": "50",
                "frequency": "weekly",
                "is_active": False,
            },
            {"id": 4, "category_id": 2, "name": "Card", "amount": "60", "frequency": "monthly"},
        ],
        "debts": [
            {
                "budget_item_id": 2,
                "principal": "1000",
                "interest_rate": "0.12",
                "minimum_payment": "100",
                "current_balance": "1000",
                "target_payoff_date": "2030-01-01",
            },
            {
                "budget_item_id": 4,
                "principal": "600",
                "interest_rate": "0.24",
                "minimum_payment": "60",
                "current_balance": "600",
            },
        ],
        "scenarios": [
            {"id": 1, "name": "Add music", "item_states": {"3": True}},
            {"id": 2, "name": "No rent", "item_states": {"1": False, "99": True}},
        ],
    }

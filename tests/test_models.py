"""Validation and immutability of the budget entities."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from hmsbudget.errors import UnknownReference
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
from tests.conftest import make_category, make_debt, make_item


class TestSalaryConfig:
    def test_defaults_to_biweekly_usd(self):
        salary = SalaryConfig(amount=Decimal("2000"))
        assert salary.frequency is Frequency.BIWEEKLY
        assert salary.currency == "USD"

    def test_currency_is_upper_cased(self):
        assert SalaryConfig(amount=1, currency="eur").currency == "EUR"

    @pytest.mark.parametrize("currency", ["US", "USDX", "U5D"])
    def test_rejects_malformed_currency(self, currency):
        with pytest.raises(ValidationError):
            SalaryConfig(amount=1, currency=currency)

    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            SalaryConfig(amount=0)

    def test_evolve_returns_new_value(self):
        salary = SalaryConfig(amount=Decimal("2000"))
        raised = salary.evolve(amount=Decimal("2500"))
        assert raised.amount == Decimal("2500")
        assert salary.amount == Decimal("2000")


class TestBudgetItem:
    def test_defaults(self):
        item = BudgetItem(id=1, category_id=1, name="Rent", amount=Decimal("500"))
        assert item.is_active is True
        assert item.frequency is Frequency.MONTHLY
        assert item.due_day is None

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5"), Decimal("1000000000.01")])
    def test_amount_bounds(self, amount):
        with pytest.raises(ValidationError):
            make_item(amount=amount)

    def test_amount_upper_bound_is_inclusive(self):
        assert make_item(amount=Decimal("1000000000")).amount == Decimal("1000000000")

    @pytest.mark.parametrize("due_day", [0, 32])
    def test_due_day_must_be_calendar_day(self, due_day):
        with pytest.raises(ValidationError):
            make_item(due_day=due_day)

    @pytest.mark.parametrize("name", ["", "x" * 101])
    def test_name_length(self, name):
        with pytest.raises(ValidationError):
            make_item(name=name)

    def test_unknown_frequency_rejected(self):
        with pytest.raises(ValidationError):
            make_item(frequency="daily")

    def test_is_immutable(self):
        item = make_item()
        with pytest.raises((ValidationError, TypeError, AttributeError)):
            item.is_active = False

    def test_toggled_produces_new_value(self):
        item = make_item(is_active=True)
        off = item.toggled()
        assert off.is_active is False
        assert item.is_active is True
        assert off.toggled(True).is_active is True

    def test_evolve_revalidates(self):
        with pytest.raises(ValidationError):
            make_item().evolve(amount=Decimal("-1"))


class TestCategory:
    def test_name_length(self):
        with pytest.raises(ValidationError):
            Category(id=1, name="x" * 51, type="expense")

    def test_with_display_only_changes_metadata(self):
        category = make_category(CategoryType.SUBSCRIPTION)
        updated = category.with_display(icon="tv", color="#ff0000")
        assert (updated.icon, updated.color) == ("tv", "#ff0000")
        assert (updated.id, updated.name, updated.type) == (category.id, category.name, category.type)
        assert category.icon is None


class TestDebtDetails:
    def test_balance_may_exceed_principal(self):
        debt = make_debt(1, principal=Decimal("1000"), current_balance=Decimal("1040"))
        assert debt.current_balance > debt.principal

    @pytest.mark.parametrize("rate", [Decimal("-0.01"), Decimal("1.01")])
    def test_interest_rate_bounds(self, rate):
        with pytest.raises(ValidationError):
            make_debt(1, interest_rate=rate)

    def test_missing_rate_means_zero(self):
        assert make_debt(1, interest_rate=None).annual_rate == Decimal(0)

    def test_zero_balance_is_not_outstanding(self):
        assert make_debt(1, current_balance=Decimal("0")).is_outstanding is False

    def test_parses_target_date(self):
        debt = DebtDetails(
            budget_item_id=1,
            principal="500",
            current_balance="500",
            target_payoff_date="2027-06-01",
        )
        assert debt.target_payoff_date == date(2027, 6, 1)


class TestScenario:
    def test_integer_keys_are_stringified(self):
        scenario = Scenario(id=1, name="s", item_states={7: False})
        assert scenario.item_states == {"7": False}
        assert scenario.state_for(7) is False

    def test_absent_item_has_no_override(self):
        assert Scenario(id=1, name="s").state_for(3) is None

    def test_with_override_does_not_mutate(self):
        scenario = Scenario(id=1, name="s", item_states={"1": True})
        updated = scenario.with_override(2, False)
        assert updated.item_states == {"1": True, "2": False}
        assert scenario.item_states == {"1": True}
        assert updated.without_override(1).item_states == {"2": False}

    def test_item_states_are_read_only(self):
        scenario = Scenario(id=1, name="s", item_states={"1": True})
        with pytest.raises(TypeError):
            scenario.item_states["2"] = False
        with pytest.raises(TypeError):
            del scenario.item_states["1"]
        assert scenario.item_states == {"1": True}

    def test_dump_round_trips_states(self):
        scenario = Scenario(id=1, name="s", item_states={3: False})
        data = scenario.model_dump()
        assert data["item_states"] == {"3": False}
        assert type(data["item_states"]) is dict
        assert Scenario.model_validate(data) == scenario


class TestBudgetEntry:
    def test_category_must_match_item(self):
        item = make_item(make_category(CategoryType.EXPENSE))
        with pytest.raises(UnknownReference):
            BudgetEntry(item=item, category=make_category(CategoryType.DEBT))

    def test_debt_requires_debt_category(self):
        category = make_category(CategoryType.EXPENSE)
        item = make_item(category)
        with pytest.raises(ValueError):
            BudgetEntry(item=item, category=category, debt=make_debt(item.id))

    def test_debt_must_belong_to_item(self):
        category = make_category(CategoryType.DEBT)
        item = make_item(category)
        with pytest.raises(UnknownReference):
            BudgetEntry(item=item, category=category, debt=make_debt(item.id + 1))

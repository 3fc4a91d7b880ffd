"""Recurring budget items and their optional debt extension."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Optional

from pydantic import ConfigDict
from sqlmodel import Field, SQLModel

from .enums import Frequency

MAX_ITEM_AMOUNT = Decimal("1000000000")


class BudgetItem(SQLModel):
    """A recurring outflow that can be toggled on or off."""

    model_config = ConfigDict(frozen=True)

    id: int
    category_id: int
    name: str = Field(min_length=1, max_length=100)
    amount: Decimal = Field(gt=0, le=MAX_ITEM_AMOUNT)
    frequency: Frequency = Field(default=Frequency.MONTHLY)
    is_active: bool = Field(default=True)
    due_day: Optional[int] = Field(default=None, ge=1, le=31)
    notes: Optional[str] = Field(default=None)

    def evolve(self, **changes: Any) -> "BudgetItem":
        """Return a re-validated copy with ``changes`` applied."""
        return type(self).model_validate({**self.model_dump(), **changes})

    def toggled(self, is_active: Optional[bool] = None) -> "BudgetItem":
        state = (not self.is_active) if is_active is None else is_active
        return self.evolve(is_active=state)


class DebtDetails(SQLModel):
    """Loan terms attached one-to-one to a ``debt`` budget item.

    ``current_balance`` may exceed ``principal`` because it can include accrued
    interest. A balance of zero marks a debt that is already paid off.
    """

    model_config = ConfigDict(frozen=True)

    budget_item_id: int
    principal: Decimal = Field(gt=0)
    interest_rate: Optional[Decimal] = Field(default=None, ge=0, le=1)
    minimum_payment: Optional[Decimal] = Field(default=None, gt=0)
    current_balance: Decimal = Field(ge=0)
    target_payoff_date: Optional[date] = Field(default=None)

    @property
    def annual_rate(self) -> Decimal:
        return self.interest_rate if self.interest_rate is not None else Decimal(0)

    @property
    def is_outstanding(self) -> bool:
        return self.current_balance > 0

    def evolve(self, **changes: Any) -> "DebtDetails":
        return type(self).model_validate({**self.model_dump(), **changes})

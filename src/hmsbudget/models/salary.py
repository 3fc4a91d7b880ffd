"""Salary configuration entity."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import ConfigDict, field_validator
from sqlmodel import Field, SQLModel

from .enums import Frequency


class SalaryConfig(SQLModel):
    """Active pay schedule; its frequency is the projection's base period."""

    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(gt=0)
    frequency: Frequency = Field(default=Frequency.BIWEEKLY)
    currency: str = Field(default="USD", min_length=3, max_length=3)

    @field_validator("currency")
    @classmethod
    def _currency_code(cls, value: str) -> str:
        if not value.isalpha():
            raise ValueError("currency must be a 3-letter code")
        return value.upper()

    def evolve(self, **changes: Any) -> "SalaryConfig":
        return type(self).model_validate({**self.model_dump(), **changes})

"""Enumerations shared by the budget entities."""

from __future__ import annotations

from enum import Enum


class Frequency(str, Enum):
    """Recurrence cadence of a salary or budget item."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class CategoryType(str, Enum):
    """Grouping used when totalling outflows."""

    EXPENSE = "expense"
    DEBT = "debt"
    SUBSCRIPTION = "subscription"

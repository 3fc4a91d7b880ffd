"""Resolved (item, category, debt) tuples consumed by the engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors import UnknownReference
from .budget_item import BudgetItem, DebtDetails
from .category import Category
from .enums import CategoryType


@dataclass(frozen=True, slots=True)
class BudgetEntry:
    """A budget item joined with its category and, for debts, its loan terms."""

    item: BudgetItem
    category: Category
    debt: Optional[DebtDetails] = None

    def __post_init__(self) -> None:
        if self.item.category_id != self.category.id:
            raise UnknownReference(
                f"Item {self.item.id} references category {self.item.category_id}, "
                f"got category {self.category.id}"
            )
        if self.debt is None:
            return
        if self.category.type is not CategoryType.DEBT:
            raise ValueError(
                f"Debt details attached to item {self.item.id} in a "
                f"{self.category.type.value} category"
            )
        if self.debt.budget_item_id != self.item.id:
            raise UnknownReference(
                f"Debt details for item {self.debt.budget_item_id} attached to item {self.item.id}"
            )

    @property
    def item_id(self) -> int:
        return self.item.id

    @property
    def kind(self) -> CategoryType:
        return self.category.type

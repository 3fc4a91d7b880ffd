"""Entity exports."""

from .budget_item import MAX_ITEM_AMOUNT, BudgetItem, DebtDetails
from .category import Category
from .entry import BudgetEntry
from .enums import CategoryType, Frequency
from .salary import SalaryConfig
from .scenario import Scenario, item_key

__all__ = [
    "BudgetEntry",
    "BudgetItem",
    "Category",
    "CategoryType",
    "DebtDetails",
    "Frequency",
    "MAX_ITEM_AMOUNT",
    "SalaryConfig",
    "Scenario",
    "item_key",
]

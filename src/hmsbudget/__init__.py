"""Budget what-if projection engine for the household management system."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, get_config
from .errors import Diagnostic, DiagnosticCode, InvalidFrequency
from .models import (
    BudgetEntry,
    BudgetItem,
    Category,
    CategoryType,
    DebtDetails,
    Frequency,
    SalaryConfig,
    Scenario,
)
from .services.amortization import PayoffStatus, amortize
from .services.normalizer import normalize
from .services.payoff_plan import plan_payoff
from .services.scenarios import compare, evaluate

__version__ = "0.1.0"

__all__ = [
    "BaseConfig",
    "BudgetEntry",
    "BudgetItem",
    "Category",
    "CategoryType",
    "DebtDetails",
    "DevConfig",
    "Diagnostic",
    "DiagnosticCode",
    "Frequency",
    "InvalidFrequency",
    "PayoffStatus",
    "SalaryConfig",
    "Scenario",
    "amortize",
    "compare",
    "evaluate",
    "get_config",
    "normalize",
    "plan_payoff",
]

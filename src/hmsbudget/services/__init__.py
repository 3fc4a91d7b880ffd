"""Service module exports."""

from . import amortization, export_csv, loader, normalizer, payoff_plan, reports, scenarios

__all__ = [
    "amortization",
    "export_csv",
    "loader",
    "normalizer",
    "payoff_plan",
    "reports",
    "scenarios",
]

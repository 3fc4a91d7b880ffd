"""CSV export helpers for reports and payoff schedules."""

from __future__ import annotations

import csv
from datetime import date
from pathlib import Path
from typing import Iterable

from .amortization import AmortizationRow
from .scenarios import ScenarioReport

REPORT_HEADERS = [
    "scenario_id",
    "period",
    "currency",
    "gross_income",
    "expense_total",
    "debt_total",
    "subscription_total",
    "net_per_period",
    "savings_rate",
]

SCHEDULE_HEADERS = [
    "period",
    "due_date",
    "payment",
    "interest_accrued",
    "principal_paid",
    "remaining_balance",
]


def _serialize_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "value"):
        return str(value.value)
    return str(value)


def export_reports_csv(*, reports: Iterable[ScenarioReport], output_path: Path) -> Path:
    """Write one row per scenario report; the baseline has an empty scenario_id."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=REPORT_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for report in reports:
            writer.writerow(
                {name: _serialize_value(getattr(report, name)) for name in REPORT_HEADERS}
            )
    return output_path


def export_schedule_csv(
    *, rows: Iterable[tuple[date | None, AmortizationRow] | AmortizationRow], output_path: Path
) -> Path:
    """Write amortization rows, optionally paired with their due dates."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=SCHEDULE_HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for entry in rows:
            due_date, row = entry if isinstance(entry, tuple) else (None, entry)
            writer.writerow(
                {
                    "period": row.period_index,
                    "due_date": _serialize_value(due_date),
                    "payment": _serialize_value(row.payment),
                    "interest_accrued": _serialize_value(row.interest_accrued),
                    "principal_paid": _serialize_value(row.principal_paid),
                    "remaining_balance": _serialize_value(row.remaining_balance),
                }
            )
    return output_path

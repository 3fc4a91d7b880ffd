"""What-if scenario evaluation and comparison."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Sequence

from ..errors import Diagnostic, DiagnosticCode, DivisionByZeroIncome
from ..logging_config import get_logger
from ..models import BudgetEntry, CategoryType, Frequency, SalaryConfig, Scenario
from .money import ZERO, to_currency, to_rate
from .normalizer import normalize_item, normalize_salary

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ScenarioReport:
    """Per-salary-period totals for one scenario (or the default item states)."""

    period: Frequency
    currency: str
    gross_income: Decimal
    expense_total: Decimal
    debt_total: Decimal
    subscription_total: Decimal
    net_per_period: Decimal
    savings_rate: Decimal
    scenario_id: int | None = None
    active_item_ids: tuple[int, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def total_outflow(self) -> Decimal:
        return self.expense_total + self.debt_total + self.subscription_total

    @property
    def is_overspending(self) -> bool:
        return self.net_per_period < 0

    def total_for(self, kind: CategoryType) -> Decimal:
        return {
            CategoryType.EXPENSE: self.expense_total,
            CategoryType.DEBT: self.debt_total,
            CategoryType.SUBSCRIPTION: self.subscription_total,
        }[kind]

    def require_savings_rate(self) -> Decimal:
        """Return the savings rate, raising when it is undefined (zero income)."""

        for diagnostic in self.diagnostics:
            if diagnostic.code is DiagnosticCode.DIVISION_BY_ZERO_INCOME:
                raise DivisionByZeroIncome(diagnostic.message)
        return self.savings_rate

    def to_dict(self) -> dict[str, Any]:
        return {
            "scenario_id": self.scenario_id,
            "period": self.period.value,
            "currency": self.currency,
            "gross_income": str(self.gross_income),
            "expense_total": str(self.expense_total),
            "debt_total": str(self.debt_total),
            "subscription_total": str(self.subscription_total),
            "total_outflow": str(self.total_outflow),
            "net_per_period": str(self.net_per_period),
            "savings_rate": str(self.savings_rate),
            "active_item_ids": list(self.active_item_ids),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


@dataclass(frozen=True, slots=True)
class ScenarioComparison:
    """Difference between a baseline report and a scenario report."""

    baseline: ScenarioReport
    scenario: ScenarioReport
    switched_on: tuple[int, ...] = ()
    switched_off: tuple[int, ...] = ()
    deltas: dict[str, Decimal] = field(default_factory=dict)

    @property
    def net_change(self) -> Decimal:
        return self.deltas["net_per_period"]


_COMPARED_FIELDS = (
    "gross_income",
    "expense_total",
    "debt_total",
    "subscription_total",
    "net_per_period",
    "savings_rate",
)


def is_effectively_active(entry: BudgetEntry, scenario: Scenario | None) -> bool:
    """Scenario override when present, otherwise the item's own toggle."""

    if scenario is not None:
        override = scenario.state_for(entry.item.id)
        if override is not None:
            return override
    return entry.item.is_active


def evaluate(
    entries: Iterable[BudgetEntry],
    salary: SalaryConfig | None,
    scenario: Scenario | None = None,
) -> ScenarioReport:
    """Aggregate normalized outflows of effectively active items.

    All totals are expressed per salary period. ``salary`` may be ``None`` when
    no pay schedule is configured yet; gross income is then zero and the
    savings rate is reported as 0 with a diagnostic.
    """

    entries = tuple(entries)
    period = salary.frequency if salary is not None else Frequency.MONTHLY
    totals: dict[CategoryType, Decimal] = {kind: ZERO for kind in CategoryType}
    active_ids: list[int] = []

    for entry in entries:
        if not is_effectively_active(entry, scenario):
            continue
        totals[entry.kind] += normalize_item(entry.item, salary, period)
        active_ids.append(entry.item.id)

    gross = normalize_salary(salary) if salary is not None else ZERO
    outflow = sum(totals.values(), ZERO)
    net = gross - outflow

    diagnostics: list[Diagnostic] = []
    if gross == 0:
        rate = ZERO
        diagnostics.append(
            Diagnostic(
                code=DiagnosticCode.DIVISION_BY_ZERO_INCOME,
                message="Gross income is zero; savings rate is undefined",
            )
        )
        logger.warning(
            "Savings rate undefined for zero income",
            extra={"scenario_id": scenario.id if scenario else None},
        )
    else:
        rate = net / gross

    logger.debug(
        "Evaluated %d items (%d active)",
        len(entries),
        len(active_ids),
        extra={"scenario_id": scenario.id if scenario else None},
    )

    return ScenarioReport(
        period=period,
        currency=salary.currency if salary is not None else "USD",
        gross_income=to_currency(gross),
        expense_total=to_currency(totals[CategoryType.EXPENSE]),
        debt_total=to_currency(totals[CategoryType.DEBT]),
        subscription_total=to_currency(totals[CategoryType.SUBSCRIPTION]),
        net_per_period=to_currency(net),
        savings_rate=to_rate(rate),
        scenario_id=scenario.id if scenario is not None else None,
        active_item_ids=tuple(active_ids),
        diagnostics=tuple(diagnostics),
    )


def evaluate_many(
    entries: Iterable[BudgetEntry],
    salary: SalaryConfig | None,
    scenarios: Iterable[Scenario],
) -> dict[int, ScenarioReport]:
    """Evaluate each scenario against the same item set, keyed by scenario id."""

    entries = tuple(entries)
    return {scenario.id: evaluate(entries, salary, scenario) for scenario in scenarios}


def compare(
    entries: Iterable[BudgetEntry],
    salary: SalaryConfig | None,
    scenario: Scenario,
    baseline: Scenario | None = None,
) -> ScenarioComparison:
    """Diff ``scenario`` against ``baseline`` (the default item states when omitted)."""

    entries = tuple(entries)
    base_report = evaluate(entries, salary, baseline)
    scenario_report = evaluate(entries, salary, scenario)

    base_active = set(base_report.active_item_ids)
    scenario_active = set(scenario_report.active_item_ids)
    deltas = {
        name: getattr(scenario_report, name) - getattr(base_report, name)
        for name in _COMPARED_FIELDS
    }
    return ScenarioComparison(
        baseline=base_report,
        scenario=scenario_report,
        switched_on=_ordered(entries, scenario_active - base_active),
        switched_off=_ordered(entries, base_active - scenario_active),
        deltas=deltas,
    )


def _ordered(entries: Sequence[BudgetEntry], ids: set[int]) -> tuple[int, ...]:
    return tuple(entry.item.id for entry in entries if entry.item.id in ids)


"""Multi-debt payoff plans (avalanche and snowball)."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable, Iterable, Sequence

from ..config import get_config
from ..errors import Diagnostic, DiagnosticCode
from ..logging_config import get_logger
from ..models import DebtDetails
from .amortization import PayoffStatus
from .money import ZERO, require_finite, settles, to_currency

logger = get_logger(__name__)

MONTHS_PER_YEAR = 12


@dataclass(frozen=True, slots=True)
class PlanMonth:
    """Payments, interest and closing balances for one month, keyed by item id."""

    period_index: int
    payments: dict[int, Decimal] = field(default_factory=dict)
    interest: dict[int, Decimal] = field(default_factory=dict)
    balances: dict[int, Decimal] = field(default_factory=dict)

    @property
    def total_balance(self) -> Decimal:
        return sum(self.balances.values(), ZERO)

    @property
    def total_payment(self) -> Decimal:
        return sum(self.payments.values(), ZERO)


@dataclass(frozen=True, slots=True)
class PayoffPlan:
    strategy: str
    status: PayoffStatus
    order: tuple[int, ...]
    months: tuple[PlanMonth, ...] = ()
    payoff_periods: dict[int, int] = field(default_factory=dict)
    total_interest: Decimal = ZERO
    total_paid: Decimal = ZERO
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def periods(self) -> int:
        return len(self.months)

    def to_dict(self) -> dict[str, Any]:
        return {
            "strategy": self.strategy,
            "status": self.status.value,
            "order": list(self.order),
            "periods": self.periods,
            "payoff_periods": {str(k): v for k, v in self.payoff_periods.items()},
            "total_interest": str(self.total_interest),
            "total_paid": str(self.total_paid),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


def _avalanche_key(debt: DebtDetails) -> tuple:
    return (-debt.annual_rate, debt.current_balance, debt.budget_item_id)


def _snowball_key(debt: DebtDetails) -> tuple:
    return (debt.current_balance, -debt.annual_rate, debt.budget_item_id)


STRATEGIES: dict[str, Callable[[DebtDetails], tuple]] = {
    "avalanche": _avalanche_key,
    "snowball": _snowball_key,
}


def order_debts(debts: Iterable[DebtDetails], strategy: str) -> list[DebtDetails]:
    """Return debts in the order extra money is applied.

    Avalanche targets the highest rate first (ties: smaller balance); snowball
    targets the smallest balance first (ties: higher rate).
    """

    try:
        key = STRATEGIES[strategy]
    except KeyError:
        raise ValueError(f"Invalid debt payoff strategy: {strategy!r}") from None
    return sorted(debts, key=key)


def plan_payoff(
    debts: Sequence[DebtDetails],
    *,
    strategy: str | None = None,
    extra_payment: Decimal = ZERO,
    horizon: int | None = None,
) -> PayoffPlan:
    """Simulate paying several debts together, month by month.

    Every open debt receives its minimum payment. The extra payment, plus the
    minimums of debts already cleared and any overpayment in the month, goes to
    open debts in strategy order.
    """

    config = get_config()
    strategy = (strategy or config.DEFAULT_STRATEGY).lower()
    ordered = [d for d in order_debts(debts, strategy) if d.is_outstanding]
    horizon = config.PAYOFF_HORIZON if horizon is None else horizon
    extra = require_finite(extra_payment, "Extra payment")
    if extra < 0:
        raise ValueError(f"Extra payment must not be negative, got {extra}")
    order = tuple(d.budget_item_id for d in ordered)

    if not ordered:
        return PayoffPlan(strategy=strategy, status=PayoffStatus.PAID_OFF, order=order)

    balances = {d.budget_item_id: d.current_balance for d in ordered}
    rates = {d.budget_item_id: d.annual_rate / MONTHS_PER_YEAR for d in ordered}
    minimums = {d.budget_item_id: d.minimum_payment or ZERO for d in ordered}

    budget = extra + sum(minimums.values(), ZERO)
    first_interest = sum((balances[i] * rates[i] for i in order), ZERO)
    if budget <= first_interest:
        diagnostic = Diagnostic(
            code=DiagnosticCode.NON_AMORTIZING,
            message=(
                f"Monthly budget {to_currency(budget)} does not exceed combined "
                f"interest {to_currency(first_interest)}"
            ),
            details={"budget": budget, "interest": first_interest},
        )
        logger.warning("Payoff plan is non-amortizing", extra={"strategy": strategy})
        return PayoffPlan(
            strategy=strategy,
            status=PayoffStatus.NON_AMORTIZING,
            order=order,
            diagnostics=(diagnostic,),
        )

    months: list[PlanMonth] = []
    payoff_periods: dict[int, int] = {}
    freed = ZERO
    total_interest = ZERO
    total_paid = ZERO

    for index in range(1, horizon + 1):
        open_ids = [i for i in order if balances[i] > 0]
        if not open_ids:
            break

        due = {}
        interest = {}
        for item_id in open_ids:
            interest[item_id] = balances[item_id] * rates[item_id]
            due[item_id] = balances[item_id] + interest[item_id]

        pool = extra + freed
        payments: dict[int, Decimal] = {}
        for item_id in open_ids:
            minimum = minimums[item_id]
            paid = due[item_id] if settles(due[item_id], minimum) else minimum
            pool += minimum - paid
            payments[item_id] = paid
        for item_id in open_ids:
            if pool <= 0:
                break
            remainder = due[item_id] - payments[item_id]
            if remainder <= 0:
                continue
            top_up = remainder if settles(remainder, pool) else pool
            payments[item_id] += top_up
            pool -= top_up

        for item_id in open_ids:
            balances[item_id] = due[item_id] - payments[item_id]
            total_interest += interest[item_id]
            total_paid += payments[item_id]
            if balances[item_id] <= 0:
                balances[item_id] = ZERO
                payoff_periods[item_id] = index
                freed += minimums[item_id]

        months.append(
            PlanMonth(
                period_index=index,
                payments={i: to_currency(v) for i, v in payments.items()},
                interest={i: to_currency(v) for i, v in interest.items()},
                balances={i: to_currency(balances[i]) for i in open_ids},
            )
        )

    remaining = sum(balances.values(), ZERO)
    diagnostics: tuple[Diagnostic, ...] = ()
    if remaining > 0:
        status = PayoffStatus.HORIZON_EXCEEDED
        diagnostics = (
            Diagnostic(
                code=DiagnosticCode.PAYOFF_HORIZON_EXCEEDED,
                message=f"Balance {to_currency(remaining)} remains after {horizon} months",
                details={"horizon": horizon, "balance": remaining},
            ),
        )
        logger.warning("Payoff plan exceeded horizon", extra={"strategy": strategy})
    else:
        status = PayoffStatus.AMORTIZING
        logger.debug("Payoff plan (%s) clears %d debts in %d months", strategy, len(order), len(months))

    return PayoffPlan(
        strategy=strategy,
        status=status,
        order=order,
        months=tuple(months),
        payoff_periods=payoff_periods,
        total_interest=to_currency(total_interest),
        total_paid=to_currency(total_paid),
        diagnostics=diagnostics,
    )

"""Single-debt amortization schedules and payoff projections.

Balances are carried at full Decimal precision between periods; rows and
projections are rounded to cents only when handed to a consumer so that
rounding error never compounds across the schedule.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal
from enum import Enum
from itertools import islice
from typing import Any, Iterator, NamedTuple

from ..config import get_config
from ..errors import Diagnostic, DiagnosticCode
from ..logging_config import get_logger
from ..models import DebtDetails, Frequency
from .money import CENT, ZERO, require_finite, settles, to_currency
from .normalizer import FrequencyLike, coerce_frequency, periods_per_year

logger = get_logger(__name__)


class PayoffStatus(str, Enum):
    PAID_OFF = "paid_off"
    AMORTIZING = "amortizing"
    NON_AMORTIZING = "non_amortizing"
    HORIZON_EXCEEDED = "horizon_exceeded"


@dataclass(frozen=True, slots=True)
class AmortizationRow:
    """One simulated payment period, rounded to cents."""

    period_index: int
    payment: Decimal
    interest_accrued: Decimal
    principal_paid: Decimal
    remaining_balance: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period_index,
            "payment": str(self.payment),
            "interest_accrued": str(self.interest_accrued),
            "principal_paid": str(self.principal_paid),
            "remaining_balance": str(self.remaining_balance),
        }


@dataclass(frozen=True, slots=True)
class PayoffProjection:
    """Outcome of running a schedule to payoff (or to the horizon)."""

    debt_id: int
    status: PayoffStatus
    payment: Decimal
    periods: int
    total_interest: Decimal
    total_paid: Decimal
    final_balance: Decimal
    payoff_date: date | None = None
    target_payoff_date: date | None = None
    meets_target: bool | None = None
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def is_paid_off(self) -> bool:
        return self.status in (PayoffStatus.AMORTIZING, PayoffStatus.PAID_OFF)

    def raise_for_status(self) -> None:
        """Raise ``NonAmortizing``/``PayoffHorizonExceeded`` for failed projections."""

        if self.diagnostics:
            raise self.diagnostics[0].to_exception()


class _Step(NamedTuple):
    index: int
    payment: Decimal
    interest: Decimal
    principal: Decimal
    balance: Decimal


def add_periods(start: date, count: int, frequency: FrequencyLike) -> date:
    """Return ``start`` advanced by ``count`` periods of ``frequency``.

    Month and year steps clamp to the last valid day (Jan 31 + 1 month is
    Feb 28/29).
    """

    freq = coerce_frequency(frequency)
    if freq is Frequency.WEEKLY:
        return start + timedelta(weeks=count)
    if freq is Frequency.BIWEEKLY:
        return start + timedelta(weeks=2 * count)
    months = count if freq is Frequency.MONTHLY else 12 * count
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


class AmortizationSchedule:
    """Lazy, restartable payoff sequence for one debt.

    Iterating recomputes the schedule from the inputs every time, so callers can
    take a prefix (``schedule.take(12)``) without simulating the full payoff.
    """

    def __init__(
        self,
        debt: DebtDetails,
        payment: Decimal | None = None,
        *,
        frequency: FrequencyLike = Frequency.MONTHLY,
        horizon: int | None = None,
        start: date | None = None,
    ) -> None:
        if payment is None:
            payment = debt.minimum_payment
        payment = require_finite(payment, "Payment") if payment is not None else ZERO
        if payment < 0:
            raise ValueError(f"Payment must not be negative, got {payment}")
        horizon = get_config().PAYOFF_HORIZON if horizon is None else horizon
        if horizon < 1:
            raise ValueError(f"Horizon must be at least one period, got {horizon}")

        self.debt = debt
        self.payment = payment
        self.frequency = coerce_frequency(frequency)
        self.horizon = horizon
        self.start = start
        self._period_rate = debt.annual_rate / periods_per_year(self.frequency)

    @property
    def first_period_interest(self) -> Decimal:
        return self.debt.current_balance * self._period_rate

    @property
    def is_amortizing(self) -> bool:
        """True when the first payment reduces the balance (or nothing is owed)."""
        return not self.debt.is_outstanding or self.payment > self.first_period_interest

    def _steps(self) -> Iterator[_Step]:
        if not self.debt.is_outstanding or not self.is_amortizing:
            return
        balance = self.debt.current_balance
        for index in range(1, self.horizon + 1):
            interest = balance * self._period_rate
            due = balance + interest
            if settles(due, self.payment):
                yield _Step(index, due, interest, balance, ZERO)
                return
            principal = self.payment - interest
            balance -= principal
            yield _Step(index, self.payment, interest, principal, balance)

    def __iter__(self) -> Iterator[AmortizationRow]:
        for step in self._steps():
            yield AmortizationRow(
                period_index=step.index,
                payment=to_currency(step.payment),
                interest_accrued=to_currency(step.interest),
                principal_paid=to_currency(step.principal),
                remaining_balance=to_currency(step.balance),
            )

    def take(self, periods: int) -> list[AmortizationRow]:
        return list(islice(self, max(periods, 0)))

    def dated(self, start: date | None = None) -> Iterator[tuple[date, AmortizationRow]]:
        """Pair each row with its payment date; the first payment falls on ``start``."""

        first = start or self.start or date.today()
        for row in self:
            yield add_periods(first, row.period_index - 1, self.frequency), row

    def project(self) -> PayoffProjection:
        """Run the schedule to completion and summarise it."""

        debt = self.debt
        if not debt.is_outstanding:
            return self._projection(PayoffStatus.PAID_OFF, 0, ZERO, ZERO, ZERO)

        if not self.is_amortizing:
            diagnostic = Diagnostic(
                code=DiagnosticCode.NON_AMORTIZING,
                message=(
                    f"Payment {to_currency(self.payment)} does not exceed first-period "
                    f"interest {to_currency(self.first_period_interest)}"
                ),
                item_id=debt.budget_item_id,
                details={"payment": self.payment, "interest": self.first_period_interest},
            )
            logger.warning(
                "Debt %s is non-amortizing",
                debt.budget_item_id,
                extra={"payment": str(self.payment)},
            )
            return self._projection(
                PayoffStatus.NON_AMORTIZING, 0, ZERO, ZERO, debt.current_balance, diagnostic
            )

        periods = 0
        total_interest = ZERO
        total_paid = ZERO
        balance = debt.current_balance
        for step in self._steps():
            periods = step.index
            total_interest += step.interest
            total_paid += step.payment
            balance = step.balance

        if balance > 0:
            diagnostic = Diagnostic(
                code=DiagnosticCode.PAYOFF_HORIZON_EXCEEDED,
                message=f"Balance {to_currency(balance)} remains after {self.horizon} periods",
                item_id=debt.budget_item_id,
                details={"horizon": self.horizon, "balance": balance},
            )
            logger.warning(
                "Debt %s not paid off within horizon",
                debt.budget_item_id,
                extra={"horizon": self.horizon},
            )
            return self._projection(
                PayoffStatus.HORIZON_EXCEEDED, periods, total_interest, total_paid, balance, diagnostic
            )

        logger.debug("Debt %s paid off in %d periods", debt.budget_item_id, periods)
        return self._projection(PayoffStatus.AMORTIZING, periods, total_interest, total_paid, ZERO)

    def _projection(
        self,
        status: PayoffStatus,
        periods: int,
        total_interest: Decimal,
        total_paid: Decimal,
        balance: Decimal,
        diagnostic: Diagnostic | None = None,
    ) -> PayoffProjection:
        target = self.debt.target_payoff_date
        payoff_date: date | None = None
        if status is PayoffStatus.AMORTIZING:
            payoff_date = add_periods(self.start or date.today(), periods - 1, self.frequency)
        elif status is PayoffStatus.PAID_OFF:
            payoff_date = self.start or date.today()

        meets_target: bool | None = None
        if target is not None:
            meets_target = payoff_date is not None and payoff_date <= target

        return PayoffProjection(
            debt_id=self.debt.budget_item_id,
            status=status,
            payment=to_currency(self.payment),
            periods=periods,
            total_interest=to_currency(total_interest),
            total_paid=to_currency(total_paid),
            final_balance=to_currency(balance),
            payoff_date=payoff_date,
            target_payoff_date=target,
            meets_target=meets_target,
            diagnostics=(diagnostic,) if diagnostic is not None else (),
        )


def amortize(
    debt: DebtDetails,
    payment: Decimal | None = None,
    *,
    frequency: FrequencyLike = Frequency.MONTHLY,
    horizon: int | None = None,
    start: date | None = None,
) -> AmortizationSchedule:
    """Build the payoff schedule for ``debt`` at ``payment`` (minimum payment by default)."""

    return AmortizationSchedule(
        debt, payment, frequency=frequency, horizon=horizon, start=start
    )


def required_payment(
    debt: DebtDetails,
    periods: int,
    *,
    frequency: FrequencyLike = Frequency.MONTHLY,
) -> Decimal:
    """Smallest whole-cent payment that clears ``debt`` within ``periods`` payments."""

    if periods < 1:
        raise ValueError(f"periods must be at least 1, got {periods}")
    if not debt.is_outstanding:
        return ZERO

    def clears(cents: int) -> bool:
        schedule = AmortizationSchedule(
            debt, Decimal(cents) * CENT, frequency=frequency, horizon=periods
        )
        if not schedule.is_amortizing:
            return False
        last = None
        for last in schedule._steps():
            pass
        return last is not None and last.balance == 0

    opening = AmortizationSchedule(debt, ZERO, frequency=frequency, horizon=1)
    interest = opening.first_period_interest
    low = int((interest / CENT).to_integral_value(rounding=ROUND_FLOOR))
    high = int(((debt.current_balance + interest) / CENT).to_integral_value(rounding=ROUND_CEILING))
    while high - low > 1:
        mid = (low + high) // 2
        if clears(mid):
            high = mid
        else:
            low = mid
    return Decimal(high) * CENT


def payment_for_target(
    debt: DebtDetails,
    *,
    start: date | None = None,
    frequency: FrequencyLike = Frequency.MONTHLY,
) -> Decimal:
    """Payment needed to clear ``debt`` by its ``target_payoff_date``.

    The first payment falls on ``start`` (today by default); every payment date
    up to and including the target counts.
    """

    target = debt.target_payoff_date
    if target is None:
        raise ValueError(f"Debt {debt.budget_item_id} has no target payoff date")
    first = start or date.today()
    if target < first:
        raise ValueError(f"Target payoff date {target} is before the first payment {first}")

    horizon = get_config().PAYOFF_HORIZON
    periods = 0
    while periods < horizon and add_periods(first, periods, frequency) <= target:
        periods += 1
    return required_payment(debt, periods, frequency=frequency)

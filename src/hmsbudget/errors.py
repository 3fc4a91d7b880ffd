"""Error and diagnostic taxonomy for the projection engine.

Exceptions are raised only for malformed input (an unknown frequency, a
dangling category reference) or when a caller explicitly asks for them via
``raise_for_status()``. Everything else is reported as a :class:`Diagnostic`
attached to the result so the caller decides how to surface it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class HMSBudgetError(Exception):
    """Base class for engine errors."""


class InvalidFrequency(HMSBudgetError, ValueError):
    """Raised when a frequency outside the supported cadences is supplied."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Unsupported frequency: {value!r}")
        self.value = value


class UnknownReference(HMSBudgetError, ValueError):
    """Raised when an entity points at an id that was never supplied."""


class NonAmortizing(HMSBudgetError):
    """Payment does not exceed the first period's interest."""


class PayoffHorizonExceeded(HMSBudgetError):
    """Balance remained after the maximum number of simulated periods."""


class DivisionByZeroIncome(HMSBudgetError):
    """A rate was requested while gross income is zero."""


class DiagnosticCode(str, Enum):
    NON_AMORTIZING = "non_amortizing"
    PAYOFF_HORIZON_EXCEEDED = "payoff_horizon_exceeded"
    DIVISION_BY_ZERO_INCOME = "division_by_zero_income"


_EXCEPTIONS: dict[DiagnosticCode, type[HMSBudgetError]] = {
    DiagnosticCode.NON_AMORTIZING: NonAmortizing,
    DiagnosticCode.PAYOFF_HORIZON_EXCEEDED: PayoffHorizonExceeded,
    DiagnosticCode.DIVISION_BY_ZERO_INCOME: DivisionByZeroIncome,
}


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured, non-fatal condition reported alongside a result.

    ``details`` may be passed as a mapping; it is stored as a tuple of
    ``(key, value)`` pairs so diagnostics (and the results carrying them) stay
    hashable.
    """

    code: DiagnosticCode
    message: str
    item_id: int | None = None
    details: tuple[tuple[str, Any], ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.details, Mapping):
            object.__setattr__(self, "details", tuple(self.details.items()))

    def to_exception(self) -> HMSBudgetError:
        return _EXCEPTIONS[self.code](self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "item_id": self.item_id,
            "details": {key: str(value) for key, value in self.details},
        }


__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "DivisionByZeroIncome",
    "HMSBudgetError",
    "InvalidFrequency",
    "NonAmortizing",
    "PayoffHorizonExceeded",
    "UnknownReference",
]

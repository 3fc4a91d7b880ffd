"""Load budget documents (JSON) into validated entities."""

from __future__ import annotations

import json
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable, Mapping, TypeVar

from ..errors import UnknownReference
from ..logging_config import get_logger
from ..models import BudgetEntry, BudgetItem, Category, DebtDetails, SalaryConfig, Scenario

logger = get_logger(__name__)

_T = TypeVar("_T")


@dataclass(frozen=True, slots=True)
class BudgetDocument:
    """Everything the engine needs, with references already resolved by id."""

    salary: SalaryConfig | None
    categories: tuple[Category, ...]
    items: tuple[BudgetItem, ...]
    debts: tuple[DebtDetails, ...]
    scenarios: tuple[Scenario, ...]

    def entries(self) -> list[BudgetEntry]:
        """Join items with their category and debt details, preserving item order."""

        categories = {c.id: c for c in self.categories}
        debts = {d.budget_item_id: d for d in self.debts}
        entries = []
        for item in self.items:
            category = categories.get(item.category_id)
            if category is None:
                raise UnknownReference(
                    f"Item {item.id} references unknown category {item.category_id}"
                )
            entries.append(BudgetEntry(item=item, category=category, debt=debts.get(item.id)))
        return entries

    def scenario(self, scenario_id: int) -> Scenario:
        for scenario in self.scenarios:
            if scenario.id == scenario_id:
                return scenario
        raise UnknownReference(f"Unknown scenario {scenario_id}")

    def debt(self, item_id: int) -> DebtDetails:
        for debt in self.debts:
            if debt.budget_item_id == item_id:
                return debt
        raise UnknownReference(f"Item {item_id} has no debt details")


def _unique(values: Iterable[_T], key: str, label: str) -> tuple[_T, ...]:
    seen: set[Any] = set()
    result = []
    for value in values:
        marker = getattr(value, key)
        if marker in seen:
            raise ValueError(f"Duplicate {label} {key}: {marker!r}")
        seen.add(marker)
        result.append(value)
    return tuple(result)


def parse_budget(data: Mapping[str, Any]) -> BudgetDocument:
    """Validate a decoded budget document.

    Raises ``pydantic.ValidationError`` for invalid fields, ``UnknownReference``
    for dangling category or item references, and ``ValueError`` for duplicates.
    Scenario keys for missing items are kept; evaluation ignores them.
    """

    salary_data = data.get("salary")
    salary = SalaryConfig.model_validate(salary_data) if salary_data else None
    categories = _unique(
        (Category.model_validate(c) for c in data.get("categories", [])), "id", "category"
    )
    _unique(categories, "name", "category")
    items = _unique((BudgetItem.model_validate(i) for i in data.get("items", [])), "id", "item")
    debts = _unique(
        (DebtDetails.model_validate(d) for d in data.get("debts", [])), "budget_item_id", "debt"
    )
    scenarios = _unique(
        (Scenario.model_validate(s) for s in data.get("scenarios", [])), "id", "scenario"
    )

    item_ids = {item.id for item in items}
    for debt in debts:
        if debt.budget_item_id not in item_ids:
            raise UnknownReference(f"Debt details reference unknown item {debt.budget_item_id}")

    document = BudgetDocument(
        salary=salary,
        categories=categories,
        items=items,
        debts=debts,
        scenarios=scenarios,
    )
    # Resolve once so dangling category references fail at load time.
    document.entries()
    logger.debug(
        "Parsed budget document",
        extra={"items": len(items), "debts": len(debts), "scenarios": len(scenarios)},
    )
    return document


def load_budget(path: Path | str) -> BudgetDocument:
    """Read a JSON budget document from ``path``; numbers are parsed as Decimal."""

    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh, parse_float=Decimal)
    if not isinstance(data, Mapping):
        raise ValueError(f"{path} does not contain a JSON object")
    logger.info("Loaded budget document", extra={"path": str(path)})
    return parse_budget(data)

"""Command line interface for the projection engine."""

from __future__ import annotations

import json
from itertools import islice
from decimal import Decimal, InvalidOperation
from pathlib import Path

import click
from pydantic import ValidationError

from .config import get_config
from .errors import HMSBudgetError
from .logging_config import setup_logging
from .services.amortization import amortize
from .services.export_csv import export_reports_csv, export_schedule_csv
from .services.loader import BudgetDocument, load_budget
from .services.payoff_plan import STRATEGIES, plan_payoff
from .services.reports import export_payoff_png
from .services.scenarios import ScenarioReport, compare, evaluate


class DecimalParamType(click.ParamType):
    name = "amount"

    def convert(self, value, param, ctx):
        if isinstance(value, Decimal):
            return value
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            self.fail(f"{value!r} is not a valid amount", param, ctx)
        if not amount.is_finite():
            self.fail(f"{value!r} is not a finite amount", param, ctx)
        return amount


DECIMAL = DecimalParamType()


def _load(path: Path) -> BudgetDocument:
    try:
        return load_budget(path)
    except (ValidationError, HMSBudgetError, ValueError) as exc:
        raise click.ClickException(f"Invalid budget document {path}: {exc}") from exc


def _lookup(getter, key: int):
    try:
        return getter(key)
    except HMSBudgetError as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_report(report: ScenarioReport, label: str) -> None:
    click.echo(f"{label} (per {report.period.value} period, {report.currency})")
    click.echo(f"  gross income:   {report.gross_income:>12}")
    click.echo(f"  expenses:       {report.expense_total:>12}")
    click.echo(f"  debts:          {report.debt_total:>12}")
    click.echo(f"  subscriptions:  {report.subscription_total:>12}")
    click.echo(f"  net per period: {report.net_per_period:>12}")
    click.echo(f"  savings rate:   {report.savings_rate:>12}")
    for diagnostic in report.diagnostics:
        click.echo(f"  warning: {diagnostic.message}", err=True)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output")
@click.version_option(package_name="hmsbudget")
def main(verbose: bool) -> None:
    """Budget what-if projections."""

    setup_logging(get_config(), verbose=verbose)


@main.command("evaluate")
@click.argument("budget", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--scenario", "scenario_id", type=int, default=None, help="Scenario id to apply")
@click.option("--all", "all_scenarios", is_flag=True, default=False, help="Evaluate every scenario")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON")
@click.option(
    "--csv", "csv_path", type=click.Path(dir_okay=False, path_type=Path), default=None,
    help="Also write the reports to CSV",
)
def evaluate_command(
    budget: Path, scenario_id: int | None, all_scenarios: bool, as_json: bool, csv_path: Path | None
) -> None:
    """Print per-period totals for the default item states or a scenario."""

    document = _load(budget)
    entries = document.entries()
    if all_scenarios:
        scenarios = [None, *document.scenarios]
    elif scenario_id is not None:
        scenarios = [_lookup(document.scenario, scenario_id)]
    else:
        scenarios = [None]

    reports = [evaluate(entries, document.salary, scenario) for scenario in scenarios]
    if as_json:
        click.echo(json.dumps([report.to_dict() for report in reports], indent=2))
    else:
        for scenario, report in zip(scenarios, reports):
            _echo_report(report, scenario.name if scenario else "Current budget")
    if csv_path is not None:
        export_reports_csv(reports=reports, output_path=csv_path)
        click.echo(f"Reports written: {csv_path}")


@main.command("compare")
@click.argument("budget", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("scenario_id", type=int)
@click.option("--baseline", "baseline_id", type=int, default=None, help="Baseline scenario id")
def compare_command(budget: Path, scenario_id: int, baseline_id: int | None) -> None:
    """Show how a scenario changes the totals relative to a baseline."""

    document = _load(budget)
    scenario = _lookup(document.scenario, scenario_id)
    baseline = _lookup(document.scenario, baseline_id) if baseline_id is not None else None
    result = compare(document.entries(), document.salary, scenario, baseline)

    click.echo(f"{scenario.name} vs {baseline.name if baseline else 'current budget'}")
    for name, delta in result.deltas.items():
        click.echo(f"  {name:<20} {delta:+}")
    if result.switched_on:
        click.echo(f"  switched on:  {', '.join(map(str, result.switched_on))}")
    if result.switched_off:
        click.echo(f"  switched off: {', '.join(map(str, result.switched_off))}")


@main.command("payoff")
@click.argument("budget", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("item_id", type=int)
@click.option("--payment", type=DECIMAL, default=None, help="Monthly payment override")
@click.option("--months", type=int, default=None, help="Only show the first N months")
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.option("--chart", "chart_path", type=click.Path(dir_okay=False, path_type=Path), default=None)
def payoff_command(
    budget: Path,
    item_id: int,
    payment: Decimal | None,
    months: int | None,
    csv_path: Path | None,
    chart_path: Path | None,
) -> None:
    """Project the payoff schedule of one debt."""

    document = _load(budget)
    debt = _lookup(document.debt, item_id)
    try:
        schedule = amortize(debt, payment)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    projection = schedule.project()
    click.echo(f"Debt {item_id}: {projection.status.value}")
    for diagnostic in projection.diagnostics:
        click.echo(f"  warning: {diagnostic.message}", err=True)
    if projection.is_paid_off:
        click.echo(f"  periods:        {projection.periods}")
        click.echo(f"  total interest: {projection.total_interest}")
        click.echo(f"  payoff date:    {projection.payoff_date}")
    if projection.meets_target is not None:
        click.echo(f"  meets target:   {'yes' if projection.meets_target else 'no'}")

    if months is None:
        dated = list(schedule.dated())
    else:
        dated = list(islice(schedule.dated(), max(months, 0)))
        for due_date, row in dated:
            click.echo(
                f"  {row.period_index:>4} {due_date}  paid {row.payment:>10}  "
                f"interest {row.interest_accrued:>8}  balance {row.remaining_balance:>10}"
            )
    if csv_path is not None:
        export_schedule_csv(rows=dated, output_path=csv_path)
        click.echo(f"Schedule written: {csv_path}")
    if chart_path is not None:
        export_payoff_png(rows=dated, output_path=chart_path, title=f"Debt {item_id} payoff")
        click.echo(f"Chart written: {chart_path}")


@main.command("plan")
@click.argument("budget", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strategy", type=click.Choice(sorted(STRATEGIES)), default=None)
@click.option("--extra", type=DECIMAL, default="0", help="Extra monthly payment")
def plan_command(budget: Path, strategy: str | None, extra: Decimal) -> None:
    """Plan paying off every debt together with avalanche or snowball ordering."""

    document = _load(budget)
    try:
        plan = plan_payoff(document.debts, strategy=strategy, extra_payment=extra)
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"Strategy {plan.strategy}: {plan.status.value}")
    for diagnostic in plan.diagnostics:
        click.echo(f"  warning: {diagnostic.message}", err=True)
    click.echo(f"  order:          {', '.join(map(str, plan.order))}")
    click.echo(f"  months:         {plan.periods}")
    click.echo(f"  total interest: {plan.total_interest}")
    for item_id, period in sorted(plan.payoff_periods.items()):
        click.echo(f"  debt {item_id} cleared in month {period}")


if __name__ == "__main__":  # pragma: no cover
    main()

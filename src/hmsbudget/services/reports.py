"""Payoff chart rendering for exported reports."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterable

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import matplotlib.ticker as mticker
from matplotlib.figure import Figure

from .amortization import AmortizationRow


def build_payoff_chart(
    rows: Iterable[tuple[date, AmortizationRow] | AmortizationRow],
    *,
    title: str = "Debt Payoff Projection",
    currency_symbol: str = "$",
) -> Figure:
    """Plot remaining balance per period; dated rows label the x-axis with dates."""

    labels: list[str] = []
    balances: list[float] = []
    for entry in rows:
        due_date, row = entry if isinstance(entry, tuple) else (None, entry)
        labels.append(due_date.isoformat() if due_date else f"P{row.period_index}")
        balances.append(float(row.remaining_balance))

    fig, ax = plt.subplots(figsize=(10, 6))

    if balances:
        x_vals = list(range(len(balances)))
        ax.plot(x_vals, balances, marker="o", color="#4F46E5", linewidth=2.0, markersize=4)
        ax.fill_between(x_vals, balances, color="#E0E7FF", alpha=0.5)

        if balances[-1] == 0:
            ax.scatter([x_vals[-1]], [0], s=120, c="gold", marker="*", zorder=5)
            ax.annotate(
                "Paid off",
                (x_vals[-1], 0),
                xytext=(0, 20),
                textcoords="offset points",
                ha="center",
                fontsize=10,
                color="#16A34A",
            )

        ax.grid(True, linestyle="--", alpha=0.3)
        ax.set_axisbelow(True)
        ax.set_title(title, fontsize=14, fontweight="bold", pad=15)
        ax.set_ylabel("Remaining Balance", fontsize=11)
        ax.set_xlabel("Period", fontsize=11)

        tick_step = max(1, len(x_vals) // 8)
        ax.set_xticks(x_vals[::tick_step])
        ax.set_xticklabels(labels[::tick_step], rotation=45, ha="right")
        ax.yaxis.set_major_formatter(
            mticker.FuncFormatter(lambda value, _pos: f"{currency_symbol}{value:,.0f}")
        )
    else:
        ax.text(0.5, 0.5, "No payoff schedule", ha="center", va="center", fontsize=14, color="#666")
        ax.axis("off")

    fig.tight_layout()
    return fig


def export_payoff_png(
    *,
    rows: Iterable[tuple[date, AmortizationRow] | AmortizationRow],
    output_path: Path,
    title: str = "Debt Payoff Projection",
) -> Path:
    """Render the payoff chart to PNG and return the path."""

    fig = build_payoff_chart(rows, title=title)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        fig.savefig(output_path, bbox_inches="tight", dpi=100)
    finally:
        plt.close(fig)
    return output_path

"""Monthly progress chart rendering."""

from __future__ import annotations

import io
from typing import Sequence

import matplotlib

matplotlib.use("Agg")
import matplotlib.ticker as mticker
from matplotlib.figure import Figure

from .aggregator import DailyStat, summarize_progress

LINE_COLOR = "#a855f7"
FILL_COLOR = "#8b5cf6"
MUTED_COLOR = "#71717a"


def build_progress_chart(
    daily_stats: Sequence[DailyStat], current_day: int, *, title: str = "Monthly Progress"
) -> Figure:
    """Create an area chart of the daily completion percentage.

    Only days up to ``current_day`` are drawn; the footer repeats the
    completed / perfect / missed totals for those days.
    """

    summary = summarize_progress(daily_stats, current_day)
    # pyplot keeps global state, a bare Figure is safe inside request threads
    fig = Figure(figsize=(8, 3.5))
    ax = fig.subplots()

    if summary.total_possible == 0:
        ax.text(
            0.5,
            0.5,
            "No progress to show yet",
            ha="center",
            va="center",
            fontsize=12,
            color=MUTED_COLOR,
        )
        ax.axis("off")
        fig.suptitle(title, fontsize=13, fontweight="bold")
        return fig

    days = [day for day, _ in summary.percentages]
    values = [pct for _, pct in summary.percentages]

    ax.plot(days, values, color=LINE_COLOR, linewidth=2)
    ax.fill_between(days, values, color=FILL_COLOR, alpha=0.15)
    ax.set_ylim(0, 100)
    ax.set_xlim(1, max(len(daily_stats), days[-1]))
    ax.yaxis.set_major_locator(mticker.FixedLocator([0, 50, 100]))
    ax.xaxis.set_major_locator(mticker.MultipleLocator(5))
    ax.grid(True, axis="y", linestyle="--", alpha=0.3)
    ax.set_axisbelow(True)
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)

    fig.suptitle(
        f"{title}  {summary.overall_percentage}%", fontsize=13, fontweight="bold"
    )
    fig.text(
        0.5,
        0.01,
        f"{summary.total_completions} completed   "
        f"{summary.perfect_days} perfect days   "
        f"{summary.missed} missed",
        ha="center",
        fontsize=9,
        color=MUTED_COLOR,
    )
    fig.subplots_adjust(bottom=0.18)
    return fig


def progress_chart_png(
    daily_stats: Sequence[DailyStat], current_day: int, *, title: str = "Monthly Progress"
) -> bytes:
    """Render ``build_progress_chart`` to PNG bytes."""

    fig = build_progress_chart(daily_stats, current_day, title=title)
    buffer = io.BytesIO()
    fig.savefig(buffer, format="png", dpi=100)
    return buffer.getvalue()


__all__ = ["build_progress_chart", "progress_chart_png"]

"""Monthly habit aggregation: daily counts, completion rate, perfect days and streaks.

Every function here is pure. Callers fetch the user's actions and the
``completed = true`` records for one (year, month) and hand over plain
identifiers:

* ``habits`` is any iterable of action ids.
* ``completions`` is an iterable of ``(action_id, day)`` pairs.

Completions that reference an action outside ``habits`` or a day outside the
evaluated range are ignored, and duplicate pairs count once.
"""

from __future__ import annotations

import calendar
import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Hashable, Iterable, Sequence

from ..errors import FutureDateError

CompletionPair = tuple[Hashable, int]


@dataclass(frozen=True, slots=True)
class DailyStat:
    """Completed vs. total actions for one day of the month."""

    day: int
    completed: int
    total: int


@dataclass(frozen=True, slots=True)
class UserStats:
    """Dashboard numbers for one month."""

    total_days_tracked: int
    overall_completion: int
    current_streak: int
    perfect_days: int


@dataclass(frozen=True, slots=True)
class ProgressSummary:
    """Figures shown under the progress chart for the visible part of a month."""

    current_day: int
    total_completions: int
    total_possible: int
    missed: int
    overall_percentage: int
    perfect_days: int
    percentages: tuple[tuple[int, int], ...]


def round_half_up(value: float) -> int:
    """Round to the nearest integer with ties going up (12.5 -> 13).

    ``round()`` uses banker's rounding and would turn 12.5 into 12.
    """

    return int(math.floor(value + 0.5))


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in ``month``; raises ``ValueError`` for month outside 1-12."""

    return calendar.monthrange(year, month)[1]


def is_future_month(year: int, month: int, today: date) -> bool:
    return (year, month) > (today.year, today.month)


def is_future_day(year: int, month: int, day: int, today: date) -> bool:
    """True while (year, month, day) is strictly after ``today``."""

    return (year, month, day) > (today.year, today.month, today.day)


def reference_day_for(year: int, month: int, today: date) -> int:
    """Last day of ``month`` that counts as elapsed relative to ``today``.

    The current month yields today's day-of-month, a past month its full
    length. Future months have no elapsed days and raise ``FutureDateError``.
    """

    if is_future_month(year, month, today):
        raise FutureDateError(f"{year}-{month:02d} has not started yet.")
    if (year, month) == (today.year, today.month):
        return today.day
    return days_in_month(year, month)


def _completed_by_day(
    habits: set[Hashable], completions: Iterable[CompletionPair], last_day: int
) -> dict[int, int]:
    done: dict[int, set[Hashable]] = defaultdict(set)
    for habit_id, day in completions:
        if habit_id in habits and 1 <= day <= last_day:
            done[day].add(habit_id)
    return {day: len(ids) for day, ids in done.items()}


def compute_daily_stats(
    habits: Iterable[Hashable],
    completions: Iterable[CompletionPair],
    days_in_month: int,
) -> list[DailyStat]:
    """Return one ``DailyStat`` per day of the month, ascending.

    ``total`` is the current action count for every day; actions created
    mid-month are counted for the whole month.
    """

    habit_ids = set(habits)
    counts = _completed_by_day(habit_ids, completions, days_in_month)
    total = len(habit_ids)
    return [
        DailyStat(day=day, completed=counts.get(day, 0), total=total)
        for day in range(1, days_in_month + 1)
    ]


def compute_overall_stats(
    habits: Iterable[Hashable],
    completions: Iterable[CompletionPair],
    reference_day: int,
) -> UserStats:
    """Aggregate days ``1..reference_day`` into ``UserStats``.

    * ``total_days_tracked`` is ``reference_day`` even with no actions: it
      measures elapsed time in the month, not days with habits.
    * ``overall_completion`` is the rounded share of possible check-offs that
      were done; 0 when nothing was possible.
    * ``perfect_days`` counts days where every action was completed.
    * ``current_streak`` walks back from ``reference_day`` and stops at the
      first day with no completion at all. A partial day keeps the streak.
    """

    habit_ids = set(habits)
    habit_count = len(habit_ids)
    counts = _completed_by_day(habit_ids, completions, reference_day)

    possible = reference_day * habit_count
    if possible > 0:
        overall = round_half_up(100 * sum(counts.values()) / possible)
    else:
        overall = 0

    perfect_days = 0
    if habit_count > 0:
        perfect_days = sum(
            1 for day in range(1, reference_day + 1) if counts.get(day, 0) == habit_count
        )

    streak = 0
    for day in range(reference_day, 0, -1):
        if counts.get(day, 0) == 0:
            break
        streak += 1

    return UserStats(
        total_days_tracked=reference_day,
        overall_completion=overall,
        current_streak=streak,
        perfect_days=perfect_days,
    )


def habit_completion_rate(completed_days: Iterable[int], days_in_month: int) -> int:
    """Share of the whole month one habit was completed, as a rounded percentage.

    Days outside ``1..days_in_month`` are ignored and repeated days count once.
    """

    if days_in_month <= 0:
        return 0
    done = {day for day in completed_days if 1 <= day <= days_in_month}
    return round_half_up(100 * len(done) / days_in_month)


def summarize_progress(daily_stats: Sequence[DailyStat], current_day: int) -> ProgressSummary:
    """Summarize the days up to ``current_day`` for the chart footer.

    Pass ``current_day=0`` for a future month: nothing is visible yet.
    """

    visible = [stat for stat in daily_stats if stat.day <= current_day]
    percentages = tuple(
        (stat.day, round_half_up(100 * stat.completed / stat.total) if stat.total > 0 else 0)
        for stat in visible
    )
    total_completions = sum(stat.completed for stat in visible)
    total_possible = sum(stat.total for stat in visible)
    overall = round_half_up(100 * total_completions / total_possible) if total_possible > 0 else 0

    return ProgressSummary(
        current_day=current_day,
        total_completions=total_completions,
        total_possible=total_possible,
        missed=total_possible - total_completions,
        overall_percentage=overall,
        perfect_days=sum(1 for _, pct in percentages if pct == 100),
        percentages=percentages,
    )


__all__ = [
    "DailyStat",
    "ProgressSummary",
    "UserStats",
    "compute_daily_stats",
    "compute_overall_stats",
    "days_in_month",
    "habit_completion_rate",
    "is_future_day",
    "is_future_month",
    "reference_day_for",
    "round_half_up",
    "summarize_progress",
]

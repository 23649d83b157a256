"""Action tracker service: the calling surface around the record store.

Validates calendar input, rejects edits to future days before any store call,
and turns SQLAlchemy failures into ``StoreError`` with a readable message.
"""

from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional

from ..domain.repositories.action import ActionRepository
from ..errors import FutureDateError, NotFoundError
from ..infra.database import store_errors
from ..logging_config import get_logger
from ..models.action import Action, ActionCompletion
from .aggregator import (
    DailyStat,
    ProgressSummary,
    UserStats,
    compute_daily_stats,
    compute_overall_stats,
    days_in_month,
    habit_completion_rate,
    is_future_day,
    is_future_month,
    reference_day_for,
    summarize_progress,
)

logger = get_logger("services.tracker")

MAX_TITLE_LENGTH = 100
MAX_NOTE_LENGTH = 500


@dataclass(frozen=True, slots=True)
class ActionWithCompletions:
    """An action plus the days of the month it was completed.

    ``completion_rate`` is measured against the full month length, so it only
    reaches 100 once every day of the month is checked off.
    """

    id: int
    title: str
    created_at: datetime
    completions: tuple[int, ...]
    completion_rate: int = 0

    @property
    def is_perfect(self) -> bool:
        return self.completion_rate == 100


@dataclass(frozen=True, slots=True)
class MonthView:
    """Everything the tracker screen needs for one month."""

    year: int
    month: int
    days_in_month: int
    is_future_month: bool
    current_day: int
    actions: list[ActionWithCompletions]
    daily_stats: list[DailyStat]
    summary: ProgressSummary


def _check_month(month: int) -> None:
    if not 1 <= month <= 12:
        raise ValueError("Month must be between 1 and 12.")


def clean_title(title: str) -> str:
    """Strip ``title`` and enforce the stored length limits."""

    cleaned = (title or "").strip()
    if not cleaned:
        raise ValueError("Please provide a habit title.")
    if len(cleaned) > MAX_TITLE_LENGTH:
        raise ValueError(f"Habit titles are limited to {MAX_TITLE_LENGTH} characters.")
    return cleaned


class ActionTracker:
    """Coordinates action CRUD, completion toggles and monthly statistics."""

    def __init__(self, repo: ActionRepository, *, clock: Callable[[], date] = date.today):
        self.repo = repo
        self._clock = clock

    def today(self) -> date:
        return self._clock()

    def _fetch_month(
        self, user_id: int, year: int, month: int
    ) -> tuple[list[Action], list[ActionCompletion]]:
        _check_month(month)
        with store_errors("load habits", logger):
            actions = self.repo.list_actions(user_id=user_id)
            action_ids = [action.id for action in actions if action.id is not None]
            completions = self.repo.list_completions(action_ids, year, month, completed=True)
        return actions, completions

    # Queries

    def get_actions_with_completions(
        self, user_id: int, year: int, month: int
    ) -> list[ActionWithCompletions]:
        actions, completions = self._fetch_month(user_id, year, month)
        month_length = days_in_month(year, month)
        days_by_action: dict[int, set[int]] = defaultdict(set)
        for completion in completions:
            days_by_action[completion.action_id].add(completion.day)

        result = []
        for action in actions:
            if action.id is None:
                continue
            days = days_by_action.get(action.id, set())
            result.append(
                ActionWithCompletions(
                    id=action.id,
                    title=action.title,
                    created_at=action.created_at,
                    completions=tuple(sorted(days)),
                    completion_rate=habit_completion_rate(days, month_length),
                )
            )
        return result

    def get_monthly_stats(self, user_id: int, year: int, month: int) -> list[DailyStat]:
        actions, completions = self._fetch_month(user_id, year, month)
        return compute_daily_stats(
            (action.id for action in actions),
            ((c.action_id, c.day) for c in completions),
            days_in_month(year, month),
        )

    def get_user_stats(
        self, user_id: int, year: Optional[int] = None, month: Optional[int] = None
    ) -> UserStats:
        """Dashboard stats for a month, the current one by default.

        Raises ``FutureDateError`` for a month that has not started.
        """
        today = self.today()
        if year is None:
            year = today.year
        if month is None:
            month = today.month
        _check_month(month)
        reference_day = reference_day_for(year, month, today)
        actions, completions = self._fetch_month(user_id, year, month)
        return compute_overall_stats(
            (action.id for action in actions),
            ((c.action_id, c.day) for c in completions),
            reference_day,
        )

    def load_month(self, user_id: int, year: int, month: int) -> MonthView:
        """Fetch actions and daily stats side by side and join them."""
        _check_month(month)
        today = self.today()
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="hustle-month") as pool:
            actions_future = pool.submit(self.get_actions_with_completions, user_id, year, month)
            stats_future = pool.submit(self.get_monthly_stats, user_id, year, month)
            actions = actions_future.result()
            daily_stats = stats_future.result()

        future_month = is_future_month(year, month, today)
        current_day = 0 if future_month else reference_day_for(year, month, today)
        return MonthView(
            year=year,
            month=month,
            days_in_month=days_in_month(year, month),
            is_future_month=future_month,
            current_day=current_day,
            actions=actions,
            daily_stats=daily_stats,
            summary=summarize_progress(daily_stats, current_day),
        )

    # Commands

    def add_action(self, user_id: int, title: str) -> Action:
        cleaned = clean_title(title)
        with store_errors("add habit", logger):
            action = self.repo.create_action(cleaned, user_id=user_id)
        logger.info("Created action", extra={"user_id": user_id, "action_id": action.id})
        return action

    def delete_action(self, user_id: int, action_id: int) -> None:
        with store_errors("delete habit", logger):
            deleted = self.repo.delete_action(action_id, user_id=user_id)
        if not deleted:
            raise NotFoundError("Habit not found")

    def guard_day(self, year: int, month: int, day: int) -> None:
        """Reject impossible dates and days strictly after today."""
        _check_month(month)
        last_day = days_in_month(year, month)
        if not 1 <= day <= last_day:
            raise ValueError(f"Day must be between 1 and {last_day}.")
        if is_future_day(year, month, day, self.today()):
            raise FutureDateError("You can't edit future days.")

    def toggle_day(self, user_id: int, action_id: int, year: int, month: int, day: int) -> bool:
        """Toggle one day's completion and return the confirmed new state."""
        self.guard_day(year, month, day)
        with store_errors("toggle day", logger):
            if self.repo.get_action(action_id, user_id=user_id) is None:
                raise NotFoundError("Habit not found")
            completed = self.repo.toggle_completion(
                action_id, year, month, day, user_id=user_id
            )
        logger.info(
            "Toggled completion",
            extra={"action_id": action_id, "date": f"{year}-{month:02d}-{day:02d}", "completed": completed},
        )
        return completed

    def set_note(
        self, user_id: int, action_id: int, year: int, month: int, day: int, note: str | None
    ) -> ActionCompletion:
        self.guard_day(year, month, day)
        cleaned = (note or "").strip() or None
        if cleaned and len(cleaned) > MAX_NOTE_LENGTH:
            raise ValueError(f"Notes are limited to {MAX_NOTE_LENGTH} characters.")
        with store_errors("save note", logger):
            if self.repo.get_action(action_id, user_id=user_id) is None:
                raise NotFoundError("Habit not found")
            return self.repo.set_note(action_id, year, month, day, cleaned, user_id=user_id)


__all__ = ["ActionTracker", "ActionWithCompletions", "MonthView", "clean_title"]

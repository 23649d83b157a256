"""Tests for the monthly aggregation: daily counts, completion rate, perfect days, streaks."""

from __future__ import annotations

from datetime import date

import pytest

from hustle.errors import FutureDateError
from hustle.services.aggregator import (
    DailyStat,
    compute_daily_stats,
    compute_overall_stats,
    days_in_month,
    habit_completion_rate,
    is_future_day,
    is_future_month,
    reference_day_for,
    round_half_up,
    summarize_progress,
)

TODAY = date(2025, 3, 10)


class TestDailyStats:
    """Per-day completed/total counts used by the chart."""

    @pytest.mark.parametrize("month_length", [28, 29, 30, 31])
    @pytest.mark.parametrize("habit_count", [0, 1, 3])
    def test_one_entry_per_day_with_constant_total(self, month_length, habit_count):
        habits = list(range(habit_count))
        stats = compute_daily_stats(habits, [], month_length)

        assert [s.day for s in stats] == list(range(1, month_length + 1))
        assert all(s.total == habit_count for s in stats)

    def test_counts_distinct_habits_per_day(self):
        completions = [(1, 1), (2, 1), (1, 1), (1, 2)]

        stats = compute_daily_stats([1, 2], completions, 30)

        assert stats[0] == DailyStat(day=1, completed=2, total=2)
        assert stats[1] == DailyStat(day=2, completed=1, total=2)
        assert all(s.completed == 0 for s in stats[2:])

    def test_ignores_unknown_habits_and_days_outside_month(self):
        completions = [(9, 1), (1, 0), (1, 31)]

        stats = compute_daily_stats([1], completions, 30)

        assert sum(s.completed for s in stats) == 0

    def test_new_habit_without_completions(self):
        stats = compute_daily_stats(["read"], [], 30)

        assert all((s.completed, s.total) == (0, 1) for s in stats)


class TestOverallStats:
    """Completion rate, perfect days and the current streak."""

    def test_documented_scenario(self):
        """2 habits; day 1 both, day 2 one, days 3-10 none."""
        completions = [(1, 1), (2, 1), (1, 2)]

        stats = compute_overall_stats([1, 2], completions, reference_day=10)

        assert stats.total_days_tracked == 10
        assert stats.perfect_days == 1
        assert stats.current_streak == 0
        assert stats.overall_completion == 15

    def test_partial_days_keep_the_streak(self):
        completions = [(1, 8), (1, 9), (1, 10)]

        stats = compute_overall_stats([1, 2], completions, reference_day=10)

        assert stats.current_streak == 3
        assert stats.perfect_days == 0

    def test_streak_stops_at_first_empty_day(self):
        completions = [(1, 10), (1, 9), (1, 7), (1, 6)]

        stats = compute_overall_stats([1], completions, reference_day=10)

        assert stats.current_streak == 2

    def test_streak_is_zero_when_reference_day_is_empty(self):
        completions = [(1, day) for day in range(1, 10)]

        stats = compute_overall_stats([1], completions, reference_day=10)

        assert stats.current_streak == 0

    def test_zero_habits_still_reports_elapsed_days(self):
        stats = compute_overall_stats([], [], reference_day=12)

        assert stats.total_days_tracked == 12
        assert stats.overall_completion == 0
        assert stats.current_streak == 0
        assert stats.perfect_days == 0

    def test_zero_reference_day(self):
        stats = compute_overall_stats([1], [(1, 1)], reference_day=0)

        assert stats.overall_completion == 0
        assert stats.perfect_days == 0
        assert stats.current_streak == 0

    def test_completions_after_reference_day_are_ignored(self):
        stats = compute_overall_stats([1], [(1, 6)], reference_day=5)

        assert stats.overall_completion == 0
        assert stats.current_streak == 0

    def test_every_habit_every_day(self):
        habits = [1, 2, 3]
        completions = [(h, d) for h in habits for d in range(1, 29)]

        stats = compute_overall_stats(habits, completions, reference_day=28)

        assert stats.overall_completion == 100
        assert stats.perfect_days == 28
        assert stats.current_streak == 28

    @pytest.mark.parametrize(
        "habit_count, expected",
        [
            (8, 13),  # 12.5 rounds up, not to even
            (40, 3),  # 2.5
            (3, 33),  # 33.3
            (6, 17),  # 16.7
        ],
    )
    def test_completion_rounds_half_up(self, habit_count, expected):
        stats = compute_overall_stats(range(habit_count), [(0, 1)], reference_day=1)

        assert stats.overall_completion == expected

    def test_bounds_hold_for_mixed_history(self):
        habits = [1, 2, 3]
        completions = [(h, d) for h in habits for d in range(1, 20) if (h + d) % 2 == 0]

        stats = compute_overall_stats(habits, completions, reference_day=19)

        assert 0 <= stats.overall_completion <= 100
        assert stats.perfect_days <= 19


class TestCalendarHelpers:
    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(14.49) == 14
        assert round_half_up(15.0) == 15

    def test_days_in_month_handles_leap_years(self):
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2025, 2) == 28
        with pytest.raises(ValueError):
            days_in_month(2025, 13)

    def test_reference_day_for_current_month_is_today(self):
        assert reference_day_for(2025, 3, TODAY) == 10

    def test_reference_day_for_past_month_is_full_length(self):
        assert reference_day_for(2025, 2, TODAY) == 28
        assert reference_day_for(2024, 12, TODAY) == 31

    def test_reference_day_for_future_month_raises(self):
        with pytest.raises(FutureDateError):
            reference_day_for(2025, 4, TODAY)

    @pytest.mark.parametrize(
        "year, month, day, expected",
        [
            (2025, 3, 10, False),
            (2025, 3, 11, True),
            (2025, 4, 1, True),
            (2024, 12, 31, False),
            (2026, 1, 1, True),
        ],
    )
    def test_is_future_day(self, year, month, day, expected):
        assert is_future_day(year, month, day, TODAY) is expected

    def test_is_future_month(self):
        assert is_future_month(2025, 4, TODAY)
        assert not is_future_month(2025, 3, TODAY)
        assert not is_future_month(2024, 11, TODAY)


class TestHabitCompletionRate:
    @pytest.mark.parametrize(
        "days, month_length, expected",
        [
            ([1], 8, 13),  # 12.5 rounds up
            ([1, 2, 3], 8, 38),  # 37.5 rounds up
            ([1], 31, 3),
            ([1], 30, 3),
            (range(1, 29), 28, 100),
            ([], 31, 0),
        ],
    )
    def test_rate_against_the_whole_month(self, days, month_length, expected):
        assert habit_completion_rate(days, month_length) == expected

    def test_repeated_and_out_of_range_days_are_ignored(self):
        assert habit_completion_rate([1, 1, 2, 0, 32], 31) == 6

    def test_empty_month(self):
        assert habit_completion_rate([1], 0) == 0


class TestProgressSummary:
    def test_summarizes_visible_days_only(self):
        daily = compute_daily_stats([1, 2], [(1, 1), (2, 1), (1, 2), (1, 5)], 31)

        summary = summarize_progress(daily, current_day=3)

        assert summary.percentages == ((1, 100), (2, 50), (3, 0))
        assert summary.total_completions == 3
        assert summary.total_possible == 6
        assert summary.missed == 3
        assert summary.overall_percentage == 50
        assert summary.perfect_days == 1

    def test_future_month_shows_nothing(self):
        daily = compute_daily_stats([1], [], 30)

        summary = summarize_progress(daily, current_day=0)

        assert summary.percentages == ()
        assert summary.overall_percentage == 0
        assert summary.missed == 0

    def test_no_habits_means_no_perfect_days(self):
        daily = compute_daily_stats([], [], 30)

        summary = summarize_progress(daily, current_day=10)

        assert summary.perfect_days == 0
        assert summary.overall_percentage == 0

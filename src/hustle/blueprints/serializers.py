"""JSON payload builders shared by the blueprints."""

from __future__ import annotations

from dataclasses import asdict
from datetime import datetime
from typing import Any, Optional

from ..models.action import Action, ActionCompletion
from ..models.profile import UserProfile
from ..models.user import User
from ..services.aggregator import ProgressSummary, UserStats
from ..services.tracker import ActionWithCompletions, MonthView


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def user_payload(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "created_at": _iso(user.created_at),
        "last_sign_in": _iso(user.last_sign_in),
    }


def action_payload(action: Action | ActionWithCompletions) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "id": action.id,
        "title": action.title,
        "created_at": _iso(action.created_at),
    }
    if isinstance(action, ActionWithCompletions):
        payload["completions"] = list(action.completions)
        payload["completion_rate"] = action.completion_rate
        payload["is_perfect"] = action.is_perfect
    return payload


def completion_payload(record: ActionCompletion) -> dict[str, Any]:
    return {
        "action_id": record.action_id,
        "year": record.year,
        "month": record.month,
        "day": record.day,
        "completed": record.completed,
        "notes": record.notes,
    }


def summary_payload(summary: ProgressSummary) -> dict[str, Any]:
    payload = asdict(summary)
    payload["percentages"] = [
        {"day": day, "percentage": pct} for day, pct in summary.percentages
    ]
    return payload


def month_payload(view: MonthView) -> dict[str, Any]:
    return {
        "year": view.year,
        "month": view.month,
        "days_in_month": view.days_in_month,
        "is_future_month": view.is_future_month,
        "current_day": view.current_day,
        "actions": [action_payload(action) for action in view.actions],
        "daily_stats": [asdict(stat) for stat in view.daily_stats],
        "summary": summary_payload(view.summary),
    }


def stats_payload(stats: UserStats) -> dict[str, Any]:
    return asdict(stats)


def profile_payload(profile: Optional[UserProfile]) -> dict[str, Any]:
    if profile is None:
        return {"onboarding_completed": False}
    return {
        "role": profile.role,
        "activities": list(profile.activities or []),
        "platforms": profile.platforms,
        "onboarding_completed": profile.onboarding_completed,
        "onboarding_completed_at": _iso(profile.onboarding_completed_at),
    }

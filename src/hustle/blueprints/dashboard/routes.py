"""Dashboard routes: headline stats and the progress chart."""

from __future__ import annotations

import calendar

from flask import Response, jsonify

from ...extensions import current_user, get_context, login_required, month_from_request
from ...services.aggregator import is_future_month, reference_day_for
from ...services.charts import progress_chart_png
from ..serializers import stats_payload
from . import bp


@bp.get("/stats")
@login_required
def stats():
    """Streak, completion rate and perfect days for the current month."""

    tracker = get_context().tracker
    return jsonify(stats_payload(tracker.get_user_stats(current_user().id)))


@bp.get("/chart.png")
@login_required
def chart():
    tracker = get_context().tracker
    today = tracker.today()
    year, month = month_from_request(today)
    daily_stats = tracker.get_monthly_stats(current_user().id, year, month)
    current_day = 0 if is_future_month(year, month, today) else reference_day_for(year, month, today)
    png = progress_chart_png(
        daily_stats, current_day, title=f"{calendar.month_name[month]} {year}"
    )
    return Response(png, mimetype="image/png")

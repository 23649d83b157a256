"""Action routes: monthly tracker view, CRUD and day toggles."""

from __future__ import annotations

from flask import jsonify, request

from ...errors import FutureDateError
from ...extensions import current_user, get_context, login_required, month_from_request
from ...services.aggregator import is_future_month
from ..serializers import action_payload, completion_payload, month_payload
from ..validation import load_form
from . import bp
from .forms import ActionForm, DayForm, NoteForm


@bp.get("/")
@login_required
def month_view():
    """Actions with their completed days plus daily stats for one month."""

    tracker = get_context().tracker
    year, month = month_from_request(tracker.today())
    view = tracker.load_month(current_user().id, year, month)
    return jsonify(month_payload(view))


@bp.post("/")
@login_required
def create_action():
    form = load_form(ActionForm, request.get_json(silent=True))
    tracker = get_context().tracker
    if form.year is not None and is_future_month(form.year, form.month, tracker.today()):
        raise FutureDateError("You can't edit future months.")
    action = tracker.add_action(current_user().id, form.title)
    return jsonify(action_payload(action)), 201


@bp.delete("/<int:action_id>")
@login_required
def delete_action(action_id: int):
    get_context().tracker.delete_action(current_user().id, action_id)
    return "", 204


@bp.post("/<int:action_id>/toggle")
@login_required
def toggle_day(action_id: int):
    """Flip one day; the response carries the state confirmed by the store."""

    form = load_form(DayForm, request.get_json(silent=True))
    completed = get_context().tracker.toggle_day(
        current_user().id, action_id, form.year, form.month, form.day
    )
    return jsonify(
        {
            "action_id": action_id,
            "year": form.year,
            "month": form.month,
            "day": form.day,
            "completed": completed,
        }
    )


@bp.put("/<int:action_id>/note")
@login_required
def set_note(action_id: int):
    form = load_form(NoteForm, request.get_json(silent=True))
    record = get_context().tracker.set_note(
        current_user().id, action_id, form.year, form.month, form.day, form.note
    )
    return jsonify(completion_payload(record))

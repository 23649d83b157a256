"""Onboarding profile routes."""

from __future__ import annotations

from flask import jsonify, request

from ...extensions import current_user, get_context, login_required
from ..serializers import profile_payload
from ..validation import load_form
from . import bp
from .forms import OnboardingForm


@bp.get("/")
@login_required
def show_profile():
    profile = get_context().profiles.get_profile(current_user().id)
    return jsonify(profile_payload(profile))


@bp.put("/")
@login_required
def save_profile():
    """Store the onboarding answers; resubmitting edits them."""

    form = load_form(OnboardingForm, request.get_json(silent=True))
    profile = get_context().profiles.save_onboarding(
        current_user().id,
        role=form.role,
        activities=form.activities,
        platforms=form.platforms.model_dump() if form.platforms else None,
    )
    return jsonify(profile_payload(profile))

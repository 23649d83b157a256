"""Sign-up, sign-in and sign-out routes."""

from __future__ import annotations

from flask import g, jsonify, request, session

from ...extensions import SESSION_TOKEN_KEY, current_user, get_context, login_required
from ...services.auth import ActiveSession
from ..serializers import user_payload
from ..validation import load_form
from . import bp
from .forms import LoginForm, SignupForm


def _session_response(active: ActiveSession, status: int):
    session[SESSION_TOKEN_KEY] = active.token
    ctx = get_context()
    body = {
        "user": user_payload(active.user),
        "token": active.token,
        "expires_at": active.expires_at.isoformat(),
        "needs_onboarding": ctx.profiles.needs_onboarding(active.user.id),
    }
    return jsonify(body), status


@bp.post("/signup")
def signup():
    """Create an account and start a session."""

    form = load_form(SignupForm, request.get_json(silent=True))
    active = get_context().identity.sign_up(form.email, form.password, form.confirm_password)
    return _session_response(active, 201)


@bp.post("/login")
def login():
    form = load_form(LoginForm, request.get_json(silent=True))
    active = get_context().identity.sign_in(form.email, form.password)
    return _session_response(active, 200)


@bp.post("/logout")
def logout():
    get_context().identity.sign_out(g.get("access_token"))
    session.pop(SESSION_TOKEN_KEY, None)
    return jsonify({"ok": True})


@bp.get("/me")
@login_required
def me():
    user = current_user()
    return jsonify(
        {
            "user": user_payload(user),
            "needs_onboarding": get_context().profiles.needs_onboarding(user.id),
        }
    )

"""Home routes."""

from __future__ import annotations

from flask import jsonify

from ...extensions import current_user, get_context
from . import bp


@bp.get("/")
def index():
    """Service banner; tells clients whether the caller is signed in."""

    ctx = get_context()
    return jsonify(
        {
            "app": ctx.config.APP_NAME,
            "status": "ok",
            "signed_in": current_user() is not None,
        }
    )

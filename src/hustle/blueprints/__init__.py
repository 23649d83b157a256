"""Blueprint registration."""

from __future__ import annotations

from flask import Flask


def register_blueprints(app: Flask) -> None:
    from .actions import bp as actions_bp
    from .auth import bp as auth_bp
    from .dashboard import bp as dashboard_bp
    from .home import bp as home_bp
    from .profile import bp as profile_bp

    for blueprint in (home_bp, auth_bp, actions_bp, dashboard_bp, profile_bp):
        app.register_blueprint(blueprint)


__all__ = ["register_blueprints"]

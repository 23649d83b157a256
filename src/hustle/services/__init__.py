"""Service module exports."""

from . import aggregator, auth, charts, profile, tracker

__all__ = ["aggregator", "auth", "charts", "profile", "tracker"]

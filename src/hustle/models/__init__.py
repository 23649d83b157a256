"""SQLModel table exports."""

from .action import Action, ActionCompletion
from .profile import UserProfile
from .user import AuthSession, User

__all__ = [
    "Action",
    "ActionCompletion",
    "AuthSession",
    "User",
    "UserProfile",
]

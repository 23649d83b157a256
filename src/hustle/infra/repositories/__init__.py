"""Concrete repository implementations using SQLModel."""

from .action import SQLModelActionRepository
from .profile import SQLModelProfileRepository

__all__ = ["SQLModelActionRepository", "SQLModelProfileRepository"]

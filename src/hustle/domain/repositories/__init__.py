"""Repository protocol definitions for domain layer."""

from .action import ActionRepository

__all__ = ["ActionRepository"]

"""SQLModel implementation of the action repository."""

from __future__ import annotations

from typing import Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select

from ...logging_config import get_logger
from ...models.action import Action, ActionCompletion
from ..database import SessionFactory

logger = get_logger("infra.repositories.action")


class SQLModelActionRepository:
    """SQLModel-based action repository implementation."""

    def __init__(self, session_factory: SessionFactory):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def list_actions(self, *, user_id: int) -> list[Action]:
        """List a user's actions, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(Action)
                .where(Action.user_id == user_id)
                .order_by(col(Action.created_at), col(Action.id))
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_action(self, action_id: int, *, user_id: int) -> Optional[Action]:
        with self.session_factory() as session:
            obj = session.exec(
                select(Action).where(Action.id == action_id, Action.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def create_action(self, title: str, *, user_id: int) -> Action:
        with self.session_factory() as session:
            action = Action(user_id=user_id, title=title)
            session.add(action)
            session.commit()
            session.refresh(action)
            session.expunge(action)
            return action

    def delete_action(self, action_id: int, *, user_id: int) -> bool:
        """Delete an action and every completion record that references it."""
        with self.session_factory() as session:
            action = session.exec(
                select(Action).where(Action.id == action_id, Action.user_id == user_id)
            ).first()
            if action is None:
                return False
            completions = session.exec(
                select(ActionCompletion).where(ActionCompletion.action_id == action_id)
            ).all()
            for completion in completions:
                session.delete(completion)
            session.delete(action)
            session.commit()
            logger.info(
                "Deleted action",
                extra={"action_id": action_id, "completions_removed": len(completions)},
            )
            return True

    def list_completions(
        self,
        action_ids: Sequence[int],
        year: int,
        month: int,
        *,
        completed: bool | None = True,
    ) -> list[ActionCompletion]:
        """List completion records of ``action_ids`` for one month.

        ``completed=None`` returns records regardless of their flag.
        """
        if not action_ids:
            return []
        with self.session_factory() as session:
            statement = (
                select(ActionCompletion)
                .where(col(ActionCompletion.action_id).in_(list(action_ids)))
                .where(ActionCompletion.year == year)
                .where(ActionCompletion.month == month)
            )
            if completed is not None:
                statement = statement.where(ActionCompletion.completed == completed)
            statement = statement.order_by(col(ActionCompletion.day))
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def get_completion(
        self, action_id: int, year: int, month: int, day: int
    ) -> Optional[ActionCompletion]:
        with self.session_factory() as session:
            obj = session.exec(self._completion_query(action_id, year, month, day)).first()
            if obj:
                session.expunge(obj)
            return obj

    def toggle_completion(
        self, action_id: int, year: int, month: int, day: int, *, user_id: int
    ) -> bool:
        """Flip an existing record or insert a completed one; return the new flag.

        The unique constraint on (action, year, month, day) catches a
        concurrent insert for the same day; the losing writer then flips the
        row that won.
        """
        with self.session_factory() as session:
            existing = session.exec(self._completion_query(action_id, year, month, day)).first()
            if existing is not None:
                existing.completed = not existing.completed
                session.add(existing)
                session.commit()
                return existing.completed

            session.add(
                ActionCompletion(
                    action_id=action_id,
                    user_id=user_id,
                    year=year,
                    month=month,
                    day=day,
                    completed=True,
                )
            )
            try:
                session.commit()
                return True
            except IntegrityError:
                session.rollback()
                logger.warning(
                    "Concurrent completion insert, flipping existing record",
                    extra={"action_id": action_id, "year": year, "month": month, "day": day},
                )

        with self.session_factory() as session:
            existing = session.exec(self._completion_query(action_id, year, month, day)).one()
            existing.completed = not existing.completed
            session.add(existing)
            session.commit()
            return existing.completed

    def set_note(
        self, action_id: int, year: int, month: int, day: int, note: str | None, *, user_id: int
    ) -> ActionCompletion:
        """Attach or clear a note; creates a not-completed record when none exists."""
        with self.session_factory() as session:
            record = session.exec(self._completion_query(action_id, year, month, day)).first()
            if record is None:
                record = ActionCompletion(
                    action_id=action_id,
                    user_id=user_id,
                    year=year,
                    month=month,
                    day=day,
                    completed=False,
                )
            record.notes = note
            session.add(record)
            session.commit()
            session.refresh(record)
            session.expunge(record)
            return record

    @staticmethod
    def _completion_query(action_id: int, year: int, month: int, day: int):
        return (
            select(ActionCompletion)
            .where(ActionCompletion.action_id == action_id)
            .where(ActionCompletion.year == year)
            .where(ActionCompletion.month == month)
            .where(ActionCompletion.day == day)
        )

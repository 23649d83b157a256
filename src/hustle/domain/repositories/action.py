"""Action repository protocol."""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ...models.action import Action, ActionCompletion


class ActionRepository(Protocol):
    """Repository for actions and their per-day completion records."""

    def list_actions(self, *, user_id: int) -> list[Action]:
        """List a user's actions, oldest first."""
        ...

    def get_action(self, action_id: int, *, user_id: int) -> Optional[Action]:
        """Retrieve one action owned by ``user_id``."""
        ...

    def create_action(self, title: str, *, user_id: int) -> Action:
        """Create a new action."""
        ...

    def delete_action(self, action_id: int, *, user_id: int) -> bool:
        """Delete an action together with its completion records."""
        ...

    def list_completions(
        self,
        action_ids: Sequence[int],
        year: int,
        month: int,
        *,
        completed: bool | None = True,
    ) -> list[ActionCompletion]:
        """List completion records of the given actions for one month."""
        ...

    def get_completion(
        self, action_id: int, year: int, month: int, day: int
    ) -> Optional[ActionCompletion]:
        """Get the record for one (action, day) tuple."""
        ...

    def toggle_completion(
        self, action_id: int, year: int, month: int, day: int, *, user_id: int
    ) -> bool:
        """Flip (or create as completed) a day's record and return the new flag."""
        ...

    def set_note(
        self, action_id: int, year: int, month: int, day: int, note: str | None, *, user_id: int
    ) -> ActionCompletion:
        """Attach or clear the note on a day's record."""
        ...

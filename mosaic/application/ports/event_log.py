"""Event log port.

The event log is the game's append-only audit trail. Entries are written
after the transition they describe has committed.
"""

from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID

from mosaic.domain.events import GameEvent


class EventLogProtocol(Protocol):
    """Protocol for appending and reading game events."""

    async def log_event(
        self,
        game_id: UUID,
        actor_user_id: UUID | None,
        event_type: str,
        payload: dict[str, Any],
    ) -> GameEvent:
        """Append an event to a game's log.

        Args:
            game_id: Game the event belongs to.
            actor_user_id: Acting user; None for the system (timeouts, NPC).
            event_type: One of the ``*_EVENT_TYPE`` constants.
            payload: JSON-ready event data.

        Returns:
            The stored event.
        """
        ...

    async def latest_event(self, game_id: UUID, event_type: str) -> GameEvent | None:
        """Return the most recent event of ``event_type`` for a game."""
        ...

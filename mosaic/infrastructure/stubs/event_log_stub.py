"""In-memory stub for EventLogProtocol.

Append-only: entries are never updated or removed. Timestamps come from
the injected time authority so timeout deduplication can be tested with
a fake clock.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from uuid6 import uuid7

from mosaic.application.ports.time_authority import TimeAuthorityProtocol
from mosaic.domain.events import GameEvent
from mosaic.infrastructure.adapters.system_time_authority import SystemTimeAuthority


class EventLogStub:
    """In-memory event log implementation for testing."""

    def __init__(self, time_authority: TimeAuthorityProtocol | None = None) -> None:
        self._time = time_authority or SystemTimeAuthority()
        self._events: list[GameEvent] = []

    async def log_event(
        self,
        game_id: UUID,
        actor_user_id: UUID | None,
        event_type: str,
        payload: dict[str, Any],
    ) -> GameEvent:
        event = GameEvent(
            event_id=uuid7(),
            game_id=game_id,
            actor_user_id=actor_user_id,
            event_type=event_type,
            occurred_at=self._time.now(),
            payload=dict(payload),
        )
        self._events.append(event)
        return event

    async def latest_event(self, game_id: UUID, event_type: str) -> GameEvent | None:
        for event in reversed(self._events):
            if event.game_id == game_id and event.event_type == event_type:
                return event
        return None

    def events_for(self, game_id: UUID, event_type: str | None = None) -> list[GameEvent]:
        """Return a game's events in append order, optionally of one type."""
        return [
            e
            for e in self._events
            if e.game_id == game_id and (event_type is None or e.event_type == event_type)
        ]

    def event_types(self, game_id: UUID) -> list[str]:
        """Return a game's event types in append order."""
        return [e.event_type for e in self._events if e.game_id == game_id]

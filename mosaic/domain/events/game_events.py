"""Game event-log and notification event types.

Event-log entries are the audit trail of a game. One entry is written per
significant transition, after the transition has been committed.
Notification events name what recipients are told. They are dispatched
fire-and-forget once the write has landed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

# Event-log types
GAME_STARTED_EVENT_TYPE: str = "GAME_STARTED"
ROUND_STARTED_EVENT_TYPE: str = "ROUND_STARTED"
ACTION_PROPOSED_EVENT_TYPE: str = "ACTION_PROPOSED"
NPC_ACTION_PROPOSED_EVENT_TYPE: str = "NPC_ACTION_PROPOSED"
ARGUMENT_ADDED_EVENT_TYPE: str = "ARGUMENT_ADDED"
ARGUMENTATION_COMPLETED_EVENT_TYPE: str = "ARGUMENTATION_COMPLETED"
ARGUMENTATION_SKIPPED_EVENT_TYPE: str = "ARGUMENTATION_SKIPPED"
VOTE_CAST_EVENT_TYPE: str = "VOTE_CAST"
VOTING_SKIPPED_EVENT_TYPE: str = "VOTING_SKIPPED"
ACTION_RESOLVED_EVENT_TYPE: str = "ACTION_RESOLVED"
ARGUMENT_STRENGTH_TOGGLED_EVENT_TYPE: str = "ARGUMENT_STRENGTH_TOGGLED"
NARRATION_ADDED_EVENT_TYPE: str = "NARRATION_ADDED"
ROUND_SUMMARY_SUBMITTED_EVENT_TYPE: str = "ROUND_SUMMARY_SUBMITTED"
PROPOSALS_SKIPPED_EVENT_TYPE: str = "PROPOSALS_SKIPPED"
PROPOSAL_TIMEOUT_EVENT_TYPE: str = "PROPOSAL_TIMEOUT"
ARGUMENTATION_TIMEOUT_EVENT_TYPE: str = "ARGUMENTATION_TIMEOUT"
VOTING_TIMEOUT_EVENT_TYPE: str = "VOTING_TIMEOUT"


class NotificationEvent(Enum):
    """What a notification tells its recipients."""

    GAME_STARTED = "game_started"
    YOUR_TURN = "your_turn"
    ACTION_PROPOSED = "action_proposed"
    VOTING_STARTED = "voting_started"
    ARBITER_REVIEW_STARTED = "arbiter_review_started"
    RESOLUTION_READY = "resolution_ready"
    NARRATION_NEEDED = "narration_needed"
    ROUND_SUMMARY_NEEDED = "round_summary_needed"
    NEW_ROUND = "new_round"
    TIMEOUT_OCCURRED = "timeout_occurred"


@dataclass(frozen=True, eq=True)
class GameEvent:
    """A single entry of a game's event log.

    Attributes:
        event_id: Unique identifier.
        game_id: Game the event belongs to.
        actor_user_id: User who caused the event (None for system actors).
        event_type: One of the ``*_EVENT_TYPE`` constants.
        payload: JSON-ready event data.
        occurred_at: When the event was recorded (UTC).
    """

    event_id: UUID
    game_id: UUID
    actor_user_id: UUID | None
    event_type: str
    occurred_at: datetime
    payload: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert the event to a dict for storage."""
        return {
            "event_id": str(self.event_id),
            "game_id": str(self.game_id),
            "actor_user_id": str(self.actor_user_id) if self.actor_user_id else None,
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "payload": dict(self.payload),
        }

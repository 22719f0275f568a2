"""Round and round summary models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID

from mosaic.domain.models.action import ResultType


class RoundStatus(Enum):
    """Round lifecycle status."""

    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class Round:
    """A round of play.

    A round requires one resolved action per acting unit. It completes only
    once every required action is resolved and a summary was submitted.

    Attributes:
        round_id: Unique identifier.
        game_id: Owning game.
        round_number: 1-based, monotonic within a game.
        status: IN_PROGRESS or COMPLETED.
        actions_completed: Resolved actions so far.
        total_actions_required: Acting units at round creation.
        created_at: Creation timestamp.
        completed_at: Completion timestamp.
    """

    round_id: UUID
    game_id: UUID
    round_number: int
    total_actions_required: int
    status: RoundStatus = RoundStatus.IN_PROGRESS
    actions_completed: int = 0
    created_at: datetime = field(default_factory=_utc_now)
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        """Validate round invariants."""
        if self.round_number < 1:
            raise ValueError(f"round_number must be >= 1, got {self.round_number}")
        if self.total_actions_required < 0:
            raise ValueError("total_actions_required must not be negative")
        if self.actions_completed > self.total_actions_required:
            raise ValueError(
                f"actions_completed ({self.actions_completed}) exceeds "
                f"total_actions_required ({self.total_actions_required})"
            )

    @property
    def is_complete(self) -> bool:
        """True once every required action has been resolved."""
        return self.actions_completed >= self.total_actions_required

    @property
    def remaining(self) -> int:
        return max(self.total_actions_required - self.actions_completed, 0)

    def with_action_completed(self) -> Round:
        """Return a copy with one more completed action."""
        return replace(self, actions_completed=self.actions_completed + 1)

    def completed(self, at: datetime) -> Round:
        """Return a copy marked COMPLETED."""
        return replace(self, status=RoundStatus.COMPLETED, completed_at=at)


@dataclass(frozen=True, eq=True)
class ActionOutcome:
    """Result of one action as recorded in a round summary."""

    action_id: UUID
    result_type: ResultType
    result_value: int


@dataclass(frozen=True, eq=True)
class RoundOutcomes:
    """Aggregated outcome statistics for a round.

    Attributes:
        result_counts: Number of actions per result type.
        total_triumphs: Triumph count (may be overridden by the author).
        total_disasters: Disaster count (may be overridden by the author).
        net_momentum: Sum of result values (may be overridden).
        key_events: Author-supplied highlights.
        actions_completed: Resolved actions in the round.
        action_results: Per-action results in sequence order.
    """

    result_counts: dict[ResultType, int]
    total_triumphs: int
    total_disasters: int
    net_momentum: int
    key_events: tuple[str, ...] = ()
    actions_completed: int = 0
    action_results: tuple[ActionOutcome, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "result_counts": {k.value: v for k, v in self.result_counts.items()},
            "total_triumphs": self.total_triumphs,
            "total_disasters": self.total_disasters,
            "net_momentum": self.net_momentum,
            "key_events": list(self.key_events),
            "actions_completed": self.actions_completed,
            "action_results": [
                {
                    "action_id": str(r.action_id),
                    "result_type": r.result_type.value,
                    "result_value": r.result_value,
                }
                for r in self.action_results
            ],
        }


@dataclass(frozen=True, eq=True)
class RoundSummary:
    """The narrative wrap-up of a round. Exactly one per round."""

    summary_id: UUID
    round_id: UUID
    author_id: UUID
    content: str
    outcomes: RoundOutcomes
    created_at: datetime = field(default_factory=_utc_now)

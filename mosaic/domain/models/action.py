"""Action, argument, vote and resolution models.

An Action is owned by a Round and exclusively owns its arguments, votes
and resolution result. Its status only ever moves forward:

    PROPOSED -> ARGUING -> {VOTING | ARBITER_REVIEW} -> RESOLVED
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping
from uuid import UUID


class ActionStatus(Enum):
    """Per-action status."""

    PROPOSED = "PROPOSED"
    ARGUING = "ARGUING"
    VOTING = "VOTING"
    ARBITER_REVIEW = "ARBITER_REVIEW"
    RESOLVED = "RESOLVED"

    def is_terminal(self) -> bool:
        """Check if this is the terminal RESOLVED status."""
        return self == ActionStatus.RESOLVED


class ArgumentType(Enum):
    """Kind of argument.

    FOR and INITIATOR_FOR form the "pro" side, AGAINST the "anti" side.
    CLARIFICATION belongs to neither side.
    """

    FOR = "FOR"
    AGAINST = "AGAINST"
    CLARIFICATION = "CLARIFICATION"
    INITIATOR_FOR = "INITIATOR_FOR"

    @property
    def is_pro(self) -> bool:
        return self in (ArgumentType.FOR, ArgumentType.INITIATOR_FOR)

    @property
    def is_anti(self) -> bool:
        return self == ArgumentType.AGAINST


class VoteType(Enum):
    """A player's estimate of an action's chances."""

    LIKELY_SUCCESS = "LIKELY_SUCCESS"
    LIKELY_FAILURE = "LIKELY_FAILURE"
    UNCERTAIN = "UNCERTAIN"


class ResultType(Enum):
    """Outcome taxonomy shared by all resolution strategies."""

    TRIUMPH = "TRIUMPH"
    SUCCESS_BUT = "SUCCESS_BUT"
    FAILURE_BUT = "FAILURE_BUT"
    DISASTER = "DISASTER"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class ResolutionResult:
    """Outcome of resolving an action. Created once and never modified.

    Attributes:
        result_type: Outcome category.
        result_value: Signed magnitude of the outcome.
        strategy_data: Strategy-specific audit payload (dice, token pool,
            drawn sequence, seed). Stored read-only.
    """

    result_type: ResultType
    result_value: int
    strategy_data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Payload is stored read-only.
        object.__setattr__(
            self, "strategy_data", MappingProxyType(dict(self.strategy_data))
        )

    def to_dict(self) -> dict[str, Any]:
        """Flatten to a JSON-ready dictionary for storage and events."""
        return {
            **dict(self.strategy_data),
            "result_type": self.result_type.value,
            "result_value": self.result_value,
        }


@dataclass(frozen=True, eq=True)
class Action:
    """A proposed action moving through argumentation and resolution.

    Attributes:
        action_id: Unique identifier.
        game_id: Owning game.
        round_id: Owning round.
        initiator_id: Player who proposed the action.
        action_description: What the initiator attempts.
        desired_outcome: What the initiator hopes happens.
        status: Current status.
        sequence_number: Game-wide ordering, assigned by persistence.
        proposed_at: Proposal timestamp.
        argumentation_started_at: When ARGUING began.
        voting_started_at: When VOTING or ARBITER_REVIEW began.
        resolved_at: When the action was resolved.
        resolution_method: Strategy id fixed at resolution time.
        resolution: The resolution result once RESOLVED.
        argumentation_was_skipped: Host or timeout skipped argumentation.
        voting_was_skipped: Host or timeout skipped voting.
    """

    action_id: UUID
    game_id: UUID
    round_id: UUID
    initiator_id: UUID
    action_description: str
    desired_outcome: str
    status: ActionStatus = ActionStatus.PROPOSED
    sequence_number: int = 0
    proposed_at: datetime = field(default_factory=_utc_now)
    argumentation_started_at: datetime | None = None
    voting_started_at: datetime | None = None
    resolved_at: datetime | None = None
    resolution_method: str | None = None
    resolution: ResolutionResult | None = None
    argumentation_was_skipped: bool = False
    voting_was_skipped: bool = False

    def __post_init__(self) -> None:
        if self.status == ActionStatus.RESOLVED and self.resolution is None:
            raise ValueError("A RESOLVED action must carry a resolution result")
        if self.resolution is not None and self.status != ActionStatus.RESOLVED:
            raise ValueError("Only RESOLVED actions may carry a resolution result")

    @property
    def is_resolved(self) -> bool:
        return self.status == ActionStatus.RESOLVED

    def with_status(self, status: ActionStatus, **changes: Any) -> Action:
        """Return a copy with a new status and any extra field changes."""
        return replace(self, status=status, **changes)


@dataclass(frozen=True, eq=True)
class Argument:
    """An argument in an action's thread.

    Attributes:
        argument_id: Unique identifier.
        action_id: Owning action.
        player_id: Author.
        argument_type: FOR, AGAINST, CLARIFICATION or INITIATOR_FOR.
        content: Argument text.
        is_strong: Arbiter's strength flag.
        sequence: Position in the thread, assigned by persistence.
        created_at: Creation timestamp.
    """

    argument_id: UUID
    action_id: UUID
    player_id: UUID
    argument_type: ArgumentType
    content: str
    is_strong: bool = False
    sequence: int = 0
    created_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, eq=True)
class Vote:
    """A vote cast on an action under a voting strategy.

    Attributes:
        vote_id: Unique identifier.
        action_id: Action voted on.
        player_id: Voter.
        vote_type: The voter's estimate.
        success_tokens: Success tokens this vote adds to the pool.
        failure_tokens: Failure tokens this vote adds to the pool.
        was_skipped: Auto-cast on the voter's behalf after a skip or timeout.
        cast_at: When the vote was recorded.
    """

    vote_id: UUID
    action_id: UUID
    player_id: UUID
    vote_type: VoteType
    success_tokens: int
    failure_tokens: int
    was_skipped: bool = False
    cast_at: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, eq=True)
class Narration:
    """Narrative text describing how a resolved action played out."""

    narration_id: UUID
    action_id: UUID
    author_id: UUID
    content: str
    created_at: datetime = field(default_factory=_utc_now)

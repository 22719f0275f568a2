"""Result objects returned by the orchestration services."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from mosaic.domain.models import Action, GamePhase, Round, Vote


@dataclass(frozen=True)
class ArgumentationProgress:
    """Outcome of marking argumentation complete.

    Attributes:
        action: The action after the call.
        units_remaining: Acting units still to mark complete (0 once moved on).
        advanced: True when this call moved the action out of ARGUING.
    """

    action: Action
    units_remaining: int
    advanced: bool


@dataclass(frozen=True)
class VoteOutcome:
    """Outcome of casting a vote.

    Attributes:
        vote: The stored vote.
        votes_cast: Votes on the action after this one.
        votes_required: Threshold that triggers resolution.
        resolved_action: The RESOLVED action when this vote hit the threshold.
    """

    vote: Vote
    votes_cast: int
    votes_required: int
    resolved_action: Action | None = None


@dataclass(frozen=True)
class SkipVotingResult:
    """Outcome of skipping voting.

    Attributes:
        action: The RESOLVED action.
        skipped_votes: Auto-cast UNCERTAIN votes for missing voters.
    """

    action: Action
    skipped_votes: tuple[Vote, ...] = ()


@dataclass(frozen=True)
class VotesView:
    """Votes on an action as visible to a member.

    Individual votes stay hidden while voting is open.
    """

    votes_submitted: int
    votes: tuple[Vote, ...] = ()


@dataclass(frozen=True)
class RoundProgress:
    """Progress of a round for status displays."""

    round: Round
    phase: GamePhase
    actions_proposed: int
    actions_resolved: int
    proposed_by: frozenset[UUID] = field(default_factory=frozenset)


@dataclass(frozen=True)
class StrategyInfo:
    """Public description of a registered resolution strategy."""

    strategy_id: str
    display_name: str
    description: str
    kind: str
    requires_arbiter: bool
    max_arguments_per_side: int | None


@dataclass(frozen=True)
class TimeoutSweepResult:
    """Summary of one timeout sweep.

    Attributes:
        processed: Timeouts acted on.
        errors: Per-game failure descriptions (never raised).
    """

    processed: int = 0
    errors: tuple[str, ...] = ()

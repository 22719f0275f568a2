"""Resolution strategy contract.

A resolution strategy turns the state of an action (votes, or an arbiter's
strength judgments) into a ResolutionResult by consulting the randomness
port. Strategies form a closed set of two kinds:

- VotingResolutionStrategy: players vote; votes map to tokens; resolve
  over the votes.
- ArbiterResolutionStrategy: an arbiter marks strong arguments; resolve
  over the strong-argument counts.

Each strategy carries the descriptor the phase machine reads
(``phase_after_argumentation``) so the machine never branches on kind.
Strategies are pure with respect to game state and raise nothing; every
precondition is checked by the orchestration layer before ``resolve``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar
from uuid import UUID

from mosaic.domain.models import ActionStatus, ResolutionResult, VoteType


class StrategyKind(Enum):
    """Tag of a resolution strategy variant."""

    VOTING = "voting"
    ARBITER = "arbiter"


@dataclass(frozen=True)
class VoteTokenMapping:
    """Token contribution of one vote."""

    success_tokens: int
    failure_tokens: int


@dataclass(frozen=True)
class ResolutionVote:
    """A vote as seen by a voting strategy."""

    player_id: UUID
    vote_type: VoteType
    success_tokens: int
    failure_tokens: int


@dataclass(frozen=True)
class ArbiterResolutionContext:
    """Strong-argument counts as seen by an arbiter strategy.

    Attributes:
        strong_pro_count: Strong FOR and INITIATOR_FOR arguments.
        strong_anti_count: Strong AGAINST arguments.
    """

    strong_pro_count: int
    strong_anti_count: int


class ResolutionStrategy(ABC):
    """Base descriptor shared by every resolution strategy.

    Attributes:
        strategy_id: Registry key stored on resolved actions.
        display_name: Human-readable name.
        description: One-sentence rules summary.
        kind: VOTING or ARBITER.
        phase_after_argumentation: Action status argumentation moves to.
        max_arguments_per_side: Cap on FOR-side and AGAINST-side arguments.
        requires_arbiter: An active ARBITER player must exist to proceed.
    """

    strategy_id: ClassVar[str]
    display_name: ClassVar[str]
    description: ClassVar[str]
    kind: ClassVar[StrategyKind]
    phase_after_argumentation: ClassVar[ActionStatus]
    max_arguments_per_side: ClassVar[int | None] = None
    requires_arbiter: ClassVar[bool] = False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(strategy_id={self.strategy_id!r})"


class VotingResolutionStrategy(ResolutionStrategy):
    """Strategy resolved from the votes cast on an action."""

    kind = StrategyKind.VOTING
    phase_after_argumentation = ActionStatus.VOTING

    @abstractmethod
    def map_vote_to_tokens(self, vote_type: VoteType) -> VoteTokenMapping:
        """Return the tokens a vote of ``vote_type`` contributes."""
        ...

    @abstractmethod
    def resolve(self, votes: Sequence[ResolutionVote]) -> ResolutionResult:
        """Resolve an action from its votes."""
        ...


class ArbiterResolutionStrategy(ResolutionStrategy):
    """Strategy resolved from an arbiter's strong-argument judgments."""

    kind = StrategyKind.ARBITER
    phase_after_argumentation = ActionStatus.ARBITER_REVIEW
    requires_arbiter = True

    @abstractmethod
    def resolve(self, context: ArbiterResolutionContext) -> ResolutionResult:
        """Resolve an action from the arbiter's judgments."""
        ...

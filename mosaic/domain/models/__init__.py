"""Domain models for the Mosaic engine."""

from mosaic.domain.models.action import (
    Action,
    ActionStatus,
    Argument,
    ArgumentType,
    Narration,
    ResolutionResult,
    ResultType,
    Vote,
    VoteType,
)
from mosaic.domain.models.game import (
    Game,
    GamePhase,
    GamePlayer,
    GamePlayerRole,
    GameStatus,
)
from mosaic.domain.models.phase_transition import PhaseTransition
from mosaic.domain.models.round import (
    ActionOutcome,
    Round,
    RoundOutcomes,
    RoundStatus,
    RoundSummary,
)

__all__ = [
    "Action",
    "ActionOutcome",
    "ActionStatus",
    "Argument",
    "ArgumentType",
    "Game",
    "GamePhase",
    "GamePlayer",
    "GamePlayerRole",
    "GameStatus",
    "Narration",
    "PhaseTransition",
    "ResolutionResult",
    "ResultType",
    "Round",
    "RoundOutcomes",
    "RoundStatus",
    "RoundSummary",
    "Vote",
    "VoteType",
]

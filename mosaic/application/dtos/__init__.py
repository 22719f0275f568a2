"""Data transfer objects for the Mosaic application layer."""

from mosaic.application.dtos.game_settings import GameSettings
from mosaic.application.dtos.inputs import (
    ActionProposalInput,
    ArgumentInput,
    NarrationInput,
    RoundOutcomesInput,
    RoundSummaryInput,
    VoteInput,
    validate_input,
)
from mosaic.application.dtos.results import (
    ArgumentationProgress,
    RoundProgress,
    SkipVotingResult,
    StrategyInfo,
    TimeoutSweepResult,
    VoteOutcome,
    VotesView,
)

__all__ = [
    "ActionProposalInput",
    "ArgumentInput",
    "ArgumentationProgress",
    "GameSettings",
    "NarrationInput",
    "RoundOutcomesInput",
    "RoundProgress",
    "RoundSummaryInput",
    "SkipVotingResult",
    "StrategyInfo",
    "TimeoutSweepResult",
    "VoteInput",
    "VoteOutcome",
    "VotesView",
    "validate_input",
]

"""Pluggable action-resolution strategies."""

from mosaic.application.services.resolution.arbiter import ArbiterStrategy
from mosaic.application.services.resolution.registry import StrategyRegistry
from mosaic.application.services.resolution.strategy import (
    ArbiterResolutionContext,
    ArbiterResolutionStrategy,
    ResolutionStrategy,
    ResolutionVote,
    StrategyKind,
    VoteTokenMapping,
    VotingResolutionStrategy,
)
from mosaic.application.services.resolution.token_draw import TokenDrawStrategy

__all__ = [
    "ArbiterResolutionContext",
    "ArbiterResolutionStrategy",
    "ArbiterStrategy",
    "ResolutionStrategy",
    "ResolutionVote",
    "StrategyKind",
    "StrategyRegistry",
    "TokenDrawStrategy",
    "VoteTokenMapping",
    "VotingResolutionStrategy",
]

"""Domain errors for the Mosaic engine.

Recoverable rule violations live in ``game_rules``; fatal engine errors in
``engine``. All inherit from MosaicError.
"""

from mosaic.domain.errors.engine import (
    InvalidRandomRangeError,
    PersistenceError,
    StrategyAlreadyRegisteredError,
)
from mosaic.domain.errors.game_rules import (
    AlreadySubmittedError,
    BadRequestError,
    ConflictError,
    DuplicateNarrationError,
    DuplicateProposalError,
    DuplicateVoteError,
    ForbiddenError,
    GameRuleError,
    InvalidInputError,
    NoArbiterAssignedError,
    NotFoundError,
    UnknownStrategyError,
    WrongPhaseError,
)

__all__: list[str] = [
    "AlreadySubmittedError",
    "BadRequestError",
    "ConflictError",
    "DuplicateNarrationError",
    "DuplicateProposalError",
    "DuplicateVoteError",
    "ForbiddenError",
    "GameRuleError",
    "InvalidInputError",
    "InvalidRandomRangeError",
    "NoArbiterAssignedError",
    "NotFoundError",
    "PersistenceError",
    "StrategyAlreadyRegisteredError",
    "UnknownStrategyError",
    "WrongPhaseError",
]

"""Token-draw resolution strategy.

Votes shape a pool of success and failure tokens; three tokens drawn from a
shuffled pool decide the outcome.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from mosaic.application.ports.randomness import RandomnessProtocol
from mosaic.application.services.resolution.strategy import (
    ResolutionVote,
    VoteTokenMapping,
    VotingResolutionStrategy,
)
from mosaic.domain.models import ResolutionResult, ResultType, VoteType

SUCCESS_TOKEN = "SUCCESS"
FAILURE_TOKEN = "FAILURE"

# Base pool before any vote, so the draw is never one-sided by default
BASE_SUCCESS_TOKENS = 1
BASE_FAILURE_TOKENS = 1

DRAW_COUNT = 3

VOTE_TOKEN_MAP: dict[VoteType, VoteTokenMapping] = {
    VoteType.LIKELY_SUCCESS: VoteTokenMapping(success_tokens=2, failure_tokens=0),
    VoteType.LIKELY_FAILURE: VoteTokenMapping(success_tokens=0, failure_tokens=2),
    VoteType.UNCERTAIN: VoteTokenMapping(success_tokens=1, failure_tokens=1),
}

_RESULT_BY_SUCCESSES: dict[int, ResultType] = {
    3: ResultType.TRIUMPH,
    2: ResultType.SUCCESS_BUT,
    1: ResultType.FAILURE_BUT,
    0: ResultType.DISASTER,
}


def result_type_for(drawn_success: int) -> ResultType:
    """Map the number of drawn success tokens to a result type."""
    return _RESULT_BY_SUCCESSES[drawn_success]


class TokenDrawStrategy(VotingResolutionStrategy):
    """Draw 3 tokens from a vote-weighted pool.

    Pool: 1 success + 1 failure, plus each vote's contribution. The pool is
    shuffled with a Fisher-Yates shuffle driven by the randomness port and
    the first three tokens are drawn. The result value is
    ``drawn_success * 2 - 3`` (one of -3, -1, +1, +3).

    With no votes the pool holds only two tokens; the missing third draw
    counts as a failure so the split always totals three.
    """

    strategy_id = "token_draw"
    display_name = "Token Draw"
    description = "Draw 3 tokens from a pool. Votes shift the pool toward success or failure."

    def __init__(self, randomness: RandomnessProtocol) -> None:
        self._randomness = randomness

    def map_vote_to_tokens(self, vote_type: VoteType) -> VoteTokenMapping:
        return VOTE_TOKEN_MAP[vote_type]

    def shuffle(self, tokens: list[str]) -> list[str]:
        """Return a Fisher-Yates shuffled copy of ``tokens``."""
        shuffled = list(tokens)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self._randomness.random_int(0, i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def resolve(self, votes: Sequence[ResolutionVote]) -> ResolutionResult:
        total_success = BASE_SUCCESS_TOKENS + sum(v.success_tokens for v in votes)
        total_failure = BASE_FAILURE_TOKENS + sum(v.failure_tokens for v in votes)

        seed = self._randomness.audit_seed()
        pool = [SUCCESS_TOKEN] * total_success + [FAILURE_TOKEN] * total_failure
        drawn = self.shuffle(pool)[:DRAW_COUNT]

        drawn_success = drawn.count(SUCCESS_TOKEN)
        drawn_failure = DRAW_COUNT - drawn_success
        strategy_data: dict[str, Any] = {
            "seed": seed,
            "total_success_tokens": total_success,
            "total_failure_tokens": total_failure,
            "drawn_success": drawn_success,
            "drawn_failure": drawn_failure,
            "drawn_tokens": [
                {"draw_sequence": index, "token_type": token}
                for index, token in enumerate(drawn, start=1)
            ],
        }
        return ResolutionResult(
            result_type=result_type_for(drawn_success),
            result_value=drawn_success * 2 - 3,
            strategy_data=strategy_data,
        )

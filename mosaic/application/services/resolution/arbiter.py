"""Arbiter resolution strategy."""

from __future__ import annotations

from mosaic.application.ports.randomness import RandomnessProtocol
from mosaic.application.services.resolution.strategy import (
    ArbiterResolutionContext,
    ArbiterResolutionStrategy,
)
from mosaic.domain.models import ResolutionResult, ResultType

# A modified 2d6 total strictly above this succeeds
SUCCESS_THRESHOLD = 7

MAX_ARGUMENTS_PER_SIDE = 3


class ArbiterStrategy(ArbiterResolutionStrategy):
    """2d6 roll modified by the arbiter's strong-argument judgments.

    ``modified = d1 + d2 + strong_pro - strong_anti``. Above 7 the action
    succeeds with a cost (SUCCESS_BUT, +1); otherwise it fails with a silver
    lining (FAILURE_BUT, -1). Arbiter games never produce TRIUMPH or
    DISASTER.
    """

    strategy_id = "arbiter"
    display_name = "Arbiter"
    description = (
        "An arbiter marks arguments as strong. A 2d6 roll modified by strong "
        "arguments determines success (> 7) or failure."
    )
    max_arguments_per_side = MAX_ARGUMENTS_PER_SIDE

    def __init__(self, randomness: RandomnessProtocol) -> None:
        self._randomness = randomness

    def resolve(self, context: ArbiterResolutionContext) -> ResolutionResult:
        dice_roll = [self._randomness.roll_die(), self._randomness.roll_die()]
        base = dice_roll[0] + dice_roll[1]
        modified = base + context.strong_pro_count - context.strong_anti_count
        succeeded = modified > SUCCESS_THRESHOLD
        return ResolutionResult(
            result_type=ResultType.SUCCESS_BUT if succeeded else ResultType.FAILURE_BUT,
            result_value=1 if succeeded else -1,
            strategy_data={
                "dice_roll": dice_roll,
                "base": base,
                "modified": modified,
                "strong_pro_count": context.strong_pro_count,
                "strong_anti_count": context.strong_anti_count,
            },
        )

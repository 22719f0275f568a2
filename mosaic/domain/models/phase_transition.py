"""PhaseTransition value object.

A PhaseTransition describes one validated move of the phase state machine:
the action status change, the mirrored game phase change and every write
that must land with it (resolution result, round counter, NPC momentum).
The persistence port applies it atomically, guarded on ``from_status`` and
``from_phase``. If either guard no longer holds the write is rejected and
nothing changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from mosaic.domain.models.action import ActionStatus, ResolutionResult
from mosaic.domain.models.game import GamePhase


@dataclass(frozen=True, eq=True)
class PhaseTransition:
    """A compare-and-set transition of an action and its game.

    Attributes:
        game_id: Game whose phase moves.
        action_id: Action whose status moves.
        from_status: Action status the write expects to find.
        to_status: Action status after the write.
        from_phase: Game phase the write expects to find.
        to_phase: Game phase after the write.
        occurred_at: Transition time; becomes the new phase start.
        round_id: Round whose counter is incremented on resolution.
        resolution: Resolution result, for transitions into RESOLVED.
        resolution_method: Strategy id fixed at resolution.
        argumentation_skipped: Argumentation ended by skip or timeout.
        voting_skipped: Voting ended by skip or timeout.
        clear_current_action: Reset the game's current action.
        momentum_delta: Added to the game's NPC momentum.
    """

    game_id: UUID
    action_id: UUID
    from_status: ActionStatus
    to_status: ActionStatus
    from_phase: GamePhase
    to_phase: GamePhase
    occurred_at: datetime
    round_id: UUID | None = None
    resolution: ResolutionResult | None = None
    resolution_method: str | None = None
    argumentation_skipped: bool = False
    voting_skipped: bool = False
    clear_current_action: bool = False
    momentum_delta: int = 0

    def __post_init__(self) -> None:
        if self.to_status == ActionStatus.RESOLVED:
            if self.resolution is None or self.resolution_method is None:
                raise ValueError("Resolution transitions need a result and a method")
            if self.round_id is None:
                raise ValueError("Resolution transitions must name the round to advance")
        elif self.resolution is not None:
            raise ValueError("Only transitions into RESOLVED may carry a result")

    @property
    def completes_action(self) -> bool:
        """True when this transition resolves the action."""
        return self.to_status == ActionStatus.RESOLVED

"""Arbiter review: strength judgments and review completion."""

from __future__ import annotations

from uuid import UUID

from structlog import get_logger

from mosaic.application.ports.event_log import EventLogProtocol
from mosaic.application.services.action_resolution_service import ActionResolutionService
from mosaic.application.services.game_access import GameAccess, require_arbiter
from mosaic.domain.errors import NotFoundError
from mosaic.domain.events import ARGUMENT_STRENGTH_TOGGLED_EVENT_TYPE
from mosaic.domain.models import Action, ActionStatus, Argument, GamePhase
from mosaic.domain.services.phase_machine import require_action_status, require_game_phase

logger = get_logger(__name__)


class ArbiterService:
    """Operations reserved for the game's ARBITER-role player."""

    def __init__(
        self,
        access: GameAccess,
        resolution: ActionResolutionService,
        event_log: EventLogProtocol,
    ) -> None:
        self._access = access
        self._repository = access.repository
        self._resolution = resolution
        self._event_log = event_log

    async def mark_argument_strong(
        self, action_id: UUID, argument_id: UUID, user_id: UUID
    ) -> Argument:
        """Toggle an argument's strength flag during arbiter review.

        Raises:
            NotFoundError: The action or argument does not exist, or the
                argument belongs to another action.
            WrongPhaseError: The action is not in arbiter review.
            ForbiddenError: The actor is not the arbiter.
        """
        ctx = await self._access.load_action(action_id, user_id)
        require_game_phase(
            ctx.game,
            GamePhase.ARBITER_REVIEW,
            "Can only mark arguments during arbiter review phase",
        )
        require_action_status(
            ctx.action,
            ActionStatus.ARBITER_REVIEW,
            "Can only mark arguments during arbiter review phase",
        )
        require_arbiter(ctx.players, user_id, "Only the arbiter can mark arguments as strong")

        argument = await self._repository.get_argument(argument_id)
        if argument is None or argument.action_id != action_id:
            raise NotFoundError("Argument not found", details={"argument_id": str(argument_id)})

        updated = await self._repository.set_argument_strength(
            argument_id, not argument.is_strong
        )
        await self._event_log.log_event(
            ctx.game.game_id,
            user_id,
            ARGUMENT_STRENGTH_TOGGLED_EVENT_TYPE,
            {
                "action_id": str(action_id),
                "argument_id": str(argument_id),
                "is_strong": updated.is_strong,
            },
        )
        return updated

    async def complete_arbiter_review(self, action_id: UUID, user_id: UUID) -> Action:
        """Roll the dice and resolve the action.

        Raises:
            WrongPhaseError: The action is not in arbiter review.
            ForbiddenError: The actor is not the arbiter.
            BadRequestError: The game's strategy does not use an arbiter.
        """
        ctx = await self._access.load_action(action_id, user_id)
        require_action_status(
            ctx.action, ActionStatus.ARBITER_REVIEW, "Game is not in arbiter review phase"
        )
        require_arbiter(ctx.players, user_id, "Only the arbiter can complete the review")

        resolved = await self._resolution.resolve_by_arbiter(ctx, actor_user_id=user_id)
        logger.info(
            "arbiter_review_completed",
            action_id=str(action_id),
            result_type=resolved.resolution.result_type.value if resolved.resolution else None,
        )
        return resolved

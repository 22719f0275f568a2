"""Round lifecycle: summaries, early close and progress."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from structlog import get_logger
from uuid6 import uuid7

from mosaic.application.dtos import (
    RoundOutcomesInput,
    RoundProgress,
    RoundSummaryInput,
    validate_input,
)
from mosaic.application.ports.event_log import EventLogProtocol
from mosaic.application.ports.time_authority import TimeAuthorityProtocol
from mosaic.application.services.game_access import GameAccess, require_host, require_member
from mosaic.application.services.notification_dispatcher import NotificationDispatcher
from mosaic.domain.errors import AlreadySubmittedError, BadRequestError, WrongPhaseError
from mosaic.domain.events import (
    PROPOSALS_SKIPPED_EVENT_TYPE,
    ROUND_STARTED_EVENT_TYPE,
    ROUND_SUMMARY_SUBMITTED_EVENT_TYPE,
    NotificationEvent,
)
from mosaic.domain.models import (
    Action,
    ActionOutcome,
    GamePhase,
    ResultType,
    Round,
    RoundOutcomes,
    RoundSummary,
)
from mosaic.domain.services.acting_units import round_action_quota
from mosaic.domain.services.phase_machine import require_game_phase

logger = get_logger(__name__)


def compute_round_outcomes(
    actions: list[Action],
    overrides: RoundOutcomesInput | None = None,
) -> RoundOutcomes:
    """Aggregate the results of a round's resolved actions.

    Args:
        actions: The round's actions; unresolved ones are ignored.
        overrides: Author values whose non-None fields replace the
            computed totals.
    """
    results = [
        ActionOutcome(
            action_id=a.action_id,
            result_type=a.resolution.result_type,
            result_value=a.resolution.result_value,
        )
        for a in sorted(actions, key=lambda a: a.sequence_number)
        if a.resolution is not None
    ]
    counts = Counter(r.result_type for r in results)
    triumphs = counts[ResultType.TRIUMPH]
    disasters = counts[ResultType.DISASTER]
    net = sum(r.result_value for r in results)
    key_events: tuple[str, ...] = ()

    if overrides is not None:
        if overrides.total_triumphs is not None:
            triumphs = overrides.total_triumphs
        if overrides.total_disasters is not None:
            disasters = overrides.total_disasters
        if overrides.net_momentum is not None:
            net = overrides.net_momentum
        if overrides.key_events is not None:
            key_events = tuple(overrides.key_events)

    return RoundOutcomes(
        result_counts={t: counts[t] for t in ResultType},
        total_triumphs=triumphs,
        total_disasters=disasters,
        net_momentum=net,
        key_events=key_events,
        actions_completed=len(results),
        action_results=tuple(results),
    )


class RoundService:
    """Application service for round rollover."""

    def __init__(
        self,
        access: GameAccess,
        event_log: EventLogProtocol,
        dispatcher: NotificationDispatcher,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._access = access
        self._repository = access.repository
        self._event_log = event_log
        self._dispatcher = dispatcher
        self._time = time_authority

    async def submit_round_summary(
        self,
        round_id: UUID,
        user_id: UUID,
        summary: RoundSummaryInput | Mapping[str, Any],
    ) -> Round:
        """Submit the round's summary, complete it and open the next round.

        Any member may write the summary. The next round's quota is the
        number of acting units at the time of submission.

        Returns:
            The newly opened round.

        Raises:
            InvalidInputError: The summary failed validation.
            NotFoundError: The round does not exist.
            ForbiddenError: The actor is not a member.
            BadRequestError: Actions of the round are still unresolved.
            WrongPhaseError: The game is not in ROUND_SUMMARY for this round.
            AlreadySubmittedError: The round already has a summary.
        """
        data = validate_input(RoundSummaryInput, summary)
        round_ = await self._access.get_round(round_id)
        ctx = await self._access.load_game(round_.game_id)
        actor = require_member(ctx.players, user_id)

        if not round_.is_complete:
            raise BadRequestError(
                f"Round is not complete. {round_.remaining} actions remaining."
            )
        if await self._repository.get_round_summary(round_id) is not None:
            raise AlreadySubmittedError("Round summary already submitted")
        require_game_phase(ctx.game, GamePhase.ROUND_SUMMARY, "Game is not in round summary phase")
        if ctx.game.current_round_id != round_id:
            raise WrongPhaseError("Round is not the game's current round")

        actions = await self._repository.list_round_actions(round_id)
        outcomes = compute_round_outcomes(actions, data.outcomes)
        now = self._time.now()
        next_round = Round(
            round_id=uuid7(),
            game_id=round_.game_id,
            round_number=round_.round_number + 1,
            total_actions_required=round_action_quota(ctx.players),
            created_at=now,
        )
        opened = await self._repository.complete_round(
            RoundSummary(
                summary_id=uuid7(),
                round_id=round_id,
                author_id=actor.player_id,
                content=data.content,
                outcomes=outcomes,
                created_at=now,
            ),
            next_round,
            now,
        )

        await self._event_log.log_event(
            round_.game_id,
            user_id,
            ROUND_SUMMARY_SUBMITTED_EVENT_TYPE,
            {
                "round_id": str(round_id),
                "round_number": round_.round_number,
                "net_result": outcomes.net_momentum,
            },
        )
        await self._event_log.log_event(
            round_.game_id,
            None,
            ROUND_STARTED_EVENT_TYPE,
            {"round_id": str(opened.round_id), "round_number": opened.round_number},
        )
        logger.info(
            "round_completed",
            game_id=str(round_.game_id),
            round_number=round_.round_number,
            next_round_number=opened.round_number,
            next_round_quota=opened.total_actions_required,
        )
        self._dispatcher.dispatch(
            NotificationEvent.NEW_ROUND,
            ctx.human_user_ids(),
            {
                "game_id": str(round_.game_id),
                "game_name": ctx.game.name,
                "round_number": opened.round_number,
            },
        )
        return opened

    async def skip_remaining_proposals(self, game_id: UUID, user_id: UUID) -> Round:
        """Host closes the round with the actions proposed so far.

        The round's quota shrinks to its action count and the game moves
        to ROUND_SUMMARY.

        Raises:
            ForbiddenError: The actor is not the host.
            WrongPhaseError: The game is not idle in PROPOSAL.
            BadRequestError: No action was proposed this round.
        """
        ctx = await self._access.load_game(game_id)
        require_host(ctx.players, user_id)
        game = ctx.game
        if (
            not game.is_active
            or game.current_phase != GamePhase.PROPOSAL
            or game.current_action_id is not None
            or game.current_round_id is None
        ):
            raise WrongPhaseError(
                "Cannot skip - game is not waiting for proposals",
                expected=GamePhase.PROPOSAL.value,
                actual=game.current_phase.value,
            )

        actions = await self._repository.list_round_actions(game.current_round_id)
        if not actions:
            raise BadRequestError(
                "Cannot skip - at least one action must be proposed before moving on"
            )

        closed = await self._repository.close_round_early(
            game_id, game.current_round_id, self._time.now()
        )
        await self._event_log.log_event(
            game_id,
            user_id,
            PROPOSALS_SKIPPED_EVENT_TYPE,
            {
                "round_id": str(closed.round_id),
                "skipped_by_host": True,
                "completed_actions": closed.actions_completed,
            },
        )
        logger.info(
            "proposals_skipped",
            game_id=str(game_id),
            round_id=str(closed.round_id),
            completed_actions=closed.actions_completed,
        )
        self._dispatcher.dispatch(
            NotificationEvent.ROUND_SUMMARY_NEEDED,
            ctx.human_user_ids(),
            {
                "game_id": str(game_id),
                "game_name": game.name,
                "round_number": closed.round_number,
                "actions_completed": closed.actions_completed,
            },
        )
        return closed

    async def get_round_progress(self, round_id: UUID, user_id: UUID) -> RoundProgress:
        round_ = await self._access.get_round(round_id)
        ctx = await self._access.load_game(round_.game_id)
        require_member(ctx.players, user_id)
        actions = await self._repository.list_round_actions(round_id)
        return RoundProgress(
            round=round_,
            phase=ctx.game.current_phase,
            actions_proposed=len(actions),
            actions_resolved=sum(1 for a in actions if a.is_resolved),
            proposed_by=frozenset(a.initiator_id for a in actions),
        )

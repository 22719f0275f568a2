"""Action resolution and NPC follow-up.

Turns a validated resolution request into a committed transition: the
strategy produces a result, the phase machine plans the move into RESOLVED,
the repository applies it with the round counter, momentum and any
auto-cast votes in one write, and then the event log and notifications
follow. When the game returns to PROPOSAL, the NPC (if any) proposes its
scripted action once every human acting unit has proposed.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import UUID

from structlog import get_logger
from uuid6 import uuid7

from mosaic.application.ports.event_log import EventLogProtocol
from mosaic.application.ports.time_authority import TimeAuthorityProtocol
from mosaic.application.services.game_access import ActionContext, GameAccess
from mosaic.application.services.notification_dispatcher import NotificationDispatcher
from mosaic.application.services.resolution import (
    ArbiterResolutionContext,
    ArbiterResolutionStrategy,
    ResolutionVote,
    VotingResolutionStrategy,
)
from mosaic.domain.errors import BadRequestError, DuplicateProposalError, WrongPhaseError
from mosaic.domain.events import (
    ACTION_RESOLVED_EVENT_TYPE,
    NPC_ACTION_PROPOSED_EVENT_TYPE,
    NotificationEvent,
)
from mosaic.domain.models import Action, GamePhase, ResolutionResult, Vote
from mosaic.domain.services.acting_units import active_npc, count_acting_units, human_players
from mosaic.domain.services.phase_machine import plan_resolution

logger = get_logger(__name__)


class ActionResolutionService:
    """Resolves actions and triggers the NPC's automatic proposal."""

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

    async def resolve_by_votes(
        self,
        ctx: ActionContext,
        *,
        actor_user_id: UUID | None,
        skipped_votes: Sequence[Vote] = (),
        voting_skipped: bool = False,
    ) -> Action:
        """Resolve a VOTING action over its votes plus any auto-cast votes.

        Raises:
            BadRequestError: The game's strategy is not a voting strategy.
            WrongPhaseError: The action left VOTING before the write.
        """
        strategy = ctx.strategy
        if not isinstance(strategy, VotingResolutionStrategy):
            raise BadRequestError("Voting is not used in arbiter games")

        votes = [*await self._repository.list_votes(ctx.action.action_id), *skipped_votes]
        result = strategy.resolve(
            [
                ResolutionVote(
                    player_id=v.player_id,
                    vote_type=v.vote_type,
                    success_tokens=v.success_tokens,
                    failure_tokens=v.failure_tokens,
                )
                for v in votes
            ]
        )
        return await self._finalize(
            ctx,
            result,
            actor_user_id=actor_user_id,
            skipped_votes=skipped_votes,
            voting_skipped=voting_skipped,
        )

    async def resolve_by_arbiter(self, ctx: ActionContext, *, actor_user_id: UUID) -> Action:
        """Resolve an ARBITER_REVIEW action from the strong-argument counts.

        Raises:
            BadRequestError: The game's strategy is not an arbiter strategy.
            WrongPhaseError: The action left ARBITER_REVIEW before the write.
        """
        strategy = ctx.strategy
        if not isinstance(strategy, ArbiterResolutionStrategy):
            raise BadRequestError("Current strategy does not support arbiter review")

        arguments = await self._repository.list_arguments(ctx.action.action_id)
        context = ArbiterResolutionContext(
            strong_pro_count=sum(1 for a in arguments if a.is_strong and a.argument_type.is_pro),
            strong_anti_count=sum(1 for a in arguments if a.is_strong and a.argument_type.is_anti),
        )
        return await self._finalize(
            ctx, strategy.resolve(context), actor_user_id=actor_user_id
        )

    async def _finalize(
        self,
        ctx: ActionContext,
        result: ResolutionResult,
        *,
        actor_user_id: UUID | None,
        skipped_votes: Sequence[Vote] = (),
        voting_skipped: bool = False,
    ) -> Action:
        action = ctx.action
        round_ = await self._access.get_round(action.round_id)
        initiator = ctx.initiator
        is_npc_action = initiator is not None and initiator.is_npc

        transition = plan_resolution(
            ctx.game,
            round_,
            action,
            result,
            ctx.strategy.strategy_id,
            voting_skipped=voting_skipped,
            momentum_delta=result.result_value if is_npc_action else 0,
            now=self._time.now(),
        )
        resolved = await self._repository.apply_transition(transition, skipped_votes)

        await self._event_log.log_event(
            action.game_id,
            actor_user_id,
            ACTION_RESOLVED_EVENT_TYPE,
            {
                "action_id": str(action.action_id),
                "strategy": ctx.strategy.strategy_id,
                "result_type": result.result_type.value,
                "result_value": result.result_value,
                "voting_skipped": voting_skipped,
            },
        )
        logger.info(
            "action_resolved",
            game_id=str(action.game_id),
            action_id=str(action.action_id),
            strategy=ctx.strategy.strategy_id,
            result_type=result.result_type.value,
            result_value=result.result_value,
            next_phase=transition.to_phase.value,
        )

        if initiator is not None and not initiator.is_npc:
            self._dispatcher.dispatch(
                NotificationEvent.RESOLUTION_READY,
                [initiator.user_id],
                {
                    "game_id": str(action.game_id),
                    "game_name": ctx.game.name,
                    "action_description": action.action_description,
                },
            )

        if transition.to_phase == GamePhase.ROUND_SUMMARY:
            self._dispatcher.dispatch(
                NotificationEvent.ROUND_SUMMARY_NEEDED,
                ctx.human_user_ids(),
                {
                    "game_id": str(action.game_id),
                    "game_name": ctx.game.name,
                    "actions_completed": round_.actions_completed + 1,
                },
            )
        else:
            await self.propose_npc_action_if_due(action.game_id)

        return resolved

    async def propose_npc_action_if_due(self, game_id: UUID) -> Action | None:
        """Propose the NPC's scripted action once all humans have proposed.

        Returns:
            The NPC's action, or None when no proposal was due.
        """
        game = await self._access.get_game(game_id)
        if (
            not game.is_active
            or game.current_phase != GamePhase.PROPOSAL
            or game.current_action_id is not None
            or game.current_round_id is None
        ):
            return None

        players = await self._repository.list_players(game_id)
        npc = active_npc(players)
        if npc is None:
            return None

        round_actions = await self._repository.list_round_actions(game.current_round_id)
        if any(a.initiator_id == npc.player_id for a in round_actions):
            return None

        humans = human_players(players)
        human_ids = {p.player_id for p in humans}
        human_proposals = sum(1 for a in round_actions if a.initiator_id in human_ids)
        if human_proposals < count_acting_units(humans):
            return None

        now = self._time.now()
        action = Action(
            action_id=uuid7(),
            game_id=game_id,
            round_id=game.current_round_id,
            initiator_id=npc.player_id,
            action_description=npc.npc_action_description or f"{npc.player_name} takes action",
            desired_outcome=npc.npc_desired_outcome or f"{npc.player_name} achieves their goal",
            proposed_at=now,
        )
        try:
            stored = await self._repository.create_action(action, (), now)
        except (WrongPhaseError, DuplicateProposalError) as e:
            # Lost the race against a concurrent proposal; the next
            # resolution re-checks.
            logger.info(
                "npc_proposal_skipped",
                game_id=str(game_id),
                reason=str(e),
            )
            return None

        await self._event_log.log_event(
            game_id,
            None,
            NPC_ACTION_PROPOSED_EVENT_TYPE,
            {
                "action_id": str(stored.action_id),
                "npc_player_id": str(npc.player_id),
                "description": stored.action_description,
            },
        )
        logger.info(
            "npc_action_proposed",
            game_id=str(game_id),
            action_id=str(stored.action_id),
            npc_player_id=str(npc.player_id),
        )
        self._dispatcher.dispatch(
            NotificationEvent.ACTION_PROPOSED,
            [p.user_id for p in humans],
            {
                "game_id": str(game_id),
                "game_name": game.name,
                "initiator_name": npc.player_name,
                "action_description": stored.action_description,
            },
        )
        return stored

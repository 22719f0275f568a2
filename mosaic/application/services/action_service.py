"""Action orchestration: proposals, argumentation, voting and narration.

Each operation validates its input, loads the game around the action,
checks the actor's seat and the phase, then performs a single
compare-and-set write through the repository. Event-log entries and
notifications follow the write; notifications never block the caller.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from structlog import get_logger
from uuid6 import uuid7

from mosaic.application.dtos import (
    ActionProposalInput,
    ArgumentationProgress,
    ArgumentInput,
    NarrationInput,
    SkipVotingResult,
    VoteInput,
    VoteOutcome,
    VotesView,
    validate_input,
)
from mosaic.application.ports.event_log import EventLogProtocol
from mosaic.application.ports.time_authority import TimeAuthorityProtocol
from mosaic.application.services.action_resolution_service import ActionResolutionService
from mosaic.application.services.game_access import (
    ActionContext,
    GameAccess,
    require_host,
    require_member,
)
from mosaic.application.services.notification_dispatcher import NotificationDispatcher
from mosaic.application.services.resolution import VotingResolutionStrategy
from mosaic.domain.errors import (
    BadRequestError,
    DuplicateNarrationError,
    DuplicateProposalError,
    ForbiddenError,
    NoArbiterAssignedError,
    NotFoundError,
    WrongPhaseError,
)
from mosaic.domain.events import (
    ACTION_PROPOSED_EVENT_TYPE,
    ARGUMENT_ADDED_EVENT_TYPE,
    ARGUMENTATION_COMPLETED_EVENT_TYPE,
    ARGUMENTATION_SKIPPED_EVENT_TYPE,
    ARGUMENTATION_TIMEOUT_EVENT_TYPE,
    NARRATION_ADDED_EVENT_TYPE,
    VOTE_CAST_EVENT_TYPE,
    VOTING_SKIPPED_EVENT_TYPE,
    VOTING_TIMEOUT_EVENT_TYPE,
    NotificationEvent,
)
from mosaic.domain.models import (
    Action,
    ActionStatus,
    Argument,
    ArgumentType,
    GamePhase,
    GamePlayer,
    Narration,
    Vote,
    VoteType,
)
from mosaic.domain.services.acting_units import (
    acting_unit_key,
    count_acting_units,
    count_completed_units,
    persona_member_ids,
)
from mosaic.domain.services.phase_machine import (
    plan_argumentation_exit,
    require_action_status,
    require_game_phase,
)

logger = get_logger(__name__)


class ActionService:
    """Application service for the per-action phases."""

    def __init__(
        self,
        access: GameAccess,
        resolution: ActionResolutionService,
        event_log: EventLogProtocol,
        dispatcher: NotificationDispatcher,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._access = access
        self._repository = access.repository
        self._resolution = resolution
        self._event_log = event_log
        self._dispatcher = dispatcher
        self._time = time_authority

    # ------------------------------------------------------------------
    # Proposal
    # ------------------------------------------------------------------

    async def propose_action(
        self,
        game_id: UUID,
        user_id: UUID,
        proposal: ActionProposalInput | Mapping[str, Any],
    ) -> Action:
        """Propose an action and open its argumentation.

        The initiator's opening arguments are stored as INITIATOR_FOR.

        Raises:
            InvalidInputError: The proposal failed validation.
            NotFoundError: The game or its round does not exist.
            ForbiddenError: Not a member, or a non-lead member of a shared persona.
            WrongPhaseError: The game is not active or not in PROPOSAL.
            DuplicateProposalError: The acting unit already proposed this round.
        """
        data = validate_input(ActionProposalInput, proposal)
        ctx = await self._access.load_game(game_id)
        actor = require_member(ctx.players, user_id)
        game = ctx.game

        if not game.is_active:
            raise WrongPhaseError(
                "Game is not active", expected="ACTIVE", actual=game.status.value
            )
        require_game_phase(game, GamePhase.PROPOSAL, "Game is not in proposal phase")
        if game.current_round_id is None:
            raise NotFoundError("Round not found")

        round_actions = await self._repository.list_round_actions(game.current_round_id)
        if ctx.settings.allow_shared_personas and actor.persona_id is not None:
            if not actor.is_persona_lead:
                raise ForbiddenError("Only the persona lead can propose actions")
            member_ids = persona_member_ids(ctx.players, actor.persona_id)
            if any(a.initiator_id in member_ids for a in round_actions):
                raise DuplicateProposalError(
                    "Your persona has already proposed an action this round"
                )
        elif any(a.initiator_id == actor.player_id for a in round_actions):
            raise DuplicateProposalError("You have already proposed an action this round")

        now = self._time.now()
        action = Action(
            action_id=uuid7(),
            game_id=game_id,
            round_id=game.current_round_id,
            initiator_id=actor.player_id,
            action_description=data.action_description,
            desired_outcome=data.desired_outcome,
            proposed_at=now,
        )
        initial_arguments = [
            Argument(
                argument_id=uuid7(),
                action_id=action.action_id,
                player_id=actor.player_id,
                argument_type=ArgumentType.INITIATOR_FOR,
                content=content,
                sequence=index,
                created_at=now,
            )
            for index, content in enumerate(data.initial_arguments, start=1)
        ]
        stored = await self._repository.create_action(action, initial_arguments, now)

        await self._event_log.log_event(
            game_id,
            user_id,
            ACTION_PROPOSED_EVENT_TYPE,
            {"action_id": str(stored.action_id), "description": stored.action_description},
        )
        logger.info(
            "action_proposed",
            game_id=str(game_id),
            action_id=str(stored.action_id),
            sequence_number=stored.sequence_number,
        )
        self._dispatcher.dispatch(
            NotificationEvent.ACTION_PROPOSED,
            [uid for uid in ctx.human_user_ids() if uid != user_id],
            {
                "game_id": str(game_id),
                "game_name": game.name,
                "initiator_name": actor.player_name,
                "action_description": stored.action_description,
            },
        )
        return stored

    # ------------------------------------------------------------------
    # Argumentation
    # ------------------------------------------------------------------

    async def add_argument(
        self,
        action_id: UUID,
        user_id: UUID,
        argument: ArgumentInput | Mapping[str, Any],
    ) -> Argument:
        """Add an argument to an action in ARGUING.

        The initiator (or a co-member of the initiator's shared persona) may
        only clarify; everyone else may only argue FOR or AGAINST.

        Raises:
            InvalidInputError: The argument failed validation.
            WrongPhaseError: The action is not in argumentation.
            BadRequestError: Role, side-cap or per-player limit violated.
        """
        data = validate_input(ArgumentInput, argument)
        ctx = await self._access.load_action(action_id, user_id)
        actor = _actor(ctx)
        action = ctx.action
        require_action_status(action, ActionStatus.ARGUING, "Action is not in argumentation phase")

        argument_type = ArgumentType(data.argument_type)
        is_initiator = self._acts_as_initiator(ctx, actor)
        if is_initiator and argument_type != ArgumentType.CLARIFICATION:
            raise BadRequestError("Initiator can only add clarification arguments")
        if not is_initiator and argument_type == ArgumentType.CLARIFICATION:
            raise BadRequestError("Only initiator can add clarification")

        existing = await self._repository.list_arguments(action_id)

        side_cap = ctx.strategy.max_arguments_per_side
        if side_cap is not None and argument_type != ArgumentType.CLARIFICATION:
            same_side = [
                a for a in existing if a.argument_type.is_pro == argument_type.is_pro
                and a.argument_type != ArgumentType.CLARIFICATION
            ]
            if len(same_side) >= side_cap:
                side = "FOR" if argument_type.is_pro else "AGAINST"
                raise BadRequestError(f"Maximum {side_cap} {side} arguments allowed")

        limit = ctx.settings.argument_limit
        if ctx.settings.shared_argument_pool and actor.persona_id is not None:
            member_ids = persona_member_ids(ctx.players, actor.persona_id)
            if sum(1 for a in existing if a.player_id in member_ids) >= limit:
                raise BadRequestError(f"Maximum {limit} arguments for your persona")
        elif sum(1 for a in existing if a.player_id == actor.player_id) >= limit:
            raise BadRequestError(f"Maximum {limit} arguments per player")

        stored = await self._repository.add_argument(
            Argument(
                argument_id=uuid7(),
                action_id=action_id,
                player_id=actor.player_id,
                argument_type=argument_type,
                content=data.content,
                created_at=self._time.now(),
            )
        )
        await self._event_log.log_event(
            action.game_id,
            user_id,
            ARGUMENT_ADDED_EVENT_TYPE,
            {"action_id": str(action_id), "argument_type": argument_type.value},
        )
        logger.debug(
            "argument_added",
            action_id=str(action_id),
            argument_id=str(stored.argument_id),
            argument_type=argument_type.value,
        )
        return stored

    async def mark_argumentation_complete(
        self, action_id: UUID, user_id: UUID
    ) -> ArgumentationProgress:
        """Mark the actor's acting unit as done arguing.

        Once every human acting unit is done, the action moves to the
        status its strategy names (VOTING or ARBITER_REVIEW).

        Raises:
            WrongPhaseError: The action is not in argumentation.
            NoArbiterAssignedError: The strategy needs an arbiter and none
                is seated; the action stays in ARGUING.
        """
        ctx = await self._access.load_action(action_id, user_id)
        actor = _actor(ctx)
        require_action_status(
            ctx.action, ActionStatus.ARGUING, "Action is not in argumentation phase"
        )

        completions = await self._repository.record_argumentation_complete(
            action_id, actor.player_id
        )
        humans = ctx.humans
        threshold = count_acting_units(humans)
        completed = count_completed_units(humans, completions)
        if completed < threshold:
            logger.debug(
                "argumentation_marked_complete",
                action_id=str(action_id),
                units_remaining=threshold - completed,
            )
            return ArgumentationProgress(
                action=ctx.action, units_remaining=threshold - completed, advanced=False
            )

        moved = await self._exit_argumentation(
            ctx,
            skipped=False,
            actor_user_id=user_id,
            event_type=ARGUMENTATION_COMPLETED_EVENT_TYPE,
        )
        return ArgumentationProgress(action=moved, units_remaining=0, advanced=True)

    async def skip_argumentation(self, action_id: UUID, user_id: UUID) -> Action:
        """Host ends argumentation early.

        Raises:
            ForbiddenError: The actor is not the host.
            WrongPhaseError: The action is not in argumentation.
            NoArbiterAssignedError: The strategy needs an arbiter and none
                is seated.
        """
        ctx = await self._access.load_action(action_id, user_id)
        require_host(ctx.players, user_id)
        require_action_status(
            ctx.action, ActionStatus.ARGUING, "Action is not in argumentation phase"
        )
        return await self._exit_argumentation(
            ctx,
            skipped=True,
            actor_user_id=user_id,
            event_type=ARGUMENTATION_SKIPPED_EVENT_TYPE,
        )

    async def expire_argumentation(self, action_id: UUID) -> Action:
        """End argumentation on behalf of the timeout sweep."""
        ctx = await self._access.load_action(action_id, None)
        require_action_status(
            ctx.action, ActionStatus.ARGUING, "Action is not in argumentation phase"
        )
        return await self._exit_argumentation(
            ctx,
            skipped=True,
            actor_user_id=None,
            event_type=ARGUMENTATION_TIMEOUT_EVENT_TYPE,
        )

    async def _exit_argumentation(
        self,
        ctx: ActionContext,
        *,
        skipped: bool,
        actor_user_id: UUID | None,
        event_type: str,
    ) -> Action:
        strategy = ctx.strategy
        arbiter = ctx.active_arbiter()
        if strategy.requires_arbiter and arbiter is None:
            raise NoArbiterAssignedError(ctx.game.game_id)

        transition = plan_argumentation_exit(
            ctx.game,
            ctx.action,
            strategy.phase_after_argumentation,
            skipped=skipped,
            now=self._time.now(),
        )
        moved = await self._repository.apply_transition(transition)

        await self._event_log.log_event(
            ctx.game.game_id,
            actor_user_id,
            event_type,
            {"action_id": str(moved.action_id), "next_status": moved.status.value},
        )
        logger.info(
            "argumentation_ended",
            game_id=str(ctx.game.game_id),
            action_id=str(moved.action_id),
            next_status=moved.status.value,
            skipped=skipped,
        )

        payload = {
            "game_id": str(ctx.game.game_id),
            "game_name": ctx.game.name,
            "action_description": moved.action_description,
        }
        if moved.status == ActionStatus.VOTING:
            self._dispatcher.dispatch(
                NotificationEvent.VOTING_STARTED, ctx.human_user_ids(), payload
            )
        elif arbiter is not None:
            self._dispatcher.dispatch(
                NotificationEvent.ARBITER_REVIEW_STARTED, [arbiter.user_id], payload
            )
        return moved

    # ------------------------------------------------------------------
    # Voting
    # ------------------------------------------------------------------

    async def submit_vote(
        self,
        action_id: UUID,
        user_id: UUID,
        vote: VoteInput | Mapping[str, Any],
    ) -> VoteOutcome:
        """Cast a vote; the vote that reaches the threshold resolves the action.

        Raises:
            InvalidInputError: The vote failed validation.
            BadRequestError: The game resolves by arbiter, not by vote.
            WrongPhaseError: The action is not in voting.
            DuplicateVoteError: The player (or their persona) already voted.
            PersistenceError: The resolving write failed; the action stays
                in VOTING.
        """
        data = validate_input(VoteInput, vote)
        ctx = await self._access.load_action(action_id, user_id)
        actor = _actor(ctx)
        strategy = ctx.strategy
        if not isinstance(strategy, VotingResolutionStrategy):
            raise BadRequestError("Voting is not used in arbiter games")
        require_action_status(ctx.action, ActionStatus.VOTING, "Action is not in voting phase")

        vote_type = VoteType(data.vote_type)
        tokens = strategy.map_vote_to_tokens(vote_type)
        stored = Vote(
            vote_id=uuid7(),
            action_id=action_id,
            player_id=actor.player_id,
            vote_type=vote_type,
            success_tokens=tokens.success_tokens,
            failure_tokens=tokens.failure_tokens,
            cast_at=self._time.now(),
        )
        # One slot per persona when it votes as a unit; the repository enforces it
        voting_unit = actor.player_id
        if ctx.settings.one_vote_per_persona and actor.persona_id is not None:
            voting_unit = actor.persona_id
        votes_cast = await self._repository.add_vote(stored, voting_unit)
        await self._event_log.log_event(
            ctx.game.game_id, user_id, VOTE_CAST_EVENT_TYPE, {"action_id": str(action_id)}
        )

        humans = ctx.humans
        threshold = count_acting_units(humans) if ctx.settings.one_vote_per_persona else len(humans)
        if votes_cast < threshold:
            return VoteOutcome(vote=stored, votes_cast=votes_cast, votes_required=threshold)

        try:
            resolved = await self._resolution.resolve_by_votes(ctx, actor_user_id=user_id)
        except WrongPhaseError:
            # A concurrent final vote already resolved the action.
            logger.info("vote_resolution_already_applied", action_id=str(action_id))
            resolved = await self._access.get_action(action_id)
        return VoteOutcome(
            vote=stored,
            votes_cast=votes_cast,
            votes_required=threshold,
            resolved_action=resolved,
        )

    async def skip_voting(self, action_id: UUID, user_id: UUID) -> SkipVotingResult:
        """Host ends voting early.

        Every required voter who has not voted gets an auto-cast UNCERTAIN
        vote marked ``was_skipped``; the action then resolves over the full
        pool.

        Raises:
            ForbiddenError: The actor is not the host.
            BadRequestError: The game resolves by arbiter, not by vote.
            WrongPhaseError: The action is not in voting.
        """
        ctx = await self._access.load_action(action_id, user_id)
        require_host(ctx.players, user_id)
        return await self._skip_voting(ctx, actor_user_id=user_id, event_type=VOTING_SKIPPED_EVENT_TYPE)

    async def expire_voting(self, action_id: UUID) -> SkipVotingResult:
        """End voting on behalf of the timeout sweep."""
        ctx = await self._access.load_action(action_id, None)
        return await self._skip_voting(ctx, actor_user_id=None, event_type=VOTING_TIMEOUT_EVENT_TYPE)

    async def _skip_voting(
        self,
        ctx: ActionContext,
        *,
        actor_user_id: UUID | None,
        event_type: str,
    ) -> SkipVotingResult:
        strategy = ctx.strategy
        if not isinstance(strategy, VotingResolutionStrategy):
            raise BadRequestError("Skip voting is not applicable in arbiter games")
        require_action_status(ctx.action, ActionStatus.VOTING, "Action is not in voting phase")

        votes = await self._repository.list_votes(ctx.action.action_id)
        missing = self._missing_voters(ctx, {v.player_id for v in votes})
        tokens = strategy.map_vote_to_tokens(VoteType.UNCERTAIN)
        now = self._time.now()
        skipped_votes = tuple(
            Vote(
                vote_id=uuid7(),
                action_id=ctx.action.action_id,
                player_id=player.player_id,
                vote_type=VoteType.UNCERTAIN,
                success_tokens=tokens.success_tokens,
                failure_tokens=tokens.failure_tokens,
                was_skipped=True,
                cast_at=now,
            )
            for player in missing
        )

        resolved = await self._resolution.resolve_by_votes(
            ctx,
            actor_user_id=actor_user_id,
            skipped_votes=skipped_votes,
            voting_skipped=True,
        )
        await self._event_log.log_event(
            ctx.game.game_id,
            actor_user_id,
            event_type,
            {
                "action_id": str(ctx.action.action_id),
                "skipped_by_host": actor_user_id is not None,
                "missing_voters_count": len(missing),
                "missing_voter_names": [p.player_name for p in missing],
            },
        )
        logger.info(
            "voting_skipped",
            action_id=str(ctx.action.action_id),
            missing_voters=len(missing),
            by_timeout=actor_user_id is None,
        )
        return SkipVotingResult(action=resolved, skipped_votes=skipped_votes)

    @staticmethod
    def _missing_voters(ctx: ActionContext, voted_ids: set[UUID]) -> list[GamePlayer]:
        """Required voters without a vote.

        With one vote per persona, a persona that has not voted is
        represented by its lead (or its first member when it has no lead).
        """
        humans = ctx.humans
        if not ctx.settings.one_vote_per_persona:
            return [p for p in humans if p.player_id not in voted_ids]

        voted_units = {acting_unit_key(p) for p in humans if p.player_id in voted_ids}
        representatives: dict[UUID, GamePlayer] = {}
        for player in humans:
            key = acting_unit_key(player)
            if key in voted_units:
                continue
            current = representatives.get(key)
            if current is None or (player.is_persona_lead and not current.is_persona_lead):
                representatives[key] = player
        return list(representatives.values())

    async def get_votes(self, action_id: UUID, user_id: UUID) -> VotesView:
        """Return the votes on an action; only the count while voting is open."""
        ctx = await self._access.load_action(action_id, user_id)
        votes = await self._repository.list_votes(action_id)
        if ctx.action.status == ActionStatus.VOTING:
            return VotesView(votes_submitted=len(votes))
        return VotesView(votes_submitted=len(votes), votes=tuple(votes))

    # ------------------------------------------------------------------
    # Narration
    # ------------------------------------------------------------------

    async def submit_narration(
        self,
        action_id: UUID,
        user_id: UUID,
        narration: NarrationInput | Mapping[str, Any],
    ) -> Narration:
        """Narrate how a resolved action played out.

        In ``initiator_only`` mode only the initiator may narrate (the lead,
        for a shared persona); in ``collaborative`` mode, or for NPC actions,
        any member may.

        Raises:
            InvalidInputError: The narration failed validation.
            WrongPhaseError: The action is not resolved yet.
            ForbiddenError: The actor may not narrate this action.
            DuplicateNarrationError: The action already has a narration.
        """
        data = validate_input(NarrationInput, narration)
        ctx = await self._access.load_action(action_id, user_id)
        actor = _actor(ctx)
        action = ctx.action
        require_action_status(
            action, ActionStatus.RESOLVED, "Action must be resolved before narrating"
        )

        initiator = ctx.initiator
        is_npc_action = initiator is not None and initiator.is_npc
        if not is_npc_action and ctx.settings.narration_mode == "initiator_only":
            shares_persona = (
                ctx.settings.allow_shared_personas
                and actor.persona_id is not None
                and initiator is not None
                and initiator.persona_id == actor.persona_id
            )
            if shares_persona:
                if not actor.is_persona_lead:
                    raise ForbiddenError(
                        "Only the persona lead can narrate for your shared persona"
                    )
            elif actor.player_id != action.initiator_id:
                raise ForbiddenError("Only the initiator can narrate this action")

        if await self._repository.get_narration(action_id) is not None:
            raise DuplicateNarrationError(action_id)

        stored = await self._repository.add_narration(
            Narration(
                narration_id=uuid7(),
                action_id=action_id,
                author_id=actor.player_id,
                content=data.content,
                created_at=self._time.now(),
            )
        )
        await self._event_log.log_event(
            action.game_id, user_id, NARRATION_ADDED_EVENT_TYPE, {"action_id": str(action_id)}
        )
        logger.debug("narration_added", action_id=str(action_id))
        return stored

    @staticmethod
    def _acts_as_initiator(ctx: ActionContext, actor: GamePlayer) -> bool:
        if actor.player_id == ctx.action.initiator_id:
            return True
        initiator = ctx.initiator
        return (
            ctx.settings.allow_shared_personas
            and actor.persona_id is not None
            and initiator is not None
            and initiator.persona_id == actor.persona_id
        )


def _actor(ctx: ActionContext) -> GamePlayer:
    if ctx.actor is None:
        raise ForbiddenError("Not a member of this game")
    return ctx.actor

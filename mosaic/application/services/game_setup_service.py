"""Game setup: strategy catalogue and game start."""

from __future__ import annotations

from uuid import UUID

from structlog import get_logger
from uuid6 import uuid7

from mosaic.application.dtos import StrategyInfo
from mosaic.application.ports.event_log import EventLogProtocol
from mosaic.application.ports.time_authority import TimeAuthorityProtocol
from mosaic.application.services.game_access import GameAccess, require_host
from mosaic.application.services.notification_dispatcher import NotificationDispatcher
from mosaic.domain.errors import BadRequestError, WrongPhaseError
from mosaic.domain.events import (
    GAME_STARTED_EVENT_TYPE,
    ROUND_STARTED_EVENT_TYPE,
    NotificationEvent,
)
from mosaic.domain.models import Game, GameStatus, Round
from mosaic.domain.services.acting_units import round_action_quota

logger = get_logger(__name__)

MIN_HUMAN_PLAYERS = 2


class GameSetupService:
    """Lists resolution strategies and starts games."""

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

    def get_all_strategies(self) -> list[StrategyInfo]:
        """Describe every registered strategy, in registration order."""
        return [
            StrategyInfo(
                strategy_id=s.strategy_id,
                display_name=s.display_name,
                description=s.description,
                kind=s.kind.value,
                requires_arbiter=s.requires_arbiter,
                max_arguments_per_side=s.max_arguments_per_side,
            )
            for s in self._access.registry.list_all()
        ]

    async def start_game(self, game_id: UUID, user_id: UUID) -> Game:
        """Start a game from the lobby and open round 1.

        Round 1 requires one action per acting unit, plus one for the NPC
        when the game has one.

        Raises:
            ForbiddenError: The actor is not the host.
            WrongPhaseError: The game has already started.
            BadRequestError: Too few players, missing personas, or an
                unknown resolution strategy.
        """
        ctx = await self._access.load_game(game_id)
        require_host(ctx.players, user_id)
        game = ctx.game
        if game.status != GameStatus.LOBBY:
            raise WrongPhaseError(
                "Game has already started",
                expected=GameStatus.LOBBY.value,
                actual=game.status.value,
            )

        humans = ctx.humans
        if len(humans) < MIN_HUMAN_PLAYERS:
            raise BadRequestError(f"Need at least {MIN_HUMAN_PLAYERS} players to start")
        if ctx.settings.personas_required:
            missing = [p.player_name for p in humans if p.persona_id is None]
            if missing:
                raise BadRequestError(
                    "All players must select a persona before starting. "
                    f"Missing: {', '.join(missing)}"
                )

        now = self._time.now()
        first_round = Round(
            round_id=uuid7(),
            game_id=game_id,
            round_number=1,
            total_actions_required=round_action_quota(ctx.players),
            created_at=now,
        )
        started = await self._repository.start_game(game_id, first_round, now)

        await self._event_log.log_event(
            game_id,
            user_id,
            GAME_STARTED_EVENT_TYPE,
            {"player_count": len(humans), "strategy": ctx.strategy.strategy_id},
        )
        await self._event_log.log_event(
            game_id,
            None,
            ROUND_STARTED_EVENT_TYPE,
            {"round_id": str(first_round.round_id), "round_number": 1},
        )
        logger.info(
            "game_started",
            game_id=str(game_id),
            strategy=ctx.strategy.strategy_id,
            round_quota=first_round.total_actions_required,
        )
        self._dispatcher.dispatch(
            NotificationEvent.GAME_STARTED,
            ctx.human_user_ids(),
            {"game_id": str(game_id), "game_name": game.name},
        )
        return started

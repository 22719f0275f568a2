"""Phase timeout sweep.

Called periodically by an external scheduler. For every ACTIVE game whose
current phase has outlived the game's ``*_timeout_hours`` setting:

- ARGUMENTATION ends the way a host skip does, with no acting user.
- VOTING ends the way a host skip does: missing voters get UNCERTAIN
  votes and the action resolves.
- PROPOSAL is never forced. The host is told once per phase instance and
  decides whether to skip the remaining proposals.

A failure in one game is recorded and logged; the sweep carries on with
the next game.
"""

from __future__ import annotations

from structlog import get_logger

from mosaic.application.dtos import TimeoutSweepResult
from mosaic.application.ports.event_log import EventLogProtocol
from mosaic.application.ports.time_authority import TimeAuthorityProtocol
from mosaic.application.services.action_service import ActionService
from mosaic.application.services.game_access import GameAccess
from mosaic.application.services.notification_dispatcher import NotificationDispatcher
from mosaic.domain.events import PROPOSAL_TIMEOUT_EVENT_TYPE, NotificationEvent
from mosaic.domain.models import Game, GamePhase

logger = get_logger(__name__)


class PhaseTimeoutService:
    """Expires phases that exceeded their configured timeout."""

    def __init__(
        self,
        access: GameAccess,
        actions: ActionService,
        event_log: EventLogProtocol,
        dispatcher: NotificationDispatcher,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._access = access
        self._repository = access.repository
        self._actions = actions
        self._event_log = event_log
        self._dispatcher = dispatcher
        self._time = time_authority

    async def process_all_timeouts(self) -> TimeoutSweepResult:
        """Run one sweep over every active game.

        Returns:
            How many timeouts were acted on, and the per-game errors.
        """
        processed = 0
        errors: list[str] = []
        for game in await self._repository.list_active_games():
            try:
                if await self._process_game(game):
                    processed += 1
            except Exception as e:
                logger.error(
                    "phase_timeout_failed",
                    game_id=str(game.game_id),
                    phase=game.current_phase.value,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                errors.append(f"{game.game_id}: {e}")

        if processed:
            logger.info("phase_timeouts_processed", processed=processed, errors=len(errors))
        return TimeoutSweepResult(processed=processed, errors=tuple(errors))

    async def _process_game(self, game: Game) -> bool:
        if game.phase_started_at is None:
            return False
        settings = self._access.settings_for(game)
        timeout = settings.timeout_for(game.current_phase)
        if timeout is None or self._time.now() - game.phase_started_at < timeout:
            return False

        if game.current_phase == GamePhase.PROPOSAL:
            return await self._notify_proposal_timeout(game)

        if game.current_action_id is None:
            return False
        if game.current_phase == GamePhase.ARGUMENTATION:
            await self._actions.expire_argumentation(game.current_action_id)
            logger.info(
                "argumentation_timed_out",
                game_id=str(game.game_id),
                action_id=str(game.current_action_id),
            )
            return True
        if game.current_phase == GamePhase.VOTING:
            result = await self._actions.expire_voting(game.current_action_id)
            logger.info(
                "voting_timed_out",
                game_id=str(game.game_id),
                action_id=str(game.current_action_id),
                auto_votes=len(result.skipped_votes),
            )
            return True
        return False

    async def _notify_proposal_timeout(self, game: Game) -> bool:
        latest = await self._event_log.latest_event(game.game_id, PROPOSAL_TIMEOUT_EVENT_TYPE)
        if latest is not None and game.phase_started_at is not None:
            if latest.occurred_at >= game.phase_started_at:
                return False

        await self._event_log.log_event(
            game.game_id, None, PROPOSAL_TIMEOUT_EVENT_TYPE, {"phase": GamePhase.PROPOSAL.value}
        )
        players = await self._repository.list_players(game.game_id)
        hosts = [p.user_id for p in players if p.is_host and p.is_active]
        if hosts:
            self._dispatcher.dispatch(
                NotificationEvent.TIMEOUT_OCCURRED,
                hosts,
                {"game_id": str(game.game_id), "game_name": game.name, "phase": "PROPOSAL"},
            )
        logger.info(
            "proposal_timed_out",
            game_id=str(game.game_id),
            host_notified=bool(hosts),
        )
        return True

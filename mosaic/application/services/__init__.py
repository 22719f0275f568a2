"""Application services for the Mosaic engine."""

from mosaic.application.services.action_resolution_service import ActionResolutionService
from mosaic.application.services.action_service import ActionService
from mosaic.application.services.arbiter_service import ArbiterService
from mosaic.application.services.game_access import (
    ActionContext,
    GameAccess,
    GameContext,
    require_arbiter,
    require_host,
    require_member,
)
from mosaic.application.services.game_setup_service import GameSetupService
from mosaic.application.services.notification_dispatcher import NotificationDispatcher
from mosaic.application.services.phase_timeout_service import PhaseTimeoutService
from mosaic.application.services.round_service import RoundService, compute_round_outcomes

__all__ = [
    "ActionContext",
    "ActionResolutionService",
    "ActionService",
    "ArbiterService",
    "GameAccess",
    "GameContext",
    "GameSetupService",
    "NotificationDispatcher",
    "PhaseTimeoutService",
    "RoundService",
    "compute_round_outcomes",
    "require_arbiter",
    "require_host",
    "require_member",
]

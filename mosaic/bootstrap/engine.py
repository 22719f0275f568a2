"""Bootstrap wiring for the game engine.

``build_engine`` constructs the strategy registry once and every service
on top of it. Ports default to the in-memory stubs; production passes
real adapters. ``get_engine``/``set_engine``/``reset_engine`` hold a
process-wide instance for callers without their own composition root.
"""

from __future__ import annotations

from dataclasses import dataclass

from structlog import get_logger

from mosaic.application.ports.event_log import EventLogProtocol
from mosaic.application.ports.game_repository import GameRepositoryProtocol
from mosaic.application.ports.notification_dispatch import NotificationDispatchProtocol
from mosaic.application.ports.randomness import RandomnessProtocol
from mosaic.application.ports.time_authority import TimeAuthorityProtocol
from mosaic.application.services import (
    ActionResolutionService,
    ActionService,
    ArbiterService,
    GameAccess,
    GameSetupService,
    NotificationDispatcher,
    PhaseTimeoutService,
    RoundService,
)
from mosaic.application.services.resolution import (
    ArbiterStrategy,
    StrategyRegistry,
    TokenDrawStrategy,
)
from mosaic.config import DEFAULT_ENGINE_CONFIG, EngineConfig
from mosaic.infrastructure.adapters import SecureRandomness, SystemTimeAuthority
from mosaic.infrastructure.stubs import (
    EventLogStub,
    GameRepositoryStub,
    NotificationDispatchStub,
)

logger = get_logger(__name__)


def build_strategy_registry(randomness: RandomnessProtocol) -> StrategyRegistry:
    """Register the built-in strategies, Token Draw first."""
    registry = StrategyRegistry()
    registry.register(TokenDrawStrategy(randomness))
    registry.register(ArbiterStrategy(randomness))
    return registry


@dataclass(frozen=True)
class GameEngine:
    """The wired services and the ports they share."""

    config: EngineConfig
    registry: StrategyRegistry
    repository: GameRepositoryProtocol
    event_log: EventLogProtocol
    dispatcher: NotificationDispatcher
    time_authority: TimeAuthorityProtocol
    access: GameAccess
    resolution: ActionResolutionService
    actions: ActionService
    arbiter: ArbiterService
    rounds: RoundService
    setup: GameSetupService
    timeouts: PhaseTimeoutService

    async def shutdown(self) -> None:
        """Wait (bounded by config) for in-flight notifications."""
        await self.dispatcher.drain(timeout=self.config.notification_drain_timeout_seconds)


def build_engine(
    *,
    config: EngineConfig | None = None,
    repository: GameRepositoryProtocol | None = None,
    event_log: EventLogProtocol | None = None,
    notification_channel: NotificationDispatchProtocol | None = None,
    randomness: RandomnessProtocol | None = None,
    time_authority: TimeAuthorityProtocol | None = None,
) -> GameEngine:
    """Wire the engine.

    Args:
        config: Engine configuration; defaults to DEFAULT_ENGINE_CONFIG.
        repository: Persistence adapter; defaults to GameRepositoryStub.
        event_log: Event log adapter; defaults to EventLogStub.
        notification_channel: Delivery adapter; defaults to
            NotificationDispatchStub.
        randomness: Random source; defaults to SecureRandomness.
        time_authority: Clock; defaults to SystemTimeAuthority.

    Raises:
        StrategyAlreadyRegisteredError: The built-in strategies collide.
        UnknownStrategyError: The configured default strategy is not
            registered.
    """
    config = config or DEFAULT_ENGINE_CONFIG
    time_authority = time_authority or SystemTimeAuthority()
    repository = repository or GameRepositoryStub()
    event_log = event_log or EventLogStub(time_authority)
    randomness = randomness or SecureRandomness()

    registry = build_strategy_registry(randomness)
    registry.get(config.default_resolution_method)

    dispatcher = NotificationDispatcher(notification_channel or NotificationDispatchStub())
    access = GameAccess(repository, registry, config)
    resolution = ActionResolutionService(access, event_log, dispatcher, time_authority)
    actions = ActionService(access, resolution, event_log, dispatcher, time_authority)

    logger.info(
        "engine_built",
        environment=config.environment,
        strategies=[s.strategy_id for s in registry.list_all()],
        default_strategy=config.default_resolution_method,
    )
    return GameEngine(
        config=config,
        registry=registry,
        repository=repository,
        event_log=event_log,
        dispatcher=dispatcher,
        time_authority=time_authority,
        access=access,
        resolution=resolution,
        actions=actions,
        arbiter=ArbiterService(access, resolution, event_log),
        rounds=RoundService(access, event_log, dispatcher, time_authority),
        setup=GameSetupService(access, event_log, dispatcher, time_authority),
        timeouts=PhaseTimeoutService(access, actions, event_log, dispatcher, time_authority),
    )


_engine: GameEngine | None = None


def get_engine() -> GameEngine:
    """Get the process-wide engine, building it from the environment."""
    global _engine
    if _engine is None:
        _engine = build_engine(config=EngineConfig.from_environment())
    return _engine


def set_engine(engine: GameEngine) -> None:
    """Set the process-wide engine (for production wiring)."""
    global _engine
    _engine = engine


def reset_engine() -> None:
    """Reset the process-wide engine for testing."""
    global _engine
    _engine = None

"""Resolution strategy registry.

Built once at process start and injected into the services that need it.
Registration order is preserved for display.
"""

from __future__ import annotations

from structlog import get_logger

from mosaic.application.services.resolution.strategy import ResolutionStrategy
from mosaic.domain.errors import StrategyAlreadyRegisteredError, UnknownStrategyError

logger = get_logger(__name__)


class StrategyRegistry:
    """Registry of resolution strategies keyed by ``strategy_id``."""

    def __init__(self) -> None:
        self._strategies: dict[str, ResolutionStrategy] = {}

    def register(self, strategy: ResolutionStrategy) -> None:
        """Register a strategy.

        Raises:
            StrategyAlreadyRegisteredError: The id is taken. Fatal at startup.
        """
        if strategy.strategy_id in self._strategies:
            raise StrategyAlreadyRegisteredError(strategy.strategy_id)
        self._strategies[strategy.strategy_id] = strategy
        logger.debug(
            "resolution_strategy_registered",
            strategy_id=strategy.strategy_id,
            kind=strategy.kind.value,
        )

    def get(self, strategy_id: str) -> ResolutionStrategy:
        """Look up a strategy.

        Raises:
            UnknownStrategyError: No strategy has that id.
        """
        strategy = self._strategies.get(strategy_id)
        if strategy is None:
            raise UnknownStrategyError(strategy_id)
        return strategy

    def list_all(self) -> list[ResolutionStrategy]:
        """Return all strategies in registration order."""
        return list(self._strategies.values())

    def __contains__(self, strategy_id: object) -> bool:
        return strategy_id in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)

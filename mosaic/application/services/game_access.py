"""Shared loading and role checks for the orchestration services.

Every operation starts the same way: load the entity, resolve the game,
check the actor's seat and role, parse the game's settings and look up its
resolution strategy. GameAccess does that once so each service reads as a
sequence of rule checks.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from mosaic.application.dtos.game_settings import GameSettings
from mosaic.application.ports.game_repository import GameRepositoryProtocol
from mosaic.application.services.resolution import ResolutionStrategy, StrategyRegistry
from mosaic.config.engine_config import EngineConfig
from mosaic.domain.errors import ForbiddenError, NotFoundError
from mosaic.domain.models import Action, Game, GamePlayer, GamePlayerRole, Round
from mosaic.domain.services.acting_units import human_players


@dataclass(frozen=True)
class GameContext:
    """A game loaded for one operation.

    Attributes:
        game: The game.
        players: All seats of the game in join order.
        settings: Parsed game settings.
        strategy: The game's resolution strategy.
    """

    game: Game
    players: list[GamePlayer]
    settings: GameSettings
    strategy: ResolutionStrategy

    @property
    def humans(self) -> list[GamePlayer]:
        """Active, non-NPC players."""
        return human_players(self.players)

    def player_by_id(self, player_id: UUID) -> GamePlayer | None:
        return next((p for p in self.players if p.player_id == player_id), None)

    def active_arbiter(self) -> GamePlayer | None:
        return next(
            (p for p in self.players if p.is_active and p.role == GamePlayerRole.ARBITER),
            None,
        )

    def human_user_ids(self) -> list[UUID]:
        return [p.user_id for p in self.humans]

    def host_user_ids(self) -> list[UUID]:
        return [p.user_id for p in self.humans if p.is_host]


@dataclass(frozen=True)
class ActionContext(GameContext):
    """A game loaded around one of its actions, with the acting player."""

    action: Action
    actor: GamePlayer | None = None

    @property
    def initiator(self) -> GamePlayer | None:
        return self.player_by_id(self.action.initiator_id)


class GameAccess:
    """Loads game state and enforces membership and role rules."""

    def __init__(
        self,
        repository: GameRepositoryProtocol,
        registry: StrategyRegistry,
        config: EngineConfig,
    ) -> None:
        self._repository = repository
        self._registry = registry
        self._config = config

    @property
    def repository(self) -> GameRepositoryProtocol:
        return self._repository

    @property
    def registry(self) -> StrategyRegistry:
        return self._registry

    def settings_for(self, game: Game) -> GameSettings:
        return GameSettings.from_raw(game.settings, self._config)

    def strategy_for(self, settings: GameSettings) -> ResolutionStrategy:
        """Look up the game's strategy; UnknownStrategyError when missing."""
        return self._registry.get(
            settings.resolution_method or self._config.default_resolution_method
        )

    async def get_game(self, game_id: UUID) -> Game:
        game = await self._repository.get_game(game_id)
        if game is None:
            raise NotFoundError("Game not found", details={"game_id": str(game_id)})
        return game

    async def get_action(self, action_id: UUID) -> Action:
        action = await self._repository.get_action(action_id)
        if action is None:
            raise NotFoundError("Action not found", details={"action_id": str(action_id)})
        return action

    async def get_round(self, round_id: UUID) -> Round:
        round_ = await self._repository.get_round(round_id)
        if round_ is None:
            raise NotFoundError("Round not found", details={"round_id": str(round_id)})
        return round_

    async def load_game(self, game_id: UUID) -> GameContext:
        game = await self.get_game(game_id)
        players = await self._repository.list_players(game_id)
        settings = self.settings_for(game)
        return GameContext(
            game=game,
            players=players,
            settings=settings,
            strategy=self.strategy_for(settings),
        )

    async def load_action(self, action_id: UUID, user_id: UUID | None) -> ActionContext:
        """Load an action, its game and (for user calls) the acting member.

        Args:
            action_id: The action.
            user_id: Acting user; None for system callers such as the
                timeout sweep, which skip the membership check.

        Raises:
            NotFoundError: The action or its game does not exist.
            ForbiddenError: ``user_id`` has no active seat in the game.
        """
        action = await self.get_action(action_id)
        ctx = await self.load_game(action.game_id)
        actor = require_member(ctx.players, user_id) if user_id is not None else None
        return ActionContext(
            game=ctx.game,
            players=ctx.players,
            settings=ctx.settings,
            strategy=ctx.strategy,
            action=action,
            actor=actor,
        )


def require_member(players: list[GamePlayer], user_id: UUID) -> GamePlayer:
    """Return the user's active seat.

    Raises:
        ForbiddenError: The user is not an active member.
    """
    for player in players:
        if player.user_id == user_id and player.is_active:
            return player
    raise ForbiddenError("Not a member of this game")


def require_host(players: list[GamePlayer], user_id: UUID) -> GamePlayer:
    """Return the user's seat if it is the host's.

    Raises:
        ForbiddenError: The user is not the active host.
    """
    player = require_member(players, user_id)
    if not player.is_host:
        raise ForbiddenError("Only the host can perform this action")
    return player


def require_arbiter(players: list[GamePlayer], user_id: UUID, message: str) -> GamePlayer:
    """Return the user's seat if it holds the ARBITER role.

    Raises:
        ForbiddenError: The user is not an active arbiter.
    """
    for player in players:
        if player.user_id == user_id and player.is_active and player.is_arbiter:
            return player
    raise ForbiddenError(message)

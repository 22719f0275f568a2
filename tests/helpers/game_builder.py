"""Builder that seeds a GameRepositoryStub with a game and its players."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from mosaic.domain.models import (
    Game,
    GamePhase,
    GamePlayer,
    GamePlayerRole,
    GameStatus,
    Round,
)
from mosaic.domain.services.acting_units import round_action_quota
from mosaic.infrastructure.stubs import GameRepositoryStub
from tests.helpers.fake_time_authority import DEFAULT_TEST_TIME


@dataclass
class SeededGame:
    """A game stored in the repository stub, with handles for assertions."""

    game: Game
    players: list[GamePlayer]
    round: Round | None = None

    @property
    def game_id(self) -> UUID:
        return self.game.game_id

    def player(self, name: str) -> GamePlayer:
        for player in self.players:
            if player.player_name == name:
                return player
        raise KeyError(name)

    def user(self, name: str) -> UUID:
        return self.player(name).user_id

    @property
    def host(self) -> GamePlayer:
        return next(p for p in self.players if p.is_host)

    @property
    def npc(self) -> GamePlayer:
        return next(p for p in self.players if p.is_npc)


@dataclass
class GameBuilder:
    """Fluent builder for seeded games.

    The first player added is the host. ``build(started=True)`` stores the
    game ACTIVE in PROPOSAL with round 1 sized by the acting-unit rule.
    """

    name: str = "Test Game"
    settings: dict[str, Any] = field(default_factory=dict)
    _players: list[dict[str, Any]] = field(default_factory=list)

    def with_settings(self, **settings: Any) -> GameBuilder:
        self.settings.update(settings)
        return self

    def with_player(
        self,
        name: str,
        *,
        arbiter: bool = False,
        persona_id: UUID | None = None,
        persona_lead: bool = False,
        active: bool = True,
    ) -> GameBuilder:
        self._players.append(
            {
                "player_name": name,
                "role": GamePlayerRole.ARBITER if arbiter else GamePlayerRole.PLAYER,
                "persona_id": persona_id,
                "is_persona_lead": persona_lead,
                "is_active": active,
            }
        )
        return self

    def with_players(self, *names: str) -> GameBuilder:
        for name in names:
            self.with_player(name)
        return self

    def with_npc(
        self,
        name: str = "The Crown",
        *,
        action_description: str | None = "The Crown raises taxes",
        desired_outcome: str | None = "The treasury fills",
    ) -> GameBuilder:
        self._players.append(
            {
                "player_name": name,
                "is_npc": True,
                "npc_action_description": action_description,
                "npc_desired_outcome": desired_outcome,
            }
        )
        return self

    def build(
        self,
        repository: GameRepositoryStub,
        *,
        started: bool = True,
        now: datetime = DEFAULT_TEST_TIME,
    ) -> SeededGame:
        game_id = uuid4()
        players = [
            GamePlayer(
                player_id=uuid4(),
                game_id=game_id,
                user_id=uuid4(),
                is_host=index == 0,
                join_order=index + 1,
                **fields,
            )
            for index, fields in enumerate(self._players)
        ]

        game = Game(game_id=game_id, name=self.name, settings=dict(self.settings), created_at=now)
        round_ = None
        if started:
            round_ = Round(
                round_id=uuid4(),
                game_id=game_id,
                round_number=1,
                total_actions_required=round_action_quota(players),
                created_at=now,
            )
            game = Game(
                game_id=game_id,
                name=self.name,
                status=GameStatus.ACTIVE,
                current_phase=GamePhase.PROPOSAL,
                current_round_id=round_.round_id,
                settings=dict(self.settings),
                phase_started_at=now,
                created_at=now,
            )
            repository.add_round(round_)

        repository.add_game(game)
        for player in players:
            repository.add_player(player)
        return SeededGame(game=game, players=players, round=round_)

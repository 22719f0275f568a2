"""In-memory stub for GameRepositoryProtocol.

This stub provides an in-memory implementation for development and tests.
It simulates the database behavior including:
- Compare-and-set phase transitions (guards re-checked under a lock)
- Unique constraints (vote per player and per voting unit, narration
  per action, summary per round, proposal per initiator and round)
- Atomic round counter increment on resolution
- Game-wide action sequence numbers

Writes are serialized with an asyncio.Lock, so concurrent coroutines
racing for the same transition see exactly one winner. The losers get
WrongPhaseError, as with an ``UPDATE ... WHERE status = :expected``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime
from uuid import UUID

from mosaic.domain.errors import (
    AlreadySubmittedError,
    DuplicateNarrationError,
    DuplicateProposalError,
    DuplicateVoteError,
    NotFoundError,
    PersistenceError,
    WrongPhaseError,
)
from mosaic.domain.models import (
    Action,
    ActionStatus,
    Argument,
    Game,
    GamePhase,
    GamePlayer,
    GameStatus,
    Narration,
    PhaseTransition,
    Round,
    RoundSummary,
    Vote,
)
from mosaic.domain.services import phase_machine


class GameRepositoryStub:
    """In-memory stub implementation of GameRepositoryProtocol.

    Seed state with ``add_game``/``add_player``/``add_round``/``add_action``
    before exercising the services.
    """

    def __init__(self) -> None:
        """Initialize empty stub."""
        self._lock = asyncio.Lock()
        self._games: dict[UUID, Game] = {}
        self._players: dict[UUID, list[GamePlayer]] = {}
        self._rounds: dict[UUID, Round] = {}
        self._actions: dict[UUID, Action] = {}
        self._arguments: dict[UUID, list[Argument]] = {}
        # Key: (action_id, player_id)
        self._votes: dict[tuple[UUID, UUID], Vote] = {}
        # Key: action_id, Value: voting units (persona or player ids) that voted
        self._vote_units: dict[UUID, set[UUID]] = {}
        self._completions: dict[UUID, set[UUID]] = {}
        self._summaries: dict[UUID, RoundSummary] = {}
        self._narrations: dict[UUID, Narration] = {}
        # Key: game_id, Value: last action sequence number
        self._sequences: dict[UUID, int] = {}
        self._transition_failure: str | None = None

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def add_game(self, game: Game) -> None:
        self._games[game.game_id] = game
        self._players.setdefault(game.game_id, [])

    def add_player(self, player: GamePlayer) -> None:
        players = self._players.setdefault(player.game_id, [])
        players.append(player)
        players.sort(key=lambda p: p.join_order)

    def add_round(self, round_: Round) -> None:
        self._rounds[round_.round_id] = round_

    def add_action(self, action: Action, arguments: Sequence[Argument] = ()) -> None:
        self._actions[action.action_id] = action
        self._arguments[action.action_id] = list(arguments)
        current = self._sequences.get(action.game_id, 0)
        self._sequences[action.game_id] = max(current, action.sequence_number)

    def fail_transitions(self, reason: str | None = "simulated write failure") -> None:
        """Make ``apply_transition`` raise PersistenceError; None turns it off.

        Guards still run first, so guard errors win over the failure.
        """
        self._transition_failure = reason

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_game(self, game_id: UUID) -> Game | None:
        return self._games.get(game_id)

    async def list_active_games(self) -> list[Game]:
        return [g for g in self._games.values() if g.status == GameStatus.ACTIVE]

    async def list_players(self, game_id: UUID) -> list[GamePlayer]:
        return list(self._players.get(game_id, []))

    async def get_round(self, round_id: UUID) -> Round | None:
        return self._rounds.get(round_id)

    async def list_round_actions(self, round_id: UUID) -> list[Action]:
        actions = [a for a in self._actions.values() if a.round_id == round_id]
        return sorted(actions, key=lambda a: a.sequence_number)

    async def get_action(self, action_id: UUID) -> Action | None:
        return self._actions.get(action_id)

    async def list_arguments(self, action_id: UUID) -> list[Argument]:
        return list(self._arguments.get(action_id, []))

    async def get_argument(self, argument_id: UUID) -> Argument | None:
        for arguments in self._arguments.values():
            for argument in arguments:
                if argument.argument_id == argument_id:
                    return argument
        return None

    async def list_votes(self, action_id: UUID) -> list[Vote]:
        return [v for (aid, _), v in self._votes.items() if aid == action_id]

    async def list_argumentation_completions(self, action_id: UUID) -> set[UUID]:
        return set(self._completions.get(action_id, set()))

    async def get_round_summary(self, round_id: UUID) -> RoundSummary | None:
        return self._summaries.get(round_id)

    async def get_narration(self, action_id: UUID) -> Narration | None:
        return self._narrations.get(action_id)

    # ------------------------------------------------------------------
    # Compare-and-set writes
    # ------------------------------------------------------------------

    async def create_action(
        self,
        action: Action,
        initial_arguments: Sequence[Argument],
        now: datetime,
    ) -> Action:
        async with self._lock:
            game = self._require_game(action.game_id)
            if any(
                a.round_id == action.round_id and a.initiator_id == action.initiator_id
                for a in self._actions.values()
            ):
                raise DuplicateProposalError("You have already proposed an action this round")

            moved_game, opened = phase_machine.start_argumentation(game, action, now)
            sequence_number = self._sequences.get(action.game_id, 0) + 1
            opened = replace(opened, sequence_number=sequence_number)

            self._sequences[action.game_id] = sequence_number
            self._actions[opened.action_id] = opened
            self._arguments[opened.action_id] = [
                replace(argument, action_id=opened.action_id, sequence=index)
                for index, argument in enumerate(initial_arguments, start=1)
            ]
            self._games[game.game_id] = moved_game
            return opened

    async def add_argument(self, argument: Argument) -> Argument:
        async with self._lock:
            action = self._require_action(argument.action_id)
            phase_machine.require_action_status(
                action, ActionStatus.ARGUING, "Action is not in argumentation phase"
            )
            thread = self._arguments.setdefault(argument.action_id, [])
            stored = replace(argument, sequence=len(thread) + 1)
            thread.append(stored)
            return stored

    async def record_argumentation_complete(self, action_id: UUID, player_id: UUID) -> set[UUID]:
        async with self._lock:
            action = self._require_action(action_id)
            phase_machine.require_action_status(
                action, ActionStatus.ARGUING, "Action is not in argumentation phase"
            )
            completed = self._completions.setdefault(action_id, set())
            completed.add(player_id)
            return set(completed)

    async def add_vote(self, vote: Vote, voting_unit: UUID | None = None) -> int:
        async with self._lock:
            action = self._require_action(vote.action_id)
            phase_machine.require_action_status(
                action, ActionStatus.VOTING, "Action is not in voting phase"
            )
            key = (vote.action_id, vote.player_id)
            if key in self._votes:
                raise DuplicateVoteError(vote.action_id, vote.player_id)
            unit = voting_unit or vote.player_id
            units = self._vote_units.setdefault(vote.action_id, set())
            if unit in units:
                raise DuplicateVoteError(
                    vote.action_id, vote.player_id, "Your persona has already voted"
                )
            units.add(unit)
            self._votes[key] = vote
            return sum(1 for aid, _ in self._votes if aid == vote.action_id)

    async def set_argument_strength(self, argument_id: UUID, is_strong: bool) -> Argument:
        async with self._lock:
            for action_id, thread in self._arguments.items():
                for index, argument in enumerate(thread):
                    if argument.argument_id != argument_id:
                        continue
                    phase_machine.require_action_status(
                        self._require_action(action_id),
                        ActionStatus.ARBITER_REVIEW,
                        "Can only mark arguments during arbiter review phase",
                    )
                    updated = replace(argument, is_strong=is_strong)
                    thread[index] = updated
                    return updated
            raise NotFoundError("Argument not found", details={"argument_id": str(argument_id)})

    async def apply_transition(
        self,
        transition: PhaseTransition,
        skipped_votes: Sequence[Vote] = (),
    ) -> Action:
        async with self._lock:
            game = self._require_game(transition.game_id)
            action = self._require_action(transition.action_id)

            round_ = None
            if transition.completes_action:
                assert transition.round_id is not None
                round_ = self._require_round(transition.round_id)
                if round_.is_complete:
                    raise WrongPhaseError("Round already has all its actions resolved")

            moved_game, moved_action = phase_machine.apply_transition(game, action, transition)
            if self._transition_failure is not None:
                raise PersistenceError(self._transition_failure)

            for vote in skipped_votes:
                if (vote.action_id, vote.player_id) in self._votes:
                    raise DuplicateVoteError(vote.action_id, vote.player_id)

            for vote in skipped_votes:
                self._votes[(vote.action_id, vote.player_id)] = vote
                self._vote_units.setdefault(vote.action_id, set()).add(vote.player_id)
            self._actions[moved_action.action_id] = moved_action
            if round_ is not None:
                self._rounds[round_.round_id] = round_.with_action_completed()
            self._games[moved_game.game_id] = moved_game
            return moved_action

    async def start_game(self, game_id: UUID, first_round: Round, now: datetime) -> Game:
        async with self._lock:
            game = self._require_game(game_id)
            if game.status != GameStatus.LOBBY:
                raise WrongPhaseError(
                    "Game has already started",
                    expected=GameStatus.LOBBY.value,
                    actual=game.status.value,
                )
            started = phase_machine.open_round(
                replace(game, status=GameStatus.ACTIVE), first_round, now
            )
            self._rounds[first_round.round_id] = first_round
            self._games[game_id] = started
            return started

    async def complete_round(
        self,
        summary: RoundSummary,
        next_round: Round,
        now: datetime,
    ) -> Round:
        async with self._lock:
            round_ = self._require_round(summary.round_id)
            game = self._require_game(round_.game_id)
            if summary.round_id in self._summaries:
                raise AlreadySubmittedError("Round summary already submitted")
            phase_machine.require_game_phase(
                game, GamePhase.ROUND_SUMMARY, "Game is not in round summary phase"
            )
            if game.current_round_id != round_.round_id:
                raise WrongPhaseError("Round is not the game's current round")

            opened_game = phase_machine.open_round(game, next_round, now)
            self._summaries[summary.round_id] = summary
            self._rounds[round_.round_id] = round_.completed(now)
            self._rounds[next_round.round_id] = next_round
            self._games[game.game_id] = opened_game
            return next_round

    async def close_round_early(self, game_id: UUID, round_id: UUID, now: datetime) -> Round:
        async with self._lock:
            game = self._require_game(game_id)
            if game.current_round_id != round_id:
                raise WrongPhaseError("Round is not the game's current round")
            moved_game = phase_machine.close_round_early(game, now)
            round_ = self._require_round(round_id)
            proposed = sum(1 for a in self._actions.values() if a.round_id == round_id)
            closed = replace(
                round_, total_actions_required=proposed, actions_completed=proposed
            )
            self._rounds[round_id] = closed
            self._games[game_id] = moved_game
            return closed

    async def add_narration(self, narration: Narration) -> Narration:
        async with self._lock:
            action = self._require_action(narration.action_id)
            phase_machine.require_action_status(
                action, ActionStatus.RESOLVED, "Action must be resolved before narrating"
            )
            if narration.action_id in self._narrations:
                raise DuplicateNarrationError(narration.action_id)
            self._narrations[narration.action_id] = narration
            return narration

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_game(self, game_id: UUID) -> Game:
        game = self._games.get(game_id)
        if game is None:
            raise NotFoundError("Game not found", details={"game_id": str(game_id)})
        return game

    def _require_action(self, action_id: UUID) -> Action:
        action = self._actions.get(action_id)
        if action is None:
            raise NotFoundError("Action not found", details={"action_id": str(action_id)})
        return action

    def _require_round(self, round_id: UUID) -> Round:
        round_ = self._rounds.get(round_id)
        if round_ is None:
            raise NotFoundError("Round not found", details={"round_id": str(round_id)})
        return round_

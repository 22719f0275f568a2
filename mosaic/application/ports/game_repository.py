"""Game repository port.

Persistence contract for the game aggregate. Reads return domain models or
None. Every write that moves the phase machine is a compare-and-set:
implementations check the expected status/phase inside the same atomic
unit as the write and raise WrongPhaseError when it no longer holds.
Uniqueness rules (one vote per player, one narration per action, one
summary per round) are enforced here as well.

Implementation Notes:
    - SQL adapters: UPDATE ... WHERE status = :expected RETURNING *, with the
      round counter, resolution and skipped votes in one transaction.
    - The in-memory stub serializes writes with an asyncio.Lock.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol
from uuid import UUID

from mosaic.domain.models import (
    Action,
    Argument,
    Game,
    GamePlayer,
    Narration,
    PhaseTransition,
    Round,
    RoundSummary,
    Vote,
)


class GameRepositoryProtocol(Protocol):
    """Protocol for game aggregate persistence."""

    # Reads

    async def get_game(self, game_id: UUID) -> Game | None:
        """Get a game by id."""
        ...

    async def list_active_games(self) -> list[Game]:
        """List games whose status is ACTIVE."""
        ...

    async def list_players(self, game_id: UUID) -> list[GamePlayer]:
        """List every player of a game (active and inactive) in join order."""
        ...

    async def get_round(self, round_id: UUID) -> Round | None:
        """Get a round by id."""
        ...

    async def list_round_actions(self, round_id: UUID) -> list[Action]:
        """List a round's actions in sequence order."""
        ...

    async def get_action(self, action_id: UUID) -> Action | None:
        """Get an action by id."""
        ...

    async def list_arguments(self, action_id: UUID) -> list[Argument]:
        """List an action's arguments in thread order."""
        ...

    async def get_argument(self, argument_id: UUID) -> Argument | None:
        """Get an argument by id."""
        ...

    async def list_votes(self, action_id: UUID) -> list[Vote]:
        """List the votes cast on an action."""
        ...

    async def list_argumentation_completions(self, action_id: UUID) -> set[UUID]:
        """Player ids that marked argumentation complete on an action."""
        ...

    async def get_round_summary(self, round_id: UUID) -> RoundSummary | None:
        """Get the summary of a round, if submitted."""
        ...

    async def get_narration(self, action_id: UUID) -> Narration | None:
        """Get the narration of an action, if submitted."""
        ...

    # Compare-and-set writes

    async def create_action(
        self,
        action: Action,
        initial_arguments: Sequence[Argument],
        now: datetime,
    ) -> Action:
        """Store a PROPOSED action and open its argumentation.

        Atomically assigns the game-wide sequence number, stores the action
        as ARGUING with its initial arguments and moves the game from
        PROPOSAL to ARGUMENTATION with the action as current.

        Returns:
            The stored action (ARGUING, with sequence number).

        Raises:
            WrongPhaseError: Game no longer waits for a proposal.
            DuplicateProposalError: Initiator already proposed this round.
        """
        ...

    async def add_argument(self, argument: Argument) -> Argument:
        """Append an argument to an ARGUING action's thread.

        Raises:
            WrongPhaseError: The action is no longer ARGUING.
        """
        ...

    async def record_argumentation_complete(self, action_id: UUID, player_id: UUID) -> set[UUID]:
        """Upsert a completion mark and return all completing player ids.

        Marking twice is a no-op.

        Raises:
            WrongPhaseError: The action is no longer ARGUING.
        """
        ...

    async def add_vote(self, vote: Vote, voting_unit: UUID | None = None) -> int:
        """Store a vote and return the action's new vote count.

        ``voting_unit`` is the slot the vote fills: the persona id when a
        persona votes once for all its members, else the player id (the
        default). At most one vote per unit and action is stored, checked
        atomically with the insert.

        Raises:
            WrongPhaseError: The action is no longer VOTING.
            DuplicateVoteError: The player or voting unit already voted.
        """
        ...

    async def set_argument_strength(self, argument_id: UUID, is_strong: bool) -> Argument:
        """Set an argument's strength flag while its action is in ARBITER_REVIEW.

        Raises:
            WrongPhaseError: The action is no longer in ARBITER_REVIEW.
        """
        ...

    async def apply_transition(
        self,
        transition: PhaseTransition,
        skipped_votes: Sequence[Vote] = (),
    ) -> Action:
        """Apply a phase transition atomically.

        In one unit: guard on ``from_status``/``from_phase``; insert the
        auto-cast ``skipped_votes``; update the action; increment the
        round counter when the transition resolves the action; move the
        game phase; add the momentum delta.

        Returns:
            The updated action.

        Raises:
            WrongPhaseError: A guard failed or the round is already full.
            DuplicateVoteError: A skipped vote collides with a real one.
        """
        ...

    async def start_game(self, game_id: UUID, first_round: Round, now: datetime) -> Game:
        """Move a LOBBY game to ACTIVE with ``first_round`` open for proposals.

        Raises:
            WrongPhaseError: The game already left the lobby.
        """
        ...

    async def complete_round(
        self,
        summary: RoundSummary,
        next_round: Round,
        now: datetime,
    ) -> Round:
        """Store a summary, complete its round and open ``next_round``.

        Returns:
            The newly opened round.

        Raises:
            WrongPhaseError: The game is not in ROUND_SUMMARY for that round.
            AlreadySubmittedError: The round already has a summary.
        """
        ...

    async def close_round_early(self, game_id: UUID, round_id: UUID, now: datetime) -> Round:
        """Shrink the round to its proposed actions and move to ROUND_SUMMARY.

        Returns:
            The updated round.

        Raises:
            WrongPhaseError: The game is not idle in PROPOSAL.
        """
        ...

    async def add_narration(self, narration: Narration) -> Narration:
        """Store a narration for a RESOLVED action.

        Raises:
            DuplicateNarrationError: The action already has a narration.
        """
        ...

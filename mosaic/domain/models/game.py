"""Game aggregate and player model.

A Game is the aggregate root: it exclusively owns its rounds, and through
them every action, argument, vote and summary. The game's ``current_phase``
mirrors the status of the active action, plus two aggregate phases
(PROPOSAL and ROUND_SUMMARY) where no action is being worked on.

Phase mirror:
    PROPOSAL        - waiting for the next proposal (no current action)
    ARGUMENTATION   - current action is ARGUING
    VOTING          - current action is VOTING
    ARBITER_REVIEW  - current action is ARBITER_REVIEW
    ROUND_SUMMARY   - every required action of the round is RESOLVED
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping
from uuid import UUID


class GameStatus(Enum):
    """Lifecycle status of a game."""

    LOBBY = "LOBBY"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"


class GamePhase(Enum):
    """Game-level phase.

    WAITING is the lobby phase before round 1 exists. All other phases are
    driven by the phase state machine.
    """

    WAITING = "WAITING"
    PROPOSAL = "PROPOSAL"
    ARGUMENTATION = "ARGUMENTATION"
    VOTING = "VOTING"
    ARBITER_REVIEW = "ARBITER_REVIEW"
    ROUND_SUMMARY = "ROUND_SUMMARY"


class GamePlayerRole(Enum):
    """Role a player holds inside a game."""

    PLAYER = "PLAYER"
    ARBITER = "ARBITER"


def _utc_now() -> datetime:
    """Return current UTC time with timezone info."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=True)
class GamePlayer:
    """A user's seat in a game.

    Players who share a ``persona_id`` act jointly as a single acting unit.
    NPC players carry their scripted proposal text directly.

    Attributes:
        player_id: Unique identifier of the seat.
        game_id: Owning game.
        user_id: The user occupying the seat.
        player_name: Display name inside the game.
        is_host: Whether this player hosts the game.
        is_npc: Whether this seat is controlled by the engine.
        is_active: False once the player has left.
        persona_id: Persona claimed by the player, if any.
        is_persona_lead: Lead member of a shared persona.
        role: PLAYER or ARBITER.
        join_order: Seating order.
        npc_action_description: Scripted proposal for NPC seats.
        npc_desired_outcome: Scripted desired outcome for NPC seats.
    """

    player_id: UUID
    game_id: UUID
    user_id: UUID
    player_name: str
    is_host: bool = False
    is_npc: bool = False
    is_active: bool = True
    persona_id: UUID | None = None
    is_persona_lead: bool = False
    role: GamePlayerRole = GamePlayerRole.PLAYER
    join_order: int = 0
    npc_action_description: str | None = None
    npc_desired_outcome: str | None = None

    @property
    def is_arbiter(self) -> bool:
        """True when the player holds the ARBITER role."""
        return self.role == GamePlayerRole.ARBITER


@dataclass(frozen=True, eq=True)
class Game:
    """The game aggregate root.

    Attributes:
        game_id: Unique identifier.
        name: Display name.
        status: Lifecycle status.
        current_phase: Current game phase.
        current_round_id: Active round (None in the lobby).
        current_action_id: Action being worked on (None in PROPOSAL and
            ROUND_SUMMARY).
        settings: Raw settings mapping, parsed by the application layer.
        npc_momentum: Running sum of NPC action results.
        phase_started_at: When the current phase began.
        created_at: Creation timestamp (UTC).
    """

    game_id: UUID
    name: str
    status: GameStatus = GameStatus.LOBBY
    current_phase: GamePhase = GamePhase.WAITING
    current_round_id: UUID | None = None
    current_action_id: UUID | None = None
    settings: Mapping[str, Any] = field(default_factory=dict)
    npc_momentum: int = 0
    phase_started_at: datetime | None = None
    created_at: datetime = field(default_factory=_utc_now)

    @property
    def is_active(self) -> bool:
        """True when the game has started and is not paused or finished."""
        return self.status == GameStatus.ACTIVE

    def with_phase(
        self,
        phase: GamePhase,
        started_at: datetime,
        *,
        current_action_id: UUID | None = None,
        clear_current_action: bool = False,
    ) -> Game:
        """Return a copy moved to ``phase``.

        Args:
            phase: New game phase.
            started_at: When the phase began.
            current_action_id: New current action, if one is being set.
            clear_current_action: Reset the current action to None.

        Returns:
            The updated Game.
        """
        action_id = self.current_action_id
        if clear_current_action:
            action_id = None
        elif current_action_id is not None:
            action_id = current_action_id
        return replace(
            self,
            current_phase=phase,
            current_action_id=action_id,
            phase_started_at=started_at,
        )

    def with_momentum(self, delta: int) -> Game:
        """Return a copy with ``delta`` added to the NPC momentum."""
        return replace(self, npc_momentum=self.npc_momentum + delta)

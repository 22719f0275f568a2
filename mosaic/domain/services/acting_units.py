"""Acting-unit counting.

An acting unit is either a solo player or a persona shared by several
players. Only active human players count; NPC seats are tracked separately
by the round sizing logic. Every threshold in the phase machine (proposal
quota, argumentation completion, vote count) is expressed in these units.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from uuid import UUID

from mosaic.domain.models.game import GamePlayer


def human_players(players: Iterable[GamePlayer]) -> list[GamePlayer]:
    """Return active, non-NPC players."""
    return [p for p in players if p.is_active and not p.is_npc]


def active_npc(players: Iterable[GamePlayer]) -> GamePlayer | None:
    """Return the game's active NPC player, if it has one."""
    return next((p for p in players if p.is_active and p.is_npc), None)


def count_acting_units(players: Iterable[GamePlayer]) -> int:
    """Count distinct acting units among active human players.

    Players sharing a persona collapse into one unit; players without a
    persona count individually.

    Args:
        players: Players of a game (inactive and NPC seats are ignored).

    Returns:
        Number of distinct personas plus solo players.
    """
    persona_ids: set[UUID] = set()
    solo_count = 0
    for player in human_players(players):
        if player.persona_id is not None:
            persona_ids.add(player.persona_id)
        else:
            solo_count += 1
    return len(persona_ids) + solo_count


def persona_member_ids(players: Iterable[GamePlayer], persona_id: UUID) -> set[UUID]:
    """Return player ids of active humans sharing ``persona_id``."""
    return {p.player_id for p in human_players(players) if p.persona_id == persona_id}


def acting_unit_key(player: GamePlayer) -> UUID:
    """Key identifying the acting unit a player belongs to."""
    return player.persona_id if player.persona_id is not None else player.player_id


def count_completed_units(
    players: Iterable[GamePlayer],
    completed_player_ids: Collection[UUID],
) -> int:
    """Count acting units that have at least one completing member.

    Args:
        players: Players of the game.
        completed_player_ids: Players who marked argumentation complete.

    Returns:
        Number of distinct acting units covered by the completions.
    """
    units = {
        acting_unit_key(p) for p in human_players(players) if p.player_id in completed_player_ids
    }
    return len(units)


def round_action_quota(players: Iterable[GamePlayer]) -> int:
    """Actions a new round requires: human acting units plus one active NPC."""
    players = list(players)
    return count_acting_units(players) + (1 if active_npc(players) is not None else 0)

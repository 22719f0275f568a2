"""Unit tests for acting-unit counting and round sizing."""

from __future__ import annotations

from uuid import uuid4

from mosaic.domain.models import GamePlayer
from mosaic.domain.services.acting_units import (
    acting_unit_key,
    active_npc,
    count_acting_units,
    count_completed_units,
    human_players,
    persona_member_ids,
    round_action_quota,
)

GAME_ID = uuid4()


def _player(name: str, **kwargs) -> GamePlayer:
    return GamePlayer(
        player_id=uuid4(), game_id=GAME_ID, user_id=uuid4(), player_name=name, **kwargs
    )


class TestCountActingUnits:
    def test_solo_players_count_individually(self) -> None:
        players = [_player("a"), _player("b"), _player("c")]
        assert count_acting_units(players) == 3

    def test_shared_persona_collapses_to_one_unit(self) -> None:
        persona = uuid4()
        players = [
            _player("a", persona_id=persona, is_persona_lead=True),
            _player("b", persona_id=persona),
            _player("c"),
        ]
        assert count_acting_units(players) == 2

    def test_inactive_and_npc_players_are_ignored(self) -> None:
        players = [_player("a"), _player("b", is_active=False), _player("npc", is_npc=True)]
        assert count_acting_units(players) == 1

    def test_empty_game_has_no_units(self) -> None:
        assert count_acting_units([]) == 0


class TestRoundActionQuota:
    def test_three_solo_players_require_three_actions(self) -> None:
        assert round_action_quota([_player("a"), _player("b"), _player("c")]) == 3

    def test_active_npc_adds_one_action(self) -> None:
        persona = uuid4()
        players = [
            _player("a", persona_id=persona),
            _player("b", persona_id=persona),
            _player("c"),
            _player("npc", is_npc=True),
        ]
        assert round_action_quota(players) == 3

    def test_inactive_npc_adds_nothing(self) -> None:
        players = [_player("a"), _player("npc", is_npc=True, is_active=False)]
        assert round_action_quota(players) == 1


class TestCompletedUnits:
    def test_one_member_completes_the_whole_persona(self) -> None:
        persona = uuid4()
        lead = _player("a", persona_id=persona, is_persona_lead=True)
        member = _player("b", persona_id=persona)
        solo = _player("c")
        players = [lead, member, solo]

        assert count_completed_units(players, {member.player_id}) == 1
        assert count_completed_units(players, {lead.player_id, member.player_id}) == 1
        assert count_completed_units(players, {member.player_id, solo.player_id}) == 2

    def test_unknown_ids_are_ignored(self) -> None:
        assert count_completed_units([_player("a")], {uuid4()}) == 0


class TestHelpers:
    def test_persona_member_ids(self) -> None:
        persona = uuid4()
        a = _player("a", persona_id=persona)
        b = _player("b", persona_id=persona)
        gone = _player("c", persona_id=persona, is_active=False)
        assert persona_member_ids([a, b, gone, _player("d")], persona) == {a.player_id, b.player_id}

    def test_acting_unit_key_prefers_persona(self) -> None:
        persona = uuid4()
        assert acting_unit_key(_player("a", persona_id=persona)) == persona
        solo = _player("b")
        assert acting_unit_key(solo) == solo.player_id

    def test_human_players_and_active_npc(self) -> None:
        npc = _player("npc", is_npc=True)
        human = _player("a")
        assert human_players([npc, human]) == [human]
        assert active_npc([npc, human]) == npc
        assert active_npc([human]) is None

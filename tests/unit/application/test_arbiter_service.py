"""Unit tests for ArbiterService."""

from __future__ import annotations

from uuid import uuid4

import pytest

from mosaic.bootstrap import GameEngine
from mosaic.domain.errors import ForbiddenError, NotFoundError, WrongPhaseError
from mosaic.domain.events import ARGUMENT_STRENGTH_TOGGLED_EVENT_TYPE
from mosaic.domain.models import Action, ActionStatus, ArgumentType, GamePhase, ResultType
from mosaic.infrastructure.stubs import EventLogStub, GameRepositoryStub
from tests.helpers import GameBuilder, ScriptedRandomness, SeededGame
from tests.helpers.game_flow import finish_argumentation, propose

VOTERS = ("Ada", "Ben", "Dee")


@pytest.fixture
def seeded(repository: GameRepositoryStub) -> SeededGame:
    return (
        GameBuilder()
        .with_settings(resolution_method="arbiter")
        .with_players("Ada", "Ben")
        .with_player("Dee", arbiter=True)
        .build(repository)
    )


async def _in_review(engine: GameEngine, seeded: SeededGame) -> Action:
    action = await propose(engine, seeded, "Ada")
    await engine.actions.add_argument(
        action.action_id, seeded.user("Ben"), {"argument_type": "AGAINST", "content": "Too risky"}
    )
    return await finish_argumentation(engine, seeded, action.action_id, *VOTERS)


async def _argument_id(engine: GameEngine, action: Action, argument_type: ArgumentType):
    arguments = await engine.repository.list_arguments(action.action_id)
    return next(a.argument_id for a in arguments if a.argument_type == argument_type)


class TestMarkArgumentStrong:
    @pytest.mark.asyncio
    async def test_arbiter_toggles_strength(
        self, engine: GameEngine, seeded: SeededGame, event_log: EventLogStub
    ) -> None:
        action = await _in_review(engine, seeded)
        argument_id = await _argument_id(engine, action, ArgumentType.INITIATOR_FOR)

        marked = await engine.arbiter.mark_argument_strong(
            action.action_id, argument_id, seeded.user("Dee")
        )
        unmarked = await engine.arbiter.mark_argument_strong(
            action.action_id, argument_id, seeded.user("Dee")
        )

        assert marked.is_strong
        assert not unmarked.is_strong
        toggles = event_log.events_for(seeded.game_id, ARGUMENT_STRENGTH_TOGGLED_EVENT_TYPE)
        assert [e.payload["is_strong"] for e in toggles] == [True, False]

    @pytest.mark.asyncio
    async def test_only_arbiter_marks(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await _in_review(engine, seeded)
        argument_id = await _argument_id(engine, action, ArgumentType.AGAINST)

        with pytest.raises(ForbiddenError, match="Only the arbiter"):
            await engine.arbiter.mark_argument_strong(
                action.action_id, argument_id, seeded.user("Ada")
            )

    @pytest.mark.asyncio
    async def test_unknown_argument(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await _in_review(engine, seeded)
        with pytest.raises(NotFoundError):
            await engine.arbiter.mark_argument_strong(action.action_id, uuid4(), seeded.user("Dee"))

    @pytest.mark.asyncio
    async def test_not_during_argumentation(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ada")
        argument_id = await _argument_id(engine, action, ArgumentType.INITIATOR_FOR)

        with pytest.raises(WrongPhaseError, match="arbiter review"):
            await engine.arbiter.mark_argument_strong(
                action.action_id, argument_id, seeded.user("Dee")
            )


class TestCompleteArbiterReview:
    @pytest.mark.asyncio
    async def test_strong_argument_tips_the_roll(
        self, engine: GameEngine, seeded: SeededGame, randomness: ScriptedRandomness
    ) -> None:
        action = await _in_review(engine, seeded)
        argument_id = await _argument_id(engine, action, ArgumentType.INITIATOR_FOR)
        await engine.arbiter.mark_argument_strong(action.action_id, argument_id, seeded.user("Dee"))
        randomness.script(3, 4)

        resolved = await engine.arbiter.complete_arbiter_review(action.action_id, seeded.user("Dee"))

        assert resolved.status == ActionStatus.RESOLVED
        assert resolved.resolution_method == "arbiter"
        assert resolved.resolution.result_type == ResultType.SUCCESS_BUT
        assert resolved.resolution.strategy_data["modified"] == 8
        assert resolved.resolution.strategy_data["strong_pro_count"] == 1
        game = await engine.access.get_game(seeded.game_id)
        assert game.current_phase == GamePhase.PROPOSAL

    @pytest.mark.asyncio
    async def test_strong_counter_argument_fails_at_seven(
        self, engine: GameEngine, seeded: SeededGame, randomness: ScriptedRandomness
    ) -> None:
        action = await _in_review(engine, seeded)
        argument_id = await _argument_id(engine, action, ArgumentType.AGAINST)
        await engine.arbiter.mark_argument_strong(action.action_id, argument_id, seeded.user("Dee"))
        randomness.script(4, 4)

        resolved = await engine.arbiter.complete_arbiter_review(action.action_id, seeded.user("Dee"))

        assert resolved.resolution.result_type == ResultType.FAILURE_BUT
        assert resolved.resolution.result_value == -1

    @pytest.mark.asyncio
    async def test_only_arbiter_completes(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await _in_review(engine, seeded)
        with pytest.raises(ForbiddenError):
            await engine.arbiter.complete_arbiter_review(action.action_id, seeded.user("Ben"))

    @pytest.mark.asyncio
    async def test_second_completion_is_rejected(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await _in_review(engine, seeded)
        await engine.arbiter.complete_arbiter_review(action.action_id, seeded.user("Dee"))

        with pytest.raises(WrongPhaseError):
            await engine.arbiter.complete_arbiter_review(action.action_id, seeded.user("Dee"))

"""Unit tests for ActionService."""

from __future__ import annotations

import asyncio
from uuid import uuid4

import pytest

from mosaic.bootstrap import GameEngine, build_engine
from mosaic.config import TEST_ENGINE_CONFIG
from mosaic.domain.errors import (
    BadRequestError,
    DuplicateNarrationError,
    DuplicateProposalError,
    DuplicateVoteError,
    ForbiddenError,
    InvalidInputError,
    NoArbiterAssignedError,
    PersistenceError,
    WrongPhaseError,
)
from mosaic.domain.events import (
    ACTION_PROPOSED_EVENT_TYPE,
    ACTION_RESOLVED_EVENT_TYPE,
    ARGUMENTATION_COMPLETED_EVENT_TYPE,
    NARRATION_ADDED_EVENT_TYPE,
    VOTING_SKIPPED_EVENT_TYPE,
    NotificationEvent,
)
from mosaic.domain.models import ActionStatus, ArgumentType, GamePhase, ResultType, VoteType
from mosaic.infrastructure.stubs import (
    EventLogStub,
    GameRepositoryStub,
    NotificationDispatchStub,
)
from tests.helpers import FakeTimeAuthority, GameBuilder, ScriptedRandomness, SeededGame
from tests.helpers.game_flow import finish_argumentation, play_action, propose, proposal, vote

PLAYERS = ("Ada", "Ben", "Cy")


@pytest.fixture
def seeded(repository: GameRepositoryStub) -> SeededGame:
    return GameBuilder().with_players(*PLAYERS).build(repository)


def _persona_game(repository: GameRepositoryStub, **settings) -> SeededGame:
    """Ada solo; Ben (lead) and Cy share a persona."""
    persona_id = uuid4()
    return (
        GameBuilder()
        .with_settings(allow_shared_personas=True, **settings)
        .with_player("Ada")
        .with_player("Ben", persona_id=persona_id, persona_lead=True)
        .with_player("Cy", persona_id=persona_id)
        .build(repository)
    )


class InterleavingRepository(GameRepositoryStub):
    """Repository that yields to the loop before every vote read and write."""

    async def list_votes(self, action_id):
        await asyncio.sleep(0)
        return await super().list_votes(action_id)

    async def add_vote(self, vote, voting_unit=None):
        await asyncio.sleep(0)
        return await super().add_vote(vote, voting_unit)


class TestProposeAction:
    @pytest.mark.asyncio
    async def test_proposal_opens_argumentation(
        self,
        engine: GameEngine,
        seeded: SeededGame,
        event_log: EventLogStub,
        notification_channel: NotificationDispatchStub,
    ) -> None:
        action = await engine.actions.propose_action(
            seeded.game_id,
            seeded.user("Ada"),
            proposal(initial_arguments=["Their walls are cracked", "We have ladders"]),
        )

        assert action.status == ActionStatus.ARGUING
        assert action.initiator_id == seeded.player("Ada").player_id
        game = await engine.access.get_game(seeded.game_id)
        assert game.current_phase == GamePhase.ARGUMENTATION
        arguments = await engine.repository.list_arguments(action.action_id)
        assert [a.argument_type for a in arguments] == [ArgumentType.INITIATOR_FOR] * 2
        assert event_log.event_types(seeded.game_id) == [ACTION_PROPOSED_EVENT_TYPE]

        await engine.dispatcher.drain()
        assert notification_channel.recipients_of(NotificationEvent.ACTION_PROPOSED) == [
            seeded.user("Ben"),
            seeded.user("Cy"),
        ]

    @pytest.mark.asyncio
    async def test_invalid_proposal_is_rejected(self, engine: GameEngine, seeded: SeededGame) -> None:
        with pytest.raises(InvalidInputError):
            await engine.actions.propose_action(
                seeded.game_id, seeded.user("Ada"), proposal(initial_arguments=[])
            )

    @pytest.mark.asyncio
    async def test_non_member_is_forbidden(self, engine: GameEngine, seeded: SeededGame) -> None:
        with pytest.raises(ForbiddenError):
            await engine.actions.propose_action(seeded.game_id, uuid4(), proposal())

    @pytest.mark.asyncio
    async def test_lobby_game_rejects_proposals(
        self, engine: GameEngine, repository: GameRepositoryStub
    ) -> None:
        seeded = GameBuilder().with_players(*PLAYERS).build(repository, started=False)
        with pytest.raises(WrongPhaseError, match="not active"):
            await propose(engine, seeded, "Ada")

    @pytest.mark.asyncio
    async def test_one_action_in_flight(self, engine: GameEngine, seeded: SeededGame) -> None:
        await propose(engine, seeded, "Ada")
        with pytest.raises(WrongPhaseError):
            await propose(engine, seeded, "Ben")

    @pytest.mark.asyncio
    async def test_one_proposal_per_round(self, engine: GameEngine, seeded: SeededGame) -> None:
        await play_action(engine, seeded, "Ada", PLAYERS)

        with pytest.raises(DuplicateProposalError):
            await propose(engine, seeded, "Ada")

    @pytest.mark.asyncio
    async def test_only_persona_lead_proposes(
        self, engine: GameEngine, repository: GameRepositoryStub
    ) -> None:
        seeded = _persona_game(repository)
        with pytest.raises(ForbiddenError, match="persona lead"):
            await propose(engine, seeded, "Cy")


class TestAddArgument:
    @pytest.mark.asyncio
    async def test_other_player_argues(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ada")

        argument = await engine.actions.add_argument(
            action.action_id, seeded.user("Ben"), {"argument_type": "AGAINST", "content": "Archers"}
        )

        assert argument.argument_type == ArgumentType.AGAINST
        assert argument.sequence == 2

    @pytest.mark.asyncio
    async def test_initiator_only_clarifies(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ada")
        ada = seeded.user("Ada")

        with pytest.raises(BadRequestError, match="Initiator can only add clarification"):
            await engine.actions.add_argument(
                action.action_id, ada, {"argument_type": "FOR", "content": "Also ladders"}
            )
        clarification = await engine.actions.add_argument(
            action.action_id, ada, {"argument_type": "CLARIFICATION", "content": "At dawn"}
        )
        assert clarification.argument_type == ArgumentType.CLARIFICATION

    @pytest.mark.asyncio
    async def test_only_initiator_clarifies(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ada")
        with pytest.raises(BadRequestError, match="Only initiator can add clarification"):
            await engine.actions.add_argument(
                action.action_id, seeded.user("Ben"), {"argument_type": "CLARIFICATION", "content": "?"}
            )

    @pytest.mark.asyncio
    async def test_per_player_limit(self, engine: GameEngine, repository: GameRepositoryStub) -> None:
        seeded = GameBuilder().with_settings(argumentLimit=2).with_players(*PLAYERS).build(repository)
        action = await propose(engine, seeded, "Ada")
        ben = seeded.user("Ben")

        for content in ("one", "two"):
            await engine.actions.add_argument(
                action.action_id, ben, {"argument_type": "FOR", "content": content}
            )
        with pytest.raises(BadRequestError, match="Maximum 2 arguments per player"):
            await engine.actions.add_argument(
                action.action_id, ben, {"argument_type": "AGAINST", "content": "three"}
            )

    @pytest.mark.asyncio
    async def test_shared_persona_pool(self, engine: GameEngine, repository: GameRepositoryStub) -> None:
        seeded = _persona_game(repository, argument_limit=2, shared_persona_arguments="shared_pool")
        action = await propose(engine, seeded, "Ada")

        await engine.actions.add_argument(
            action.action_id, seeded.user("Ben"), {"argument_type": "FOR", "content": "one"}
        )
        await engine.actions.add_argument(
            action.action_id, seeded.user("Cy"), {"argument_type": "FOR", "content": "two"}
        )
        with pytest.raises(BadRequestError, match="for your persona"):
            await engine.actions.add_argument(
                action.action_id, seeded.user("Cy"), {"argument_type": "AGAINST", "content": "three"}
            )

    @pytest.mark.asyncio
    async def test_arbiter_games_cap_each_side(
        self, engine: GameEngine, repository: GameRepositoryStub
    ) -> None:
        seeded = (
            GameBuilder()
            .with_settings(resolution_method="arbiter")
            .with_players("Ada", "Ben", "Cy")
            .with_player("Dee", arbiter=True)
            .build(repository)
        )
        action = await propose(engine, seeded, "Ada")
        for name in ("Ben", "Cy"):
            await engine.actions.add_argument(
                action.action_id, seeded.user(name), {"argument_type": "FOR", "content": name}
            )

        with pytest.raises(BadRequestError, match="Maximum 3 FOR arguments allowed"):
            await engine.actions.add_argument(
                action.action_id, seeded.user("Dee"), {"argument_type": "FOR", "content": "more"}
            )
        against = await engine.actions.add_argument(
            action.action_id, seeded.user("Dee"), {"argument_type": "AGAINST", "content": "no"}
        )
        assert against.argument_type == ArgumentType.AGAINST

    @pytest.mark.asyncio
    async def test_closed_argumentation(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, *PLAYERS)

        with pytest.raises(WrongPhaseError):
            await engine.actions.add_argument(
                action.action_id, seeded.user("Ben"), {"argument_type": "FOR", "content": "late"}
            )


class TestMarkArgumentationComplete:
    @pytest.mark.asyncio
    async def test_progress_until_every_unit_is_done(
        self,
        engine: GameEngine,
        seeded: SeededGame,
        event_log: EventLogStub,
        notification_channel: NotificationDispatchStub,
    ) -> None:
        action = await propose(engine, seeded, "Ada")

        first = await engine.actions.mark_argumentation_complete(action.action_id, seeded.user("Ada"))
        again = await engine.actions.mark_argumentation_complete(action.action_id, seeded.user("Ada"))
        assert (first.units_remaining, first.advanced) == (2, False)
        assert again.units_remaining == 2

        await engine.actions.mark_argumentation_complete(action.action_id, seeded.user("Ben"))
        last = await engine.actions.mark_argumentation_complete(action.action_id, seeded.user("Cy"))

        assert last.advanced
        assert last.action.status == ActionStatus.VOTING
        game = await engine.access.get_game(seeded.game_id)
        assert game.current_phase == GamePhase.VOTING
        assert ARGUMENTATION_COMPLETED_EVENT_TYPE in event_log.event_types(seeded.game_id)
        await engine.dispatcher.drain()
        assert len(notification_channel.recipients_of(NotificationEvent.VOTING_STARTED)) == 3

    @pytest.mark.asyncio
    async def test_persona_counts_once(self, engine: GameEngine, repository: GameRepositoryStub) -> None:
        seeded = _persona_game(repository)
        action = await propose(engine, seeded, "Ada")

        await engine.actions.mark_argumentation_complete(action.action_id, seeded.user("Ada"))
        progress = await engine.actions.mark_argumentation_complete(
            action.action_id, seeded.user("Cy")
        )

        assert progress.advanced

    @pytest.mark.asyncio
    async def test_completion_after_exit_is_rejected(
        self, engine: GameEngine, seeded: SeededGame
    ) -> None:
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, *PLAYERS)

        with pytest.raises(WrongPhaseError):
            await engine.actions.mark_argumentation_complete(action.action_id, seeded.user("Ada"))

    @pytest.mark.asyncio
    async def test_arbiter_game_without_arbiter_stays_arguing(
        self, engine: GameEngine, repository: GameRepositoryStub
    ) -> None:
        seeded = (
            GameBuilder().with_settings(resolution_method="arbiter").with_players("Ada", "Ben").build(repository)
        )
        action = await propose(engine, seeded, "Ada")
        await engine.actions.mark_argumentation_complete(action.action_id, seeded.user("Ada"))

        with pytest.raises(NoArbiterAssignedError):
            await engine.actions.mark_argumentation_complete(action.action_id, seeded.user("Ben"))
        stored = await engine.access.get_action(action.action_id)
        assert stored.status == ActionStatus.ARGUING

    @pytest.mark.asyncio
    async def test_arbiter_game_moves_to_review(
        self,
        engine: GameEngine,
        repository: GameRepositoryStub,
        notification_channel: NotificationDispatchStub,
    ) -> None:
        seeded = (
            GameBuilder()
            .with_settings(resolution_method="arbiter")
            .with_players("Ada", "Ben")
            .with_player("Dee", arbiter=True)
            .build(repository)
        )
        action = await propose(engine, seeded, "Ada")

        moved = await finish_argumentation(engine, seeded, action.action_id, "Ada", "Ben", "Dee")

        assert moved.status == ActionStatus.ARBITER_REVIEW
        await engine.dispatcher.drain()
        assert notification_channel.recipients_of(NotificationEvent.ARBITER_REVIEW_STARTED) == [
            seeded.user("Dee")
        ]


class TestSkipArgumentation:
    @pytest.mark.asyncio
    async def test_host_skips(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ben")

        moved = await engine.actions.skip_argumentation(action.action_id, seeded.user("Ada"))

        assert moved.status == ActionStatus.VOTING
        assert moved.argumentation_was_skipped

    @pytest.mark.asyncio
    async def test_non_host_is_forbidden(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ben")
        with pytest.raises(ForbiddenError):
            await engine.actions.skip_argumentation(action.action_id, seeded.user("Ben"))

    @pytest.mark.asyncio
    async def test_arbiter_game_without_arbiter_stays_arguing(
        self, engine: GameEngine, repository: GameRepositoryStub
    ) -> None:
        seeded = (
            GameBuilder().with_settings(resolution_method="arbiter").with_players("Ada", "Ben").build(repository)
        )
        action = await propose(engine, seeded, "Ben")

        with pytest.raises(NoArbiterAssignedError):
            await engine.actions.skip_argumentation(action.action_id, seeded.user("Ada"))
        stored = await engine.access.get_action(action.action_id)
        assert stored.status == ActionStatus.ARGUING
        assert not stored.argumentation_was_skipped
        game = await engine.access.get_game(seeded.game_id)
        assert game.current_phase == GamePhase.ARGUMENTATION


class TestSubmitVote:
    @pytest.mark.asyncio
    async def test_votes_below_threshold_do_not_resolve(
        self, engine: GameEngine, seeded: SeededGame
    ) -> None:
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, *PLAYERS)

        outcome = await engine.actions.submit_vote(
            action.action_id, seeded.user("Ben"), {"vote_type": "LIKELY_FAILURE"}
        )

        assert outcome.votes_cast == 1
        assert outcome.votes_required == 3
        assert outcome.resolved_action is None
        assert (outcome.vote.success_tokens, outcome.vote.failure_tokens) == (0, 2)

    @pytest.mark.asyncio
    async def test_final_vote_resolves(
        self,
        engine: GameEngine,
        seeded: SeededGame,
        event_log: EventLogStub,
        notification_channel: NotificationDispatchStub,
    ) -> None:
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, *PLAYERS)
        await vote(engine, seeded, action.action_id, "Ada", "Ben")

        outcome = await engine.actions.submit_vote(
            action.action_id, seeded.user("Cy"), {"vote_type": "LIKELY_SUCCESS"}
        )

        resolved = outcome.resolved_action
        assert resolved is not None
        assert resolved.status == ActionStatus.RESOLVED
        assert resolved.resolution_method == "token_draw"
        # Unscripted shuffle leaves the successes on top
        assert resolved.resolution.result_type == ResultType.TRIUMPH
        assert ACTION_RESOLVED_EVENT_TYPE in event_log.event_types(seeded.game_id)
        game = await engine.access.get_game(seeded.game_id)
        assert game.current_phase == GamePhase.PROPOSAL
        assert game.current_action_id is None
        await engine.dispatcher.drain()
        assert notification_channel.recipients_of(NotificationEvent.RESOLUTION_READY) == [
            seeded.user("Ada")
        ]

    @pytest.mark.asyncio
    async def test_duplicate_vote(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, *PLAYERS)
        await vote(engine, seeded, action.action_id, "Ben")

        with pytest.raises(DuplicateVoteError):
            await vote(engine, seeded, action.action_id, "Ben")

    @pytest.mark.asyncio
    async def test_one_vote_per_persona(self, engine: GameEngine, repository: GameRepositoryStub) -> None:
        seeded = _persona_game(repository)
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, "Ada", "Ben")

        outcome = await engine.actions.submit_vote(
            action.action_id, seeded.user("Cy"), {"vote_type": "UNCERTAIN"}
        )
        assert outcome.votes_required == 2
        with pytest.raises(DuplicateVoteError, match="persona"):
            await vote(engine, seeded, action.action_id, "Ben")

    @pytest.mark.asyncio
    async def test_concurrent_persona_votes_fill_one_slot(
        self,
        event_log: EventLogStub,
        notification_channel: NotificationDispatchStub,
        randomness: ScriptedRandomness,
        fake_time_authority: FakeTimeAuthority,
    ) -> None:
        repository = InterleavingRepository()
        engine = build_engine(
            config=TEST_ENGINE_CONFIG,
            repository=repository,
            event_log=event_log,
            notification_channel=notification_channel,
            randomness=randomness,
            time_authority=fake_time_authority,
        )
        seeded = _persona_game(repository)
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, "Ada", "Ben")

        results = await asyncio.gather(
            engine.actions.submit_vote(action.action_id, seeded.user("Ben"), {"vote_type": "UNCERTAIN"}),
            engine.actions.submit_vote(action.action_id, seeded.user("Cy"), {"vote_type": "UNCERTAIN"}),
            return_exceptions=True,
        )

        rejected = [r for r in results if isinstance(r, DuplicateVoteError)]
        accepted = [r for r in results if not isinstance(r, BaseException)]
        assert len(rejected) == 1
        assert len(accepted) == 1
        assert accepted[0].votes_cast == 1
        assert accepted[0].resolved_action is None
        assert len(await repository.list_votes(action.action_id)) == 1
        stored = await engine.access.get_action(action.action_id)
        assert stored.status == ActionStatus.VOTING

    @pytest.mark.asyncio
    async def test_unknown_vote_type(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, *PLAYERS)

        with pytest.raises(InvalidInputError):
            await engine.actions.submit_vote(
                action.action_id, seeded.user("Ben"), {"vote_type": "MAYBE"}
            )

    @pytest.mark.asyncio
    async def test_arbiter_games_do_not_vote(
        self, engine: GameEngine, repository: GameRepositoryStub
    ) -> None:
        seeded = (
            GameBuilder()
            .with_settings(resolution_method="arbiter")
            .with_players("Ada", "Ben")
            .with_player("Dee", arbiter=True)
            .build(repository)
        )
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, "Ada", "Ben", "Dee")

        with pytest.raises(BadRequestError, match="arbiter games"):
            await vote(engine, seeded, action.action_id, "Ben")


class TestSkipVoting:
    @pytest.mark.asyncio
    async def test_missing_voters_get_uncertain_votes(
        self, engine: GameEngine, seeded: SeededGame, event_log: EventLogStub
    ) -> None:
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, *PLAYERS)
        await vote(engine, seeded, action.action_id, "Ada", vote_type="LIKELY_SUCCESS")

        result = await engine.actions.skip_voting(action.action_id, seeded.user("Ada"))

        assert result.action.status == ActionStatus.RESOLVED
        assert result.action.voting_was_skipped
        assert {v.player_id for v in result.skipped_votes} == {
            seeded.player("Ben").player_id,
            seeded.player("Cy").player_id,
        }
        assert all(v.was_skipped and v.vote_type == VoteType.UNCERTAIN for v in result.skipped_votes)
        stored_votes = await engine.repository.list_votes(action.action_id)
        assert len(stored_votes) == 3
        resolution = result.action.resolution
        assert resolution.strategy_data["total_success_tokens"] == 1 + 2 + 1 + 1
        [skipped_event] = event_log.events_for(seeded.game_id, VOTING_SKIPPED_EVENT_TYPE)
        assert skipped_event.payload["skipped_by_host"] is True
        assert skipped_event.payload["missing_voters_count"] == 2
        assert skipped_event.payload["missing_voter_names"] == ["Ben", "Cy"]

    @pytest.mark.asyncio
    async def test_persona_represented_by_lead(
        self, engine: GameEngine, repository: GameRepositoryStub
    ) -> None:
        seeded = _persona_game(repository)
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, "Ada", "Ben")

        result = await engine.actions.skip_voting(action.action_id, seeded.user("Ada"))

        assert [v.player_id for v in result.skipped_votes] == [
            seeded.player("Ada").player_id,
            seeded.player("Ben").player_id,
        ]

    @pytest.mark.asyncio
    async def test_non_host_is_forbidden(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, *PLAYERS)

        with pytest.raises(ForbiddenError):
            await engine.actions.skip_voting(action.action_id, seeded.user("Cy"))


class TestGetVotes:
    @pytest.mark.asyncio
    async def test_votes_hidden_until_resolved(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, *PLAYERS)
        await vote(engine, seeded, action.action_id, "Ada")

        during = await engine.actions.get_votes(action.action_id, seeded.user("Ben"))
        assert (during.votes_submitted, during.votes) == (1, ())

        await vote(engine, seeded, action.action_id, "Ben", "Cy")
        after = await engine.actions.get_votes(action.action_id, seeded.user("Ben"))
        assert len(after.votes) == 3


class TestSubmitNarration:
    @pytest.mark.asyncio
    async def test_initiator_narrates(
        self, engine: GameEngine, seeded: SeededGame, event_log: EventLogStub
    ) -> None:
        action = await play_action(engine, seeded, "Ada", PLAYERS)

        narration = await engine.actions.submit_narration(
            action.action_id, seeded.user("Ada"), {"content": "The gate fell at dawn."}
        )

        assert narration.author_id == seeded.player("Ada").player_id
        assert NARRATION_ADDED_EVENT_TYPE in event_log.event_types(seeded.game_id)
        with pytest.raises(DuplicateNarrationError):
            await engine.actions.submit_narration(
                action.action_id, seeded.user("Ada"), {"content": "Again."}
            )

    @pytest.mark.asyncio
    async def test_others_cannot_narrate_by_default(
        self, engine: GameEngine, seeded: SeededGame
    ) -> None:
        action = await play_action(engine, seeded, "Ada", PLAYERS)
        with pytest.raises(ForbiddenError):
            await engine.actions.submit_narration(
                action.action_id, seeded.user("Ben"), {"content": "Not mine to tell."}
            )

    @pytest.mark.asyncio
    async def test_collaborative_mode(self, engine: GameEngine, repository: GameRepositoryStub) -> None:
        seeded = (
            GameBuilder().with_settings(narrationMode="collaborative").with_players(*PLAYERS).build(repository)
        )
        action = await play_action(engine, seeded, "Ada", PLAYERS)

        narration = await engine.actions.submit_narration(
            action.action_id, seeded.user("Cy"), {"content": "Cy saw it all."}
        )
        assert narration.author_id == seeded.player("Cy").player_id

    @pytest.mark.asyncio
    async def test_unresolved_action(self, engine: GameEngine, seeded: SeededGame) -> None:
        action = await propose(engine, seeded, "Ada")
        with pytest.raises(WrongPhaseError):
            await engine.actions.submit_narration(
                action.action_id, seeded.user("Ada"), {"content": "Too early."}
            )


class TestPersistenceFailure:
    @pytest.mark.asyncio
    async def test_failed_resolution_write_surfaces_and_changes_nothing(
        self,
        engine: GameEngine,
        seeded: SeededGame,
        repository: GameRepositoryStub,
        event_log: EventLogStub,
        notification_channel: NotificationDispatchStub,
    ) -> None:
        action = await propose(engine, seeded, "Ada")
        await finish_argumentation(engine, seeded, action.action_id, *PLAYERS)
        await vote(engine, seeded, action.action_id, "Ada", "Ben")
        repository.fail_transitions()

        with pytest.raises(PersistenceError):
            await vote(engine, seeded, action.action_id, "Cy")

        stored = await engine.access.get_action(action.action_id)
        assert stored.status == ActionStatus.VOTING
        assert ACTION_RESOLVED_EVENT_TYPE not in event_log.event_types(seeded.game_id)
        await engine.dispatcher.drain()
        assert NotificationEvent.RESOLUTION_READY not in notification_channel.sent_events()

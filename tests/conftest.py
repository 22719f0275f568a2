"""Shared fixtures for the Mosaic engine tests.

- Async tests are marked ``@pytest.mark.asyncio`` (auto mode is on in
  pyproject.toml).
- The ``engine`` fixture runs on in-memory stubs, a frozen clock and
  scripted randomness; tests reach the stubs through their own fixtures.
- Unit tests live in tests/unit/, whole-game runs in tests/integration/.
"""

from __future__ import annotations

import pytest

from mosaic.bootstrap import GameEngine, build_engine
from mosaic.config import TEST_ENGINE_CONFIG
from mosaic.infrastructure.stubs import (
    EventLogStub,
    GameRepositoryStub,
    NotificationDispatchStub,
)
from tests.helpers import FakeTimeAuthority, ScriptedRandomness


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Frozen clock at 2026-01-01T00:00:00 UTC."""
    return FakeTimeAuthority()


@pytest.fixture
def randomness() -> ScriptedRandomness:
    """Scripted randomness; unscripted calls return the range maximum."""
    return ScriptedRandomness()


@pytest.fixture
def repository() -> GameRepositoryStub:
    return GameRepositoryStub()


@pytest.fixture
def event_log(fake_time_authority: FakeTimeAuthority) -> EventLogStub:
    return EventLogStub(fake_time_authority)


@pytest.fixture
def notification_channel() -> NotificationDispatchStub:
    return NotificationDispatchStub()


@pytest.fixture
def engine(
    repository: GameRepositoryStub,
    event_log: EventLogStub,
    notification_channel: NotificationDispatchStub,
    randomness: ScriptedRandomness,
    fake_time_authority: FakeTimeAuthority,
) -> GameEngine:
    """Engine wired to in-memory stubs, scripted randomness and a fake clock."""
    return build_engine(
        config=TEST_ENGINE_CONFIG,
        repository=repository,
        event_log=event_log,
        notification_channel=notification_channel,
        randomness=randomness,
        time_authority=fake_time_authority,
    )

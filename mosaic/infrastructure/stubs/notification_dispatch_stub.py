"""In-memory stub for NotificationDispatchProtocol.

Records every delivery. Can be told to fail so tests can check that a
broken channel never affects the operation that triggered it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from mosaic.domain.events import NotificationEvent


@dataclass(frozen=True)
class SentNotification:
    """A recorded delivery."""

    event: NotificationEvent
    recipients: tuple[UUID, ...]
    payload: dict[str, Any] = field(default_factory=dict)


class NotificationDispatchStub:
    """Notification channel that records instead of sending."""

    def __init__(self, fail_with: Exception | None = None) -> None:
        """Initialize the stub.

        Args:
            fail_with: When set, every ``notify`` raises this error.
        """
        self._fail_with = fail_with
        self.sent: list[SentNotification] = []

    async def notify(
        self,
        event: NotificationEvent,
        recipients: Sequence[UUID],
        payload: dict[str, Any],
    ) -> None:
        if self._fail_with is not None:
            raise self._fail_with
        self.sent.append(SentNotification(event, tuple(recipients), dict(payload)))

    def sent_events(self) -> list[NotificationEvent]:
        return [n.event for n in self.sent]

    def recipients_of(self, event: NotificationEvent) -> list[UUID]:
        """All recipients of ``event`` across deliveries, in order."""
        return [r for n in self.sent if n.event == event for r in n.recipients]

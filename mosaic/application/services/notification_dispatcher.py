"""Fire-and-forget notification dispatch.

Notifications are sent after the state change that triggers them has been
committed. Delivery runs in a detached asyncio task so the request never
waits on it. Failures are logged and dropped. They never reach the caller
and never undo the transition.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from structlog import get_logger

from mosaic.application.ports.notification_dispatch import NotificationDispatchProtocol
from mosaic.domain.events import NotificationEvent

logger = get_logger(__name__)


class NotificationDispatcher:
    """Dispatches notifications on detached tasks.

    Tasks are tracked until they finish so that shutdown (and tests) can
    wait for in-flight deliveries with ``drain``.
    """

    def __init__(self, channel: NotificationDispatchProtocol) -> None:
        """Initialize the dispatcher.

        Args:
            channel: Delivery adapter.
        """
        self._channel = channel
        self._pending: set[asyncio.Task[None]] = set()

    def dispatch(
        self,
        event: NotificationEvent,
        recipients: Sequence[UUID],
        payload: dict[str, Any],
    ) -> asyncio.Task[None] | None:
        """Start delivering ``event`` without waiting for it.

        Must be called from a running event loop.

        Returns:
            The delivery task, or None when there is nobody to notify.
        """
        unique_recipients = list(dict.fromkeys(recipients))
        if not unique_recipients:
            return None

        task = asyncio.create_task(self._deliver(event, unique_recipients, payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _deliver(
        self,
        event: NotificationEvent,
        recipients: list[UUID],
        payload: dict[str, Any],
    ) -> None:
        try:
            await self._channel.notify(event, recipients, payload)
        except Exception as e:
            logger.warning(
                "notification_delivery_failed",
                notification_event=event.value,
                recipient_count=len(recipients),
                error=str(e),
                error_type=type(e).__name__,
            )
            return
        logger.debug(
            "notification_delivered",
            notification_event=event.value,
            recipient_count=len(recipients),
        )

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def drain(self, timeout: float | None = None) -> None:
        """Wait for in-flight deliveries.

        Args:
            timeout: Seconds to wait before giving up; None waits forever.
        """
        if not self._pending:
            return
        pending = list(self._pending)
        _done, not_done = await asyncio.wait(pending, timeout=timeout)
        if not_done:
            logger.warning("notification_drain_timed_out", still_pending=len(not_done))

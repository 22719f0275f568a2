"""Notification dispatch port.

Delivery channels (email, push, in-app) sit behind this port. Callers never
await delivery on the request path; see NotificationDispatcher.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol
from uuid import UUID

from mosaic.domain.events import NotificationEvent


class NotificationDispatchProtocol(Protocol):
    """Protocol for delivering notifications to users."""

    async def notify(
        self,
        event: NotificationEvent,
        recipients: Sequence[UUID],
        payload: dict[str, Any],
    ) -> None:
        """Deliver ``event`` to the given user ids.

        Raises:
            Exception: Any delivery failure. The dispatcher logs and drops it.
        """
        ...

"""Infrastructure stubs for development and testing.

In-memory implementations of the application ports:
- GameRepositoryStub: game aggregate persistence with compare-and-set writes
- EventLogStub: append-only game event log
- NotificationDispatchStub: recording notification channel
"""

from mosaic.infrastructure.stubs.event_log_stub import EventLogStub
from mosaic.infrastructure.stubs.game_repository_stub import GameRepositoryStub
from mosaic.infrastructure.stubs.notification_dispatch_stub import (
    NotificationDispatchStub,
    SentNotification,
)

__all__: list[str] = [
    "EventLogStub",
    "GameRepositoryStub",
    "NotificationDispatchStub",
    "SentNotification",
]

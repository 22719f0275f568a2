"""Ports consumed by the Mosaic application services."""

from mosaic.application.ports.event_log import EventLogProtocol
from mosaic.application.ports.game_repository import GameRepositoryProtocol
from mosaic.application.ports.notification_dispatch import NotificationDispatchProtocol
from mosaic.application.ports.randomness import RandomnessProtocol
from mosaic.application.ports.time_authority import TimeAuthorityProtocol

__all__ = [
    "EventLogProtocol",
    "GameRepositoryProtocol",
    "NotificationDispatchProtocol",
    "RandomnessProtocol",
    "TimeAuthorityProtocol",
]

"""Time authority port.

Services never call ``datetime.now()`` directly. They inject a
TimeAuthorityProtocol so phase start times, resolution timestamps and
timeout checks all come from one source, and tests can freeze or advance
the clock.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    For production use SystemTimeAuthority; for tests use
    FakeTimeAuthority from tests/helpers.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time, timezone-aware (UTC)."""
        ...

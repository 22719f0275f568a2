"""System clock adapter for TimeAuthorityProtocol."""

from __future__ import annotations

from datetime import datetime, timezone

from mosaic.application.ports.time_authority import TimeAuthorityProtocol


class SystemTimeAuthority(TimeAuthorityProtocol):
    """Wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

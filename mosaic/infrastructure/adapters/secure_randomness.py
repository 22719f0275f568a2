"""Cryptographically secure randomness adapter.

Draws bytes from the operating system's CSPRNG (``secrets.token_bytes``)
and maps them onto the requested range by rejection sampling: byte
values at or above the largest multiple of the range are discarded and
redrawn, so every integer in the range is equally likely.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable

from structlog import get_logger

from mosaic.domain.errors import InvalidRandomRangeError

logger = get_logger(__name__)

AUDIT_SEED_BYTES = 32


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class SecureRandomness:
    """RandomnessProtocol implementation backed by ``secrets``.

    Args:
        byte_source: Callable returning ``n`` random bytes. Defaults to
            ``secrets.token_bytes``; tests inject a scripted source to
            exercise the rejection loop.
    """

    def __init__(self, byte_source: Callable[[int], bytes] | None = None) -> None:
        self._byte_source = byte_source or secrets.token_bytes

    def random_int(self, minimum: int, maximum: int) -> int:
        """Return a uniformly distributed integer in ``[minimum, maximum]``.

        Raises:
            InvalidRandomRangeError: A bound is not an int, or
                ``minimum > maximum``.
        """
        if not _is_int(minimum) or not _is_int(maximum):
            raise InvalidRandomRangeError(minimum, maximum, "bounds must be integers")
        if minimum > maximum:
            raise InvalidRandomRangeError(minimum, maximum, "minimum exceeds maximum")

        span = maximum - minimum + 1
        if span == 1:
            return minimum

        bytes_needed = max(1, ((span - 1).bit_length() + 7) // 8)
        max_valid = (256**bytes_needed // span) * span - 1

        while True:
            value = int.from_bytes(self._byte_source(bytes_needed), "big")
            if value <= max_valid:
                return minimum + value % span
            logger.debug("random_sample_rejected", span=span, bytes_needed=bytes_needed)

    def roll_die(self, faces: int = 6) -> int:
        """Roll a fair die with ``faces`` sides; returns 1..faces."""
        return self.random_int(1, faces)

    def audit_seed(self) -> str:
        """Return 32 fresh random bytes as hex, stored with token draws."""
        return self._byte_source(AUDIT_SEED_BYTES).hex()

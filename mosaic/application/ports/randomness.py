"""Randomness port.

Resolution strategies never touch a random source directly; they consume
this port so production can use a cryptographically secure provider and
tests can script exact sequences.
"""

from __future__ import annotations

from typing import Protocol


class RandomnessProtocol(Protocol):
    """Protocol for an unbiased integer random source."""

    def random_int(self, minimum: int, maximum: int) -> int:
        """Return a uniformly distributed integer in ``[minimum, maximum]``.

        Raises:
            InvalidRandomRangeError: ``minimum > maximum`` or a bound is not
                an integer.
        """
        ...

    def roll_die(self, faces: int = 6) -> int:
        """Roll a die with ``faces`` sides (1-based)."""
        ...

    def audit_seed(self) -> str:
        """Return a hex string recorded alongside a draw for traceability."""
        ...

"""Fatal engine errors.

These errors signal programmer mistakes or infrastructure failures rather
than caller mistakes. They are never mapped to a recoverable response and
must terminate the operation (or, for duplicate strategy registration,
process startup).
"""

from __future__ import annotations

from mosaic.domain.exceptions import MosaicError


class StrategyAlreadyRegisteredError(MosaicError):
    """Raised when two resolution strategies share an identifier.

    This is a startup-time invariant violation. The registry is built once
    at process start, so hitting this error means the wiring is wrong.

    Attributes:
        strategy_id: The duplicated identifier.
    """

    def __init__(self, strategy_id: str) -> None:
        self.strategy_id = strategy_id
        super().__init__(f'Resolution strategy "{strategy_id}" is already registered')


class InvalidRandomRangeError(MosaicError, ValueError):
    """Raised when a random range is empty or its bounds are not integers.

    Swapping or truncating bad bounds would silently skew every probability
    derived from the provider, so the call fails instead.

    Attributes:
        minimum: Requested lower bound.
        maximum: Requested upper bound.
    """

    def __init__(self, minimum: object, maximum: object, reason: str) -> None:
        self.minimum = minimum
        self.maximum = maximum
        super().__init__(f"Invalid random range [{minimum!r}, {maximum!r}]: {reason}")


class PersistenceError(MosaicError):
    """Raised when the persistence layer fails during a validated write.

    The phase transition and its accompanying writes are a single unit, so
    a persistence failure leaves the game in its previous state and the
    request fails.
    """

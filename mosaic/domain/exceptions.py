"""Root of the engine's exception hierarchy."""


class MosaicError(Exception):
    """Base for every error the engine raises on purpose.

    Recoverable rule violations derive from GameRuleError; programming and
    infrastructure faults (registry clashes, bad random ranges, persistence
    failures) derive from this class directly.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)

"""Recoverable, caller-facing game rule errors.

Every error in this module represents a precondition violation that the
caller can correct: the wrong phase, the wrong role, a missing entity or an
invalid payload. Each error carries a stable machine-readable ``code`` and
an HTTP-style ``status`` so the API layer can map it without inspecting
messages. No storage or stack detail is ever placed in the message.

Taxonomy:
    BadRequestError (400): invalid input, wrong phase, already submitted,
        unknown strategy, missing arbiter.
    ForbiddenError (403): actor lacks the host/arbiter/initiator role.
    NotFoundError (404): missing game, round, action or argument.
    ConflictError (409): uniqueness violation (vote, proposal, narration).
"""

from __future__ import annotations

from typing import Any, ClassVar
from uuid import UUID

from mosaic.domain.exceptions import MosaicError


class GameRuleError(MosaicError):
    """Base class for recoverable game rule violations.

    Attributes:
        code: Stable machine-readable error kind.
        status: HTTP-style status the API layer should surface.
        title: Short human-readable title.
        details: Optional structured details safe to expose to callers.
    """

    code: ClassVar[str] = "BAD_REQUEST"
    status: ClassVar[int] = 400
    title: ClassVar[str] = "Bad Request"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
            details: Optional structured details for the caller.
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def kind(self) -> str:
        """Machine-readable kind (alias of ``code``)."""
        return self.code

    def to_rfc7807_dict(self) -> dict[str, Any]:
        """Serialize to RFC 7807 problem details.

        Returns:
            Dictionary with type, title, status, detail and code fields.
        """
        result: dict[str, Any] = {
            "type": f"urn:mosaic:error:{self.code.lower().replace('_', '-')}",
            "title": self.title,
            "status": self.status,
            "detail": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = dict(self.details)
        return result


class BadRequestError(GameRuleError):
    """Raised for invalid input or a request that does not fit the game state."""

    code = "BAD_REQUEST"
    status = 400
    title = "Bad Request"


class ForbiddenError(GameRuleError):
    """Raised when the actor lacks the role required for an operation."""

    code = "FORBIDDEN"
    status = 403
    title = "Forbidden"


class NotFoundError(GameRuleError):
    """Raised when a game, round, action or argument does not exist."""

    code = "NOT_FOUND"
    status = 404
    title = "Not Found"


class ConflictError(GameRuleError):
    """Raised when a uniqueness rule rejects a second submission."""

    code = "CONFLICT"
    status = 409
    title = "Conflict"


# =============================================================================
# BadRequest specializations
# =============================================================================


class InvalidInputError(BadRequestError):
    """Raised when an input payload fails validation.

    Attributes:
        errors: Field-level validation problems (location + message).
    """

    code = "VALIDATION_ERROR"
    title = "Invalid Input"

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message, details={"errors": self.errors} if self.errors else None)


class WrongPhaseError(BadRequestError):
    """Raised when an operation is attempted outside the phase that allows it.

    This is also the error for a transition whose precondition already
    holds, e.g. completing argumentation twice. The second attempt must
    fail instead of double-applying the transition.

    Attributes:
        expected: Phase or status the operation requires.
        actual: Phase or status that was found.
    """

    code = "WRONG_PHASE"
    title = "Wrong Phase"

    def __init__(self, message: str, expected: str | None = None, actual: str | None = None) -> None:
        self.expected = expected
        self.actual = actual
        details = {}
        if expected is not None:
            details["expected"] = expected
        if actual is not None:
            details["actual"] = actual
        super().__init__(message, details=details or None)


class AlreadySubmittedError(BadRequestError):
    """Raised when a one-time submission (e.g. a round summary) already exists."""

    code = "ALREADY_SUBMITTED"
    title = "Already Submitted"


class UnknownStrategyError(BadRequestError):
    """Raised when a game references a resolution strategy that is not registered.

    Attributes:
        strategy_id: The unknown identifier.
    """

    code = "UNKNOWN_STRATEGY"
    title = "Unknown Resolution Strategy"

    def __init__(self, strategy_id: str) -> None:
        self.strategy_id = strategy_id
        super().__init__(
            f'Unknown resolution strategy: "{strategy_id}"',
            details={"strategy_id": strategy_id},
        )


class NoArbiterAssignedError(BadRequestError):
    """Raised when an arbiter strategy needs an arbiter and none is assigned.

    Advancing argumentation into ARBITER_REVIEW without an active ARBITER
    player would park the action in a phase nobody can leave.

    Attributes:
        game_id: The game without an arbiter.
    """

    code = "NO_ARBITER"
    title = "No Arbiter Assigned"

    def __init__(self, game_id: UUID) -> None:
        self.game_id = game_id
        super().__init__(
            "No arbiter assigned: an active player with the ARBITER role is "
            "required before arbiter review can begin",
            details={"game_id": str(game_id)},
        )


# =============================================================================
# Conflict specializations
# =============================================================================


class DuplicateVoteError(ConflictError):
    """Raised when a player (or persona) has already voted on an action.

    Attributes:
        action_id: The action voted on.
        player_id: The player whose second vote was rejected.
    """

    def __init__(self, action_id: UUID, player_id: UUID, message: str = "You have already voted") -> None:
        self.action_id = action_id
        self.player_id = player_id
        super().__init__(message, details={"action_id": str(action_id)})


class DuplicateProposalError(ConflictError):
    """Raised when an acting unit proposes a second action in the same round."""


class DuplicateNarrationError(ConflictError):
    """Raised when a narration already exists for an action.

    Attributes:
        action_id: The narrated action.
    """

    def __init__(self, action_id: UUID) -> None:
        self.action_id = action_id
        super().__init__("Narration already submitted", details={"action_id": str(action_id)})

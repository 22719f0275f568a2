"""Per-game settings.

Games store their settings as a raw mapping (camelCase or snake_case keys
are both accepted). GameSettings parses that mapping once per request and
fills unset values from the EngineConfig.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import timedelta
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from mosaic.config.engine_config import (
    MAX_ARGUMENT_LIMIT,
    MAX_TIMEOUT_HOURS,
    MIN_ARGUMENT_LIMIT,
    TIMEOUT_DISABLED,
    EngineConfig,
)
from mosaic.domain.errors import InvalidInputError
from mosaic.domain.models import GamePhase


def _alias(snake: str, camel: str) -> AliasChoices:
    return AliasChoices(snake, camel)


class GameSettings(BaseModel):
    """Validated settings of a single game.

    Attributes:
        resolution_method: Strategy id; None falls back to the engine default.
        argument_limit: Arguments per player (or per persona pool) per action.
        proposal_timeout_hours: PROPOSAL timeout, -1 disables.
        argumentation_timeout_hours: ARGUMENTATION timeout, -1 disables.
        voting_timeout_hours: VOTING timeout, -1 disables.
        narration_mode: Who may narrate a resolved action.
        personas_required: Every human must claim a persona before start.
        allow_shared_personas: Several players may share one persona.
        shared_persona_voting: One vote per persona or one per member.
        shared_persona_arguments: Shared argument pool or per-member limits.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    resolution_method: str | None = Field(
        default=None, validation_alias=_alias("resolution_method", "resolutionMethod")
    )
    argument_limit: int | None = Field(
        default=None,
        ge=MIN_ARGUMENT_LIMIT,
        le=MAX_ARGUMENT_LIMIT,
        validation_alias=_alias("argument_limit", "argumentLimit"),
    )
    proposal_timeout_hours: int = Field(
        default=TIMEOUT_DISABLED,
        ge=TIMEOUT_DISABLED,
        le=MAX_TIMEOUT_HOURS,
        validation_alias=_alias("proposal_timeout_hours", "proposalTimeoutHours"),
    )
    argumentation_timeout_hours: int = Field(
        default=TIMEOUT_DISABLED,
        ge=TIMEOUT_DISABLED,
        le=MAX_TIMEOUT_HOURS,
        validation_alias=_alias("argumentation_timeout_hours", "argumentationTimeoutHours"),
    )
    voting_timeout_hours: int = Field(
        default=TIMEOUT_DISABLED,
        ge=TIMEOUT_DISABLED,
        le=MAX_TIMEOUT_HOURS,
        validation_alias=_alias("voting_timeout_hours", "votingTimeoutHours"),
    )
    narration_mode: Literal["initiator_only", "collaborative"] = Field(
        default="initiator_only", validation_alias=_alias("narration_mode", "narrationMode")
    )
    personas_required: bool = Field(
        default=False, validation_alias=_alias("personas_required", "personasRequired")
    )
    allow_shared_personas: bool = Field(
        default=False, validation_alias=_alias("allow_shared_personas", "allowSharedPersonas")
    )
    shared_persona_voting: Literal["one_per_persona", "each_member"] = Field(
        default="one_per_persona",
        validation_alias=_alias("shared_persona_voting", "sharedPersonaVoting"),
    )
    shared_persona_arguments: Literal["shared_pool", "independent"] = Field(
        default="independent",
        validation_alias=_alias("shared_persona_arguments", "sharedPersonaArguments"),
    )

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any] | None, config: EngineConfig) -> GameSettings:
        """Parse a game's raw settings and apply engine defaults.

        Raises:
            InvalidInputError: A stored setting is out of range.
        """
        try:
            parsed = cls.model_validate(dict(raw or {}))
        except ValidationError as e:
            raise InvalidInputError(
                "Invalid game settings",
                errors=[
                    {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
                    for err in e.errors()
                ],
            ) from e
        return parsed.model_copy(
            update={
                "resolution_method": parsed.resolution_method or config.default_resolution_method,
                "argument_limit": parsed.argument_limit or config.default_argument_limit,
            }
        )

    @property
    def one_vote_per_persona(self) -> bool:
        return self.allow_shared_personas and self.shared_persona_voting == "one_per_persona"

    @property
    def shared_argument_pool(self) -> bool:
        return self.allow_shared_personas and self.shared_persona_arguments == "shared_pool"

    def timeout_for(self, phase: GamePhase) -> timedelta | None:
        """Return the timeout of ``phase``, or None when it has none."""
        hours = {
            GamePhase.PROPOSAL: self.proposal_timeout_hours,
            GamePhase.ARGUMENTATION: self.argumentation_timeout_hours,
            GamePhase.VOTING: self.voting_timeout_hours,
        }.get(phase, TIMEOUT_DISABLED)
        if hours == TIMEOUT_DISABLED:
            return None
        return timedelta(hours=hours)

"""Input DTOs for the orchestration operations.

Length limits match what clients are told in the UI. Validation failures
surface as InvalidInputError so callers see a single error family.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError

from mosaic.domain.errors import InvalidInputError

ArgumentText = Annotated[str, StringConstraints(min_length=1, max_length=900)]

ModelT = TypeVar("ModelT", bound=BaseModel)


class ActionProposalInput(BaseModel):
    """Proposal of a new action with the initiator's opening arguments."""

    model_config = ConfigDict(frozen=True)

    action_description: str = Field(..., min_length=1, max_length=1800)
    desired_outcome: str = Field(..., min_length=1, max_length=1200)
    initial_arguments: list[ArgumentText] = Field(..., min_length=1, max_length=3)


class ArgumentInput(BaseModel):
    """A new argument. INITIATOR_FOR is reserved for proposals."""

    model_config = ConfigDict(frozen=True)

    argument_type: Literal["FOR", "AGAINST", "CLARIFICATION"]
    content: str = Field(..., min_length=1, max_length=900)


class VoteInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    vote_type: Literal["LIKELY_SUCCESS", "LIKELY_FAILURE", "UNCERTAIN"]


class NarrationInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str = Field(..., min_length=1, max_length=3600)


class RoundOutcomesInput(BaseModel):
    """Author overrides for the computed round statistics."""

    model_config = ConfigDict(frozen=True)

    total_triumphs: int | None = Field(default=None, ge=0)
    total_disasters: int | None = Field(default=None, ge=0)
    net_momentum: int | None = None
    key_events: list[str] | None = Field(default=None, max_length=10)


class RoundSummaryInput(BaseModel):
    model_config = ConfigDict(frozen=True)

    content: str = Field(..., min_length=1, max_length=7500)
    outcomes: RoundOutcomesInput | None = None


def validate_input(model: type[ModelT], data: ModelT | Mapping[str, Any]) -> ModelT:
    """Validate raw input into ``model``.

    Already-validated instances pass through untouched.

    Raises:
        InvalidInputError: The payload failed validation.
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = [
            {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        raise InvalidInputError(errors[0]["msg"] if errors else "Invalid input", errors=errors) from e

"""Domain events for the Mosaic engine."""

from mosaic.domain.events.game_events import (
    ACTION_PROPOSED_EVENT_TYPE,
    ACTION_RESOLVED_EVENT_TYPE,
    ARGUMENT_ADDED_EVENT_TYPE,
    ARGUMENT_STRENGTH_TOGGLED_EVENT_TYPE,
    ARGUMENTATION_COMPLETED_EVENT_TYPE,
    ARGUMENTATION_SKIPPED_EVENT_TYPE,
    ARGUMENTATION_TIMEOUT_EVENT_TYPE,
    GAME_STARTED_EVENT_TYPE,
    NARRATION_ADDED_EVENT_TYPE,
    NPC_ACTION_PROPOSED_EVENT_TYPE,
    PROPOSAL_TIMEOUT_EVENT_TYPE,
    PROPOSALS_SKIPPED_EVENT_TYPE,
    ROUND_STARTED_EVENT_TYPE,
    ROUND_SUMMARY_SUBMITTED_EVENT_TYPE,
    VOTE_CAST_EVENT_TYPE,
    VOTING_SKIPPED_EVENT_TYPE,
    VOTING_TIMEOUT_EVENT_TYPE,
    GameEvent,
    NotificationEvent,
)

__all__ = [
    "ACTION_PROPOSED_EVENT_TYPE",
    "ACTION_RESOLVED_EVENT_TYPE",
    "ARGUMENT_ADDED_EVENT_TYPE",
    "ARGUMENT_STRENGTH_TOGGLED_EVENT_TYPE",
    "ARGUMENTATION_COMPLETED_EVENT_TYPE",
    "ARGUMENTATION_SKIPPED_EVENT_TYPE",
    "ARGUMENTATION_TIMEOUT_EVENT_TYPE",
    "GAME_STARTED_EVENT_TYPE",
    "GameEvent",
    "NARRATION_ADDED_EVENT_TYPE",
    "NPC_ACTION_PROPOSED_EVENT_TYPE",
    "NotificationEvent",
    "PROPOSAL_TIMEOUT_EVENT_TYPE",
    "PROPOSALS_SKIPPED_EVENT_TYPE",
    "ROUND_STARTED_EVENT_TYPE",
    "ROUND_SUMMARY_SUBMITTED_EVENT_TYPE",
    "VOTE_CAST_EVENT_TYPE",
    "VOTING_SKIPPED_EVENT_TYPE",
    "VOTING_TIMEOUT_EVENT_TYPE",
]

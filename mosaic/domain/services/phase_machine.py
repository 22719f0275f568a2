"""Phase state machine.

Pure functions that validate a requested move and describe it as a
PhaseTransition for the persistence port to apply. The machine never
branches on the resolution strategy in use: the status an action moves to
after argumentation is handed in from the strategy descriptor.

Action status graph (monotonic):
    PROPOSED -> ARGUING -> {VOTING | ARBITER_REVIEW} -> RESOLVED

Game phase graph:
    WAITING -> PROPOSAL
    PROPOSAL -> ARGUMENTATION | ROUND_SUMMARY (host closes round early)
    ARGUMENTATION -> VOTING | ARBITER_REVIEW
    VOTING | ARBITER_REVIEW -> PROPOSAL | ROUND_SUMMARY
    ROUND_SUMMARY -> PROPOSAL (next round)
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from mosaic.domain.errors import WrongPhaseError
from mosaic.domain.models.action import Action, ActionStatus, ResolutionResult
from mosaic.domain.models.game import Game, GamePhase
from mosaic.domain.models.phase_transition import PhaseTransition
from mosaic.domain.models.round import Round

ACTION_TRANSITIONS: dict[ActionStatus, frozenset[ActionStatus]] = {
    ActionStatus.PROPOSED: frozenset({ActionStatus.ARGUING}),
    ActionStatus.ARGUING: frozenset({ActionStatus.VOTING, ActionStatus.ARBITER_REVIEW}),
    ActionStatus.VOTING: frozenset({ActionStatus.RESOLVED}),
    ActionStatus.ARBITER_REVIEW: frozenset({ActionStatus.RESOLVED}),
    ActionStatus.RESOLVED: frozenset(),  # Terminal
}

GAME_PHASE_TRANSITIONS: dict[GamePhase, frozenset[GamePhase]] = {
    GamePhase.WAITING: frozenset({GamePhase.PROPOSAL}),
    GamePhase.PROPOSAL: frozenset({GamePhase.ARGUMENTATION, GamePhase.ROUND_SUMMARY}),
    GamePhase.ARGUMENTATION: frozenset({GamePhase.VOTING, GamePhase.ARBITER_REVIEW}),
    GamePhase.VOTING: frozenset({GamePhase.PROPOSAL, GamePhase.ROUND_SUMMARY}),
    GamePhase.ARBITER_REVIEW: frozenset({GamePhase.PROPOSAL, GamePhase.ROUND_SUMMARY}),
    GamePhase.ROUND_SUMMARY: frozenset({GamePhase.PROPOSAL}),
}

# Game phase mirrored by each in-flight action status
GAME_PHASE_FOR_STATUS: dict[ActionStatus, GamePhase] = {
    ActionStatus.ARGUING: GamePhase.ARGUMENTATION,
    ActionStatus.VOTING: GamePhase.VOTING,
    ActionStatus.ARBITER_REVIEW: GamePhase.ARBITER_REVIEW,
}

_RESOLVABLE_STATUSES = frozenset({ActionStatus.VOTING, ActionStatus.ARBITER_REVIEW})


def is_valid_action_transition(from_status: ActionStatus, to_status: ActionStatus) -> bool:
    """Check whether the action status graph allows a move."""
    return to_status in ACTION_TRANSITIONS[from_status]


def is_valid_phase_transition(from_phase: GamePhase, to_phase: GamePhase) -> bool:
    """Check whether the game phase graph allows a move."""
    return to_phase in GAME_PHASE_TRANSITIONS[from_phase]


def require_action_status(action: Action, expected: ActionStatus, message: str) -> None:
    """Raise WrongPhaseError unless ``action`` is in ``expected`` status."""
    if action.status != expected:
        raise WrongPhaseError(message, expected=expected.value, actual=action.status.value)


def require_game_phase(game: Game, expected: GamePhase, message: str) -> None:
    """Raise WrongPhaseError unless ``game`` is in ``expected`` phase."""
    if game.current_phase != expected:
        raise WrongPhaseError(
            message, expected=expected.value, actual=game.current_phase.value
        )


def start_argumentation(game: Game, action: Action, now: datetime) -> tuple[Game, Action]:
    """Open argumentation for a freshly proposed action.

    Proposal moves the action straight from PROPOSED to ARGUING and the game
    from PROPOSAL to ARGUMENTATION with the action as current.

    Returns:
        Tuple of (updated game, updated action).

    Raises:
        WrongPhaseError: The game is not waiting for a proposal.
    """
    require_game_phase(game, GamePhase.PROPOSAL, "Game is not in proposal phase")
    if game.current_action_id is not None:
        raise WrongPhaseError("Another action is already in progress")
    require_action_status(action, ActionStatus.PROPOSED, "Action has already been opened")

    opened = action.with_status(ActionStatus.ARGUING, argumentation_started_at=now)
    moved = game.with_phase(GamePhase.ARGUMENTATION, now, current_action_id=action.action_id)
    return moved, opened


def plan_argumentation_exit(
    game: Game,
    action: Action,
    target_status: ActionStatus,
    *,
    skipped: bool,
    now: datetime,
) -> PhaseTransition:
    """Plan the move out of ARGUING into the strategy's next status.

    Args:
        game: Game owning the action.
        action: The action being argued.
        target_status: ``phase_after_argumentation`` of the game's strategy.
        skipped: True when the host or the timeout sweep ends argumentation.
        now: Transition time.

    Returns:
        PhaseTransition guarded on ARGUING / ARGUMENTATION.

    Raises:
        WrongPhaseError: The action is no longer ARGUING.
        ValueError: ``target_status`` is not a post-argumentation status.
    """
    if not is_valid_action_transition(ActionStatus.ARGUING, target_status):
        raise ValueError(f"{target_status.value} cannot follow argumentation")
    require_action_status(action, ActionStatus.ARGUING, "Action is not in argumentation phase")
    require_game_phase(game, GamePhase.ARGUMENTATION, "Game is not in argumentation phase")

    return PhaseTransition(
        game_id=game.game_id,
        action_id=action.action_id,
        from_status=ActionStatus.ARGUING,
        to_status=target_status,
        from_phase=GamePhase.ARGUMENTATION,
        to_phase=GAME_PHASE_FOR_STATUS[target_status],
        occurred_at=now,
        argumentation_skipped=skipped,
    )


def resolution_completes_round(round_: Round) -> bool:
    """True when resolving one more action fills the round's quota."""
    return round_.actions_completed + 1 >= round_.total_actions_required


def plan_resolution(
    game: Game,
    round_: Round,
    action: Action,
    result: ResolutionResult,
    resolution_method: str,
    *,
    voting_skipped: bool = False,
    momentum_delta: int = 0,
    now: datetime,
) -> PhaseTransition:
    """Plan the move of an action into RESOLVED.

    The round counter increments in the same write. When that fills the
    round the game moves to ROUND_SUMMARY, otherwise back to PROPOSAL. In
    both cases the current action is cleared.

    Raises:
        WrongPhaseError: The action is not awaiting resolution, or the round
            has no room for another resolved action.
    """
    if action.status not in _RESOLVABLE_STATUSES:
        raise WrongPhaseError(
            "Action is not awaiting resolution",
            expected="VOTING|ARBITER_REVIEW",
            actual=action.status.value,
        )
    expected_phase = GAME_PHASE_FOR_STATUS[action.status]
    require_game_phase(game, expected_phase, "Game phase does not match the action")
    if round_.is_complete:
        raise WrongPhaseError("Round already has all its actions resolved")

    to_phase = GamePhase.ROUND_SUMMARY if resolution_completes_round(round_) else GamePhase.PROPOSAL
    return PhaseTransition(
        game_id=game.game_id,
        action_id=action.action_id,
        from_status=action.status,
        to_status=ActionStatus.RESOLVED,
        from_phase=expected_phase,
        to_phase=to_phase,
        occurred_at=now,
        round_id=round_.round_id,
        resolution=result,
        resolution_method=resolution_method,
        voting_skipped=voting_skipped,
        clear_current_action=True,
        momentum_delta=momentum_delta,
    )


def apply_transition(game: Game, action: Action, transition: PhaseTransition) -> tuple[Game, Action]:
    """Apply a planned transition to in-memory copies of game and action.

    Persistence adapters call this after their compare-and-set guard has
    passed, so both sides of the mirror always move together.

    Raises:
        WrongPhaseError: Either guard no longer holds.
    """
    if action.status != transition.from_status or game.current_phase != transition.from_phase:
        raise WrongPhaseError(
            "Game state changed before the transition could be applied",
            expected=transition.from_phase.value,
            actual=game.current_phase.value,
        )

    changes: dict[str, object] = {}
    if transition.to_status in (ActionStatus.VOTING, ActionStatus.ARBITER_REVIEW):
        changes["voting_started_at"] = transition.occurred_at
        changes["argumentation_was_skipped"] = transition.argumentation_skipped
    elif transition.completes_action:
        changes["resolved_at"] = transition.occurred_at
        changes["resolution"] = transition.resolution
        changes["resolution_method"] = transition.resolution_method
        changes["voting_was_skipped"] = transition.voting_skipped

    moved_action = action.with_status(transition.to_status, **changes)
    moved_game = game.with_phase(
        transition.to_phase,
        transition.occurred_at,
        clear_current_action=transition.clear_current_action,
    )
    if transition.momentum_delta:
        moved_game = moved_game.with_momentum(transition.momentum_delta)
    return moved_game, moved_action


def open_round(game: Game, round_: Round, now: datetime) -> Game:
    """Point the game at a new round and move it to PROPOSAL.

    Used when a game starts (WAITING) and when a summary closes the previous
    round (ROUND_SUMMARY).
    """
    if game.current_phase not in (GamePhase.WAITING, GamePhase.ROUND_SUMMARY):
        raise WrongPhaseError(
            "A new round can only open from the lobby or the round summary",
            actual=game.current_phase.value,
        )
    moved = game.with_phase(GamePhase.PROPOSAL, now, clear_current_action=True)
    return replace(moved, current_round_id=round_.round_id)


def close_round_early(game: Game, now: datetime) -> Game:
    """Move a game with no action in flight from PROPOSAL to ROUND_SUMMARY."""
    require_game_phase(game, GamePhase.PROPOSAL, "Game is not in proposal phase")
    if game.current_action_id is not None:
        raise WrongPhaseError("An action is still in progress")
    return game.with_phase(GamePhase.ROUND_SUMMARY, now, clear_current_action=True)

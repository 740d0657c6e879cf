"""
SM-2 interval model.

Pure computation: given a card's current scheduling state and a new attempt,
derive the next state. No I/O and no clock access.
"""

from dataclasses import replace
from datetime import timedelta

from brayne.domain.constants import (
    FAILURE_INTERVAL,
    FIRST_INTERVAL,
    MIN_EFFORT_FACTOR,
    SECOND_INTERVAL,
)
from brayne.domain.errors import InvariantViolationError
from brayne.domain.models import AttemptQuality, AttemptRecord, CardState


def update_effort_factor(effort_factor: float, quality: AttemptQuality) -> float:
    """
    Adjust the effort factor for one attempt, clamped below at MIN_EFFORT_FACTOR.

    EF' = EF + 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)
    """
    miss = 5 - quality.score
    return max(MIN_EFFORT_FACTOR, effort_factor + 0.1 - miss * (0.08 + miss * 0.02))


def apply_attempt(state: CardState, attempt: AttemptRecord) -> CardState:
    """
    Compute the card state that results from recording `attempt`.

    Args:
        state: State before the attempt.
        attempt: The attempt being recorded.

    Returns:
        A new CardState; `state` is left untouched.

    Raises:
        InvariantViolationError: A streak of three or more recalls is being
            extended on a card that has never been attempted.
    """
    effort_factor = update_effort_factor(state.effort_factor, attempt.quality)

    if attempt.quality.is_recall:
        recall_count = state.recall_count + 1
    else:
        recall_count = 0

    if recall_count == 0:
        next_attempt = attempt.time + FAILURE_INTERVAL
    elif recall_count == 1:
        next_attempt = attempt.time + FIRST_INTERVAL
    elif recall_count == 2:
        next_attempt = attempt.time + SECOND_INTERVAL
    else:
        next_attempt = attempt.time + _grown_interval(state, effort_factor)

    return replace(
        state,
        recall_count=recall_count,
        effort_factor=effort_factor,
        last_attempt=attempt.time,
        next_attempt=next_attempt,
    )


def _grown_interval(state: CardState, effort_factor: float) -> timedelta:
    """
    Previous interval scaled by the effort factor, truncated to whole seconds.
    """
    if state.last_attempt is None:
        raise InvariantViolationError(
            f"Missing last_attempt for card with recall_count={state.recall_count}"
        )
    previous: timedelta = state.next_attempt - state.last_attempt
    return timedelta(seconds=int(previous.total_seconds() * effort_factor))


def interval_of(state: CardState) -> timedelta | None:
    """Current review interval, or None before the first attempt."""
    if state.last_attempt is None:
        return None
    return state.next_attempt - state.last_attempt

"""
Scheduling engine for a deck of cards.

Two queues decide what is shown next:
1. The primary queue orders every normally scheduled card by its next review time.
2. The repeat queue holds, in FIFO order, cards that were just failed and
   should be drilled again within the same session.

Primary reviews always win over repeats. A repeat entry left untouched for
longer than `repeat_timeout` falls back into the primary queue.

The engine never reads the clock: every time-dependent call takes `now` or an
attempt timestamp from the caller.
"""

import logging
from collections import deque
from datetime import datetime, timedelta
from enum import Enum

from brayne.domain.constants import REPEAT_TIMEOUT
from brayne.domain.errors import (
    DuplicateCardError,
    OrderingViolationError,
    UnknownCardError,
)
from brayne.domain.models import AttemptRecord, CardId, CardState

from .interval_model import apply_attempt
from .priority_queue import IndexedPriorityQueue

logger = logging.getLogger(__name__)


class QueueLocation(Enum):
    PRIMARY = "primary"
    REPEAT = "repeat"


class SchedulingEngine:
    """
    Owns every CardState plus the primary and repeat queues.

    A tracked card is in exactly one of the two queues. All public mutators
    validate before touching any structure, so a raised error leaves the
    engine unchanged.
    """

    def __init__(self, repeat_timeout: timedelta = REPEAT_TIMEOUT):
        self.repeat_timeout = repeat_timeout
        self._states: dict[CardId, CardState] = {}
        self._primary: IndexedPriorityQueue[CardId] = IndexedPriorityQueue()
        self._repeat: deque[tuple[CardId, datetime]] = deque()

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._states

    # ---------- Mutations ----------

    def new_card(self, card_id: CardId, created: datetime) -> None:
        """
        Start tracking a card, due immediately at its creation time.

        Raises:
            DuplicateCardError: The card is already tracked.
        """
        if card_id in self._states:
            raise DuplicateCardError(card_id)
        self._states[card_id] = CardState(next_attempt=created)
        self._primary.push(card_id, created)

    def delete_card(self, card_id: CardId) -> bool:
        """
        Stop tracking a card. Returns False (and does nothing) if it was not tracked.
        """
        if self._states.pop(card_id, None) is None:
            return False
        if card_id in self._primary:
            self._primary.remove(card_id)
        else:
            self._repeat = deque(entry for entry in self._repeat if entry[0] != card_id)
        return True

    def draw_card(self, now: datetime) -> CardId | None:
        """
        Return the card that should be presented at `now`, or None if nothing is due.

        The drawn card stays queued; only `insert_attempt` moves it. Stale
        repeat entries are returned to the primary queue as a side effect.
        """
        head = self._primary.peek()
        if head is not None and head[1] <= now:
            return head[0]

        while self._repeat:
            card_id, moved_at = self._repeat[0]
            if now - moved_at <= self.repeat_timeout:
                return card_id
            self._repeat.popleft()
            self._primary.push(card_id, self._states[card_id].next_attempt)
            logger.debug(f"[repeat] {card_id} timed out after {now - moved_at}")

        return None

    def insert_attempt(self, attempt: AttemptRecord) -> QueueLocation:
        """
        Record an attempt for the card at the front of one of the queues.

        Returns:
            Where the card sits after the attempt.

        Raises:
            UnknownCardError: The card is tracked by neither queue.
            OrderingViolationError: The card is tracked but not at a queue front.
        """
        card_id = attempt.card_id
        head = self._primary.peek()

        if head is not None and head[0] == card_id:
            return self._attempt_primary(attempt)
        if self._repeat and self._repeat[0][0] == card_id:
            return self._attempt_repeat(attempt)
        if card_id not in self._states:
            raise UnknownCardError(card_id)
        raise OrderingViolationError(card_id)

    def _attempt_primary(self, attempt: AttemptRecord) -> QueueLocation:
        card_id = attempt.card_id
        state = apply_attempt(self._states[card_id], attempt)
        self._states[card_id] = state

        if attempt.quality.clears_repeat:
            self._primary.update(card_id, state.next_attempt)
            return QueueLocation.PRIMARY

        self._primary.remove(card_id)
        self._repeat.append((card_id, attempt.time))
        logger.debug(f"[repeat] {card_id} demoted ({attempt.quality.name})")
        return QueueLocation.REPEAT

    def _attempt_repeat(self, attempt: AttemptRecord) -> QueueLocation:
        # Repeat attempts never touch the card's scheduling state.
        card_id = attempt.card_id
        if not attempt.quality.clears_repeat:
            return QueueLocation.REPEAT

        self._repeat.popleft()
        self._primary.push(card_id, self._states[card_id].next_attempt)
        logger.debug(f"[repeat] {card_id} promoted ({attempt.quality.name})")
        return QueueLocation.PRIMARY

    # ---------- Queries ----------

    def card_state(self, card_id: CardId) -> CardState | None:
        return self._states.get(card_id)

    def location(self, card_id: CardId) -> QueueLocation | None:
        if card_id in self._primary:
            return QueueLocation.PRIMARY
        if card_id in self._states:
            return QueueLocation.REPEAT
        return None

    def schedule(self) -> list[tuple[CardId, datetime]]:
        """Primary queue contents in due order."""
        return list(self._primary)

    def repeat_entries(self) -> list[tuple[CardId, datetime]]:
        """Repeat queue contents, front first, as (card_id, moved_at) pairs."""
        return list(self._repeat)

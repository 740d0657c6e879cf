"""
Deck: the card catalog plus its scheduling engine, rebuilt from ledger entries.
"""

import logging
from collections.abc import Iterable
from datetime import datetime

from brayne.domain.errors import BrayneError, LedgerReplayError
from brayne.domain.ledger import (
    AttemptRecorded,
    CardCreated,
    CardDeleted,
    LedgerEntry,
    RepeatsExpired,
    TagsUpdated,
)
from brayne.domain.models import Card, CardId

from .scheduler import QueueLocation, SchedulingEngine

logger = logging.getLogger(__name__)


class Deck:
    """
    Applies ledger entries to a SchedulingEngine and keeps card contents alongside.

    The engine only ever sees identities and times; questions, answers and
    tags live in `cards`.
    """

    def __init__(self, engine: SchedulingEngine | None = None):
        self.engine = engine or SchedulingEngine()
        self.cards: dict[CardId, Card] = {}

    def apply(self, entry: LedgerEntry) -> None:
        """
        Apply a single entry. Engine errors propagate unchanged.

        Attempts and expiries first draw at their own time, so stale repeat
        entries move exactly as they did when the entry was recorded. A
        rejected attempt leaves the deck as that draw left it.
        """
        if isinstance(entry, CardCreated):
            card = entry.card
            self.engine.new_card(card.id, card.created)
            self.cards[card.id] = card
        elif isinstance(entry, CardDeleted):
            self.cards.pop(entry.card_id, None)
            if not self.engine.delete_card(entry.card_id):
                logger.warning(f"Delete for unknown card {entry.card_id} ignored")
        elif isinstance(entry, AttemptRecorded):
            # Every attempt follows a draw at the same instant; redo its queue moves.
            self.engine.draw_card(entry.attempt.time)
            location = self.engine.insert_attempt(entry.attempt)
            if location is QueueLocation.REPEAT:
                logger.debug(f"{entry.attempt.card_id} queued for repeat")
        elif isinstance(entry, TagsUpdated):
            card = self.cards.get(entry.card_id)
            if card is None:
                logger.warning(f"Tag update for unknown card {entry.card_id} ignored")
                return
            card.tags = list(entry.tags)
        elif isinstance(entry, RepeatsExpired):
            self.engine.draw_card(entry.time)
        else:
            raise TypeError(f"Unsupported ledger entry: {entry!r}")

    def replay(self, entries: Iterable[LedgerEntry]) -> int:
        """
        Apply entries in order and return how many were applied.

        Raises:
            LedgerReplayError: An entry was rejected by the engine; carries its
                1-based position.
        """
        count = 0
        for position, entry in enumerate(entries, start=1):
            try:
                self.apply(entry)
            except BrayneError as e:
                raise LedgerReplayError(position, e) from e
            count = position
        logger.debug(f"Replayed {count} ledger entries ({len(self.cards)} live cards)")
        return count

    def next_card(self, now: datetime) -> Card | None:
        card_id = self.engine.draw_card(now)
        if card_id is None:
            return None
        return self.cards[card_id]

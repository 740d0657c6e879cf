"""Tests for rebuilding a deck from ledger entries."""

import logging
from datetime import timedelta

import pytest

from brayne.application.replayer import Deck
from brayne.application.scheduler import QueueLocation
from brayne.domain.errors import DuplicateCardError, LedgerReplayError, UnknownCardError
from brayne.domain.ledger import (
    AttemptRecorded,
    CardCreated,
    CardDeleted,
    RepeatsExpired,
    TagsUpdated,
)
from brayne.domain.models import AttemptQuality, AttemptRecord, BasicCard, Card

DAY = timedelta(days=1)


def created(card_id, when, question="Q?", tags=None):
    return CardCreated(
        card=Card(id=card_id, created=when, contents=BasicCard(question, "A."), tags=tags or [])
    )


def attempted(card_id, when, quality):
    return AttemptRecorded(attempt=AttemptRecord(card_id=card_id, time=when, quality=quality))


def test_replay_rebuilds_engine_and_catalog(t0):
    deck = Deck()
    count = deck.replay(
        [
            created("a", t0, question="Capital of France?"),
            created("b", t0 + timedelta(seconds=1)),
            attempted("a", t0, AttemptQuality.PERFECT),
            attempted("b", t0 + timedelta(seconds=1), AttemptQuality.BLACKOUT),
        ]
    )

    assert count == 4
    assert set(deck.cards) == {"a", "b"}
    assert deck.engine.card_state("a").next_attempt == t0 + DAY
    assert deck.engine.location("b") is QueueLocation.REPEAT
    assert deck.next_card(t0 + timedelta(minutes=5)).id == "b"


def test_next_card_returns_contents(t0):
    deck = Deck()
    deck.apply(created("a", t0, question="2 + 2?"))
    assert deck.next_card(t0).contents.question == "2 + 2?"
    assert deck.next_card(t0 - DAY) is None


def test_deletes_remove_card_everywhere(t0):
    deck = Deck()
    deck.replay([created("a", t0), CardDeleted(card_id="a")])
    assert deck.cards == {}
    assert "a" not in deck.engine


def test_delete_of_unknown_card_is_tolerated(t0, caplog):
    deck = Deck()
    with caplog.at_level(logging.WARNING):
        deck.replay([CardDeleted(card_id="ghost"), created("a", t0)])
    assert "ghost" in caplog.text
    assert set(deck.cards) == {"a"}


def test_tags_update_only_touches_catalog(t0, caplog):
    deck = Deck()
    deck.replay([created("a", t0, tags=["travel"]), TagsUpdated(card_id="a", tags=["food", "fr"])])
    assert deck.cards["a"].tags == ["food", "fr"]
    assert deck.engine.schedule() == [("a", t0)]

    with caplog.at_level(logging.WARNING):
        deck.apply(TagsUpdated(card_id="ghost", tags=["x"]))
    assert "ghost" in caplog.text


def test_engine_errors_carry_position(t0):
    deck = Deck()
    with pytest.raises(LedgerReplayError) as excinfo:
        deck.replay(
            [
                created("a", t0),
                attempted("a", t0, AttemptQuality.PERFECT),
                attempted("ghost", t0, AttemptQuality.PERFECT),
            ]
        )
    assert excinfo.value.position == 3
    assert isinstance(excinfo.value.cause, UnknownCardError)


def test_duplicate_creation_does_not_replace_card(t0):
    deck = Deck()
    deck.apply(created("a", t0, question="first"))
    with pytest.raises(DuplicateCardError):
        deck.apply(created("a", t0 + DAY, question="second"))
    assert deck.cards["a"].contents.question == "first"


def snapshot(deck):
    engine = deck.engine
    return (
        engine.schedule(),
        engine.repeat_entries(),
        {card_id: engine.card_state(card_id) for card_id in deck.cards},
    )


class LiveDeck:
    """Drives a deck the way a study session does and keeps the entries it produced."""

    def __init__(self):
        self.deck = Deck()
        self.entries = []

    def record(self, entry):
        self.deck.apply(entry)
        self.entries.append(entry)

    def study(self, card_id, when, quality):
        assert self.deck.next_card(when).id == card_id
        self.record(attempted(card_id, when, quality))


def test_replay_matches_live_deck_after_stale_repeat(t0):
    live = LiveDeck()
    live.record(created("a", t0))
    live.record(created("b", t0))
    live.study("a", t0, AttemptQuality.BLACKOUT)
    live.study("b", t0 + timedelta(hours=3), AttemptQuality.BLACKOUT)
    # "a" has waited 7h and returns to the primary queue; "b" is still fresh.
    live.study("b", t0 + timedelta(hours=7), AttemptQuality.PERFECT)
    live.study("a", t0 + DAY + timedelta(hours=1), AttemptQuality.PERFECT)

    assert live.deck.engine.card_state("a").recall_count == 1

    replayed = Deck()
    assert replayed.replay(live.entries) == len(live.entries)
    assert snapshot(replayed) == snapshot(live.deck)


def test_expired_repeats_entry_moves_cards_back(t0):
    deck = Deck()
    deck.replay(
        [
            created("a", t0),
            attempted("a", t0, AttemptQuality.BLACKOUT),
            RepeatsExpired(time=t0 + timedelta(hours=7)),
        ]
    )
    assert deck.engine.location("a") is QueueLocation.PRIMARY
    assert deck.engine.repeat_entries() == []

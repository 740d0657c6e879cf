import json
from datetime import timedelta

import pytest

from brayne.application.replayer import Deck
from brayne.domain.errors import LedgerFormatError
from brayne.domain.ledger import AttemptRecorded, CardCreated, CardDeleted, TagsUpdated
from brayne.domain.models import AttemptQuality, AttemptRecord, BasicCard, Card
from brayne.infrastructure.ledger_file import LedgerFile


@pytest.fixture
def ledger(tmp_path):
    return LedgerFile(tmp_path / "ledger.dat")


@pytest.fixture
def batman(t0):
    return Card(
        id="banana-farm",
        created=t0,
        contents=BasicCard(
            question="What do you call it when Batman skips church?",
            answer="Christian Bale",
        ),
        tags=["hippo", "family"],
    )


def test_missing_file_reads_empty(ledger):
    assert list(ledger.read()) == []


def test_write_then_read(ledger, batman, t0):
    entries = [
        CardCreated(card=batman),
        AttemptRecorded(
            attempt=AttemptRecord(card_id=batman.id, time=t0, quality=AttemptQuality.PERFECT)
        ),
        TagsUpdated(card_id=batman.id, tags=["jokes"]),
        CardDeleted(card_id=batman.id),
    ]
    for entry in entries:
        ledger.append(entry)

    assert list(ledger.read()) == entries


def test_one_json_object_per_line(ledger, batman):
    ledger.append(CardCreated(card=batman))
    ledger.append(CardDeleted(card_id=batman.id))

    lines = ledger.path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["kind"] == "card_created"
    assert first["card"]["contents"]["answer"] == "Christian Bale"
    assert json.loads(lines[1]) == {"kind": "card_deleted", "card_id": "banana-farm"}


def test_quality_is_stored_as_score(ledger, t0):
    ledger.append(
        AttemptRecorded(
            attempt=AttemptRecord(card_id="c", time=t0, quality=AttemptQuality.CORRECT_AFTER_HESITATION)
        )
    )
    raw = json.loads(ledger.path.read_text(encoding="utf-8"))
    assert raw["attempt"]["quality"] == 4


def test_blank_lines_are_skipped(ledger, batman):
    ledger.append(CardCreated(card=batman))
    with ledger.path.open("a", encoding="utf-8") as f:
        f.write("\n   \n")
    ledger.append(CardDeleted(card_id=batman.id))

    assert [e.kind for e in ledger.read()] == ["card_created", "card_deleted"]


@pytest.mark.parametrize(
    "bad_line",
    ["not json", '{"kind": "mystery"}', '{"kind": "card_deleted"}'],
)
def test_malformed_line_reports_line_number(ledger, batman, bad_line):
    ledger.append(CardCreated(card=batman))
    with ledger.path.open("a", encoding="utf-8") as f:
        f.write(bad_line + "\n")

    with pytest.raises(LedgerFormatError) as excinfo:
        list(ledger.read())
    assert excinfo.value.line_number == 2


def test_replaying_file_restores_schedule(ledger, batman, t0):
    ledger.append(CardCreated(card=batman))
    ledger.append(
        AttemptRecorded(
            attempt=AttemptRecord(card_id=batman.id, time=t0, quality=AttemptQuality.PERFECT)
        )
    )

    deck = Deck()
    deck.replay(ledger.read())
    assert deck.engine.schedule() == [(batman.id, t0 + timedelta(days=1))]
    assert deck.cards[batman.id] == batman

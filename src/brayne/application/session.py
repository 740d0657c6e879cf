"""
Interactive study session.

Draws due cards from the deck, shows them on the terminal, collects a quality
rating and records the attempt. The deck validates an attempt before it is
appended to the ledger, so a rejected attempt never reaches the file.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone

import typer

from brayne.domain.ledger import AttemptRecorded, LedgerEntry, RepeatsExpired
from brayne.domain.models import AttemptQuality, AttemptRecord, Card
from brayne.infrastructure.ledger_file import LedgerFile

from .replayer import Deck

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

COMMAND_PROMPT = "Command ([c]ard, [r]eport, [q]uit)"
QUALITY_PROMPT = "Blackout [0] ... Perfect [5]"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StudySession:
    def __init__(self, deck: Deck, ledger: LedgerFile, clock: Clock = utc_now):
        self.deck = deck
        self.ledger = ledger
        self.clock = clock
        self.attempts = 0

    def run(self) -> int:
        """Run the command loop until the user quits. Returns the number of attempts made."""
        while True:
            command = typer.prompt(COMMAND_PROMPT, default="c").strip().lower()
            logger.debug(f"Got command: {command}")
            if command == "q":
                break
            if command == "r":
                self.report()
            elif command == "c":
                self.challenge()
            else:
                typer.secho(f"Unknown command: {command}", fg="red")
        return self.attempts

    def challenge(self) -> AttemptRecord | None:
        """Present the next due card, if any, and record the attempt."""
        if len(self.deck.engine) == 0:
            typer.echo("There are no cards in the deck!")
            return None

        # Replay redraws at the attempt time, so the attempt carries the draw time.
        now = self.clock()
        waiting = len(self.deck.engine.repeat_entries())
        card = self.deck.next_card(now)
        if card is None:
            if len(self.deck.engine.repeat_entries()) < waiting:
                self._record(RepeatsExpired(time=now))
            typer.echo("All card attempts completed for this session!")
            return None

        quality = self.ask(card)
        attempt = AttemptRecord(card_id=card.id, time=now, quality=quality)
        self._record(AttemptRecorded(attempt=attempt))
        self.attempts += 1
        return attempt

    def _record(self, entry: LedgerEntry) -> None:
        self.deck.apply(entry)
        self.ledger.append(entry)

    def ask(self, card: Card) -> AttemptQuality:
        typer.echo(_label("Question:") + card.contents.question)
        typer.prompt("Hit Enter for answer", default="", show_default=False)
        typer.echo(_label("Answer:") + card.contents.answer)

        while True:
            raw = typer.prompt(QUALITY_PROMPT)
            try:
                return AttemptQuality.from_score(int(raw.strip()))
            except ValueError:
                typer.secho("Attempt quality must be 0-5", fg="red")

    def report(self) -> None:
        engine = self.deck.engine
        now = self.clock()
        due = sum(1 for _, when in engine.schedule() if when <= now)
        typer.echo(
            f"Cards: {len(engine)}  Due: {due}  Repeat: {len(engine.repeat_entries())}"
            f"  Attempts this session: {self.attempts}"
        )


def _label(text: str) -> str:
    return typer.style(text, fg="blue") + " "

"""
Domain models for cards, attempts and per-card scheduling state.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .constants import INITIAL_EFFORT_FACTOR

CardId = str


class AttemptQuality(Enum):
    """
    Rating of a single review attempt, from total failure to effortless recall.

    The integer value of each member is its SM-2 score and is the only
    projection used in arithmetic; read it through `score`.
    """

    BLACKOUT = 0
    INCORRECT_BUT_REMEMBERED = 1
    INCORRECT_BUT_EASY_RECALL = 2
    CORRECT_SERIOUS_DIFFICULTY = 3
    CORRECT_AFTER_HESITATION = 4
    PERFECT = 5

    @property
    def score(self) -> int:
        return self.value

    @property
    def is_recall(self) -> bool:
        """True when the attempt extends the consecutive-success streak."""
        return self.score >= AttemptQuality.CORRECT_SERIOUS_DIFFICULTY.score

    @property
    def clears_repeat(self) -> bool:
        """True when the attempt is good enough to leave (or avoid) the repeat queue."""
        return self.score >= AttemptQuality.CORRECT_AFTER_HESITATION.score

    @classmethod
    def from_score(cls, score: int) -> "AttemptQuality":
        for quality in cls:
            if quality.score == score:
                return quality
        raise ValueError(f"attempt quality must be 0-5, got {score}")


@dataclass(frozen=True)
class AttemptRecord:
    """
    One answer given for one card.

    Attributes:
        card_id: The card that was attempted.
        time: Wall-clock time of the attempt.
        quality: How well the card was recalled.
    """

    card_id: CardId
    time: datetime
    quality: AttemptQuality


@dataclass(frozen=True)
class CardState:
    """
    Scheduling state of a single card.

    Before the first attempt `next_attempt` holds the card creation time and
    `last_attempt` is None.
    """

    next_attempt: datetime
    recall_count: int = 0  # Consecutive attempts scoring >= CORRECT_SERIOUS_DIFFICULTY
    effort_factor: float = INITIAL_EFFORT_FACTOR
    last_attempt: datetime | None = None


@dataclass(frozen=True)
class BasicCard:
    question: str
    answer: str


@dataclass
class Card:
    """A study card as recorded in the ledger."""

    id: CardId
    created: datetime  # UTC creation time
    contents: BasicCard
    # Arbitrary user-supplied labels, e.g. "travel"
    tags: list[str] = field(default_factory=list)

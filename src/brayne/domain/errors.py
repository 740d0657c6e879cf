"""Error taxonomy for brayne."""

from .models import CardId


class BrayneError(Exception):
    """Base class for recoverable errors surfaced to the caller."""


class DuplicateCardError(BrayneError):
    def __init__(self, card_id: CardId):
        super().__init__(f"Card {card_id} is already scheduled")
        self.card_id = card_id


class OrderingViolationError(BrayneError):
    """An attempt arrived for a card that is not at the front of either queue."""

    def __init__(self, card_id: CardId, message: str | None = None):
        super().__init__(message or f"Card {card_id} is not the card currently due for review")
        self.card_id = card_id


class UnknownCardError(OrderingViolationError):
    """An attempt arrived for a card tracked by neither queue."""

    def __init__(self, card_id: CardId):
        super().__init__(card_id, f"Card {card_id} is not scheduled")


class LedgerFormatError(BrayneError):
    def __init__(self, path, line_number: int, reason: str):
        super().__init__(f"{path}:{line_number}: malformed ledger entry ({reason})")
        self.path = path
        self.line_number = line_number


class LedgerReplayError(BrayneError):
    """A ledger entry could not be applied to the deck."""

    def __init__(self, position: int, cause: BrayneError):
        super().__init__(f"Ledger entry {position}: {cause}")
        self.position = position
        self.cause = cause


class InvariantViolationError(RuntimeError):
    """
    Internal consistency failure.

    Not a BrayneError: nothing in the package recovers from it.
    """

# Domain models and errors
from .errors import (
    BrayneError,
    DuplicateCardError,
    InvariantViolationError,
    OrderingViolationError,
    UnknownCardError,
)
from .models import AttemptQuality, AttemptRecord, Card, CardState

__all__ = [
    "AttemptQuality",
    "AttemptRecord",
    "BrayneError",
    "Card",
    "CardState",
    "DuplicateCardError",
    "InvariantViolationError",
    "OrderingViolationError",
    "UnknownCardError",
]

# Application layer
from .replayer import Deck
from .scheduler import QueueLocation, SchedulingEngine

__all__ = ["Deck", "QueueLocation", "SchedulingEngine"]

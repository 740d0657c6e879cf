"""
Ledger entry models.

The ledger is an append-only sequence of these entries; replaying it in order
rebuilds the deck. Each entry serializes to one JSON object tagged by `kind`.
"""

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .models import AttemptRecord, Card, CardId


class _Entry(BaseModel):
    model_config = ConfigDict(frozen=True)


class CardCreated(_Entry):
    kind: Literal["card_created"] = "card_created"
    card: Card


class CardDeleted(_Entry):
    kind: Literal["card_deleted"] = "card_deleted"
    card_id: CardId


class AttemptRecorded(_Entry):
    kind: Literal["attempt_recorded"] = "attempt_recorded"
    attempt: AttemptRecord


class TagsUpdated(_Entry):
    kind: Literal["tags_updated"] = "tags_updated"
    card_id: CardId
    tags: list[str]


class RepeatsExpired(_Entry):
    """A draw at `time` returned stale repeat entries to the primary queue without an attempt."""

    kind: Literal["repeats_expired"] = "repeats_expired"
    time: datetime


LedgerEntry = Annotated[
    CardCreated | CardDeleted | AttemptRecorded | TagsUpdated | RepeatsExpired,
    Field(discriminator="kind"),
]

ledger_entry_adapter: TypeAdapter[LedgerEntry] = TypeAdapter(LedgerEntry)

"""Service for creating card identities and cards."""

from datetime import datetime, timezone

from ulid import ULID

from brayne.domain.models import BasicCard, Card


def generate_card_id() -> str:
    """Generate a unique, never-reused card identity using ULID."""
    return str(ULID())


def make_card(
    question: str,
    answer: str,
    tags: list[str] | None = None,
    created: datetime | None = None,
) -> Card:
    return Card(
        id=generate_card_id(),
        created=created or datetime.now(timezone.utc),
        contents=BasicCard(question=question, answer=answer),
        tags=list(tags or []),
    )

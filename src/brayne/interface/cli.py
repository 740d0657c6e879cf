"""brayne CLI: card management, study sessions and configuration."""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from brayne.application.config import resolve_config
from brayne.application.id_service import make_card
from brayne.application.interval_model import interval_of
from brayne.application.session import StudySession
from brayne.consts import VERSION
from brayne.domain.ledger import CardCreated, CardDeleted, TagsUpdated
from brayne.interface._common import _resolve_with_overrides, load_deck

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="brayne: spaced-repetition flashcards on a local JSON ledger.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage brayne configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


def _version_callback(value: bool):
    if value:
        typer.echo(f"brayne {VERSION}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 0,
    ledger: Annotated[
        Path | None, typer.Option("--ledger", "-l", help="Ledger file. Defaults to config.")
    ] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version", callback=_version_callback, is_eager=True, help="Show version and exit."
        ),
    ] = False,
):
    """Global settings for brayne."""
    ctx.ensure_object(dict)
    # Without -v the configured verbosity applies.
    ctx.obj["verbose"] = verbose or None
    ctx.obj["ledger_path"] = ledger


def _config_from(ctx: typer.Context):
    obj = ctx.obj or {}
    return _resolve_with_overrides(
        ledger_path=obj.get("ledger_path"),
        verbose=obj.get("verbose"),
    )


# ---------------------------------------------------------------------------
# Card commands
# ---------------------------------------------------------------------------


@app.command()
def create(
    ctx: typer.Context,
    question: Annotated[str, typer.Option("--question", "-q", help="Card question.")],
    answer: Annotated[str, typer.Option("--answer", "-a", help="Card answer.")],
    tag: Annotated[
        list[str] | None, typer.Option("--tag", "-t", help="Card tag. Repeatable.")
    ] = None,
):
    """[bold green]Create[/bold green] a new card."""
    config = _config_from(ctx)
    deck, ledger = load_deck(config)

    card = make_card(question, answer, tags=tag)
    entry = CardCreated(card=card)
    deck.apply(entry)
    ledger.append(entry)
    logger.info(f"Created card {card.id}")
    typer.echo(card.id)


@app.command()
def delete(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Option("--uuid", "-u", help="Card id to delete.")],
):
    """Delete the card with the given id."""
    config = _config_from(ctx)
    deck, ledger = load_deck(config)

    if card_id not in deck.cards:
        typer.secho(f"No card {card_id}; nothing deleted.", fg="yellow")
        return

    entry = CardDeleted(card_id=card_id)
    deck.apply(entry)
    ledger.append(entry)
    typer.secho(f"Deleted {card_id}", fg="green")


@app.command()
def tag(
    ctx: typer.Context,
    card_id: Annotated[str, typer.Option("--uuid", "-u", help="Card id to retag.")],
    tags: Annotated[list[str], typer.Option("--tag", "-t", help="New tag. Repeatable.")],
):
    """Replace the tags of a card."""
    config = _config_from(ctx)
    deck, ledger = load_deck(config)

    if card_id not in deck.cards:
        typer.secho(f"No card {card_id}.", fg="red", err=True)
        raise typer.Exit(1)

    entry = TagsUpdated(card_id=card_id, tags=tags)
    deck.apply(entry)
    ledger.append(entry)
    typer.echo(f"{card_id}: {', '.join(tags)}")


@app.command("list")
def list_cards(
    ctx: typer.Context,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """List every card with its queue and next review time."""
    config = _config_from(ctx)
    deck, _ = load_deck(config)
    engine = deck.engine

    rows = []
    order = [cid for cid, _ in engine.schedule()] + [cid for cid, _ in engine.repeat_entries()]
    for cid in order:
        state = engine.card_state(cid)
        card = deck.cards[cid]
        interval = interval_of(state)
        rows.append(
            {
                "id": cid,
                "queue": engine.location(cid).value,
                "next_attempt": state.next_attempt.isoformat(timespec="seconds"),
                "interval_days": (
                    round(interval.total_seconds() / 86400, 2) if interval is not None else None
                ),
                "recall_count": state.recall_count,
                "effort_factor": round(state.effort_factor, 2),
                "question": card.contents.question,
                "tags": card.tags,
            }
        )

    if json_output:
        typer.echo(json.dumps(rows, indent=2))
        return

    if not rows:
        typer.secho("There are no cards in the deck!", fg="yellow")
        return
    for row in rows:
        tags = f"  [{', '.join(row['tags'])}]" if row["tags"] else ""
        typer.echo(
            f"{row['id']}  {row['queue']:<7}  {row['next_attempt']}"
            f"  EF={row['effort_factor']:.2f}  {row['question']}{tags}"
        )


@app.command()
def study(ctx: typer.Context):
    """[bold green]Study[/bold green] the cards that are due now."""
    config = _config_from(ctx)
    deck, ledger = load_deck(config)

    session = StudySession(deck, ledger)
    attempts = session.run()
    typer.echo(f"Recorded {attempts} attempt(s).")


# ---------------------------------------------------------------------------
# Misc
# ---------------------------------------------------------------------------


@app.command()
def logs(ctx: typer.Context):
    """Print the log directory, creating it if needed."""
    config = _config_from(ctx)
    if not config.log_dir.exists():
        config.log_dir.mkdir(parents=True, exist_ok=True)
    typer.echo(str(config.log_dir))


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _config_from(ctx)
    d = {k: str(v) if isinstance(v, Path) else v for k, v in config.model_dump().items()}
    typer.echo(json.dumps(d, indent=2))

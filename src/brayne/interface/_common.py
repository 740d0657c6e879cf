"""Helpers shared by CLI commands: config overrides, logging and deck loading."""

import logging
import os
from typing import Any

import typer

from brayne.application.config import AppConfig
from brayne.application.replayer import Deck
from brayne.application.scheduler import SchedulingEngine
from brayne.domain.errors import BrayneError
from brayne.infrastructure.ledger_file import LedgerFile

LOG_FILE_NAME = "brayne.log"

_LEVELS = {0: logging.WARNING, 1: logging.INFO}


def _resolve_with_overrides(**overrides: Any) -> AppConfig:
    """Resolve config, letting only explicitly passed (non-None) CLI values win."""
    # Looked up through the cli module so tests can patch `brayne.interface.cli.resolve_config`.
    from brayne.interface import cli

    config = cli.resolve_config({k: v for k, v in overrides.items() if v is not None})
    configure_logging(config)
    return config


def configure_logging(config: AppConfig) -> None:
    """Set the root level from verbosity and mirror records into the log directory."""
    root = logging.getLogger()
    root.setLevel(_LEVELS.get(config.verbose, logging.DEBUG))

    log_file = config.log_dir / LOG_FILE_NAME
    for handler in list(root.handlers):
        if isinstance(handler, logging.FileHandler) and handler.get_name() == "brayne":
            if handler.baseFilename == os.path.abspath(log_file):
                return
            root.removeHandler(handler)
            handler.close()

    try:
        config.log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logging.getLogger(__name__).warning(f"Log directory unavailable: {e}")
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.set_name("brayne")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s:%(name)s:%(message)s"))
    root.addHandler(handler)


def load_deck(config: AppConfig) -> tuple[Deck, LedgerFile]:
    """Replay the configured ledger into a fresh deck. Exits 1 on ledger errors."""
    ledger = LedgerFile(config.ledger_path)
    deck = Deck(SchedulingEngine(repeat_timeout=config.repeat_timeout))
    try:
        deck.replay(ledger.read())
    except BrayneError as e:
        typer.secho(f"Error: {e}", fg="red", err=True)
        raise typer.Exit(1)
    return deck, ledger

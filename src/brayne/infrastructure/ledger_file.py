"""
Append-only JSON-lines ledger file.

One ledger entry per line. Entries are only ever appended, never rewritten.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from brayne.domain.errors import LedgerFormatError
from brayne.domain.ledger import LedgerEntry, ledger_entry_adapter

logger = logging.getLogger(__name__)


class LedgerFile:
    def __init__(self, path: Path):
        self.path = Path(path)

    def append(self, entry: LedgerEntry) -> None:
        """Serialize `entry` as one line and flush it to disk."""
        line = ledger_entry_adapter.dump_json(entry).decode("utf-8")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()
        logger.debug(f"[ledger] {self.path.name} <- {line}")

    def read(self) -> Iterator[LedgerEntry]:
        """
        Yield entries in file order. A missing file reads as an empty ledger.

        Raises:
            LedgerFormatError: A line is not a valid ledger entry.
        """
        if not self.path.exists():
            logger.info(f"No ledger at {self.path}; starting empty")
            return

        with self.path.open("r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                if not line.strip():
                    continue
                try:
                    yield ledger_entry_adapter.validate_json(line.strip())
                except ValidationError as e:
                    raise LedgerFormatError(
                        self.path, line_number, f"{e.error_count()} validation error(s)"
                    ) from e

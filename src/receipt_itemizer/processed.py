"""Append-only record of receipts already itemized."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from receipt_itemizer.errors import PersistenceReadError, PersistenceWriteError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class ProcessedLog:
    """One identifier per line; lines are appended, never rewritten."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._ids: set[str] = set()
        if path.exists():
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                msg = f"Failed to read processed file {path}: {exc}"
                raise PersistenceReadError(msg) from exc
            self._ids = {line for line in text.splitlines() if line}

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._ids)

    def mark(self, identifier: str) -> None:
        """Record ``identifier`` as fully processed."""
        if identifier in self._ids:
            return
        try:
            with self.path.open("a", encoding="utf-8") as fp:
                fp.write(f"{identifier}\n")
        except OSError as exc:
            msg = f"Failed to append to processed file {self.path}: {exc}"
            raise PersistenceWriteError(msg) from exc
        self._ids.add(identifier)
        logger.debug("Marked %s as processed", identifier)

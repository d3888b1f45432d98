"""Source adapter for receipt text already extracted to files."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from receipt_itemizer.adapters.base import ReceiptText
from receipt_itemizer.errors import ReceiptSourceError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Set
    from pathlib import Path

logger = logging.getLogger(__name__)


class TextFileAdapter:
    """Yield the OCR text of the given files, keyed by path."""

    def __init__(self, paths: Iterable[Path]) -> None:
        self.paths = list(dict.fromkeys(paths))

    def fetch_unprocessed(self, processed_ids: Set[str]) -> Iterator[ReceiptText]:
        """Read each file not yet processed, in the order given."""
        for path in self.paths:
            source_id = str(path)
            if source_id in processed_ids:
                logger.info("Receipt already done, skipping: %s", source_id)
                continue
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                msg = f"Failed to read receipt text {source_id}: {exc}"
                raise ReceiptSourceError(msg) from exc
            yield ReceiptText(source_id=source_id, text=text)

"""Source adapter protocol for OCR receipt text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Set


@dataclass(frozen=True)
class ReceiptText:
    """OCR output for one receipt image."""

    source_id: str
    text: str


@runtime_checkable
class TextSource(Protocol):
    """Protocol for receipt text sources."""

    def fetch_unprocessed(self, processed_ids: Set[str]) -> Iterator[ReceiptText]: ...

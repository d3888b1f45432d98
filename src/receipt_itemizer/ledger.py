"""Append-only purchase ledger and its ``price | name | tags`` file format."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from receipt_itemizer.catalog import split_tags
from receipt_itemizer.errors import (
    MalformedLedgerRecordError,
    PersistenceReadError,
    PersistenceWriteError,
)
from receipt_itemizer.models import EXCLUDE_TAG, UNKNOWN_NAME, Purchase

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from receipt_itemizer.catalog import Catalog

logger = logging.getLogger(__name__)


class Ledger:
    """Purchases in processing order. Entries are only ever appended."""

    def __init__(self, purchases: Iterable[Purchase] = ()) -> None:
        self._purchases: list[Purchase] = list(purchases)

    def __len__(self) -> int:
        return len(self._purchases)

    def __iter__(self) -> Iterator[Purchase]:
        return iter(self._purchases)

    def __getitem__(self, index: int) -> Purchase:
        return self._purchases[index]

    def append(self, purchase: Purchase) -> None:
        self._purchases.append(purchase)


def display_name(purchase: Purchase, catalog: Catalog | None = None) -> str:
    """Name to show for a purchase.

    An UNKNOWN purchase that still knows its source code shows the vendor
    description of the catalog entry it resolved to instead.
    """
    if (
        purchase.name != UNKNOWN_NAME
        or purchase.source_code is None
        or catalog is None
    ):
        return purchase.name

    index = purchase.catalog_index
    if index is None or index >= len(catalog):
        index = catalog.find_code(purchase.source_code)
    if index is None:
        return purchase.name
    return catalog[index].description


def _persisted_tags(purchase: Purchase) -> list[str]:
    if purchase.excluded and EXCLUDE_TAG not in purchase.tags:
        return [*purchase.tags, EXCLUDE_TAG]
    return purchase.tags


def format_ledger(ledger: Ledger, catalog: Catalog | None = None) -> str:
    """Render the ledger one purchase per line, columns aligned."""
    rows = [
        (
            f"{purchase.price:.2f}",
            display_name(purchase, catalog),
            ", ".join(_persisted_tags(purchase)),
        )
        for purchase in ledger
    ]
    if not rows:
        return ""

    price_width = max(len(price) for price, _name, _tags in rows)
    name_width = max(len(name) for _price, name, _tags in rows)
    lines = [
        f"{price:<{price_width}} | {name:<{name_width}} | {tags}".rstrip()
        for price, name, tags in rows
    ]
    return "\n".join(lines) + "\n"


def parse_ledger(text: str) -> Ledger:
    """Parse ledger text. Blank lines are skipped."""
    ledger = Ledger()
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        parts = [part.strip() for part in line.split("|")]
        if len(parts) != 3:
            msg = f"expected 'price | name | tags', got {line!r}"
            raise MalformedLedgerRecordError(msg, number)

        raw_price, name, raw_tags = parts
        try:
            price = Decimal(raw_price)
        except InvalidOperation:
            msg = f"price is not a number: {raw_price!r}"
            raise MalformedLedgerRecordError(msg, number) from None

        ledger.append(Purchase(name=name, price=price, tags=split_tags(raw_tags)))
    return ledger


def load_ledger(path: Path) -> Ledger:
    """Read a ledger file; a missing file is an empty ledger."""
    if not path.exists():
        logger.info("Ledger file %s does not exist yet, starting empty", path)
        return Ledger()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Failed to read ledger from {path}: {exc}"
        raise PersistenceReadError(msg) from exc
    return parse_ledger(text)


def save_ledger(ledger: Ledger, path: Path, catalog: Catalog | None = None) -> None:
    """Rewrite the ledger file with every purchase."""
    try:
        path.write_text(format_ledger(ledger, catalog), encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to write ledger to {path}: {exc}"
        raise PersistenceWriteError(msg) from exc

"""Reconciliation of receipt lines against the catalog."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from receipt_itemizer.catalog import Catalog, load_catalog, save_catalog
from receipt_itemizer.ledger import Ledger, load_ledger, save_ledger
from receipt_itemizer.models import Purchase

if TYPE_CHECKING:
    from decimal import Decimal

    from receipt_itemizer.config import ItemizerConfig
    from receipt_itemizer.receipt import Receipt

logger = logging.getLogger(__name__)


@runtime_checkable
class Itemizer(Protocol):
    """Resolves one purchase against a catalog and records it."""

    def process_purchase(
        self, code: int, description: str, price: Decimal
    ) -> None: ...


def process_receipt(itemizer: Itemizer, receipt: Receipt) -> int:
    """Feed every item line of ``receipt`` to ``itemizer``.

    Returns the number of purchases recorded.
    """
    count = 0
    for fields in receipt.iter_fields():
        logger.debug("Checking for %s / %s", fields.code, fields.description)
        itemizer.process_purchase(fields.code, fields.description, fields.price)
        count += 1
    logger.info("Recorded %d purchases from %s receipt", count, receipt.vendor.value)
    return count


class FileItemizer:
    """Itemizer over an in-memory catalog and ledger backed by text files."""

    def __init__(
        self, catalog: Catalog | None = None, ledger: Ledger | None = None
    ) -> None:
        self.catalog = catalog if catalog is not None else Catalog()
        self.ledger = ledger if ledger is not None else Ledger()

    @classmethod
    def from_config(cls, config: ItemizerConfig) -> FileItemizer:
        """Load the catalog and ledger files named in ``config``."""
        return cls(
            catalog=load_catalog(config.catalog_path),
            ledger=load_ledger(config.ledger_path),
        )

    def process_purchase(self, code: int, description: str, price: Decimal) -> None:
        """Resolve the item and append a purchase for it.

        An unknown item gets a placeholder catalog entry so later lines with
        the same code or description resolve to it.
        """
        index = self.catalog.lookup(code, description)
        if index is None:
            logger.info(
                "No catalog item for code/desc/price: %s / %s / %s",
                code,
                description,
                price,
            )
            index = self.catalog.insert_placeholder(code, description)

        rule = self.catalog[index]
        self.ledger.append(
            Purchase(
                name=rule.name,
                price=price,
                tags=list(rule.tags),
                excluded=rule.excluded,
                source_code=code,
                catalog_index=index,
            )
        )

    def save(self, config: ItemizerConfig) -> None:
        """Write the catalog and ledger back to their files."""
        save_catalog(self.catalog, config.catalog_path)
        save_ledger(self.ledger, config.ledger_path, self.catalog)

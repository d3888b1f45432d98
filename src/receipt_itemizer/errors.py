"""Exception taxonomy for the itemizer.

Recoverable conditions (a line that does not match the vendor pattern, an
item missing from the catalog) are not exceptions: they surface as ``None``
results and log records so a batch keeps moving. Everything here is fatal
for the run.
"""

from __future__ import annotations


class ItemizerError(Exception):
    """Base class for fatal itemizer errors."""


class ConfigError(ItemizerError, ValueError):
    """A required setting is missing or unusable."""


class VendorUnrecognizedError(ItemizerError):
    """Receipt text matched none of the supported vendors."""


class MalformedFieldsError(ItemizerError):
    """A vendor pattern matched but its numeric captures did not parse."""


class MalformedCatalogRecordError(ItemizerError):
    """A catalog block is structurally invalid."""

    def __init__(self, message: str, line_number: int) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


class MalformedLedgerRecordError(ItemizerError):
    """A ledger line is not ``price | name | tags``."""

    def __init__(self, message: str, line_number: int) -> None:
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number


class PersistenceWriteError(ItemizerError):
    """Writing the catalog, ledger or processed marker failed."""


class PersistenceReadError(ItemizerError):
    """Reading the catalog, ledger or processed marker failed."""


class ReceiptSourceError(ItemizerError):
    """A receipt text file could not be read."""

"""Catalog and ledger models."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

EXCLUDE_TAG = "EXCLUDE"
UNKNOWN_NAME = "UNKNOWN"
MAX_CODE = 2**64 - 1


@dataclass(frozen=True)
class LineFields:
    """The (code, description, price) triple read from one receipt line."""

    code: int
    description: str
    price: Decimal


class ItemRule(BaseModel):
    """A catalog entry mapping a vendor item to a canonical name and tags.

    ``code`` is the vendor SKU; 0 means unset.
    """

    code: int = Field(default=0, ge=0, le=MAX_CODE)
    description: str
    name: str
    tags: list[str] = Field(default_factory=list)
    excluded: bool = False

    @property
    def is_excluded(self) -> bool:
        """True if this item is left out of totals."""
        return self.excluded or EXCLUDE_TAG in self.tags

    @field_validator("description", "name")
    @classmethod
    def _single_nonblank_line(cls, value: str) -> str:
        # each field is one line of a blank-line-delimited catalog block
        if not value.strip():
            msg = "must not be blank"
            raise ValueError(msg)
        if "\n" in value or "\r" in value:
            msg = "must be a single line"
            raise ValueError(msg)
        return value


class Purchase(BaseModel):
    """One resolved line item in the ledger."""

    name: str
    price: Decimal
    tags: list[str] = Field(default_factory=list)
    excluded: bool = False
    source_code: int | None = Field(default=None, ge=0, le=MAX_CODE)
    catalog_index: int | None = Field(default=None, ge=0)

    @property
    def is_excluded(self) -> bool:
        """True if this purchase is left out of totals."""
        return self.excluded or EXCLUDE_TAG in self.tags

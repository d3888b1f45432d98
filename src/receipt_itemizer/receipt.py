"""Vendor detection and per-line field extraction for OCR receipt text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import TYPE_CHECKING

from receipt_itemizer.errors import MalformedFieldsError, VendorUnrecognizedError
from receipt_itemizer.models import MAX_CODE, LineFields

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class Vendor(Enum):
    """Supported store formats, declared in detection priority order."""

    FRED_MEYER = "fred_meyer"
    COSTCO = "costco"
    WINCO = "winco"


@dataclass(frozen=True)
class VendorFormat:
    """How to recognize a vendor's receipt and read its item lines.

    ``field_order`` gives the capture group numbers holding code,
    description and price, in that order.
    """

    keywords: tuple[str, ...]
    pattern: re.Pattern[str]
    field_order: tuple[int, int, int] = (1, 2, 3)


VENDOR_FORMATS: dict[Vendor, VendorFormat] = {
    Vendor.FRED_MEYER: VendorFormat(
        keywords=("fredmeyer", "fred meyer"),
        pattern=re.compile(r"(\d+) ([\w ]+) (\d+\.\d{2}) F\s*$", re.ASCII),
    ),
    Vendor.COSTCO: VendorFormat(
        keywords=("costco", "wholesale"),
        pattern=re.compile(r"(\d+) ([\w -]+) (\d+\.\d{2})", re.ASCII),
    ),
    Vendor.WINCO: VendorFormat(
        keywords=("winco",),
        pattern=re.compile(r"^\s*([\w -]+?) (\d+) (\d+\.\d{2})", re.ASCII),
        field_order=(2, 1, 3),
    ),
}


def detect_vendor(text: str) -> Vendor:
    """Classify receipt text by case-insensitive keyword match.

    Vendors are tried in declaration order; the first whose keyword list
    matches wins.
    """
    lowered = text.lower()
    for vendor in Vendor:
        if any(keyword in lowered for keyword in VENDOR_FORMATS[vendor].keywords):
            return vendor
    msg = f"Could not recognize receipt vendor from text: {text[:80]!r}"
    raise VendorUnrecognizedError(msg)


@dataclass(frozen=True)
class Receipt:
    """OCR text of one receipt, bound to its vendor's line pattern."""

    vendor: Vendor
    raw_text: str
    field_pattern: re.Pattern[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "field_pattern", VENDOR_FORMATS[self.vendor].pattern)

    @classmethod
    def from_text(cls, text: str) -> Receipt:
        """Detect the vendor of ``text`` and build a receipt for it."""
        return cls(vendor=detect_vendor(text), raw_text=text)

    def extract(self, line: str) -> LineFields | None:
        """Return the fields on ``line``, or None if it is not an item line."""
        match = self.field_pattern.search(line)
        if match is None:
            logger.debug("No match on line: %r", line)
            return None

        code_group, desc_group, price_group = VENDOR_FORMATS[self.vendor].field_order
        raw_code = match.group(code_group)
        description = match.group(desc_group).strip()
        raw_price = match.group(price_group)
        logger.debug("Fields from line: %r, %r, %r", raw_code, description, raw_price)
        if not description:
            logger.debug("Blank description on line: %r", line)
            return None

        try:
            code = int(raw_code)
            price = Decimal(raw_price)
        except (ValueError, InvalidOperation) as exc:
            msg = f"Unparseable {self.vendor.value} fields on line {line!r}"
            raise MalformedFieldsError(msg) from exc
        if code > MAX_CODE:
            msg = f"Item code {code} out of range on line {line!r}"
            raise MalformedFieldsError(msg)

        return LineFields(code=code, description=description, price=price)

    def iter_fields(self) -> Iterator[LineFields]:
        """Yield the fields of every item line, skipping the rest."""
        for line in self.raw_text.splitlines():
            fields = self.extract(line)
            if fields is not None:
                yield fields

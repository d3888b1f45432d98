"""Ledger totals grouped by item name and by tag."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from receipt_itemizer.models import EXCLUDE_TAG

if TYPE_CHECKING:
    from collections.abc import Iterable

    from receipt_itemizer.models import Purchase


@dataclass(frozen=True)
class Totals:
    """Per-key totals, largest first, plus the grand total they came from."""

    rows: list[tuple[str, Decimal]]
    grand_total: Decimal


def _sorted_rows(sums: dict[str, Decimal]) -> list[tuple[str, Decimal]]:
    # sorted() is stable, so ties keep first-seen order
    return sorted(sums.items(), key=lambda row: row[1], reverse=True)


def totals_by_name(purchases: Iterable[Purchase]) -> Totals:
    """Sum prices per item name, skipping excluded purchases."""
    sums: dict[str, Decimal] = {}
    grand_total = Decimal(0)
    for purchase in purchases:
        if purchase.is_excluded:
            continue
        sums[purchase.name] = sums.get(purchase.name, Decimal(0)) + purchase.price
        grand_total += purchase.price
    return Totals(rows=_sorted_rows(sums), grand_total=grand_total)


def totals_by_tag(purchases: Iterable[Purchase]) -> Totals:
    """Sum prices per tag.

    A purchase counts once toward each of its tags but only once toward the
    grand total. Untagged and excluded purchases are skipped.
    """
    sums: dict[str, Decimal] = {}
    grand_total = Decimal(0)
    for purchase in purchases:
        if purchase.is_excluded or not purchase.tags:
            continue
        for tag in purchase.tags:
            if tag == EXCLUDE_TAG:
                continue
            sums[tag] = sums.get(tag, Decimal(0)) + purchase.price
        grand_total += purchase.price
    return Totals(rows=_sorted_rows(sums), grand_total=grand_total)


def format_totals(title: str, totals: Totals) -> str:
    """Render totals as an aligned text table."""
    amounts = [f"{total:.2f}" for _key, total in totals.rows]
    grand = f"{totals.grand_total:.2f}"
    width = max([len(grand), *(len(amount) for amount in amounts)])

    lines = [title]
    for (key, _total), amount in zip(totals.rows, amounts, strict=True):
        lines.append(f"  {amount:>{width}}  {key}")
    lines.append(f"  {grand:>{width}}  TOTAL")
    return "\n".join(lines)

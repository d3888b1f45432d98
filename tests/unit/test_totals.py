"""Tests for receipt_itemizer.totals."""

from __future__ import annotations

from decimal import Decimal

from receipt_itemizer.models import Purchase
from receipt_itemizer.totals import (
    Totals,
    format_totals,
    totals_by_name,
    totals_by_tag,
)


def _purchase(name: str, price: str, *tags: str, excluded: bool = False) -> Purchase:
    return Purchase(name=name, price=Decimal(price), tags=list(tags), excluded=excluded)


class TestTotalsByName:
    """Tests for totals_by_name()."""

    def test_sums_per_name_descending(self) -> None:
        totals = totals_by_name(
            [
                _purchase("Milk", "3.49", "dairy"),
                _purchase("Bananas", "1.99", "produce"),
                _purchase("Milk", "3.49", "dairy"),
            ]
        )
        assert totals.rows == [("Milk", Decimal("6.98")), ("Bananas", Decimal("1.99"))]
        assert totals.grand_total == Decimal("8.97")

    def test_ties_keep_first_seen_order(self) -> None:
        totals = totals_by_name(
            [
                _purchase("Zucchini", "2.00"),
                _purchase("Apple", "2.00"),
                _purchase("Melon", "5.00"),
            ]
        )
        assert [key for key, _ in totals.rows] == ["Melon", "Zucchini", "Apple"]

    def test_skips_exclude_tag(self) -> None:
        totals = totals_by_name(
            [
                _purchase("Milk", "3.49", "dairy"),
                _purchase("UNKNOWN", "5.00", "EXCLUDE"),
            ]
        )
        assert totals.rows == [("Milk", Decimal("3.49"))]
        assert totals.grand_total == Decimal("3.49")

    def test_skips_excluded_flag(self) -> None:
        totals = totals_by_name([_purchase("Gift card", "25.00", excluded=True)])
        assert totals.rows == []
        assert totals.grand_total == Decimal(0)

    def test_untagged_purchases_count(self) -> None:
        totals = totals_by_name([_purchase("Water", "4.00")])
        assert totals.rows == [("Water", Decimal("4.00"))]


class TestTotalsByTag:
    """Tests for totals_by_tag()."""

    def test_purchase_counts_toward_each_tag(self) -> None:
        totals = totals_by_tag([_purchase("Bananas", "2.00", "produce", "fruit")])
        assert totals.rows == [("produce", Decimal("2.00")), ("fruit", Decimal("2.00"))]
        assert totals.grand_total == Decimal("2.00")

    def test_sorted_descending(self) -> None:
        totals = totals_by_tag(
            [
                _purchase("Bananas", "1.99", "produce"),
                _purchase("Steak", "15.00", "meat"),
                _purchase("Apples", "4.00", "produce"),
            ]
        )
        assert totals.rows == [("meat", Decimal("15.00")), ("produce", Decimal("5.99"))]

    def test_skips_untagged(self) -> None:
        totals = totals_by_tag([_purchase("Water", "4.00")])
        assert totals.rows == []
        assert totals.grand_total == Decimal(0)

    def test_skips_exclude_tagged(self) -> None:
        totals = totals_by_tag(
            [
                _purchase("UNKNOWN", "5.00", "EXCLUDE"),
                _purchase("Gift", "25.00", "gifts", "EXCLUDE"),
                _purchase("Milk", "3.49", "dairy"),
            ]
        )
        assert totals.rows == [("dairy", Decimal("3.49"))]
        assert totals.grand_total == Decimal("3.49")

    def test_skips_excluded_flag(self) -> None:
        totals = totals_by_tag([_purchase("Gift", "25.00", "gifts", excluded=True)])
        assert totals.rows == []


class TestGrandTotals:
    """Grand totals agree when every purchase is tagged and included."""

    def test_name_and_tag_grand_totals_match(self) -> None:
        purchases = [
            _purchase("Bananas", "1.99", "produce", "fruit"),
            _purchase("Milk", "3.49", "dairy"),
            _purchase("Milk", "3.49", "dairy"),
            _purchase("Steak", "15.00", "meat", "protein"),
        ]
        assert totals_by_name(purchases).grand_total == Decimal("23.97")
        assert (
            totals_by_name(purchases).grand_total
            == totals_by_tag(purchases).grand_total
        )

    def test_placeholder_in_neither(self) -> None:
        purchases = [_purchase("UNKNOWN", "5.00", "EXCLUDE")]
        assert totals_by_name(purchases).grand_total == Decimal(0)
        assert totals_by_tag(purchases).grand_total == Decimal(0)


class TestFormatTotals:
    """Tests for format_totals()."""

    def test_right_aligned_amounts(self) -> None:
        totals = Totals(
            rows=[("Steak", Decimal("15")), ("Milk", Decimal("3.49"))],
            grand_total=Decimal("18.49"),
        )
        assert format_totals("By name:", totals) == (
            "By name:\n  15.00  Steak\n   3.49  Milk\n  18.49  TOTAL"
        )

    def test_empty(self) -> None:
        totals = Totals(rows=[], grand_total=Decimal(0))
        assert format_totals("By tag:", totals) == "By tag:\n  0.00  TOTAL"

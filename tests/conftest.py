"""Shared test fixtures."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from receipt_itemizer.config import ItemizerConfig

if TYPE_CHECKING:
    from pathlib import Path

SAMPLE_CATALOG = """\
# staples
0
placeholder
ignored

1234567
BANANAS
Bananas
produce, fruit

7654321
MILK GALLON
Milk
dairy

1111
KS WATER
Water
true

2222
GIFT CARD
Gift card
gifts
true
"""


@pytest.fixture
def catalog_text() -> str:
    """Provide catalog text with a comment block and every field layout."""
    return SAMPLE_CATALOG


@pytest.fixture
def itemizer_config(tmp_path: Path) -> ItemizerConfig:
    """Provide a configuration pointing into a temporary directory."""
    return ItemizerConfig(
        catalog_path=tmp_path / "catalog.txt",
        ledger_path=tmp_path / "ledger.txt",
        processed_path=tmp_path / "processed.txt",
    )


@pytest.fixture
def itemizer_env(
    monkeypatch: pytest.MonkeyPatch, itemizer_config: ItemizerConfig
) -> ItemizerConfig:
    """Export the temporary configuration through the environment."""
    monkeypatch.setenv("ITEMIZER_CATALOG_FILE", str(itemizer_config.catalog_path))
    monkeypatch.setenv("ITEMIZER_LEDGER_FILE", str(itemizer_config.ledger_path))
    monkeypatch.setenv("ITEMIZER_PROCESSED_FILE", str(itemizer_config.processed_path))
    return itemizer_config

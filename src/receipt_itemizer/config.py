"""Configuration via environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from receipt_itemizer.errors import ConfigError

load_dotenv()

CATALOG_FILE_VAR = "ITEMIZER_CATALOG_FILE"
LEDGER_FILE_VAR = "ITEMIZER_LEDGER_FILE"
PROCESSED_FILE_VAR = "ITEMIZER_PROCESSED_FILE"


@dataclass(frozen=True)
class ItemizerConfig:
    """Paths to the durable artifacts of a run."""

    catalog_path: Path
    ledger_path: Path
    processed_path: Path


def get_itemizer_config() -> ItemizerConfig:
    """Build the itemizer configuration from environment variables.

    Required: ITEMIZER_CATALOG_FILE, ITEMIZER_LEDGER_FILE,
    ITEMIZER_PROCESSED_FILE. Paths are resolved to absolute paths.
    """
    catalog = os.environ.get(CATALOG_FILE_VAR)
    ledger = os.environ.get(LEDGER_FILE_VAR)
    processed = os.environ.get(PROCESSED_FILE_VAR)

    missing = []
    if not catalog:
        missing.append(CATALOG_FILE_VAR)
    if not ledger:
        missing.append(LEDGER_FILE_VAR)
    if not processed:
        missing.append(PROCESSED_FILE_VAR)

    if missing:
        msg = f"Required environment variables not set: {', '.join(missing)}"
        raise ConfigError(msg)

    return ItemizerConfig(
        catalog_path=Path(catalog).resolve(),  # type: ignore[arg-type]
        ledger_path=Path(ledger).resolve(),  # type: ignore[arg-type]
        processed_path=Path(processed).resolve(),  # type: ignore[arg-type]
    )


def get_database_url() -> str:
    """Return the DATABASE_URL from the environment."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        msg = "DATABASE_URL environment variable is required"
        raise ConfigError(msg)
    return url

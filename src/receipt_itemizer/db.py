"""PostgreSQL-backed itemizer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import psycopg
from psycopg.rows import dict_row

from receipt_itemizer.config import get_database_url

if TYPE_CHECKING:
    from decimal import Decimal

logger = logging.getLogger(__name__)

Connection = psycopg.Connection[dict[str, Any]]

TABLES: dict[str, str] = {
    "items": """
        CREATE TABLE items (
            item_id SERIAL PRIMARY KEY,
            code    NUMERIC(20, 0) UNIQUE,
            "desc"  TEXT NOT NULL,
            name    TEXT NOT NULL,
            excl    BOOLEAN DEFAULT FALSE
        )
    """,
    "tags": """
        CREATE TABLE tags (
            tag_id   SERIAL PRIMARY KEY,
            tag_name TEXT NOT NULL UNIQUE
        )
    """,
    "items_tags": """
        CREATE TABLE items_tags (
            item_id INTEGER REFERENCES items (item_id),
            tag_id  INTEGER REFERENCES tags (tag_id),
            PRIMARY KEY (item_id, tag_id)
        )
    """,
    "purchases": """
        CREATE TABLE purchases (
            purchase_id   SERIAL PRIMARY KEY,
            item_id       INTEGER REFERENCES items (item_id),
            price         NUMERIC(12, 2),
            purchase_date TIMESTAMPTZ DEFAULT now()
        )
    """,
}


def get_connection(url: str | None = None) -> Connection:
    """Create and return a new autocommit database connection."""
    return psycopg.connect(
        url or get_database_url(), row_factory=dict_row, autocommit=True
    )


def ensure_schema(conn: Connection) -> None:
    """Create any missing table, in dependency order."""
    for table, ddl in TABLES.items():
        row = conn.execute(
            "SELECT to_regclass(%s) IS NOT NULL AS present", (table,)
        ).fetchone()
        if row is None or not row["present"]:
            logger.info("The %r table does not exist, creating it", table)
            conn.execute(ddl)


class DatabaseItemizer:
    """Itemizer whose catalog and purchases are rows in the database.

    Every resolution is written as it happens; there is no batching.
    """

    def __init__(self, conn: Connection) -> None:
        self.conn = conn
        ensure_schema(conn)

    def process_purchase(self, code: int, description: str, price: Decimal) -> None:
        """Resolve the item row and insert a purchase for it.

        An unknown item is inserted with an empty name, to be filled in by
        hand later.
        """
        item_id = self._find_item(code, description)
        if item_id is None:
            logger.info(
                "No item for code/desc/price: %s / %s / %s", code, description, price
            )
            item_id = self._insert_item(code, description)

        self.conn.execute(
            "INSERT INTO purchases (item_id, price) VALUES (%s, %s)",
            (item_id, price),
        )

    def _find_item(self, code: int, description: str) -> int | None:
        if code:
            row = self.conn.execute(
                "SELECT item_id FROM items WHERE code = %s", (code,)
            ).fetchone()
            if row is not None:
                return int(row["item_id"])
            logger.debug("Could not find code %s", code)

        row = self.conn.execute(
            'SELECT item_id FROM items WHERE "desc" = %s', (description,)
        ).fetchone()
        if row is not None:
            return int(row["item_id"])
        return None

    def _insert_item(self, code: int, description: str) -> int:
        row = self.conn.execute(
            'INSERT INTO items (code, "desc", name) VALUES (%s, %s, %s) '
            "RETURNING item_id",
            (code or None, description, ""),
        ).fetchone()
        if row is None:
            msg = f"Insert of item {code} / {description} returned no id"
            raise RuntimeError(msg)
        return int(row["item_id"])

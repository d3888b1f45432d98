"""Catalog of known items and its blank-line-delimited text format.

File layout, one block per item, blocks separated by a blank line::

    <code>
    <description>
    <name>
    [<comma, separated, tags>]
    [<true|false>]

A block whose first line starts with ``#`` or ``//`` is a comment.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from receipt_itemizer.errors import (
    MalformedCatalogRecordError,
    PersistenceReadError,
    PersistenceWriteError,
)
from receipt_itemizer.models import EXCLUDE_TAG, UNKNOWN_NAME, ItemRule

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", "//")


class Catalog:
    """Item rules indexed by code and by description.

    Rules live in one ordered list; the two indices map keys to positions in
    it. Code 0 is never indexed by code. When two rules share a key the later
    one wins the index and both stay in the list.
    """

    def __init__(self, rules: Iterable[ItemRule] = ()) -> None:
        self._rules: list[ItemRule] = []
        self._by_code: dict[int, int] = {}
        self._by_description: dict[str, int] = {}
        for rule in rules:
            self.add(rule)

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self) -> Iterator[ItemRule]:
        return iter(self._rules)

    def __getitem__(self, index: int) -> ItemRule:
        return self._rules[index]

    def add(self, rule: ItemRule) -> int:
        """Append a rule, index it, and return its position."""
        if (rule.code and rule.code in self._by_code) or (
            rule.description in self._by_description
        ):
            logger.warning(
                "Duplicate item in catalog, later entry shadows earlier: %s / %s",
                rule.code,
                rule.description,
            )
        index = len(self._rules)
        self._rules.append(rule)
        if rule.code:
            self._by_code[rule.code] = index
        self._by_description[rule.description] = index
        return index

    def find_code(self, code: int) -> int | None:
        """Return the position of the rule indexed under ``code``."""
        if not code:
            return None
        return self._by_code.get(code)

    def lookup(self, code: int, description: str) -> int | None:
        """Resolve by code first, then by description."""
        index = self.find_code(code)
        if index is not None:
            return index
        return self._by_description.get(description)

    def insert_placeholder(self, code: int, description: str) -> int:
        """Add an UNKNOWN, excluded rule for an item seen for the first time."""
        logger.info("Adding placeholder catalog entry for %s / %s", code, description)
        return self.add(
            ItemRule(
                code=code,
                description=description,
                name=UNKNOWN_NAME,
                tags=[EXCLUDE_TAG],
            )
        )

    def unresolved(self) -> list[ItemRule]:
        """Return placeholder rules still awaiting a real name."""
        return [rule for rule in self._rules if rule.name == UNKNOWN_NAME]


def split_tags(text: str) -> list[str]:
    """Split a comma-separated tag list, dropping blanks."""
    return [tag.strip() for tag in text.split(",") if tag.strip()]


def _parse_bool(text: str) -> bool | None:
    if text == "true":
        return True
    if text == "false":
        return False
    return None


def _iter_blocks(text: str) -> Iterator[tuple[int, list[str]]]:
    """Yield (first line number, lines) for each blank-line-delimited block."""
    block: list[str] = []
    start = 0
    for number, line in enumerate(text.splitlines(), start=1):
        if line.strip():
            if not block:
                start = number
            block.append(line)
        elif block:
            yield start, block
            block = []
    if block:
        yield start, block


def _parse_block(lines: list[str], line_number: int) -> ItemRule:
    if len(lines) < 3 or len(lines) > 5:
        msg = f"expected 3 to 5 lines in catalog block, got {len(lines)}"
        raise MalformedCatalogRecordError(msg, line_number)

    raw_code, description, name, *extra = lines
    try:
        code = int(raw_code.strip())
    except ValueError:
        msg = f"item code is not an integer: {raw_code!r}"
        raise MalformedCatalogRecordError(msg, line_number) from None

    tags: list[str] = []
    excluded = False
    if len(extra) == 2:
        tags = split_tags(extra[0])
        parsed = _parse_bool(extra[1].strip())
        if parsed is None:
            msg = f"expected true or false, got {extra[1]!r}"
            raise MalformedCatalogRecordError(msg, line_number + 4)
        excluded = parsed
    elif len(extra) == 1:
        parsed = _parse_bool(extra[0].strip())
        if parsed is None:
            tags = split_tags(extra[0])
        else:
            excluded = parsed

    try:
        return ItemRule(
            code=code,
            description=description,
            name=name,
            tags=tags,
            excluded=excluded,
        )
    except ValidationError as exc:
        raise MalformedCatalogRecordError(str(exc), line_number) from exc


def parse_catalog(text: str) -> Catalog:
    """Parse catalog text. Empty text is an empty catalog."""
    catalog = Catalog()
    for line_number, lines in _iter_blocks(text):
        if lines[0].lstrip().startswith(COMMENT_PREFIXES):
            continue
        catalog.add(_parse_block(lines, line_number))
    return catalog


def format_rule(rule: ItemRule) -> str:
    """Render one rule as a catalog block, without the separating blank line."""
    lines = [str(rule.code), rule.description, rule.name]
    if rule.tags:
        lines.append(", ".join(rule.tags))
    if rule.excluded:
        lines.append("true")
    return "\n".join(lines)


def dump_catalog(catalog: Catalog) -> str:
    """Serialize the catalog in rule order."""
    blocks = [format_rule(rule) for rule in catalog]
    if not blocks:
        return ""
    return "\n\n".join(blocks) + "\n"


def load_catalog(path: Path) -> Catalog:
    """Read a catalog file; a missing file is an empty catalog."""
    if not path.exists():
        logger.info("Catalog file %s does not exist yet, starting empty", path)
        return Catalog()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Failed to read catalog from {path}: {exc}"
        raise PersistenceReadError(msg) from exc
    return parse_catalog(text)


def save_catalog(catalog: Catalog, path: Path) -> None:
    """Rewrite the catalog file."""
    try:
        path.write_text(dump_catalog(catalog), encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to write catalog to {path}: {exc}"
        raise PersistenceWriteError(msg) from exc

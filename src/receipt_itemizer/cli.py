"""CLI entry point for receipt-itemizer."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click

from receipt_itemizer.adapters.text_file import TextFileAdapter
from receipt_itemizer.catalog import load_catalog
from receipt_itemizer.config import get_itemizer_config
from receipt_itemizer.db import DatabaseItemizer, get_connection
from receipt_itemizer.errors import ItemizerError
from receipt_itemizer.itemizer import FileItemizer, Itemizer, process_receipt
from receipt_itemizer.ledger import load_ledger
from receipt_itemizer.processed import ProcessedLog
from receipt_itemizer.receipt import Receipt
from receipt_itemizer.totals import format_totals, totals_by_name, totals_by_tag

if TYPE_CHECKING:
    from receipt_itemizer.ledger import Ledger


def _echo_totals(ledger: Ledger) -> None:
    click.echo(format_totals("Totals by name:", totals_by_name(ledger)))
    click.echo()
    click.echo(format_totals("Totals by tag:", totals_by_tag(ledger)))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log every receipt line.")
def cli(verbose: bool) -> None:
    """Receipt Itemizer: turn receipt text into a purchase ledger."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@click.option(
    "--backend",
    type=click.Choice(["file", "db"]),
    default="file",
    show_default=True,
    help="Where the catalog and purchases live.",
)
@click.argument(
    "files", nargs=-1, type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
def itemize(backend: str, files: tuple[Path, ...]) -> None:
    """Itemize OCR text files of receipts not yet processed."""
    try:
        config = get_itemizer_config()
        processed = ProcessedLog(config.processed_path)

        file_itemizer: FileItemizer | None = None
        itemizer: Itemizer
        if backend == "db":
            itemizer = DatabaseItemizer(get_connection())
        else:
            file_itemizer = FileItemizer.from_config(config)
            itemizer = file_itemizer

        source = TextFileAdapter(path.resolve() for path in files)
        done: list[str] = []
        for receipt_text in source.fetch_unprocessed(processed.ids):
            receipt = Receipt.from_text(receipt_text.text)
            process_receipt(itemizer, receipt)
            if file_itemizer is None:
                processed.mark(receipt_text.source_id)
            else:
                done.append(receipt_text.source_id)

        # file purchases are only durable once saved
        if file_itemizer is not None:
            _echo_totals(file_itemizer.ledger)
            file_itemizer.save(config)
            for source_id in done:
                processed.mark(source_id)
    except ItemizerError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
def totals() -> None:
    """Show ledger totals by item name and by tag."""
    try:
        config = get_itemizer_config()
        _echo_totals(load_ledger(config.ledger_path))
    except ItemizerError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command("catalog-unknown")
def catalog_unknown() -> None:
    """List catalog entries still waiting for a name."""
    try:
        config = get_itemizer_config()
        catalog = load_catalog(config.catalog_path)
    except ItemizerError as exc:
        raise click.ClickException(str(exc)) from exc

    unresolved = catalog.unresolved()
    if not unresolved:
        click.echo("No unknown items.")
        return
    for rule in unresolved:
        click.echo(f"{rule.code}\t{rule.description}")

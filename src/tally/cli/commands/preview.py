"""CSV import preview command."""

from pathlib import Path

import click
from tally.domain.account import AccountService
from tally.domain.csv_import import CSVImportService

from tally.cli.account_resolution import resolve_account_or_exit
from tally.cli.error_handling import exit_on_domain_error
from tally.cli.commands.formats import describe_columns, resolve_format_or_exit
from tally.cli.formatting import format_money


@click.command("preview")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID")
@click.option("--format", "format_name", help="Built-in format name (auto-detected if omitted)")
@click.pass_context
@exit_on_domain_error
def preview_csv(ctx, csv_file: str, account: str, format_name: str | None):
    """Show what importing a CSV file would do, without storing anything.

    Rows that look like already stored transactions are marked DUPLICATE
    and would be left out by 'tally import'.
    """
    db = ctx.obj["db"]
    account_obj = resolve_account_or_exit(ctx, AccountService(db), account)
    service = CSVImportService(db)
    csv_text = Path(csv_file).read_text(encoding="utf-8-sig")

    if format_name:
        mapping = resolve_format_or_exit(ctx, format_name)
        preview = service.generate_preview(csv_text, mapping, account_obj)
    else:
        detected = service.auto_detect_and_preview(csv_text, account_obj)
        if detected is None:
            click.echo("Error: Could not detect the CSV format; pass --format", err=True)
            ctx.exit(1)
        mapping, preview = detected
        click.echo(f"Detected format: {describe_columns(mapping)}")

    if not preview.transactions:
        click.echo("No transactions found.")
    for row in preview.transactions:
        mark = "x" if row.is_selected else " "
        click.echo(
            f"[{mark}] {row.raw_row_index:4d} | {row.date.isoformat()} | "
            f"{format_money(row.amount):>14s} | {row.merchant:30s} | {row.duplicate_status}"
        )

    click.echo(
        f"\nNew: {preview.new_count}, Duplicates: {preview.duplicate_count}, "
        f"Errors: {preview.error_count}"
    )
    for error in preview.errors:
        click.echo(f"  {error}", err=True)


def register_commands(cli):
    """Register preview command with main CLI."""
    cli.add_command(preview_csv)

"""Built-in CSV format commands."""

from typing import Optional

import click
from tally.domain.csv_import import CSVImportService
from tally.domain.csv_mapping import ColumnMapping, get_format


def resolve_format_or_exit(ctx: click.Context, name: str) -> ColumnMapping:
    """Look up a built-in format by name, or exit with a CLI error."""
    mapping = get_format(name)
    if mapping is None:
        click.echo(f"Error: Unknown format '{name}'. Run 'tally formats' to list them.", err=True)
        ctx.exit(1)
    return mapping


def describe_columns(mapping: ColumnMapping) -> str:
    """One-line summary of the columns a mapping reads."""
    amount: Optional[str] = mapping.amount_column
    if mapping.uses_debit_credit_columns:
        amount = f"{mapping.debit_column} / {mapping.credit_column}"
    return f"{mapping.date_column} ({mapping.date_format}), {mapping.description_column}, {amount}"


@click.command("formats")
def list_formats():
    """List the built-in bank CSV formats."""
    click.echo("\nBuilt-in formats:")
    click.echo("-" * 80)
    for name, mapping in CSVImportService.get_available_formats():
        click.echo(f"{name:36s} | {describe_columns(mapping)}")


def register_commands(cli):
    """Register format commands with main CLI."""
    cli.add_command(list_formats)

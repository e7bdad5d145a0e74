"""CSV import command."""

from pathlib import Path

import click
from tally.domain.account import AccountService
from tally.domain.csv_import import CSVImportService

from tally.cli.account_resolution import resolve_account_or_exit
from tally.cli.error_handling import exit_on_domain_error
from tally.cli.commands.formats import describe_columns, resolve_format_or_exit


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID")
@click.option("--format", "format_name", help="Built-in format name (auto-detected if omitted)")
@click.option(
    "--include-duplicates",
    is_flag=True,
    help="Also import rows that look like already stored transactions",
)
@click.pass_context
@exit_on_domain_error
def import_csv(ctx, csv_file: str, account: str, format_name: str | None, include_duplicates: bool):
    """Import transactions from a CSV file."""
    db = ctx.obj["db"]
    account_obj = resolve_account_or_exit(ctx, AccountService(db), account)
    service = CSVImportService(db)
    csv_text = Path(csv_file).read_text(encoding="utf-8-sig")

    if format_name:
        mapping = resolve_format_or_exit(ctx, format_name)
        result = service.import_csv(
            csv_text, mapping, account_obj, skip_duplicates=not include_duplicates
        )
        errors = result.errors
    else:
        detected = service.auto_detect_and_preview(csv_text, account_obj)
        if detected is None:
            click.echo("Error: Could not detect the CSV format; pass --format", err=True)
            ctx.exit(1)
        mapping, preview = detected
        click.echo(f"Detected format: {describe_columns(mapping)}")
        if include_duplicates:
            preview = preview.select_all()
        result = service.import_transactions(
            account_obj.id, account_obj.currency, preview.transactions
        )
        errors = preview.errors

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.imported_count} transactions")
    if include_duplicates:
        click.echo(f"  Duplicates imported: {result.duplicate_count}")
    else:
        click.echo(f"  Skipped: {result.duplicate_count + result.skipped_count} duplicates")
    if errors:
        click.echo(f"  Errors: {len(errors)}")
        for error in errors:
            click.echo(f"    {error}", err=True)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)

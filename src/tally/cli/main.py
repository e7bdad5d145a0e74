"""Main CLI entry point."""

import logging

import click
from tally.database.factories import create_sqlite_database

# Import and register all commands at module level
from tally.cli.commands import (
    account,
    formats,
    preview,
    import_cmd,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TALLY_DB_PATH environment variable)",
    envvar="TALLY_DB_PATH",
)
@click.option("--verbose", "-v", count=True, help="Log progress (-v) or debug detail (-vv)")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: int):
    """Tally - Currency-safe expense tracking.

    Import bank statement CSV files into accounts, with duplicate detection
    against what is already stored.
    """
    ctx.ensure_object(dict)

    level = {0: logging.WARNING, 1: logging.INFO}.get(verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
formats.register_commands(cli)
preview.register_commands(cli)
import_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

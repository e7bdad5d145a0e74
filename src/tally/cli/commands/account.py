"""Account management commands."""

import click
from tally.domain.account import AccountService
from tally.domain.currency import SUPPORTED_CURRENCIES

from tally.cli.error_handling import exit_on_domain_error


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--currency",
    required=True,
    type=click.Choice([c.code for c in SUPPORTED_CURRENCIES], case_sensitive=False),
    help="Currency the account is kept in",
)
@click.pass_context
@exit_on_domain_error
def create_account(ctx, name: str, currency: str):
    """Create a new account.

    Examples:
        tally account create "BPI Savings" --currency PHP
        tally account create "Chase Checking" --currency USD
    """
    db = ctx.obj["db"]
    service = AccountService(db)

    account_id = service.create_account(name=name, currency_code=currency)
    click.echo(f"Created account '{name.strip()}' (ID: {account_id}, {currency.upper()})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    db = ctx.obj["db"]
    service = AccountService(db)

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | Currency: {acc.currency.code}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")

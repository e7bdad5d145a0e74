"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from tally.domain.account import AccountService
from tally.domain.entities import Account
from tally.domain.errors import NotFoundError
from tally.utils.account_resolver import resolve_account

from tally.cli.error_handling import handle_domain_error


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> Account:
    """Resolve account name or ID to the account, or exit with a CLI error."""
    try:
        return account_service.require_account(resolve_account(account_service, account))
    except NotFoundError as exc:
        handle_domain_error(ctx, exc)

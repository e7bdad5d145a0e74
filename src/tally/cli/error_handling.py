"""CLI error handling helpers."""

import functools

import click

from tally.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def exit_on_domain_error(func):
    """Turn a DomainError escaping a command into "Error: ..." and exit code 1.

    Apply below ``click.pass_context`` so the command body is wrapped.
    Database errors are not caught.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DomainError as e:
            handle_domain_error(click.get_current_context(), e)

    return wrapper

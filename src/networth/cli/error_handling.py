"""CLI error handling helpers."""

import click

from networth.domain.errors import DomainError, ValidationError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure.

    Validation errors that name fields are listed one field per line.
    """
    if isinstance(error, ValidationError) and error.field_errors:
        for field, message in error.field_errors.items():
            click.echo(f"Error: {field}: {message}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)

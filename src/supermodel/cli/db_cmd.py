"""Database CLI commands: inspect."""

import click

from supermodel.errors import PersistenceError
from supermodel.persistence.config import DatabaseConfig, create_adapter


@click.command()
@click.argument("table")
@click.option(
    "--url",
    default=None,
    help="Database URL. Defaults to SUPERMODEL_DATABASE_URL / DATABASE_URL.",
)
@click.option(
    "--naming",
    type=click.Choice(["snake", "identity"]),
    default=None,
    help="Column naming convention. Defaults to SUPERMODEL_COLUMN_NAMING.",
)
def inspect(table: str, url: str | None, naming: str | None):
    """Show the attributes a model bound to TABLE would see."""
    config = DatabaseConfig.from_env()
    if url:
        config.url = url
    if naming:
        config.naming = naming

    try:
        adapter = create_adapter(config)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    adapter.connect()
    try:
        attributes = adapter.describe(table)
    except PersistenceError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)
    finally:
        adapter.close()

    click.echo(f"{table} ({config.naming} naming):")
    for name in attributes:
        click.echo(f"  {name}")

"""Supermodel CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
def cli(verbose: bool):
    """Supermodel: schema-validated models with secure passwords."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


# Register subcommands
from supermodel.cli.db_cmd import inspect  # noqa: E402
from supermodel.cli.password_cmd import digest, verify  # noqa: E402

cli.add_command(digest)
cli.add_command(verify)
cli.add_command(inspect)

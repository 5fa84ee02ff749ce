"""Password CLI commands: digest, verify."""

import click

from supermodel.auth.password import (
    DEFAULT_BCRYPT_ROUNDS,
    MAX_BCRYPT_ROUNDS,
    MIN_BCRYPT_ROUNDS,
    get_password_service,
)


@click.command()
@click.option(
    "--rounds", "-r",
    type=click.IntRange(MIN_BCRYPT_ROUNDS, MAX_BCRYPT_ROUNDS),
    default=DEFAULT_BCRYPT_ROUNDS,
    show_default=True,
    help="bcrypt work factor.",
)
def digest(rounds: int):
    """Print the bcrypt digest of a password.

    Useful for seeding a digest column by hand:

        supermodel digest --rounds 10
    """
    password = click.prompt("Password", hide_input=True, confirmation_prompt=True)
    click.echo(get_password_service(rounds).hash(password))


@click.command()
@click.argument("digest_value", metavar="DIGEST")
def verify(digest_value: str):
    """Check a password against DIGEST. Exits 1 on mismatch."""
    password = click.prompt("Password", hide_input=True)
    if get_password_service().verify(password, digest_value):
        click.echo("Password matches.")
        return

    click.echo("Password does not match.", err=True)
    raise SystemExit(1)

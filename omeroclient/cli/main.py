"""This module delivers a CLI to work with OMERO images."""

import typer

from ..utils import setup_logging
from . import acquire, attachments


def version_callback(value: bool) -> None:
    if value:
        from ..version import __version__

        typer.echo(__version__)
        raise typer.Exit()


app = typer.Typer(no_args_is_help=True, pretty_exceptions_short=False)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
        is_flag=True,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Log debug output, including HTTP requests."
    ),
) -> None:
    """omeroclient CLI tool."""
    setup_logging(verbose)


app.command("acquire")(acquire.main)
app.command("attachments")(attachments.main)

"""Options shared by the CLI commands."""

from typing import Optional

import typer
from typing_extensions import Annotated

HostOption = Annotated[
    Optional[str],
    typer.Option(
        help="Hostname of the OMERO server.",
        rich_help_panel="OMERO context",
        envvar="OMERO_HOST",
    ),
]
PortOption = Annotated[
    Optional[int],
    typer.Option(
        help="Port of the OMERO gateway.",
        rich_help_panel="OMERO context",
        envvar="OMERO_PORT",
    ),
]
UserOption = Annotated[
    Optional[str],
    typer.Option(
        help="OMERO login name.",
        rich_help_panel="OMERO context",
        envvar="OMERO_USER",
    ),
]
PasswordOption = Annotated[
    Optional[str],
    typer.Option(
        help="OMERO password, asked for interactively if not given.",
        rich_help_panel="OMERO context",
        envvar="OMERO_PASSWORD",
    ),
]
SessionTokenOption = Annotated[
    Optional[str],
    typer.Option(
        help="Join an existing session instead of logging in.",
        rich_help_panel="OMERO context",
    ),
]

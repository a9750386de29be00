"""This module provides download links to OME-TIFF files of OMERO images."""

import logging

import typer
from typing_extensions import Annotated

from ..context import omero_context
from ..errors import OmeroClientError
from ..omero_client import OmeroClient
from ._utils import (
    HostOption,
    PasswordOption,
    PortOption,
    SessionTokenOption,
    UserOption,
)

logger = logging.getLogger(__name__)


def main(
    *,
    image_id: Annotated[
        int,
        typer.Argument(help="OMERO id of the image.", show_default=False),
    ],
    host: HostOption = None,
    port: PortOption = None,
    user: UserOption = None,
    password: PasswordOption = None,
    session_token: SessionTokenOption = None,
    keep_session: Annotated[
        bool,
        typer.Option(
            help="Keep the session open so the printed link stays valid.",
        ),
    ] = True,
) -> None:
    """Print a download link to an OME-TIFF of the image.

    The image is exported and the OME-TIFF is attached to it if neither the
    image nor any of its attachments is an OME-TIFF yet.
    """

    with omero_context(host=host, port=port, username=user, password=password):
        client = OmeroClient(show_progress=True)
        try:
            if session_token is not None:
                client.connect_to_session(session_token)
            link = client.acquire_canonical_link(image_id)
        except OmeroClientError as e:
            client.disconnect()
            logger.error(f"[{e.kind.value}] {e}")
            raise typer.Exit(code=1) from e
        if not keep_session:
            client.disconnect()
    typer.echo(link)

"""This module lists the files attached to an OMERO image."""

import logging

import typer
from rich.console import Console
from rich.table import Table
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
) -> None:
    """List the file attachments of an image."""

    with omero_context(host=host, port=port, username=user, password=password):
        with OmeroClient() as client:
            try:
                if session_token is not None:
                    client.connect_to_session(session_token)
                attachments = client.file_annotations(image_id)
            except OmeroClientError as e:
                logger.error(f"[{e.kind.value}] {e}")
                raise typer.Exit(code=1) from e

    table = Table("Annotation", "File name", "Format", "Size")
    for attachment in attachments:
        table.add_row(
            str(attachment.annotation_id),
            attachment.file_name,
            attachment.file_format or "",
            "" if attachment.size is None else str(attachment.size),
        )
    Console().print(table)

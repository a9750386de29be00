"""
Links into OMERO.web for a connected session.

The links embed the session token as `bsession` and stop working once the
session that minted them is closed.
"""

from ._defaults import DEFAULT_SERVER_ID
from .session_state import Connected


def _session_query(session: Connected, server_id: int) -> str:
    return f"server={server_id}&bsession={session.session_token}"


def image_download_link(
    session: Connected, image_id: int, server_id: int = DEFAULT_SERVER_ID
) -> str:
    """Download of the original file(s) the image was imported from."""
    return (
        f"http://{session.host}/omero/webgateway/archived_files/download/{image_id}"
        f"?{_session_query(session, server_id)}"
    )


def annotation_download_link(
    session: Connected, annotation_id: int, server_id: int = DEFAULT_SERVER_ID
) -> str:
    return (
        f"http://{session.host}/omero/webclient/annotation/{annotation_id}"
        f"?{_session_query(session, server_id)}"
    )


def image_detail_link(
    session: Connected, image_id: int, server_id: int = DEFAULT_SERVER_ID
) -> str:
    """Interactive viewer page of the image."""
    return (
        f"http://{session.host}/omero/webclient/img_detail/{image_id}/"
        f"?{_session_query(session, server_id)}"
    )

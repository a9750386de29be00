import pytest

from omeroclient.links import (
    annotation_download_link,
    image_detail_link,
    image_download_link,
)
from omeroclient.session_state import Connected, Credentials, SecurityContext


@pytest.fixture
def session() -> Connected:
    return Connected(
        credentials=Credentials("jdoe", "secret", "omero.example.org"),
        security_context=SecurityContext(3),
        session_token="a1b2c3",
        session_id=9,
        user_id=7,
    )


def test_image_download_link(session: Connected) -> None:
    assert (
        image_download_link(session, 42)
        == "http://omero.example.org/omero/webgateway/archived_files/download/42?server=1&bsession=a1b2c3"
    )


def test_annotation_download_link(session: Connected) -> None:
    assert (
        annotation_download_link(session, 1234)
        == "http://omero.example.org/omero/webclient/annotation/1234?server=1&bsession=a1b2c3"
    )


def test_image_detail_link(session: Connected) -> None:
    assert (
        image_detail_link(session, 42)
        == "http://omero.example.org/omero/webclient/img_detail/42/?server=1&bsession=a1b2c3"
    )


def test_server_id(session: Connected) -> None:
    assert image_detail_link(session, 42, server_id=2).endswith(
        "?server=2&bsession=a1b2c3"
    )

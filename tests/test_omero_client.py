import pytest

from omeroclient import MapAnnotation, OmeroClient
from omeroclient.client.api_client.models import ApiFileAnnotation, ApiMapAnnotation
from omeroclient.errors import NotFound
from omeroclient.session_state import Credentials

from .fake_transport import FakeTransport


@pytest.fixture
def client(credentials: Credentials, transport: FakeTransport) -> OmeroClient:
    return OmeroClient(credentials, transport)


def test_session_token(client: OmeroClient) -> None:
    assert not client.is_connected()
    assert client.session_token == "session-1"
    assert client.is_connected()


def test_acquire_canonical_link(client: OmeroClient, transport: FakeTransport) -> None:
    transport.add_image(42, payload=bytes(100))

    link = client.acquire_canonical_link(42)

    (annotation_id,) = transport.created_annotations
    assert link.endswith(f"/omero/webclient/annotation/{annotation_id}?server=1&bsession=session-1")
    assert client.acquire_canonical_link(42) == link


def test_file_annotations(client: OmeroClient, transport: FakeTransport) -> None:
    transport.add_image(
        7, attachments=[ApiFileAnnotation(11, 111, "notes.txt", "text/plain", 5)]
    )

    (attachment,) = client.file_annotations(7)

    assert attachment.file_name == "notes.txt"


def test_map_annotations(client: OmeroClient, transport: FakeTransport) -> None:
    transport.map_annotations[7] = [
        ApiMapAnnotation(5, [("stain", "DAPI"), ("objective", "63x")], "ns")
    ]

    assert client.map_annotations(7) == [
        MapAnnotation(5, "ns", [("stain", "DAPI"), ("objective", "63x")])
    ]


def test_add_map_annotation(client: OmeroClient, transport: FakeTransport) -> None:
    annotation_id = client.add_map_annotation("dataset", 12, "stain", "DAPI")

    (link,) = transport.links
    assert (link.parent_type, link.parent_id, link.annotation_id) == (
        "dataset",
        12,
        annotation_id,
    )


def test_create_project_and_dataset(
    client: OmeroClient, transport: FakeTransport
) -> None:
    project_id = client.create_project("screen", "first screen")
    dataset_id = client.create_dataset(project_id, "plate 1")

    (project,) = transport.projects
    (dataset,) = transport.datasets
    assert (project.id, project.name, project.description) == (
        project_id,
        "screen",
        "first screen",
    )
    assert (dataset.id, dataset.name) == (dataset_id, "plate 1")


def test_browse_projects_datasets_and_images(
    client: OmeroClient, transport: FakeTransport
) -> None:
    project_id = client.create_project("screen")
    dataset_id = client.create_dataset(project_id, "plate 1")
    client.create_dataset(client.create_project("other"), "plate 2")
    transport.add_image(42, dataset_id=dataset_id)
    transport.add_image(43)

    assert [project.name for project in client.projects()] == ["screen", "other"]
    assert [dataset.id for dataset in client.datasets(project_id)] == [dataset_id]
    assert [image.id for image in client.images(dataset_id)] == [42]


def test_channels(client: OmeroClient, transport: FakeTransport) -> None:
    transport.add_image(42)

    (channel,) = client.channels(42)

    assert (channel.index, channel.name) == (0, "DAPI")
    with pytest.raises(NotFound):
        client.channels(404)


def test_thumbnail(client: OmeroClient, transport: FakeTransport) -> None:
    transport.add_image(42)

    assert len(client.thumbnail(42)) == 96 * 96
    assert client.thumbnail(42, 16, 8) == bytes(128)
    assert [call for call in transport.calls if call[0] == "get_thumbnail"] == [
        ("get_thumbnail", 42, 96, 96),
        ("get_thumbnail", 42, 16, 8),
    ]


def test_image_download_link(client: OmeroClient, transport: FakeTransport) -> None:
    transport.add_image(42, file_format="JPEG")

    assert client.image_download_link(42) == (
        "http://omero.example.org/omero/webgateway/archived_files/download/42"
        "?server=1&bsession=session-1"
    )


def test_image_download_link_without_format(
    client: OmeroClient, transport: FakeTransport
) -> None:
    transport.add_image(42, file_format=None)

    with pytest.raises(ValueError):
        client.image_download_link(42)


def test_image_download_link_unknown_image(client: OmeroClient) -> None:
    with pytest.raises(NotFound):
        client.image_download_link(404)


def test_image_detail_link(client: OmeroClient) -> None:
    assert client.image_detail_link(42).endswith(
        "/omero/webclient/img_detail/42/?server=1&bsession=session-1"
    )


def test_context_manager(credentials: Credentials, transport: FakeTransport) -> None:
    with OmeroClient(credentials, transport) as client:
        client.connect()
        assert transport.connected

    assert not transport.connected

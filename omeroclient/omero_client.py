from typing import Any, Literal

import attr

from ._defaults import DEFAULT_THUMBNAIL_SIZE, MAP_ANNOTATION_NAMESPACE
from .acquisition import (
    AcquisitionOrchestrator,
    AnnotationLocator,
    AttachmentDescriptor,
    AttachmentPublisher,
    CanonicalFormatGenerator,
)
from .client.api_client.models import (
    ApiChannel,
    ApiDataset,
    ApiDatasetCreate,
    ApiImage,
    ApiMapAnnotation,
    ApiMapAnnotationCreate,
    ApiProject,
    ApiProjectCreate,
)
from .client.transport import Transport
from .links import annotation_download_link, image_detail_link, image_download_link
from .session import SessionManager
from .session_state import Credentials

AnnotatableType = Literal["project", "dataset", "image"]


@attr.frozen
class MapAnnotation:
    """Key-value pairs attached to an object."""

    annotation_id: int
    namespace: str | None
    values: list[tuple[str, str]]

    @classmethod
    def _from_api_map_annotation(
        cls, api_annotation: ApiMapAnnotation
    ) -> "MapAnnotation":
        return cls(
            annotation_id=api_annotation.id,
            namespace=api_annotation.namespace,
            values=[(key, value) for key, value in api_annotation.values],
        )


class OmeroClient:
    """Entry point for working with one OMERO session.

    Examples:
        ```
        with OmeroClient(Credentials("jdoe", "secret", "omero.example.org")) as client:
            print(client.acquire_canonical_link(42))
        ```
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        transport: Transport | None = None,
        show_progress: bool = False,
    ) -> None:
        self.session = SessionManager(credentials, transport)
        transport = self.session.transport
        self.locator = AnnotationLocator(transport)
        self.acquisition = AcquisitionOrchestrator(
            self.session,
            locator=self.locator,
            generator=CanonicalFormatGenerator(transport, show_progress=show_progress),
            publisher=AttachmentPublisher(transport, show_progress=show_progress),
        )

    def connect(self, credentials: Credentials | None = None) -> None:
        self.session.connect(credentials)

    def connect_to_session(self, session_token: str) -> None:
        self.session.connect_to_session(session_token)

    def disconnect(self) -> None:
        self.session.disconnect()

    def is_connected(self) -> bool:
        return self.session.is_connected()

    @property
    def session_token(self) -> str:
        return self.session.ensure_connected().session_token

    def acquire_canonical_link(self, image_id: int) -> str:
        """Returns a download link to an OME-TIFF of the image.

        Reuses the image itself or an existing OME-TIFF attachment if there
        is one, otherwise exports the image and attaches the result.
        The link is only valid as long as this session is connected.
        """
        return self.acquisition.acquire_canonical_link(image_id)

    def projects(self) -> list[ApiProject]:
        return self.session.transport.list_projects(self.session.ensure_connected())

    def datasets(self, project_id: int) -> list[ApiDataset]:
        return self.session.transport.list_datasets(
            self.session.ensure_connected(), project_id
        )

    def images(self, dataset_id: int) -> list[ApiImage]:
        return self.session.transport.list_images(
            self.session.ensure_connected(), dataset_id
        )

    def channels(self, image_id: int) -> list[ApiChannel]:
        return self.session.transport.get_channels(
            self.session.ensure_connected(), image_id
        )

    def thumbnail(
        self,
        image_id: int,
        width: int = DEFAULT_THUMBNAIL_SIZE,
        height: int = DEFAULT_THUMBNAIL_SIZE,
    ) -> bytes:
        """Returns the rendered thumbnail of the image as encoded by the server."""
        return self.session.transport.get_thumbnail(
            self.session.ensure_connected(), image_id, width, height
        )

    def file_annotations(self, image_id: int) -> list[AttachmentDescriptor]:
        return self.locator.list(self.session.ensure_connected(), image_id)

    def map_annotations(self, image_id: int) -> list[MapAnnotation]:
        session = self.session.ensure_connected()
        return [
            MapAnnotation._from_api_map_annotation(api_annotation)
            for api_annotation in self.session.transport.list_map_annotations(
                session, image_id
            )
        ]

    def add_map_annotation(
        self, parent_type: AnnotatableType, parent_id: int, key: str, value: str
    ) -> int:
        """Attaches a single key-value pair, editable in the web client."""
        session = self.session.ensure_connected()
        transport = self.session.transport
        api_annotation = transport.create_map_annotation(
            session,
            ApiMapAnnotationCreate(
                values=[(key, value)], namespace=MAP_ANNOTATION_NAMESPACE
            ),
        )
        transport.link_annotation(session, parent_type, parent_id, api_annotation.id)
        return api_annotation.id

    def create_project(self, name: str, description: str | None = None) -> int:
        session = self.session.ensure_connected()
        return self.session.transport.create_project(
            session, ApiProjectCreate(name=name, description=description)
        ).id

    def create_dataset(
        self, project_id: int, name: str, description: str | None = None
    ) -> int:
        session = self.session.ensure_connected()
        return self.session.transport.create_dataset(
            session,
            ApiDatasetCreate(name=name, project_id=project_id, description=description),
        ).id

    def image_download_link(self, image_id: int) -> str:
        session = self.session.ensure_connected()
        image = self.session.transport.get_image(session, image_id)
        if image.format is None:
            raise ValueError(
                f"Image {image_id} has no format and is not available for download."
            )
        return image_download_link(session, image_id)

    def annotation_download_link(self, annotation_id: int) -> str:
        return annotation_download_link(self.session.ensure_connected(), annotation_id)

    def image_detail_link(self, image_id: int) -> str:
        return image_detail_link(self.session.ensure_connected(), image_id)

    def __enter__(self) -> "OmeroClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.disconnect()

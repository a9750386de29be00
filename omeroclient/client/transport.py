"""
The capability surface this package consumes from an OMERO server.

`Transport` lists every remote call the session manager and the acquisition
pipeline make. Every capability call receives the `Connected` session it runs
under. Stateful server services (the exporter and the raw file store) are only
handed out as context managers, so they are closed on every exit path and
never shared between calls.

`HttpTransport` implements the surface on top of `GatewayApiClient`.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

import httpx

from ..errors import (
    AccessDenied,
    AuthenticationFailed,
    NotFound,
    OmeroClientError,
    ServiceUnavailable,
    SessionResumeFailed,
)
from ..session_state import Connected, Credentials
from .api_client import GatewayApiClient
from .api_client.models import (
    ApiAnnotationLink,
    ApiChannel,
    ApiDataset,
    ApiDatasetCreate,
    ApiEventContext,
    ApiFileAnnotation,
    ApiFileAnnotationCreate,
    ApiImage,
    ApiLogin,
    ApiMapAnnotation,
    ApiMapAnnotationCreate,
    ApiOriginalFile,
    ApiOriginalFileCreate,
    ApiProject,
    ApiProjectCreate,
)

logger = logging.getLogger(__name__)

EXPORT_FILE_TYPE = "tiff"


class ExporterProxy(ABC):
    """Server side exporter bound to one session."""

    @abstractmethod
    def add_image(self, image_id: int) -> None: ...

    @abstractmethod
    def generate_tiff(self) -> int:
        """Materializes the OME-TIFF of all added images, returns its length in bytes."""

    @abstractmethod
    def read(self, offset: int, length: int) -> bytes: ...

    @abstractmethod
    def close(self) -> None: ...


class RawFileStoreProxy(ABC):
    """Server side byte store bound to one original file record."""

    @abstractmethod
    def write(self, data: bytes, offset: int) -> None: ...

    @abstractmethod
    def save(self) -> ApiOriginalFile: ...

    @abstractmethod
    def close(self) -> None: ...


def _close_quietly(proxy: ExporterProxy | RawFileStoreProxy) -> None:
    try:
        proxy.close()
    except OmeroClientError as e:
        logger.warning(
            f"Could not close {type(proxy).__name__} after a failed call: {e}"
        )


class Transport(ABC):
    @abstractmethod
    def connect(self, credentials: Credentials) -> ApiEventContext:
        """Logs in, or joins an existing session if the credentials hold a session token."""

    @abstractmethod
    def disconnect(self) -> None: ...

    @abstractmethod
    def is_connected(self) -> bool: ...

    @abstractmethod
    def get_image(self, session: Connected, image_id: int) -> ApiImage: ...

    @abstractmethod
    def list_file_annotations(
        self, session: Connected, image_id: int
    ) -> list[ApiFileAnnotation]: ...

    @abstractmethod
    def list_map_annotations(
        self, session: Connected, image_id: int
    ) -> list[ApiMapAnnotation]: ...

    @abstractmethod
    def list_projects(self, session: Connected) -> list[ApiProject]: ...

    @abstractmethod
    def list_datasets(self, session: Connected, project_id: int) -> list[ApiDataset]: ...

    @abstractmethod
    def list_images(self, session: Connected, dataset_id: int) -> list[ApiImage]: ...

    @abstractmethod
    def get_channels(self, session: Connected, image_id: int) -> list[ApiChannel]: ...

    @abstractmethod
    def get_thumbnail(
        self, session: Connected, image_id: int, width: int, height: int
    ) -> bytes: ...

    @abstractmethod
    def open_exporter(self, session: Connected) -> ExporterProxy: ...

    @abstractmethod
    def open_raw_file_store(
        self, session: Connected, file_id: int
    ) -> RawFileStoreProxy: ...

    @abstractmethod
    def create_original_file(
        self, session: Connected, original_file: ApiOriginalFileCreate
    ) -> ApiOriginalFile: ...

    @abstractmethod
    def create_file_annotation(
        self, session: Connected, annotation: ApiFileAnnotationCreate
    ) -> ApiFileAnnotation: ...

    @abstractmethod
    def create_map_annotation(
        self, session: Connected, annotation: ApiMapAnnotationCreate
    ) -> ApiMapAnnotation: ...

    @abstractmethod
    def link_annotation(
        self, session: Connected, parent_type: str, parent_id: int, annotation_id: int
    ) -> ApiAnnotationLink: ...

    @abstractmethod
    def create_project(
        self, session: Connected, project: ApiProjectCreate
    ) -> ApiProject: ...

    @abstractmethod
    def create_dataset(
        self, session: Connected, dataset: ApiDatasetCreate
    ) -> ApiDataset: ...

    @contextmanager
    def exporter(self, session: Connected) -> Iterator[ExporterProxy]:
        proxy = self.open_exporter(session)
        try:
            yield proxy
        except BaseException:
            _close_quietly(proxy)
            raise
        else:
            proxy.close()

    @contextmanager
    def raw_file_store(
        self, session: Connected, file_id: int
    ) -> Iterator[RawFileStoreProxy]:
        proxy = self.open_raw_file_store(session, file_id)
        try:
            yield proxy
        except BaseException:
            _close_quietly(proxy)
            raise
        else:
            proxy.close()


class _HttpExporterProxy(ExporterProxy):
    def __init__(self, api_client: GatewayApiClient, exporter_id: str) -> None:
        self._api_client = api_client
        self._exporter_id = exporter_id

    def add_image(self, image_id: int) -> None:
        self._api_client.exporter_add_image(self._exporter_id, image_id)

    def generate_tiff(self) -> int:
        return self._api_client.exporter_generate(
            self._exporter_id, EXPORT_FILE_TYPE
        ).length

    def read(self, offset: int, length: int) -> bytes:
        return self._api_client.exporter_read(self._exporter_id, offset, length)

    def close(self) -> None:
        self._api_client.exporter_close(self._exporter_id)


class _HttpRawFileStoreProxy(RawFileStoreProxy):
    def __init__(self, api_client: GatewayApiClient, store_id: str) -> None:
        self._api_client = api_client
        self._store_id = store_id

    def write(self, data: bytes, offset: int) -> None:
        self._api_client.raw_file_store_write(self._store_id, data, offset)

    def save(self) -> ApiOriginalFile:
        return self._api_client.raw_file_store_save(self._store_id)

    def close(self) -> None:
        self._api_client.raw_file_store_close(self._store_id)


class HttpTransport(Transport):
    def __init__(
        self, timeout_seconds: float, client: httpx.Client | None = None
    ) -> None:
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._api_client: GatewayApiClient | None = None

    def connect(self, credentials: Credentials) -> ApiEventContext:
        api_client = GatewayApiClient(
            credentials.base_url, self.timeout_seconds, client=self._client
        )
        if credentials.is_session_token:
            try:
                event_context = api_client.session_join(credentials.username)
            except (AccessDenied, NotFound) as e:
                raise SessionResumeFailed(credentials.username) from e
        else:
            try:
                event_context = api_client.session_login(
                    ApiLogin(
                        credentials.username, credentials.password, credentials.group_id
                    )
                )
            except AccessDenied as e:
                raise AuthenticationFailed(
                    f"Login of {credentials.username} on {credentials.host} was rejected."
                ) from e
        self._api_client = api_client.with_session_token(event_context.session_uuid)
        return event_context

    def disconnect(self) -> None:
        api_client, self._api_client = self._api_client, None
        if api_client is not None:
            api_client.session_close()

    def is_connected(self) -> bool:
        return self._api_client is not None

    def _api(self, session: Connected) -> GatewayApiClient:
        if self._api_client is None:
            # prevents calls with a session object that outlived its connection
            raise ServiceUnavailable(
                f"Session {session.session_id} is not connected to {session.host}."
            )
        return self._api_client

    def get_image(self, session: Connected, image_id: int) -> ApiImage:
        return self._api(session).image_info(image_id)

    def list_file_annotations(
        self, session: Connected, image_id: int
    ) -> list[ApiFileAnnotation]:
        return self._api(session).image_file_annotations(image_id)

    def list_map_annotations(
        self, session: Connected, image_id: int
    ) -> list[ApiMapAnnotation]:
        return self._api(session).image_map_annotations(image_id)

    def list_projects(self, session: Connected) -> list[ApiProject]:
        return self._api(session).project_list()

    def list_datasets(self, session: Connected, project_id: int) -> list[ApiDataset]:
        return self._api(session).project_datasets(project_id)

    def list_images(self, session: Connected, dataset_id: int) -> list[ApiImage]:
        return self._api(session).dataset_images(dataset_id)

    def get_channels(self, session: Connected, image_id: int) -> list[ApiChannel]:
        return self._api(session).image_channels(image_id)

    def get_thumbnail(
        self, session: Connected, image_id: int, width: int, height: int
    ) -> bytes:
        return self._api(session).image_thumbnail(image_id, width, height)

    def open_exporter(self, session: Connected) -> ExporterProxy:
        api_client = self._api(session)
        return _HttpExporterProxy(api_client, api_client.exporter_open().id)

    def open_raw_file_store(
        self, session: Connected, file_id: int
    ) -> RawFileStoreProxy:
        api_client = self._api(session)
        return _HttpRawFileStoreProxy(
            api_client, api_client.raw_file_store_open(file_id).id
        )

    def create_original_file(
        self, session: Connected, original_file: ApiOriginalFileCreate
    ) -> ApiOriginalFile:
        return self._api(session).original_file_create(original_file)

    def create_file_annotation(
        self, session: Connected, annotation: ApiFileAnnotationCreate
    ) -> ApiFileAnnotation:
        return self._api(session).annotation_create_file(annotation)

    def create_map_annotation(
        self, session: Connected, annotation: ApiMapAnnotationCreate
    ) -> ApiMapAnnotation:
        return self._api(session).annotation_create_map(annotation)

    def link_annotation(
        self, session: Connected, parent_type: str, parent_id: int, annotation_id: int
    ) -> ApiAnnotationLink:
        return self._api(session).annotation_link(parent_type, parent_id, annotation_id)

    def create_project(
        self, session: Connected, project: ApiProjectCreate
    ) -> ApiProject:
        return self._api(session).project_create(project)

    def create_dataset(
        self, session: Connected, dataset: ApiDatasetCreate
    ) -> ApiDataset:
        return self._api(session).dataset_create(dataset)

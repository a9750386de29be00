import httpx

from ..._defaults import GATEWAY_API_VERSION
from ._abstract_api_client import AbstractApiClient
from .models import (
    ApiAnnotationLink,
    ApiChannel,
    ApiDataset,
    ApiDatasetCreate,
    ApiEventContext,
    ApiExportGenerated,
    ApiFileAnnotation,
    ApiFileAnnotationCreate,
    ApiImage,
    ApiJoinSession,
    ApiLogin,
    ApiMapAnnotation,
    ApiMapAnnotationCreate,
    ApiOriginalFile,
    ApiOriginalFileCreate,
    ApiProject,
    ApiProjectCreate,
    ApiServiceHandle,
)

SESSION_TOKEN_HEADER = "X-Session-Token"


class GatewayApiClient(AbstractApiClient):
    # Client to use the HTTP gateway in front of the OMERO blitz services.
    # When adding a method here, use the utility methods from AbstractApiClient
    # and add more as needed.
    # Methods here are prefixed with the domain, e.g. image_file_annotations (not file_annotations_for_image)

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float,
        headers: dict[str, str] | None = None,
        client: httpx.Client | None = None,
        gateway_api_version: int = GATEWAY_API_VERSION,
    ):
        super().__init__(timeout_seconds, headers, client)
        self.base_url = base_url.rstrip("/")
        self.gateway_api_version = gateway_api_version

    @property
    def url_prefix(self) -> str:
        return f"{self.base_url}/gateway/v{self.gateway_api_version}"

    def with_session_token(self, session_token: str) -> "GatewayApiClient":
        return GatewayApiClient(
            self.base_url,
            self.timeout_seconds,
            headers={**(self.headers or {}), SESSION_TOKEN_HEADER: session_token},
            client=self._client,
            gateway_api_version=self.gateway_api_version,
        )

    ### session

    def session_login(self, login: ApiLogin) -> ApiEventContext:
        route = "/session/login"
        return self._post_json_with_json_response(route, login, ApiEventContext)

    def session_join(self, session_token: str) -> ApiEventContext:
        route = "/session/join"
        return self._post_json_with_json_response(
            route, ApiJoinSession(session_token), ApiEventContext
        )

    def session_close(self) -> None:
        route = "/session"
        self._delete(route)

    ### browsing and metadata

    def project_list(self) -> list[ApiProject]:
        route = "/projects"
        return self._get_json(route, list[ApiProject])

    def project_create(self, project: ApiProjectCreate) -> ApiProject:
        route = "/projects"
        return self._post_json_with_json_response(route, project, ApiProject)

    def project_datasets(self, project_id: int) -> list[ApiDataset]:
        route = f"/projects/{project_id}/datasets"
        return self._get_json(route, list[ApiDataset])

    def dataset_create(self, dataset: ApiDatasetCreate) -> ApiDataset:
        route = "/datasets"
        return self._post_json_with_json_response(route, dataset, ApiDataset)

    def dataset_images(self, dataset_id: int) -> list[ApiImage]:
        route = f"/datasets/{dataset_id}/images"
        return self._get_json(route, list[ApiImage])

    def image_info(self, image_id: int) -> ApiImage:
        route = f"/images/{image_id}"
        return self._get_json(route, ApiImage)

    def image_channels(self, image_id: int) -> list[ApiChannel]:
        route = f"/images/{image_id}/channels"
        return self._get_json(route, list[ApiChannel])

    def image_thumbnail(self, image_id: int, width: int, height: int) -> bytes:
        route = f"/images/{image_id}/thumbnail"
        return self._get_bytes(route, query={"width": width, "height": height})

    def image_file_annotations(self, image_id: int) -> list[ApiFileAnnotation]:
        route = f"/images/{image_id}/annotations/file"
        return self._get_json(route, list[ApiFileAnnotation])

    def image_map_annotations(self, image_id: int) -> list[ApiMapAnnotation]:
        route = f"/images/{image_id}/annotations/map"
        return self._get_json(route, list[ApiMapAnnotation])

    ### data management

    def annotation_create_file(
        self, annotation: ApiFileAnnotationCreate
    ) -> ApiFileAnnotation:
        route = "/annotations/file"
        return self._post_json_with_json_response(route, annotation, ApiFileAnnotation)

    def annotation_create_map(self, annotation: ApiMapAnnotationCreate) -> ApiMapAnnotation:
        route = "/annotations/map"
        return self._post_json_with_json_response(route, annotation, ApiMapAnnotation)

    def annotation_link(
        self, parent_type: str, parent_id: int, annotation_id: int
    ) -> ApiAnnotationLink:
        route = f"/{parent_type}s/{parent_id}/annotations/{annotation_id}"
        return self._post_with_json_response(route, ApiAnnotationLink)

    def original_file_create(self, original_file: ApiOriginalFileCreate) -> ApiOriginalFile:
        route = "/files"
        return self._post_json_with_json_response(route, original_file, ApiOriginalFile)

    ### exporter service

    def exporter_open(self) -> ApiServiceHandle:
        route = "/exporters"
        return self._post_with_json_response(route, ApiServiceHandle)

    def exporter_add_image(self, exporter_id: str, image_id: int) -> None:
        route = f"/exporters/{exporter_id}/images/{image_id}"
        self._post(route)

    def exporter_generate(self, exporter_id: str, file_type: str) -> ApiExportGenerated:
        route = f"/exporters/{exporter_id}/generate"
        return self._post_with_json_response(
            route, ApiExportGenerated, query={"type": file_type}
        )

    def exporter_read(self, exporter_id: str, offset: int, length: int) -> bytes:
        route = f"/exporters/{exporter_id}/read"
        return self._get_bytes(route, query={"offset": offset, "length": length})

    def exporter_close(self, exporter_id: str) -> None:
        route = f"/exporters/{exporter_id}"
        self._delete(route)

    ### raw file store service

    def raw_file_store_open(self, file_id: int) -> ApiServiceHandle:
        route = "/rawfilestores"
        return self._post_with_json_response(
            route, ApiServiceHandle, query={"fileId": file_id}
        )

    def raw_file_store_write(self, store_id: str, data: bytes, offset: int) -> None:
        route = f"/rawfilestores/{store_id}"
        self._put_bytes(route, data, query={"offset": offset})

    def raw_file_store_save(self, store_id: str) -> ApiOriginalFile:
        route = f"/rawfilestores/{store_id}/save"
        return self._post_with_json_response(route, ApiOriginalFile)

    def raw_file_store_close(self, store_id: str) -> None:
        route = f"/rawfilestores/{store_id}"
        self._delete(route)

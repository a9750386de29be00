import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar

import httpx

from ...errors import ServiceUnavailable
from ...utils import get_ssl_context
from ._serialization import custom_converter
from .errors import CannotHandleResponseError, error_for_status

logger = logging.getLogger(__name__)

T = TypeVar("T")

Query = dict[str, str | int | float | bool | None]


class AbstractApiClient(ABC):
    def __init__(
        self,
        timeout_seconds: float,
        headers: dict[str, str] | None = None,
        client: httpx.Client | None = None,
    ):
        self.headers = headers
        self.timeout_seconds = timeout_seconds
        # an injected client is owned by the caller and never closed here
        self._client = client

    @property
    @abstractmethod
    def url_prefix(self) -> str: ...

    def url_from_route(self, route: str) -> str:
        return f"{self.url_prefix}{route}"

    def _get_json(
        self, route: str, response_type: type[T], query: Query | None = None
    ) -> T:
        response = self._get(route, query)
        return self._parse_json(response, response_type)

    def _get_bytes(self, route: str, query: Query | None = None) -> bytes:
        return self._get(route, query).content

    def _post_with_json_response(
        self, route: str, response_type: type[T], query: Query | None = None
    ) -> T:
        response = self._post(route, query=query)
        return self._parse_json(response, response_type)

    def _post_json_with_json_response(
        self, route: str, body_structured: Any, response_type: type[T]
    ) -> T:
        body_json = self._prepare_for_json(body_structured)
        response = self._post(route, body_json=body_json)
        return self._parse_json(response, response_type)

    def _put_bytes(self, route: str, content: bytes, query: Query | None = None) -> None:
        self._request("PUT", route, query=query, content=content)

    def _get(self, route: str, query: Query | None = None) -> httpx.Response:
        return self._request("GET", route, query)

    def _post(
        self,
        route: str,
        body_json: Any | None = None,
        query: Query | None = None,
    ) -> httpx.Response:
        return self._request("POST", route, query=query, body_json=body_json)

    def _delete(self, route: str) -> httpx.Response:
        return self._request("DELETE", route)

    def _request(
        self,
        method: str,
        route: str,
        query: Query | None = None,
        body_json: Any | None = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        url = self.url_from_route(route)
        logger.debug(f"{method} {url}")
        try:
            if self._client is not None:
                response = self._client.request(
                    method,
                    url,
                    params=self._omit_none_values_in_query(query),
                    json=body_json,
                    content=content,
                    headers=self.headers,
                    timeout=self.timeout_seconds,
                )
            else:
                response = httpx.request(
                    method,
                    url,
                    params=self._omit_none_values_in_query(query),
                    json=body_json,
                    content=content,
                    headers=self.headers,
                    timeout=self.timeout_seconds,
                    verify=get_ssl_context(),
                )
        except httpx.TransportError as e:
            raise ServiceUnavailable(
                f"Could not reach the OMERO gateway for a {method} request for URL {url}: {e}"
            ) from e
        self._assert_good_response(response)
        return response

    def _omit_none_values_in_query(self, query: Query | None) -> Query | None:
        if query is None:
            return None
        return {k: v for (k, v) in query.items() if v is not None}

    def _parse_json(self, response: httpx.Response, response_type: type[T]) -> T:
        try:
            return custom_converter.structure(response.json(), response_type)
        except Exception as e:
            raise CannotHandleResponseError(response) from e

    def _prepare_for_json(self, body_structured: Any) -> Any:
        return custom_converter.unstructure(body_structured)

    def _assert_good_response(self, response: httpx.Response) -> None:
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise error_for_status(response) from e

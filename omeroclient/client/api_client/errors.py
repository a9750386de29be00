import httpx

from ...errors import (
    AccessDenied,
    ErrorKind,
    NotFound,
    OmeroClientError,
    ServiceUnavailable,
)

_RESPONSE_LIMIT_CHARS = 2000

CHECK_CREDENTIALS_HINT = (
    "If this is unexpected, please double-check your OMERO host and credentials."
)


def message_for_response_body(response: httpx.Response) -> str:
    response_str = response.content.decode("utf-8", errors="replace")
    shortened_label = (
        f" (showing first {_RESPONSE_LIMIT_CHARS} of {len(response_str)} characters)"
        if (len(response_str) > _RESPONSE_LIMIT_CHARS)
        else ""
    )
    return f"Got response status {response.status_code} with body{shortened_label}: {response_str[0:_RESPONSE_LIMIT_CHARS]}"


def request_label(response: httpx.Response) -> str:
    try:
        request = response.request
    except RuntimeError:
        return "an OMERO gateway request"
    return f"a {request.method} request for URL {request.url}"


class ApiClientError(OmeroClientError):
    kind = ErrorKind.UNEXPECTED_RESPONSE

    def __init__(self, response: httpx.Response, message: str):
        self.status_code = response.status_code
        super().__init__(message)


class UnexpectedStatusError(ApiClientError):
    def __init__(self, response: httpx.Response):
        msg = f"""An error occurred while performing {request_label(response)}.
{CHECK_CREDENTIALS_HINT}
{message_for_response_body(response)}
"""
        super().__init__(response, msg)


class CannotHandleResponseError(ApiClientError):
    def __init__(self, response: httpx.Response):
        msg = f"""An error occurred while processing the response to {request_label(response)}.
{message_for_response_body(response)}
"""
        super().__init__(response, msg)


def error_for_status(response: httpx.Response) -> OmeroClientError:
    status = response.status_code
    if status in (401, 403):
        return AccessDenied(
            f"Access denied for {request_label(response)}. {CHECK_CREDENTIALS_HINT}\n"
            + message_for_response_body(response)
        )
    if status == 404:
        return NotFound(
            f"Nothing found for {request_label(response)}.\n"
            + message_for_response_body(response)
        )
    if status == 440 or status >= 500:
        # 440 is sent for expired sessions
        return ServiceUnavailable(
            f"Error while accessing the OMERO service: broken connection, expired session or not logged in ({request_label(response)}).\n"
            + message_for_response_body(response)
        )
    return UnexpectedStatusError(response)

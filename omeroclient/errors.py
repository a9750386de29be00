"""
# Errors

All failures raised by this package derive from `OmeroClientError` and carry an
`ErrorKind`. Callers can tell retryable transport failures from terminal ones by
checking `error.retryable` or `error.kind` instead of matching messages:

```python
try:
    link = client.acquire_canonical_link(42)
except OmeroClientError as e:
    if e.retryable:
        client.session.disconnect()
        ...
```
"""

from enum import Enum, unique


@unique
class ErrorKind(str, Enum):
    SERVICE_UNAVAILABLE = "service_unavailable"
    AUTHENTICATION_FAILED = "authentication_failed"
    SESSION_RESUME_FAILED = "session_resume_failed"
    ILLEGAL_CONNECTION_STATE = "illegal_connection_state"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    GENERATION_FAILED = "generation_failed"
    PUBLISH_FAILED = "publish_failed"
    UNEXPECTED_RESPONSE = "unexpected_response"


_RETRYABLE_KINDS = frozenset(
    {
        ErrorKind.SERVICE_UNAVAILABLE,
        ErrorKind.GENERATION_FAILED,
        ErrorKind.PUBLISH_FAILED,
    }
)


class OmeroClientError(Exception):
    kind: ErrorKind

    @property
    def retryable(self) -> bool:
        return self.kind in _RETRYABLE_KINDS


class ServiceUnavailable(OmeroClientError):
    """The server could not be reached, or the connection broke or expired."""

    kind = ErrorKind.SERVICE_UNAVAILABLE


class AuthenticationFailed(OmeroClientError):
    kind = ErrorKind.AUTHENTICATION_FAILED


class SessionResumeFailed(OmeroClientError):
    kind = ErrorKind.SESSION_RESUME_FAILED

    def __init__(self, session_token: str, message: str | None = None):
        self.session_token = session_token
        super().__init__(
            message or f"Could not join the existing session {_shorten(session_token)}."
        )


class IllegalConnectionState(OmeroClientError):
    """Local session state and transport state disagree. Always a defect."""

    kind = ErrorKind.ILLEGAL_CONNECTION_STATE


class AccessDenied(OmeroClientError):
    kind = ErrorKind.ACCESS_DENIED


class NotFound(OmeroClientError):
    kind = ErrorKind.NOT_FOUND


class _ImageOperationError(OmeroClientError):
    operation: str

    def __init__(self, image_id: int, cause: BaseException | str):
        self.image_id = image_id
        self.cause = cause
        super().__init__(f"{self.operation} for image {image_id} failed: {cause}")


class GenerationFailed(_ImageOperationError):
    kind = ErrorKind.GENERATION_FAILED
    operation = "Generating the canonical file"


class PublishFailed(_ImageOperationError):
    kind = ErrorKind.PUBLISH_FAILED
    operation = "Publishing the canonical file"


def _shorten(session_token: str) -> str:
    # tokens are credentials, never log them in full
    return f"{session_token[:8]}…" if len(session_token) > 8 else session_token

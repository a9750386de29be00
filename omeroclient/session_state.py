"""
Value objects describing the session of a `SessionManager`.

A session is either `Disconnected`, `Connecting` or `Connected`. Only
`Connected` carries a security context and a session token, and it cannot be
built without both, so "connected without a token" does not exist as a state.
"""

import attr

from ._defaults import DEFAULT_OMERO_PORT, DEFAULT_OMERO_SCHEME


def _non_empty(instance: object, attribute: "attr.Attribute", value: str) -> None:
    if not value:
        raise ValueError(f"{attribute.name} must not be empty")


@attr.frozen
class Credentials:
    """Login data for an OMERO server.

    A session token can stand in for the username, in which case the password
    is empty and `token_login` is set (see `Credentials.for_session`). An
    empty password alone does not make a token login.
    """

    username: str
    password: str = attr.field(repr=False)
    host: str
    port: int = DEFAULT_OMERO_PORT
    group_id: int | None = None
    scheme: str = DEFAULT_OMERO_SCHEME
    token_login: bool = attr.field(default=False, kw_only=True)

    @classmethod
    def for_session(
        cls,
        session_token: str,
        host: str,
        port: int = DEFAULT_OMERO_PORT,
        scheme: str = DEFAULT_OMERO_SCHEME,
    ) -> "Credentials":
        return cls(session_token, "", host, port, scheme=scheme, token_login=True)

    @property
    def is_session_token(self) -> bool:
        return self.token_login

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.port}"


@attr.frozen
class SecurityContext:
    group_id: int


@attr.frozen
class Disconnected:
    pass


@attr.frozen
class Connecting:
    credentials: Credentials


@attr.frozen
class Connected:
    credentials: Credentials
    security_context: SecurityContext
    session_token: str = attr.field(validator=_non_empty)
    session_id: int
    user_id: int

    @property
    def host(self) -> str:
        return self.credentials.host


SessionState = Disconnected | Connecting | Connected

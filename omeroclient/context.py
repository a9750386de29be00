"""
# Server Context

The OMERO server and the login used by `SessionManager` and the CLI can be
given in four ways, later ones only used if nothing earlier is specified:

1. Explicitly, by passing `Credentials` to `SessionManager` or `OmeroClient`.

2. Using the `omero_context` contextmanager (or decorator):

    ```python
    with omero_context(host="omero.example.org", username="jdoe", password="…"):
        client = OmeroClient()
        print(client.acquire_canonical_link(42))
    ```

3. Environment variables, optionally read from a `.env` file in the working
   directory. Variables set in the shell take precedence:

    ```shell
    # content of .env
    OMERO_HOST="omero.example.org"
    OMERO_PORT="4080"
    OMERO_USER="jdoe"
    OMERO_PASSWORD="…"
    OMERO_GROUP="3"
    OMERO_TIMEOUT="3600"  # in seconds
    ```

4. If no password is known when a login is needed, it is asked for
   interactively once per host and user.
"""

import os
from contextlib import ContextDecorator
from contextvars import ContextVar, Token
from functools import lru_cache
from typing import Any

import attr
from dotenv import load_dotenv
from rich.prompt import Prompt

from ._defaults import (
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_OMERO_HOST,
    DEFAULT_OMERO_PORT,
    DEFAULT_OMERO_SCHEME,
)
from .session_state import Credentials

load_dotenv()


@lru_cache(maxsize=None)
def _cached_ask_for_password(host: str, username: str) -> str:
    return Prompt.ask(
        f"\nPlease enter the OMERO password of {username} on {host} ",
        password=True,
    )


@lru_cache(maxsize=None)
def _cached_ask_for_username(host: str) -> str:
    return Prompt.ask(f"\nPlease enter your OMERO username on {host} ")


def _clear_all_context_caches() -> None:
    _cached_ask_for_password.cache_clear()
    _cached_ask_for_username.cache_clear()


def _optional_int(value: str | None) -> int | None:
    return None if value in (None, "") else int(value)  # type: ignore[arg-type]


@attr.frozen
class _OmeroContext:
    host: str = attr.field(
        factory=lambda: os.environ.get("OMERO_HOST", DEFAULT_OMERO_HOST)
    )
    port: int = attr.field(
        factory=lambda: int(os.environ.get("OMERO_PORT", DEFAULT_OMERO_PORT))
    )
    username: str | None = attr.field(factory=lambda: os.environ.get("OMERO_USER"))
    password: str | None = attr.field(
        factory=lambda: os.environ.get("OMERO_PASSWORD"), repr=False
    )
    group_id: int | None = attr.field(
        factory=lambda: _optional_int(os.environ.get("OMERO_GROUP"))
    )
    timeout: int = attr.field(
        factory=lambda: int(os.environ.get("OMERO_TIMEOUT", DEFAULT_HTTP_TIMEOUT))
    )
    scheme: str = attr.field(
        factory=lambda: os.environ.get("OMERO_SCHEME", DEFAULT_OMERO_SCHEME)
    )

    @property
    def required_username(self) -> str:
        if self.username is None:
            return _cached_ask_for_username(self.host)
        return self.username

    @property
    def required_password(self) -> str:
        if self.password is None:
            return _cached_ask_for_password(self.host, self.required_username)
        return self.password

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            self.required_username,
            self.required_password,
            self.host,
            self.port,
            group_id=self.group_id,
            scheme=self.scheme,
        )

    def session_credentials(self, session_token: str) -> Credentials:
        return Credentials.for_session(session_token, self.host, self.port, self.scheme)


_omero_context_var: ContextVar[_OmeroContext] = ContextVar("_omero_context_var")


def _get_context() -> _OmeroContext:
    # without an enclosing omero_context the environment is read on every call
    context = _omero_context_var.get(None)
    return _OmeroContext() if context is None else context


class omero_context(ContextDecorator):
    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        group_id: int | None = None,
        timeout: int | None = None,
        scheme: str | None = None,
    ) -> None:
        """Creates a new OMERO server context manager.

        Can be used as a context manager with 'with' or as a decorator.

        Args:
            host: Hostname of the OMERO server. Taken from previous context if not specified.
            port: Port of the OMERO gateway. Taken from previous context if not specified.
            username: Login name. Taken from previous context if not specified.
            password: Password of the login. Only taken from the previous context
                if the username is not changed either.
            group_id: Group to log into, defaults to the user's default group.
            timeout: Network request timeout in seconds, defaults to 1800 (30 min).
            scheme: "http" or "https" for the gateway connection.
        """
        previous = _get_context()
        self._context = _OmeroContext(
            host=previous.host if host is None else host.rstrip("/"),
            port=previous.port if port is None else port,
            username=previous.username if username is None else username,
            password=previous.password
            if password is None and username is None
            else password,
            group_id=previous.group_id if group_id is None else group_id,
            timeout=previous.timeout if timeout is None else timeout,
            scheme=previous.scheme if scheme is None else scheme,
        )
        self._context_var_token_stack: list[Token[_OmeroContext]] = []

    def __enter__(self) -> None:
        context_var_token = _omero_context_var.set(self._context)
        self._context_var_token_stack.append(context_var_token)

    def __exit__(self, *exc: Any) -> None:
        _omero_context_var.reset(self._context_var_token_stack.pop())

"""
# Session Manager

`SessionManager` owns the one authenticated session of a client. It moves
between the states of `omeroclient.session_state`:

    Disconnected -> Connecting -> Connected -> Disconnected

Every component that talks to the server calls `ensure_connected()` first and
passes the returned `Connected` value on to the transport.

```python
with SessionManager(Credentials("jdoe", "secret", "omero.example.org")) as sessions:
    session = sessions.ensure_connected()
    print(session.session_token)
```

A session manager is not meant to be shared by concurrent callers. Connect and
disconnect are serialised by a lock so a reconnect is atomic for the caller,
but long running operations on the same session are not.
"""

import logging
import threading
from typing import Any

from .client.transport import HttpTransport, Transport
from .context import _get_context
from .errors import IllegalConnectionState
from .session_state import (
    Connected,
    Connecting,
    Credentials,
    Disconnected,
    SecurityContext,
    SessionState,
)

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(
        self,
        credentials: Credentials | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Creates a disconnected session manager.

        Args:
            credentials: Login used by `connect()` and `ensure_connected()`.
                Read from the current `omero_context` if not given.
            transport: The connection to the server, an `HttpTransport` using
                the context's timeout by default.
        """
        self._credentials = credentials
        self._transport = (
            HttpTransport(_get_context().timeout) if transport is None else transport
        )
        self._state: SessionState = Disconnected()
        self._lock = threading.RLock()
        # set when the last teardown failed and the transport state is stale
        self._teardown_failed = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def transport(self) -> Transport:
        return self._transport

    @property
    def credentials(self) -> Credentials:
        if self._credentials is None:
            self._credentials = _get_context().credentials
        return self._credentials

    def connect(self, credentials: Credentials | None = None) -> Connected:
        """Establishes a fresh session, closing the current one first.

        Raises:
            ServiceUnavailable: If the server cannot be reached.
            AuthenticationFailed: If the credentials are rejected.
        """
        with self._lock:
            if credentials is not None:
                self._credentials = credentials
            login = self.credentials
            if self._needs_teardown():
                self.disconnect()
            return self._establish(login)

    def connect_to_session(self, session_token: str) -> Connected:
        """Joins an existing session by its token.

        Does nothing if already connected to that session. Otherwise the
        current session is closed and the token is used as login with an
        empty password.

        Raises:
            SessionResumeFailed: If the token cannot be validated.
        """
        with self._lock:
            state = self._state
            if (
                isinstance(state, Connected)
                and state.session_token == session_token
                and self.is_connected()
            ):
                logger.debug(f"Already connected to session {state.session_id}.")
                return state
            if self._credentials is None:
                login = _get_context().session_credentials(session_token)
            else:
                login = Credentials.for_session(
                    session_token,
                    self._credentials.host,
                    self._credentials.port,
                    self._credentials.scheme,
                )
            if self._needs_teardown():
                self.disconnect()
            return self._establish(login)

    def is_connected(self) -> bool:
        """Reports whether the session is usable.

        Raises:
            IllegalConnectionState: If the local session state and the
                transport disagree.
        """
        with self._lock:
            transport_connected = self._transport.is_connected()
            state = self._state
            if isinstance(state, Connected):
                if not transport_connected:
                    raise IllegalConnectionState(
                        f"Session {state.session_id} is marked as connected, "
                        "but the transport has no connection."
                    )
                return True
            if transport_connected:
                if self._teardown_failed:
                    return False
                raise IllegalConnectionState(
                    "The transport reports a connection the session manager does not know of."
                )
            return False

    def ensure_connected(self) -> Connected:
        with self._lock:
            if self.is_connected():
                assert isinstance(self._state, Connected)
                return self._state
            return self.connect()

    def disconnect(self) -> None:
        """Closes the session. Never raises, teardown failures are only logged."""
        with self._lock:
            state = self._state
            try:
                self._transport.disconnect()
            except Exception as e:
                logger.warning(
                    f"Closing the session on the server failed, continuing as disconnected: {e}"
                )
                self._teardown_failed = True
            else:
                self._teardown_failed = False
                if isinstance(state, Connected):
                    logger.info(f"Disconnected session {state.session_id}.")
            finally:
                self._state = Disconnected()

    def _needs_teardown(self) -> bool:
        return not isinstance(self._state, Disconnected) or (
            self._transport.is_connected()
        )

    def _establish(self, login: Credentials) -> Connected:
        self._state = Connecting(login)
        try:
            event_context = self._transport.connect(login)
            connected = Connected(
                credentials=login,
                security_context=SecurityContext(event_context.group_id),
                session_token=event_context.session_uuid,
                session_id=event_context.session_id,
                user_id=event_context.user_id,
            )
        except BaseException:
            # a half established connection is torn down again
            self.disconnect()
            raise
        self._teardown_failed = False
        self._state = connected
        logger.info(
            f"Connected to {login.host} as user {event_context.user_id} in group {event_context.group_id}."
        )
        return connected

    def __enter__(self) -> "SessionManager":
        return self

    def __exit__(self, *args: Any) -> None:
        self.disconnect()

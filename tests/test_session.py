import threading

import pytest

from omeroclient.client.api_client.models import ApiEventContext
from omeroclient.errors import (
    AuthenticationFailed,
    ErrorKind,
    IllegalConnectionState,
    ServiceUnavailable,
    SessionResumeFailed,
)
from omeroclient.session import SessionManager
from omeroclient.session_state import (
    Connected,
    Credentials,
    Disconnected,
    SecurityContext,
)

from .fake_transport import GROUP_ID, USER_ID, FakeTransport


def test_connect(session_manager: SessionManager, transport: FakeTransport) -> None:
    session = session_manager.connect()

    assert isinstance(session, Connected)
    assert session_manager.state == session
    assert session_manager.is_connected()
    assert session.session_token == "session-1"
    assert session.user_id == USER_ID
    assert session.security_context.group_id == GROUP_ID
    assert session.host == "omero.example.org"


def test_connect_twice_replaces_the_session(
    session_manager: SessionManager, transport: FakeTransport
) -> None:
    first = session_manager.connect()
    second = session_manager.connect()

    assert first.session_token != second.session_token
    assert transport.call_names() == ["connect", "disconnect", "connect"]
    assert session_manager.is_connected()


def test_connect_with_wrong_password(
    transport: FakeTransport, credentials: Credentials
) -> None:
    session_manager = SessionManager(
        Credentials(credentials.username, "wrong", credentials.host), transport
    )

    with pytest.raises(AuthenticationFailed) as exc_info:
        session_manager.connect()

    assert exc_info.value.kind == ErrorKind.AUTHENTICATION_FAILED
    assert not exc_info.value.retryable
    assert session_manager.state == Disconnected()
    assert not session_manager.is_connected()


def test_connect_with_empty_password(transport: FakeTransport) -> None:
    session_manager = SessionManager(
        Credentials("jdoe", "", "omero.example.org"), transport
    )

    with pytest.raises(AuthenticationFailed):
        session_manager.connect()

    assert session_manager.state == Disconnected()
    assert transport.sessions == {}


def test_connect_to_unreachable_server(
    session_manager: SessionManager, transport: FakeTransport
) -> None:
    transport.reachable = False

    with pytest.raises(ServiceUnavailable) as exc_info:
        session_manager.connect()

    assert exc_info.value.retryable
    assert session_manager.state == Disconnected()


def test_connect_with_new_credentials(
    session_manager: SessionManager, transport: FakeTransport
) -> None:
    session = session_manager.connect(
        Credentials("other", "secret", "omero2.example.org")
    )

    assert session.credentials.username == "other"
    assert session.host == "omero2.example.org"
    assert session_manager.credentials.username == "other"


def test_connect_to_session(transport: FakeTransport) -> None:
    owner = SessionManager(Credentials("jdoe", "secret", "omero.example.org"), transport)
    token = owner.connect().session_token

    joined = SessionManager(
        Credentials("someone", "else", "omero.example.org"), transport
    ).connect_to_session(token)

    assert joined.session_token == token
    assert joined.credentials == Credentials.for_session(token, "omero.example.org")
    assert joined.credentials.password == ""


def test_connect_to_same_session_is_a_noop(
    session_manager: SessionManager, transport: FakeTransport
) -> None:
    token = session_manager.connect().session_token
    calls_before = list(transport.calls)

    first = session_manager.connect_to_session(token)
    second = session_manager.connect_to_session(token)

    assert first == second
    assert first.session_token == token
    assert transport.calls == calls_before


def test_connect_to_unknown_session(
    session_manager: SessionManager, transport: FakeTransport
) -> None:
    session_manager.connect()

    with pytest.raises(SessionResumeFailed) as exc_info:
        session_manager.connect_to_session("0123456789abcdef")

    assert exc_info.value.session_token == "0123456789abcdef"
    assert "0123456789abcdef" not in str(exc_info.value)
    assert session_manager.state == Disconnected()
    assert not transport.connected


def test_disconnect(session_manager: SessionManager, transport: FakeTransport) -> None:
    session_manager.connect()
    session_manager.disconnect()

    assert session_manager.state == Disconnected()
    assert not session_manager.is_connected()


def test_disconnect_when_disconnected(session_manager: SessionManager) -> None:
    session_manager.disconnect()
    session_manager.disconnect()

    assert not session_manager.is_connected()


def test_disconnect_never_raises(
    session_manager: SessionManager, transport: FakeTransport
) -> None:
    session_manager.connect()
    transport.fail_disconnect = True

    session_manager.disconnect()

    assert session_manager.state == Disconnected()
    assert transport.connected
    assert not session_manager.is_connected()


def test_reconnect_after_failed_teardown(
    session_manager: SessionManager, transport: FakeTransport
) -> None:
    session_manager.connect()
    transport.fail_disconnect = True
    session_manager.disconnect()
    transport.fail_disconnect = False

    session = session_manager.connect()

    assert session_manager.is_connected()
    assert session_manager.state == session


def test_lost_transport_connection_is_illegal(
    session_manager: SessionManager, transport: FakeTransport
) -> None:
    session_manager.connect()
    transport.connected = False

    with pytest.raises(IllegalConnectionState) as exc_info:
        session_manager.is_connected()

    assert exc_info.value.kind == ErrorKind.ILLEGAL_CONNECTION_STATE


def test_unknown_transport_connection_is_illegal(
    session_manager: SessionManager, transport: FakeTransport
) -> None:
    transport.connected = True

    with pytest.raises(IllegalConnectionState):
        session_manager.is_connected()


def test_ensure_connected(
    session_manager: SessionManager, transport: FakeTransport
) -> None:
    first = session_manager.ensure_connected()
    second = session_manager.ensure_connected()

    assert first == second
    assert transport.call_names() == ["connect"]


def test_connected_requires_session_token(credentials: Credentials) -> None:
    with pytest.raises(ValueError):
        Connected(
            credentials=credentials,
            security_context=SecurityContext(GROUP_ID),
            session_token="",
            session_id=1,
            user_id=1,
        )


def test_context_manager_disconnects(
    credentials: Credentials, transport: FakeTransport
) -> None:
    with SessionManager(credentials, transport) as session_manager:
        session_manager.connect()
        assert transport.connected

    assert not transport.connected
    assert session_manager.state == Disconnected()


class SlowConnectTransport(FakeTransport):
    """Holds `connect` open after the server side login has succeeded."""

    def __init__(self) -> None:
        super().__init__()
        self.logged_in = threading.Event()
        self.release = threading.Event()

    def connect(self, credentials: Credentials) -> ApiEventContext:
        event_context = super().connect(credentials)
        self.logged_in.set()
        self.release.wait(timeout=5)
        return event_context


def test_is_connected_waits_for_running_connect(credentials: Credentials) -> None:
    transport = SlowConnectTransport()
    session_manager = SessionManager(credentials, transport)
    results: list[bool] = []

    connecting = threading.Thread(target=session_manager.connect)
    connecting.start()
    assert transport.logged_in.wait(timeout=5)

    checking = threading.Thread(
        target=lambda: results.append(session_manager.is_connected())
    )
    checking.start()
    checking.join(timeout=0.2)
    # the transport is already connected while the state is still Connecting
    assert checking.is_alive()

    transport.release.set()
    connecting.join(timeout=5)
    checking.join(timeout=5)

    assert results == [True]
    assert isinstance(session_manager.state, Connected)

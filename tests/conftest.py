from collections.abc import Generator
from pathlib import Path

import pytest

from omeroclient.context import _clear_all_context_caches
from omeroclient.session import SessionManager
from omeroclient.session_state import Credentials

from .fake_transport import FakeTransport

OMERO_ENV_VARS = (
    "OMERO_HOST",
    "OMERO_PORT",
    "OMERO_USER",
    "OMERO_PASSWORD",
    "OMERO_GROUP",
    "OMERO_TIMEOUT",
    "OMERO_SCHEME",
)


### PYTEST SETUP & TEARDOWN


@pytest.fixture(autouse=True, scope="function")
def clear_caches() -> Generator:
    _clear_all_context_caches()
    yield
    _clear_all_context_caches()


@pytest.fixture(autouse=True, scope="function")
def clean_omero_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # a developer's .env must not leak into the tests
    for name in OMERO_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


### Misc fixtures


@pytest.fixture
def credentials() -> Credentials:
    return Credentials("jdoe", "secret", "omero.example.org")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(password="secret")


@pytest.fixture
def session_manager(
    credentials: Credentials, transport: FakeTransport
) -> SessionManager:
    return SessionManager(credentials, transport)


@pytest.fixture
def export_dir(tmp_path: Path) -> Path:
    path = tmp_path / "exports"
    path.mkdir()
    return path

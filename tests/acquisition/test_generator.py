from pathlib import Path

import pytest

from omeroclient.acquisition import (
    CanonicalFormatGenerator,
    IncompleteTransferError,
    OverlongTransferError,
)
from omeroclient.errors import ErrorKind, GenerationFailed, NotFound, ServiceUnavailable
from omeroclient.session import SessionManager
from omeroclient.session_state import Connected

from ..fake_transport import FakeTransport

CHUNK_SIZE = 8
PAYLOAD = bytes(range(50))


@pytest.fixture
def session(session_manager: SessionManager, transport: FakeTransport) -> Connected:
    transport.add_image(42, payload=PAYLOAD)
    return session_manager.connect()


@pytest.fixture
def generator(transport: FakeTransport, export_dir: Path) -> CanonicalFormatGenerator:
    return CanonicalFormatGenerator(transport, chunk_size=CHUNK_SIZE, temp_dir=export_dir)


def test_generate(
    generator: CanonicalFormatGenerator,
    session: Connected,
    transport: FakeTransport,
    export_dir: Path,
) -> None:
    canonical_file = generator.generate(session, 42)

    assert canonical_file.image_id == 42
    assert canonical_file.size == len(PAYLOAD)
    assert canonical_file.path.parent == export_dir
    assert canonical_file.path.name.endswith(".ome.tiff")
    assert canonical_file.path.read_bytes() == PAYLOAD
    reads = [call for call in transport.calls if call[0] == "exporter_read"]
    assert len(reads) == 7
    assert all(length <= CHUNK_SIZE for _, _, length in reads)
    assert transport.call_names()[-1] == "exporter_close"
    assert transport.open_proxies == 0


def test_generate_empty_export(
    generator: CanonicalFormatGenerator, session: Connected, transport: FakeTransport
) -> None:
    transport.export_payloads[42] = b""

    canonical_file = generator.generate(session, 42)

    assert canonical_file.size == 0
    assert canonical_file.path.read_bytes() == b""
    assert "exporter_read" not in transport.call_names()


def test_early_end_of_export(
    generator: CanonicalFormatGenerator,
    session: Connected,
    transport: FakeTransport,
    export_dir: Path,
) -> None:
    transport.declared_export_length = len(PAYLOAD) + 100

    with pytest.raises(GenerationFailed) as exc_info:
        generator.generate(session, 42)

    assert exc_info.value.image_id == 42
    assert exc_info.value.kind == ErrorKind.GENERATION_FAILED
    assert isinstance(exc_info.value.cause, IncompleteTransferError)
    assert isinstance(exc_info.value.__cause__, IncompleteTransferError)
    assert list(export_dir.iterdir()) == []
    assert transport.open_proxies == 0


def test_export_returns_more_than_requested(
    generator: CanonicalFormatGenerator,
    session: Connected,
    transport: FakeTransport,
    export_dir: Path,
) -> None:
    transport.export_read_padding = 5

    with pytest.raises(GenerationFailed) as exc_info:
        generator.generate(session, 42)

    assert isinstance(exc_info.value.cause, OverlongTransferError)
    assert exc_info.value.retryable
    assert transport.call_names().count("exporter_read") == 1
    assert list(export_dir.iterdir()) == []
    assert transport.open_proxies == 0


def test_export_read_fails(
    generator: CanonicalFormatGenerator,
    session: Connected,
    transport: FakeTransport,
    export_dir: Path,
) -> None:
    transport.fail_export_read_at = 16

    with pytest.raises(GenerationFailed) as exc_info:
        generator.generate(session, 42)

    assert isinstance(exc_info.value.cause, ServiceUnavailable)
    assert exc_info.value.retryable
    assert list(export_dir.iterdir()) == []
    assert transport.call_names()[-1] == "exporter_close"


def test_generate_unknown_image(
    generator: CanonicalFormatGenerator, session: Connected, export_dir: Path
) -> None:
    with pytest.raises(NotFound):
        generator.generate(session, 404)

    assert list(export_dir.iterdir()) == []


def test_delete(generator: CanonicalFormatGenerator, session: Connected) -> None:
    canonical_file = generator.generate(session, 42)

    canonical_file.delete()
    canonical_file.delete()

    assert not canonical_file.path.exists()

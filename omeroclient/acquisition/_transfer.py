from collections.abc import Callable, Iterator

import attr

from .._defaults import TRANSFER_CHUNK_SIZE

# (offset, length) -> at most `length` bytes starting at `offset`
ReadChunk = Callable[[int, int], bytes]
# (offset, data)
WriteChunk = Callable[[int, bytes], None]


class TransferSizeError(Exception):
    """The source produced a different number of bytes than declared."""

    def __init__(self, expected_size: int | None, transferred_size: int, message: str):
        self.expected_size = expected_size
        self.transferred_size = transferred_size
        super().__init__(message)


class IncompleteTransferError(TransferSizeError, EOFError):
    def __init__(self, expected_size: int, transferred_size: int):
        super().__init__(
            expected_size,
            transferred_size,
            f"The source ended after {transferred_size} of {expected_size} bytes.",
        )


class OverlongTransferError(TransferSizeError):
    def __init__(self, expected_size: int | None, offset: int, requested: int, received: int):
        super().__init__(
            expected_size,
            offset + received,
            f"Asked the source for {requested} bytes at offset {offset}, got {received}.",
        )


@attr.frozen
class TransferResult:
    bytes_transferred: int
    chunk_count: int


def iter_chunks(
    read: ReadChunk,
    total_size: int | None,
    chunk_size: int = TRANSFER_CHUNK_SIZE,
) -> Iterator[tuple[int, bytes]]:
    """Yields `(offset, data)` windows of at most `chunk_size` bytes.

    With a known `total_size`, reading stops once that many bytes were
    produced, and a window shorter than requested before that point raises
    `IncompleteTransferError`. Without it, reading stops at the first empty
    window. A window longer than requested always raises
    `OverlongTransferError`, so no more than `total_size` bytes are yielded.
    """
    assert chunk_size > 0, f"chunk_size must be positive, got {chunk_size}"
    offset = 0
    while total_size is None or offset < total_size:
        requested = (
            chunk_size if total_size is None else min(chunk_size, total_size - offset)
        )
        data = read(offset, requested)
        if len(data) > requested:
            raise OverlongTransferError(total_size, offset, requested, len(data))
        if len(data) == 0 and total_size is None:
            return
        if total_size is not None and len(data) < requested:
            raise IncompleteTransferError(total_size, offset + len(data))
        yield offset, data
        offset += len(data)


def transfer_chunks(
    read: ReadChunk,
    write: WriteChunk,
    total_size: int | None,
    chunk_size: int = TRANSFER_CHUNK_SIZE,
    on_chunk: Callable[[int], None] | None = None,
) -> TransferResult:
    """Copies from `read` to `write` holding at most one chunk in memory."""
    bytes_transferred = 0
    chunk_count = 0
    for offset, data in iter_chunks(read, total_size, chunk_size):
        write(offset, data)
        bytes_transferred += len(data)
        chunk_count += 1
        if on_chunk is not None:
            on_chunk(len(data))
    return TransferResult(bytes_transferred, chunk_count)

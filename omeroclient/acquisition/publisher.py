import logging
from collections.abc import Callable
from typing import BinaryIO

from .._defaults import CANONICAL_FORMAT, HASHER_TAG, TRANSFER_CHUNK_SIZE
from ..client.api_client.models import ApiFileAnnotationCreate, ApiOriginalFileCreate
from ..client.transport import Transport
from ..errors import OmeroClientError, PublishFailed
from ..session_state import Connected
from ..utils import get_rich_progress
from ._transfer import TransferSizeError, transfer_chunks
from .generator import CanonicalFile

logger = logging.getLogger(__name__)


def _read_at(source: BinaryIO) -> Callable[[int, int], bytes]:
    def read(offset: int, length: int) -> bytes:
        source.seek(offset)
        return source.read(length)

    return read


class AttachmentPublisher:
    """Uploads a local file and attaches it to an image.

    The steps are not transactional. If linking fails after the file was
    saved, an unlinked file annotation stays on the server.
    """

    def __init__(
        self,
        transport: Transport,
        chunk_size: int = TRANSFER_CHUNK_SIZE,
        file_format: str = CANONICAL_FORMAT,
        show_progress: bool = False,
    ) -> None:
        self._transport = transport
        self.chunk_size = chunk_size
        self.file_format = file_format
        self.show_progress = show_progress

    def publish(
        self, session: Connected, image_id: int, canonical_file: CanonicalFile
    ) -> int:
        """Returns the id of the new file annotation linked to the image.

        Raises:
            PublishFailed: On any transport or local file error.
        """
        path = canonical_file.path
        try:
            size = path.stat().st_size
            original_file = self._transport.create_original_file(
                session,
                ApiOriginalFileCreate(
                    name=path.name,
                    path=str(path.parent),
                    size=size,
                    hasher=HASHER_TAG,
                    mimetype=self.file_format,
                ),
            )
            logger.info(
                f"Uploading {path} ({size} bytes) as original file {original_file.id}."
            )
            with self._transport.raw_file_store(
                session, original_file.id
            ) as store, path.open("rb") as source, get_rich_progress(
                disable=not self.show_progress
            ) as progress:
                progress_task = progress.add_task(f"Upload {image_id}", total=size)
                transfer_chunks(
                    _read_at(source),
                    lambda offset, data: store.write(data, offset),
                    size,
                    chunk_size=self.chunk_size,
                    on_chunk=lambda chunk_size: progress.advance(
                        progress_task, chunk_size
                    ),
                )
                saved_file = store.save()
                annotation = self._transport.create_file_annotation(
                    session,
                    ApiFileAnnotationCreate(
                        file_id=saved_file.id,
                        description=f"{self.file_format} generated from image {image_id}",
                    ),
                )
                self._transport.link_annotation(
                    session, "image", image_id, annotation.id
                )
        except (OmeroClientError, TransferSizeError, OSError) as e:
            raise PublishFailed(image_id, e) from e
        logger.info(
            f"Attached {path.name} to image {image_id} as annotation {annotation.id}."
        )
        return annotation.id

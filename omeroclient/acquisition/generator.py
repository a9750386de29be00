import logging
import os
from pathlib import Path
from tempfile import mkstemp

import attr

from .._defaults import CANONICAL_FILE_SUFFIX, TRANSFER_CHUNK_SIZE
from ..client.transport import Transport
from ..errors import GenerationFailed, NotFound, OmeroClientError
from ..session_state import Connected
from ..utils import get_rich_progress
from ._transfer import TransferSizeError, transfer_chunks

logger = logging.getLogger(__name__)


@attr.frozen
class CanonicalFile:
    """An OME-TIFF written to local temporary storage.

    It is only a transfer artifact and can be deleted once published.
    """

    path: Path
    image_id: int
    size: int

    def delete(self) -> None:
        self.path.unlink(missing_ok=True)


class CanonicalFormatGenerator:
    def __init__(
        self,
        transport: Transport,
        chunk_size: int = TRANSFER_CHUNK_SIZE,
        temp_dir: Path | None = None,
        show_progress: bool = False,
    ) -> None:
        self._transport = transport
        self.chunk_size = chunk_size
        self.temp_dir = temp_dir
        self.show_progress = show_progress

    def generate(self, session: Connected, image_id: int) -> CanonicalFile:
        """Exports the image as OME-TIFF into a local temporary file.

        Raises:
            GenerationFailed: If the export fails or ends early. No file is
                left behind in that case.
            NotFound: If the image does not exist.
        """
        fd, tmp_path = mkstemp(
            prefix=f"image-{image_id}-", suffix=CANONICAL_FILE_SUFFIX, dir=self.temp_dir
        )
        os.close(fd)
        path = Path(tmp_path)
        try:
            with self._transport.exporter(session) as exporter:
                exporter.add_image(image_id)
                total_size = exporter.generate_tiff()
                logger.info(
                    f"Exporting image {image_id} as OME-TIFF ({total_size} bytes) to {path}."
                )
                with path.open("wb") as target, get_rich_progress(
                    disable=not self.show_progress
                ) as progress:
                    progress_task = progress.add_task(
                        f"Export {image_id}", total=total_size
                    )
                    result = transfer_chunks(
                        exporter.read,
                        lambda _offset, data: target.write(data),
                        total_size,
                        chunk_size=self.chunk_size,
                        on_chunk=lambda size: progress.advance(progress_task, size),
                    )
        except NotFound:
            path.unlink(missing_ok=True)
            raise
        except (OmeroClientError, TransferSizeError, OSError) as e:
            path.unlink(missing_ok=True)
            raise GenerationFailed(image_id, e) from e
        logger.debug(
            f"Export of image {image_id} took {result.chunk_count} chunks."
        )
        return CanonicalFile(path, image_id, result.bytes_transferred)

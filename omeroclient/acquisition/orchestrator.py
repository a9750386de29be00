import logging
from collections.abc import Callable

from .._defaults import CANONICAL_FORMAT
from ..links import annotation_download_link, image_download_link
from ..session import SessionManager
from ..session_state import Connected
from .generator import CanonicalFormatGenerator
from .locator import AnnotationLocator, AttachmentDescriptor
from .publisher import AttachmentPublisher

logger = logging.getLogger(__name__)

ReplacePolicy = Callable[[AttachmentDescriptor], bool]


class AcquisitionOrchestrator:
    """Provides a download link to a canonical (OME-TIFF) file of an image.

    Existing files are reused before anything is generated: the image itself
    if it was imported in the canonical format, then the first attachment in
    that format. Only if neither exists the image is exported and the result
    is attached to it.
    """

    def __init__(
        self,
        session_manager: SessionManager,
        locator: AnnotationLocator | None = None,
        generator: CanonicalFormatGenerator | None = None,
        publisher: AttachmentPublisher | None = None,
        canonical_format: str = CANONICAL_FORMAT,
        replace_existing: ReplacePolicy | None = None,
        keep_local_files: bool = False,
    ) -> None:
        """
        Args:
            replace_existing: Called with each existing canonical attachment in
                listing order. The first one it returns False for is reused.
                If it returns True for all of them, a new attachment is
                generated in addition to them. By default the first canonical
                attachment is always reused. Old attachments are never removed.
            keep_local_files: Keep the generated local file after publishing
                instead of deleting it.
        """
        transport = session_manager.transport
        self._session_manager = session_manager
        self.locator = locator or AnnotationLocator(transport)
        self.generator = generator or CanonicalFormatGenerator(transport)
        self.publisher = publisher or AttachmentPublisher(
            transport, file_format=canonical_format
        )
        self.canonical_format = canonical_format
        self.replace_existing = replace_existing
        self.keep_local_files = keep_local_files

    def _find_reusable(
        self, session: Connected, image_id: int
    ) -> AttachmentDescriptor | None:
        if self.replace_existing is None:
            return self.locator.find(session, image_id, self.canonical_format)

        for attachment in self.locator.list(session, image_id):
            if attachment.file_format != self.canonical_format:
                continue
            if not self.replace_existing(attachment):
                return attachment
            logger.info(
                f"Not reusing {self.canonical_format} annotation {attachment.annotation_id} of image {image_id}."
            )
        return None

    def acquire_canonical_link(self, image_id: int) -> str:
        session = self._session_manager.ensure_connected()
        transport = self._session_manager.transport

        image = transport.get_image(session, image_id)
        if image.format == self.canonical_format:
            logger.info(f"Image {image_id} is stored as {self.canonical_format}.")
            return image_download_link(session, image_id)

        existing = self._find_reusable(session, image_id)
        if existing is not None:
            return annotation_download_link(session, existing.annotation_id)

        canonical_file = self.generator.generate(session, image_id)
        try:
            annotation_id = self.publisher.publish(session, image_id, canonical_file)
        finally:
            if not self.keep_local_files:
                canonical_file.delete()
        return annotation_download_link(session, annotation_id)

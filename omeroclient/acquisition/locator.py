import logging

import attr

from ..client.api_client.models import ApiFileAnnotation
from ..client.transport import Transport
from ..session_state import Connected

logger = logging.getLogger(__name__)


@attr.frozen
class AttachmentDescriptor:
    """A file attached to an image."""

    annotation_id: int
    file_id: int
    file_name: str
    file_format: str | None
    size: int | None

    @classmethod
    def _from_api_file_annotation(
        cls, api_annotation: ApiFileAnnotation
    ) -> "AttachmentDescriptor":
        return cls(
            annotation_id=api_annotation.id,
            file_id=api_annotation.file_id,
            file_name=api_annotation.file_name,
            file_format=api_annotation.file_format,
            size=api_annotation.file_size,
        )


class AnnotationLocator:
    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    def list(self, session: Connected, image_id: int) -> list[AttachmentDescriptor]:
        return [
            AttachmentDescriptor._from_api_file_annotation(api_annotation)
            for api_annotation in self._transport.list_file_annotations(
                session, image_id
            )
        ]

    def find(
        self, session: Connected, image_id: int, target_format: str
    ) -> AttachmentDescriptor | None:
        """Returns the first attachment of the image in `target_format`, if any.

        The order is the listing order of the server. The format is compared
        exactly, including case.
        """
        for attachment in self.list(session, image_id):
            if attachment.file_format == target_format:
                logger.debug(
                    f"Found {target_format} attachment {attachment.annotation_id} ({attachment.file_name}) on image {image_id}."
                )
                return attachment
        logger.debug(f"Image {image_id} has no {target_format} attachment.")
        return None

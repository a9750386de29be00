from ._transfer import (
    IncompleteTransferError,
    OverlongTransferError,
    TransferResult,
    TransferSizeError,
    transfer_chunks,
)
from .generator import CanonicalFile, CanonicalFormatGenerator
from .locator import AnnotationLocator, AttachmentDescriptor
from .orchestrator import AcquisitionOrchestrator
from .publisher import AttachmentPublisher

__all__ = [
    "AcquisitionOrchestrator",
    "AnnotationLocator",
    "AttachmentDescriptor",
    "AttachmentPublisher",
    "CanonicalFile",
    "CanonicalFormatGenerator",
    "IncompleteTransferError",
    "OverlongTransferError",
    "TransferResult",
    "TransferSizeError",
    "transfer_chunks",
]

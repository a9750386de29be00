"""
A client for OMERO image servers that can always hand out an OME-TIFF.

`OmeroClient` keeps one authenticated session (see `SessionManager`) and
provides download links to a canonical OME-TIFF file for any image. Existing
files are reused: the image itself if it was imported as OME-TIFF, or an
OME-TIFF attached to it. Otherwise the image is exported in chunks, uploaded
again and attached to the image.

Server and login are taken from `Credentials`, from an `omero_context` or
from `OMERO_*` environment variables, see `omeroclient.context`.
"""

from .acquisition import (
    AcquisitionOrchestrator,
    AnnotationLocator,
    AttachmentDescriptor,
    AttachmentPublisher,
    CanonicalFile,
    CanonicalFormatGenerator,
)
from .client import HttpTransport, Transport
from .context import omero_context
from .errors import (
    AccessDenied,
    AuthenticationFailed,
    ErrorKind,
    GenerationFailed,
    IllegalConnectionState,
    NotFound,
    OmeroClientError,
    PublishFailed,
    ServiceUnavailable,
    SessionResumeFailed,
)
from .omero_client import MapAnnotation, OmeroClient
from .session import SessionManager
from .session_state import Connected, Credentials, Disconnected, SecurityContext
from .version import __version__

DEFAULT_OMERO_HOST = "localhost"
DEFAULT_OMERO_PORT = 4080
DEFAULT_OMERO_SCHEME = "http"
DEFAULT_HTTP_TIMEOUT = 1800  # 30 minutes

# OMERO.web addresses the first configured server as 1
DEFAULT_SERVER_ID = 1
GATEWAY_API_VERSION = 1

CANONICAL_FORMAT = "OMETiff"
CANONICAL_FILE_SUFFIX = ".ome.tiff"
HASHER_TAG = "SHA1-160"

# Transfer window for export reads and raw file store writes
TRANSFER_CHUNK_SIZE = 1024 * 1024  # 1 MiB

MAP_ANNOTATION_NAMESPACE = "openmicroscopy.org/omero/client/mapAnnotation"

# edge length of OMERO.web thumbnails
DEFAULT_THUMBNAIL_SIZE = 96

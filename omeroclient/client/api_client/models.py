import attr

# Request and response bodies of the OMERO gateway routes.
# Keys are converted to/from camelCase on the wire.
# Optional fields in response bodies should always have “= None” defaults.


@attr.s(auto_attribs=True)
class ApiLogin:
    username: str
    password: str
    group_id: int | None = None


@attr.s(auto_attribs=True)
class ApiJoinSession:
    session_token: str


@attr.s(auto_attribs=True)
class ApiEventContext:
    session_id: int
    session_uuid: str
    user_id: int
    group_id: int
    user_name: str | None = None


@attr.s(auto_attribs=True)
class ApiImage:
    id: int
    name: str
    description: str | None = None
    format: str | None = None


@attr.s(auto_attribs=True)
class ApiProject:
    id: int
    name: str
    description: str | None = None


@attr.s(auto_attribs=True)
class ApiProjectCreate:
    name: str
    description: str | None = None


@attr.s(auto_attribs=True)
class ApiDataset:
    id: int
    name: str
    description: str | None = None


@attr.s(auto_attribs=True)
class ApiDatasetCreate:
    name: str
    project_id: int
    description: str | None = None


@attr.s(auto_attribs=True)
class ApiChannel:
    index: int
    name: str | None = None


@attr.s(auto_attribs=True)
class ApiFileAnnotation:
    id: int
    file_id: int
    file_name: str
    file_format: str | None = None
    file_size: int | None = None
    namespace: str | None = None
    description: str | None = None


@attr.s(auto_attribs=True)
class ApiFileAnnotationCreate:
    file_id: int
    description: str | None = None
    namespace: str | None = None


@attr.s(auto_attribs=True)
class ApiMapAnnotation:
    id: int
    values: list[tuple[str, str]]
    namespace: str | None = None


@attr.s(auto_attribs=True)
class ApiMapAnnotationCreate:
    values: list[tuple[str, str]]
    namespace: str | None = None


@attr.s(auto_attribs=True)
class ApiAnnotationLink:
    id: int
    parent_type: str
    parent_id: int
    annotation_id: int


@attr.s(auto_attribs=True)
class ApiOriginalFileCreate:
    name: str
    path: str
    size: int
    hasher: str
    mimetype: str


@attr.s(auto_attribs=True)
class ApiOriginalFile:
    id: int
    name: str
    path: str
    size: int
    hasher: str | None = None
    hash: str | None = None
    mimetype: str | None = None


@attr.s(auto_attribs=True)
class ApiServiceHandle:
    # stateful server side service (exporter, raw file store)
    id: str


@attr.s(auto_attribs=True)
class ApiExportGenerated:
    length: int

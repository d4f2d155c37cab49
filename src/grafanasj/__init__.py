"""Grafana SimpleJSON datasource endpoints backed by pluggable collaborators.

Example:
    ```python
    from grafanasj import InMemorySource, SimpleJSONConfig, create_asgi_app

    app = create_asgi_app(SimpleJSONConfig.from_source(InMemorySource()))
    ```
"""

from grafanasj.adapters.frameworks.asgi import create_asgi_app
from grafanasj.adapters.frameworks.wsgi import create_wsgi_app
from grafanasj.adapters.sources.in_memory import InMemorySource
from grafanasj.core.config import BasicAuth, SimpleJSONConfig
from grafanasj.core.dispatcher import SimpleJSONDispatcher
from grafanasj.core.errors import (
    CapabilityNotImplemented,
    CollaboratorError,
    ColumnLengthMismatch,
    DecodeError,
    InvalidColumnType,
    SimpleJSONError,
    Unauthorized,
    UnknownTagType,
    UnknownTargetKind,
)
from grafanasj.core.models import (
    AdhocFilter,
    Annotation,
    AnnotationsArguments,
    DataPoint,
    NumberColumn,
    QueryArguments,
    StringColumn,
    TableColumn,
    TableQueryArguments,
    TagStringKey,
    TagStringValue,
    TimeColumn,
    TimeRange,
)
from grafanasj.core.ports import (
    AnnotatorPort,
    QuerierPort,
    SearcherPort,
    TableQuerierPort,
    TagSearcherPort,
)

__all__ = [
    "AdhocFilter",
    "Annotation",
    "AnnotationsArguments",
    "AnnotatorPort",
    "BasicAuth",
    "CapabilityNotImplemented",
    "CollaboratorError",
    "ColumnLengthMismatch",
    "DataPoint",
    "DecodeError",
    "InMemorySource",
    "InvalidColumnType",
    "NumberColumn",
    "QuerierPort",
    "QueryArguments",
    "SearcherPort",
    "SimpleJSONConfig",
    "SimpleJSONDispatcher",
    "SimpleJSONError",
    "StringColumn",
    "TableColumn",
    "TableQuerierPort",
    "TableQueryArguments",
    "TagSearcherPort",
    "TagStringKey",
    "TagStringValue",
    "TimeColumn",
    "TimeRange",
    "Unauthorized",
    "UnknownTagType",
    "UnknownTargetKind",
    "create_asgi_app",
    "create_wsgi_app",
]

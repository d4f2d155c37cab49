"""Core domain models for the SimpleJSON datasource protocol.

All models are request-scoped values: they are decoded from a request,
handed to a collaborator, re-encoded and dropped.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, ClassVar

TIMESERIES_KINDS = frozenset({"", "timeserie"})
TABLE_KIND = "table"


@dataclass(frozen=True)
class TimeRange:
    """An inclusive time range.

    Attributes:
        start: Range start (``from`` on the wire).
        end: Range end (``to`` on the wire).
    """

    start: datetime
    end: datetime


@dataclass(frozen=True)
class RawTimeRange:
    """The relative range expressions Grafana sends alongside the range.

    Values such as ``now-6h`` are forwarded untouched.
    """

    start: str = ""
    end: str = ""


@dataclass(frozen=True)
class AdhocFilter:
    """A single ad-hoc filter, e.g. ``host = web-1``."""

    key: str
    operator: str
    value: str


@dataclass(frozen=True)
class Target:
    """One named series or table requested within a query.

    Attributes:
        name: The ``target`` string chosen in the Grafana query editor.
        kind: Raw ``type`` value. Empty means timeseries.
        ref_id: Grafana's query reference (``A``, ``B``...).
        hidden: Whether the query is hidden in the panel.
    """

    name: str
    kind: str = ""
    ref_id: str = ""
    hidden: bool = False

    @property
    def is_timeseries(self) -> bool:
        return self.kind in TIMESERIES_KINDS

    @property
    def is_table(self) -> bool:
        return self.kind == TABLE_KIND


@dataclass(frozen=True)
class QueryRequest:
    """A decoded ``/query`` request envelope."""

    range: TimeRange
    interval: timedelta = timedelta(0)
    max_data_points: int = 0
    targets: tuple[Target, ...] = ()
    adhoc_filters: tuple[AdhocFilter, ...] = ()
    raw_range: RawTimeRange = field(default_factory=RawTimeRange)
    interval_ms: int = 0
    panel_id: int = 0
    format: str = ""


@dataclass(frozen=True)
class QueryArguments:
    """Arguments passed to a timeseries collaborator."""

    range: TimeRange
    interval: timedelta
    max_data_points: int
    filters: tuple[AdhocFilter, ...] = ()


@dataclass(frozen=True)
class TableQueryArguments:
    """Arguments passed to a table collaborator."""

    range: TimeRange
    filters: tuple[AdhocFilter, ...] = ()


@dataclass(frozen=True)
class DataPoint:
    """A single value at a point in time."""

    time: datetime
    value: float


@dataclass(frozen=True)
class NumberColumn:
    """Values of a ``number`` table column."""

    values: Sequence[float]
    type_tag: ClassVar[str] = "number"


@dataclass(frozen=True)
class StringColumn:
    """Values of a ``string`` table column."""

    values: Sequence[str]
    type_tag: ClassVar[str] = "string"


@dataclass(frozen=True)
class TimeColumn:
    """Values of a ``time`` table column."""

    values: Sequence[datetime]
    type_tag: ClassVar[str] = "time"


ColumnData = NumberColumn | StringColumn | TimeColumn


@dataclass(frozen=True)
class TableColumn:
    """A labelled table column.

    Attributes:
        text: Column header shown by Grafana.
        data: One of NumberColumn, StringColumn or TimeColumn.
    """

    text: str
    data: ColumnData


@dataclass(frozen=True)
class Annotation:
    """An annotation to display on a graph.

    A point annotation has no ``time_end``; a region annotation spans
    ``time`` to ``time_end``.
    """

    time: datetime
    title: str = ""
    text: str = ""
    tags: tuple[str, ...] = ()
    time_end: datetime | None = None

    @property
    def is_region(self) -> bool:
        return self.time_end is not None


@dataclass(frozen=True)
class AnnotationQuery:
    """The annotation descriptor from an ``/annotations`` request.

    It is echoed verbatim in every response record.
    """

    name: str = ""
    datasource: str | dict[str, Any] = ""
    query: str = ""
    enable: bool = False
    icon_color: str = ""


@dataclass(frozen=True)
class AnnotationsRequest:
    """A decoded ``/annotations`` request envelope."""

    range: TimeRange
    annotation: AnnotationQuery = field(default_factory=AnnotationQuery)
    raw_range: RawTimeRange = field(default_factory=RawTimeRange)


@dataclass(frozen=True)
class AnnotationsArguments:
    """Arguments passed to an annotation collaborator."""

    range: TimeRange


@dataclass(frozen=True)
class TagStringKey:
    """An ad-hoc filter key whose values are strings."""

    name: str
    type_tag: ClassVar[str] = "string"


@dataclass(frozen=True)
class TagStringValue:
    """A string value for an ad-hoc filter key."""

    text: str


TagKey = TagStringKey
TagValue = TagStringValue

"""In-memory datasource implementing every collaborator port.

Suitable for testing, demos and small fixed datasets where no external
store is needed.
"""

import heapq
from collections.abc import Iterable, Sequence
from datetime import datetime

from grafanasj.core.encoding.wiretime import to_aware
from grafanasj.core.models import (
    AdhocFilter,
    Annotation,
    AnnotationsArguments,
    DataPoint,
    QueryArguments,
    TableColumn,
    TableQueryArguments,
    TagStringKey,
    TagStringValue,
    TimeRange,
)


def _in_range(moment: datetime, time_range: TimeRange) -> bool:
    return to_aware(time_range.start) <= to_aware(moment) <= to_aware(time_range.end)


def _filter_matches(labels: dict[str, str], adhoc_filter: AdhocFilter) -> bool:
    """Check one ad-hoc filter against a series' labels.

    Raises:
        ValueError: If the operator is not ``=`` or ``!=``.
    """
    actual = labels.get(adhoc_filter.key)
    if adhoc_filter.operator == "=":
        return actual == adhoc_filter.value
    if adhoc_filter.operator == "!=":
        return actual != adhoc_filter.value
    raise ValueError(f"unsupported ad-hoc filter operator {adhoc_filter.operator!r}")


class InMemorySource:
    """In-memory implementation of all SimpleJSON collaborator ports.

    Series are returned unsorted: in insertion order, or newest first when
    capped by ``max_data_points``.

    Example:
        ```python
        source = InMemorySource()
        source.add_series("cpu", [DataPoint(time=now, value=0.5)])
        config = SimpleJSONConfig.from_source(source)
        ```
    """

    def __init__(self) -> None:
        self._series: dict[str, list[DataPoint]] = {}
        self._labels: dict[str, dict[str, str]] = {}
        self._tables: dict[str, list[TableColumn]] = {}
        self._annotations: list[Annotation] = []
        self._tag_values: dict[str, set[str]] = {}

    def add_series(
        self,
        name: str,
        points: Iterable[DataPoint],
        labels: dict[str, str] | None = None,
    ) -> None:
        """Append datapoints to a named series, optionally setting its labels."""
        self._series.setdefault(name, []).extend(points)
        if labels is not None:
            self._labels[name] = dict(labels)
            for key, value in labels.items():
                self._tag_values.setdefault(key, set()).add(value)

    def add_table(self, name: str, columns: Sequence[TableColumn]) -> None:
        """Register (or replace) a named table."""
        self._tables[name] = list(columns)

    def add_annotation(self, annotation: Annotation) -> None:
        """Append an annotation."""
        self._annotations.append(annotation)

    def add_tag_values(self, key: str, values: Iterable[str]) -> None:
        """Register ad-hoc filter values for a key."""
        self._tag_values.setdefault(key, set()).update(values)

    async def grafana_query(
        self, target: str, args: QueryArguments
    ) -> Sequence[DataPoint]:
        """Return the target's points inside the range.

        When ``max_data_points`` is positive, only that many of the latest
        points by time are kept, newest first. A series whose labels fail an
        ad-hoc filter yields no points.

        Raises:
            KeyError: If the target is unknown.
        """
        if target not in self._series:
            raise KeyError(f"unknown target {target!r}")
        labels = self._labels.get(target, {})
        if not all(_filter_matches(labels, f) for f in args.filters):
            return []
        points = [p for p in self._series[target] if _in_range(p.time, args.range)]
        if args.max_data_points > 0:
            points = heapq.nlargest(
                args.max_data_points, points, key=lambda p: to_aware(p.time)
            )
        return points

    async def grafana_query_table(
        self, target: str, args: TableQueryArguments
    ) -> Sequence[TableColumn]:
        """Return the registered table.

        Raises:
            KeyError: If the table is unknown.
        """
        if target not in self._tables:
            raise KeyError(f"unknown table {target!r}")
        return list(self._tables[target])

    async def grafana_annotations(
        self, query: str, args: AnnotationsArguments
    ) -> Sequence[Annotation]:
        """Return annotations overlapping the range that match the query.

        A query of ``#tag`` matches annotations carrying that tag; any other
        non-empty query matches a title substring.
        """
        start, end = to_aware(args.range.start), to_aware(args.range.end)
        matches = []
        for annotation in self._annotations:
            ann_start = to_aware(annotation.time)
            ann_end = to_aware(annotation.time_end or annotation.time)
            if ann_end < start or ann_start > end:
                continue
            if query.startswith("#"):
                if query[1:] not in annotation.tags:
                    continue
            elif query and query not in annotation.title:
                continue
            matches.append(annotation)
        return matches

    async def grafana_search(self, target: str) -> Sequence[str]:
        """Return series and table names containing ``target``, sorted."""
        names = set(self._series) | set(self._tables)
        return sorted(name for name in names if target in name)

    async def grafana_adhoc_filter_tags(self) -> Sequence[TagStringKey]:
        """Return every known ad-hoc filter key, sorted."""
        return [TagStringKey(key) for key in sorted(self._tag_values)]

    async def grafana_adhoc_filter_tag_values(
        self, key: str
    ) -> Sequence[TagStringValue]:
        """Return the values known for ``key``, sorted; unknown keys give none."""
        values = sorted(self._tag_values.get(key, ()))
        return [TagStringValue(value) for value in values]

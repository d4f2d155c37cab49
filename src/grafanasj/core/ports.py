"""Port interfaces for datasource collaborators.

These protocols define the capabilities an embedding application can wire
into the SimpleJSON endpoints. The core depends only on these interfaces,
never on concrete data sources.
"""

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from grafanasj.core.models import (
    Annotation,
    AnnotationsArguments,
    DataPoint,
    QueryArguments,
    TableColumn,
    TableQueryArguments,
    TagKey,
    TagValue,
)


@runtime_checkable
class QuerierPort(Protocol):
    """Port for timeseries queries, served on ``/query``."""

    async def grafana_query(
        self, target: str, args: QueryArguments
    ) -> Sequence[DataPoint]:
        """Return the datapoints of one target.

        Args:
            target: The target name from the query editor.
            args: Range, interval, max datapoints and ad-hoc filters.

        Returns:
            Datapoints in any order; they are sorted before encoding.
        """
        ...


@runtime_checkable
class TableQuerierPort(Protocol):
    """Port for table queries, served on ``/query`` with ``type: table``."""

    async def grafana_query_table(
        self, target: str, args: TableQueryArguments
    ) -> Sequence[TableColumn]:
        """Return the columns of one table. All columns must be equal length."""
        ...


@runtime_checkable
class AnnotatorPort(Protocol):
    """Port for annotation queries, served on ``/annotations``."""

    async def grafana_annotations(
        self, query: str, args: AnnotationsArguments
    ) -> Sequence[Annotation]:
        """Return annotations matching the annotation query within the range."""
        ...


@runtime_checkable
class SearcherPort(Protocol):
    """Port for metric name lookup, served on ``/search``."""

    async def grafana_search(self, target: str) -> Sequence[str]:
        """Return the target names matching the partial input."""
        ...


@runtime_checkable
class TagSearcherPort(Protocol):
    """Port for ad-hoc filter lookup, served on ``/tag-keys`` and ``/tag-values``."""

    async def grafana_adhoc_filter_tags(self) -> Sequence[TagKey]:
        """Return the keys usable in ad-hoc filters."""
        ...

    async def grafana_adhoc_filter_tag_values(self, key: str) -> Sequence[TagValue]:
        """Return the values known for one ad-hoc filter key."""
        ...

"""Dispatcher translating SimpleJSON requests into collaborator calls.

The dispatcher is framework-free: each handler takes a raw request body
and returns a JSON-ready structure, raising ``SimpleJSONError`` subclasses
that carry the status code to answer with.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from grafanasj.core.config import SimpleJSONConfig
from grafanasj.core.encoding.simplejson import (
    decode_annotations_request,
    decode_query_request,
    decode_search_request,
    decode_tag_values_request,
    encode_tag_keys,
    encode_tag_values,
    encode_timeseries,
    expand_annotations,
)
from grafanasj.core.encoding.table import encode_table
from grafanasj.core.errors import (
    CapabilityNotImplemented,
    CollaboratorError,
    SimpleJSONError,
    UnknownTargetKind,
)
from grafanasj.core.models import (
    AnnotationsArguments,
    QueryArguments,
    QueryRequest,
    TableQueryArguments,
    Target,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Collaborator failures on /query are server errors, everywhere else they
# are reported as bad requests. Clients may depend on either.
QUERY_FAILURE_STATUS = 500
LOOKUP_FAILURE_STATUS = 400


async def _call_collaborator(
    description: str,
    status_code: int,
    func: Callable[..., Awaitable[T] | T],
    *args: Any,
) -> T:
    """Call a collaborator, wrapping its failures in CollaboratorError.

    Coroutine functions are awaited on the event loop. Plain functions run
    in a worker thread, so a slow one only holds up its own request.
    """
    try:
        if inspect.iscoroutinefunction(func):
            return await func(*args)
        result = await asyncio.to_thread(func, *args)
        if inspect.isawaitable(result):
            result = await result
        return result
    except SimpleJSONError:
        raise
    except Exception as e:
        raise CollaboratorError(f"{description}: {e}", status_code) from e


class SimpleJSONDispatcher:
    """Serves the SimpleJSON data endpoints from a configuration.

    Example:
        ```python
        dispatcher = SimpleJSONDispatcher(SimpleJSONConfig(querier=source))
        response = await dispatcher.handle_query(body)
        ```
    """

    def __init__(self, config: SimpleJSONConfig) -> None:
        self.config = config

    def has_capability(self, path: str) -> bool:
        """Return True if the endpoint at ``path`` has a wired collaborator."""
        config = self.config
        capabilities = {
            "/query": config.querier is not None or config.table_querier is not None,
            "/annotations": config.annotator is not None,
            "/search": config.searcher is not None,
            "/tag-keys": config.tag_searcher is not None,
            "/tag-values": config.tag_searcher is not None,
        }
        return capabilities.get(path, False)

    def _require(self, path: str) -> None:
        if not self.has_capability(path):
            raise CapabilityNotImplemented(path)

    def _check_targets(self, targets: tuple[Target, ...]) -> None:
        """Validate every target before any collaborator is called.

        Unknown kinds are reported ahead of missing capabilities.
        """
        for target in targets:
            if not (target.is_timeseries or target.is_table):
                raise UnknownTargetKind(target.kind)
        for target in targets:
            if target.is_timeseries and self.config.querier is None:
                raise CapabilityNotImplemented("timeserie query")
            if target.is_table and self.config.table_querier is None:
                raise CapabilityNotImplemented("table query")

    async def _query_timeseries(
        self, request: QueryRequest, target: Target
    ) -> dict[str, Any]:
        assert self.config.querier is not None
        args = QueryArguments(
            range=request.range,
            interval=request.interval,
            max_data_points=request.max_data_points,
            filters=request.adhoc_filters,
        )
        points = await _call_collaborator(
            f"query {target.name!r} failed",
            QUERY_FAILURE_STATUS,
            self.config.querier.grafana_query,
            target.name,
            args,
        )
        return encode_timeseries(target.name, points)

    async def _query_table(
        self, request: QueryRequest, target: Target
    ) -> dict[str, Any]:
        assert self.config.table_querier is not None
        args = TableQueryArguments(range=request.range, filters=request.adhoc_filters)
        columns = await _call_collaborator(
            f"table query {target.name!r} failed",
            QUERY_FAILURE_STATUS,
            self.config.table_querier.grafana_query_table,
            target.name,
            args,
        )
        return encode_table(columns)

    async def handle_query(self, body: bytes | str) -> list[dict[str, Any]]:
        """Serve ``/query``: one response entry per target, in request order.

        Raises:
            DecodeError: Malformed body (400).
            UnknownTargetKind: A target type is not timeserie or table (400).
            CollaboratorError: A collaborator failed (500).
            ColumnLengthMismatch, InvalidColumnType: Bad table data (500).
        """
        self._require("/query")
        request = decode_query_request(body)
        self._check_targets(request.targets)

        responses = []
        for target in request.targets:
            logger.debug(
                "dispatching %s target %r", target.kind or "timeserie", target.name
            )
            if target.is_table:
                responses.append(await self._query_table(request, target))
            else:
                responses.append(await self._query_timeseries(request, target))
        return responses

    async def handle_annotations(self, body: bytes | str) -> list[dict[str, Any]]:
        """Serve ``/annotations``: expand each annotation into wire records.

        Raises:
            DecodeError: Malformed body (400).
            CollaboratorError: The annotator failed (400).
        """
        self._require("/annotations")
        assert self.config.annotator is not None
        request = decode_annotations_request(body)
        annotations = await _call_collaborator(
            "annotations failed",
            LOOKUP_FAILURE_STATUS,
            self.config.annotator.grafana_annotations,
            request.annotation.query,
            AnnotationsArguments(range=request.range),
        )
        return expand_annotations(request.annotation, annotations)

    async def handle_search(self, body: bytes | str) -> list[str]:
        """Serve ``/search``: the searcher's target names, verbatim."""
        self._require("/search")
        assert self.config.searcher is not None
        target = decode_search_request(body)
        names = await _call_collaborator(
            "search failed",
            LOOKUP_FAILURE_STATUS,
            self.config.searcher.grafana_search,
            target,
        )
        return list(names)

    async def handle_tag_keys(self, body: bytes | str) -> list[dict[str, str]]:
        """Serve ``/tag-keys``. The request body is not inspected."""
        self._require("/tag-keys")
        assert self.config.tag_searcher is not None
        keys = await _call_collaborator(
            "tag keys failed",
            LOOKUP_FAILURE_STATUS,
            self.config.tag_searcher.grafana_adhoc_filter_tags,
        )
        return encode_tag_keys(keys)

    async def handle_tag_values(self, body: bytes | str) -> list[dict[str, str]]:
        """Serve ``/tag-values`` for the requested key."""
        self._require("/tag-values")
        assert self.config.tag_searcher is not None
        key = decode_tag_values_request(body)
        values = await _call_collaborator(
            f"tag values for {key!r} failed",
            LOOKUP_FAILURE_STATUS,
            self.config.tag_searcher.grafana_adhoc_filter_tag_values,
            key,
        )
        return encode_tag_values(values)

"""Decoders and encoders for the SimpleJSON request and response bodies.

Request example (``/query``)::

    {
      "range": {"from": "2016-10-31T06:33:44.866Z",
                "to": "2016-10-31T12:33:44.866Z",
                "raw": {"from": "now-6h", "to": "now"}},
      "interval": "30s",
      "intervalMs": 30000,
      "targets": [{"target": "upper_50", "refId": "A", "type": "timeserie"}],
      "adhocFilters": [{"key": "host", "operator": "=", "value": "web-1"}],
      "maxDataPoints": 550
    }

Timeseries response::

    [{"target": "upper_50", "datapoints": [[622, 1450754160000], ...]}]
"""

import json
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta
from typing import Any

from grafanasj.core.encoding.wiretime import (
    decode_duration,
    decode_range_time,
    encode_datapoint,
    encode_point_time,
    to_aware,
)
from grafanasj.core.errors import DecodeError, UnknownTagType
from grafanasj.core.models import (
    AdhocFilter,
    Annotation,
    AnnotationQuery,
    AnnotationsRequest,
    DataPoint,
    QueryRequest,
    RawTimeRange,
    TagKey,
    TagStringKey,
    TagStringValue,
    TagValue,
    Target,
    TimeRange,
)


def _load_object(body: bytes | str) -> dict[str, Any]:
    """Parse a request body that must hold a JSON object."""
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError(f"invalid JSON body: {e}") from e
    if not isinstance(payload, dict):
        raise DecodeError("request body must be a JSON object")
    return payload


def _get(
    obj: dict[str, Any],
    key: str,
    kind: type | tuple[type, ...],
    default: Any,
) -> Any:
    """Return ``obj[key]`` checked against ``kind``; missing or null gives default."""
    value = obj.get(key)
    if value is None:
        return default
    kinds = kind if isinstance(kind, tuple) else (kind,)
    # bool is an int subclass
    if not isinstance(value, kinds) or (isinstance(value, bool) and bool not in kinds):
        raise DecodeError(f"field {key!r} has wrong type {type(value).__name__}")
    return value


def _decode_range(obj: dict[str, Any]) -> TimeRange:
    range_obj = _get(obj, "range", dict, None)
    if range_obj is None:
        raise DecodeError("missing field 'range'")
    if "from" not in range_obj or "to" not in range_obj:
        raise DecodeError("field 'range' requires 'from' and 'to'")
    return TimeRange(
        start=decode_range_time(range_obj["from"]),
        end=decode_range_time(range_obj["to"]),
    )


def _decode_raw_range(obj: dict[str, Any]) -> RawTimeRange:
    raw = _get(obj, "rangeRaw", dict, None)
    if raw is None:
        raw = _get(_get(obj, "range", dict, {}), "raw", dict, {})
    return RawTimeRange(
        start=_get(raw, "from", str, ""),
        end=_get(raw, "to", str, ""),
    )


def _decode_target(obj: Any) -> Target:
    if not isinstance(obj, dict):
        raise DecodeError("each target must be a JSON object")
    return Target(
        name=_get(obj, "target", str, ""),
        kind=_get(obj, "type", str, ""),
        ref_id=_get(obj, "refId", str, ""),
        hidden=_get(obj, "hide", bool, False),
    )


def _decode_adhoc_filter(obj: Any) -> AdhocFilter:
    if not isinstance(obj, dict):
        raise DecodeError("each ad-hoc filter must be a JSON object")
    return AdhocFilter(
        key=_get(obj, "key", str, ""),
        operator=_get(obj, "operator", str, ""),
        value=_get(obj, "value", str, ""),
    )


def decode_query_request(body: bytes | str) -> QueryRequest:
    """Decode a ``/query`` request body.

    Raises:
        DecodeError: If the body is not JSON or a field is malformed.
    """
    payload = _load_object(body)
    interval = _get(payload, "interval", str, None)
    return QueryRequest(
        range=_decode_range(payload),
        interval=decode_duration(interval) if interval is not None else timedelta(0),
        max_data_points=_get(payload, "maxDataPoints", int, 0),
        targets=tuple(_decode_target(t) for t in _get(payload, "targets", list, [])),
        adhoc_filters=tuple(
            _decode_adhoc_filter(f) for f in _get(payload, "adhocFilters", list, [])
        ),
        raw_range=_decode_raw_range(payload),
        interval_ms=_get(payload, "intervalMs", int, 0),
        panel_id=_get(payload, "panelId", int, 0),
        format=_get(payload, "format", str, ""),
    )


def encode_timeseries(target: str, points: Iterable[DataPoint]) -> dict[str, Any]:
    """Encode one target's datapoints, sorted ascending by time.

    Each datapoint is a ``[value, milliseconds]`` pair of floats.
    """
    ordered = sorted(points, key=lambda point: to_aware(point.time))
    return {
        "target": target,
        "datapoints": [encode_datapoint(point) for point in ordered],
    }


def decode_annotations_request(body: bytes | str) -> AnnotationsRequest:
    """Decode an ``/annotations`` request body.

    Raises:
        DecodeError: If the body is not JSON or a field is malformed.
    """
    payload = _load_object(body)
    annotation = _get(payload, "annotation", dict, {})
    return AnnotationsRequest(
        range=_decode_range(payload),
        annotation=AnnotationQuery(
            name=_get(annotation, "name", str, ""),
            datasource=_get(annotation, "datasource", (str, dict), ""),
            query=_get(annotation, "query", str, ""),
            enable=_get(annotation, "enable", bool, False),
            icon_color=_get(annotation, "iconColor", str, ""),
        ),
        raw_range=_decode_raw_range(payload),
    )


def encode_annotation_query(query: AnnotationQuery) -> dict[str, Any]:
    """Encode the annotation descriptor as echoed in each response record."""
    return {
        "name": query.name,
        "datasource": query.datasource,
        "query": query.query,
        "enable": query.enable,
        "iconColor": query.icon_color,
    }


def _annotation_record(
    query: AnnotationQuery,
    annotation: Annotation,
    at: datetime,
    region_id: int | None,
) -> dict[str, Any]:
    record: dict[str, Any] = {
        "annotation": encode_annotation_query(query),
        "time": encode_point_time(at),
    }
    if region_id is not None:
        record["regionId"] = region_id
    record["title"] = annotation.title
    record["text"] = annotation.text
    record["tags"] = list(annotation.tags)
    return record


def expand_annotations(
    query: AnnotationQuery, annotations: Sequence[Annotation]
) -> list[dict[str, Any]]:
    """Expand annotations into SimpleJSON annotation records.

    A point annotation becomes one record without ``regionId``. A region
    annotation becomes a start record and an end record, both carrying
    ``regionId`` set to the annotation's index in ``annotations``. Region
    ids are only unique within one response.
    """
    records: list[dict[str, Any]] = []
    for index, annotation in enumerate(annotations):
        if annotation.time_end is None:
            records.append(_annotation_record(query, annotation, annotation.time, None))
            continue
        records.append(_annotation_record(query, annotation, annotation.time, index))
        records.append(
            _annotation_record(query, annotation, annotation.time_end, index)
        )
    return records


def decode_search_request(body: bytes | str) -> str:
    """Decode a ``/search`` body and return its ``target`` (``""`` if absent)."""
    return _get(_load_object(body), "target", str, "")


def decode_tag_values_request(body: bytes | str) -> str:
    """Decode a ``/tag-values`` body and return its ``key``.

    Raises:
        DecodeError: If ``key`` is missing or not a string.
    """
    key = _get(_load_object(body), "key", str, None)
    if key is None:
        raise DecodeError("missing field 'key'")
    return key


def encode_tag_keys(keys: Iterable[TagKey]) -> list[dict[str, str]]:
    """Encode ad-hoc filter keys as ``{"type", "text"}`` objects.

    Raises:
        UnknownTagType: If a key is not a known tag key variant.
    """
    encoded = []
    for key in keys:
        match key:
            case TagStringKey(name=name):
                encoded.append({"type": TagStringKey.type_tag, "text": name})
            case other:
                raise UnknownTagType(f"unknown tag key type {type(other).__name__}")
    return encoded


def encode_tag_values(values: Iterable[TagValue]) -> list[dict[str, str]]:
    """Encode ad-hoc filter values, each as its own ``{"text"}`` object.

    Raises:
        UnknownTagType: If a value is not a known tag value variant.
    """
    encoded = []
    for value in values:
        match value:
            case TagStringValue(text=text):
                encoded.append({"text": text})
            case other:
                raise UnknownTagType(f"unknown tag value type {type(other).__name__}")
    return encoded

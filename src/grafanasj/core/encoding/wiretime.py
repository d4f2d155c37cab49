"""Time and duration codecs used by the SimpleJSON wire protocol.

The protocol uses two unrelated time encodings:

- Range boundaries and table time cells are RFC 3339 strings
  (``2016-10-31T06:33:44.866Z``).
- Datapoints and annotations are milliseconds since the Unix epoch.

Intervals are duration strings such as ``30s`` or ``1m30s``.

Naive datetimes are treated as UTC throughout.
"""

import math
import re
from datetime import UTC, datetime, timedelta, timezone

from grafanasj.core.errors import DecodeError
from grafanasj.core.models import DataPoint

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)

_RFC3339_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})[Tt](\d{2}):(\d{2}):(\d{2})"
    r"(?:\.(\d{1,9}))?"
    r"([Zz]|[+-]\d{2}:\d{2})"
)

_DURATION_RE = re.compile(r"([+-]?)((?:\d+(?:ms|[smhd]))+|0)")
_DURATION_PART_RE = re.compile(r"(\d+)(ms|[smhd])")
_DURATION_UNITS = {
    "ms": timedelta(milliseconds=1),
    "s": timedelta(seconds=1),
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
}


def to_aware(dt: datetime) -> datetime:
    """Return ``dt`` unchanged if it carries a timezone, else as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt


def encode_range_time(dt: datetime) -> str:
    """Encode a datetime as an RFC 3339 string.

    Fractional seconds are written with trailing zeros trimmed and omitted
    entirely when zero. UTC is written as ``Z``.
    """
    dt = to_aware(dt)
    text = (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
    )
    if dt.microsecond:
        text += "." + f"{dt.microsecond:06d}".rstrip("0")

    offset = dt.utcoffset() or timedelta(0)
    if not offset:
        return text + "Z"
    sign = "-" if offset < timedelta(0) else "+"
    minutes = abs(offset) // timedelta(minutes=1)
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


def decode_range_time(value: object) -> datetime:
    """Decode an RFC 3339 string into an aware datetime.

    Up to nine fractional digits are accepted; digits beyond microseconds
    are truncated.

    Raises:
        DecodeError: If the value is not a valid RFC 3339 timestamp.
    """
    if not isinstance(value, str):
        raise DecodeError(f"expected RFC 3339 time string, got {value!r}")
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise DecodeError(f"cannot parse {value!r} as RFC 3339 time")

    year, month, day, hour, minute, second = (int(g) for g in match.groups()[:6])
    fraction, zone = match.group(7), match.group(8)
    microsecond = int((fraction or "").ljust(6, "0")[:6])
    try:
        if zone in ("Z", "z"):
            tz = UTC
        else:
            sign = -1 if zone[0] == "-" else 1
            tz = timezone(
                sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6]))
            )
        return datetime(year, month, day, hour, minute, second, microsecond, tz)
    except ValueError as e:
        raise DecodeError(f"cannot parse {value!r} as RFC 3339 time: {e}") from e


def encode_point_time(dt: datetime) -> int:
    """Encode a datetime as whole milliseconds since the epoch.

    Sub-millisecond precision is dropped (floor).
    """
    return (to_aware(dt) - EPOCH) // _ONE_MS


def decode_point_time(value: object) -> datetime:
    """Decode milliseconds since the epoch into an aware UTC datetime.

    Floats are accepted for the legacy ``[value, time]`` pair form and are
    truncated to whole milliseconds.

    Raises:
        DecodeError: If the value is not a finite number.
    """
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise DecodeError(f"expected millisecond timestamp, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise DecodeError(f"expected finite millisecond timestamp, got {value!r}")
    try:
        return EPOCH + timedelta(milliseconds=int(value))
    except OverflowError as e:
        raise DecodeError(f"millisecond timestamp {value!r} out of range") from e


def encode_datapoint(point: DataPoint) -> list[float]:
    """Encode a datapoint in the legacy ``[value, milliseconds]`` pair form."""
    return [float(point.value), float(encode_point_time(point.time))]


def decode_datapoint(pair: object) -> DataPoint:
    """Decode a ``[value, milliseconds]`` pair.

    Raises:
        DecodeError: If the pair is not two numbers.
    """
    if not isinstance(pair, list | tuple) or len(pair) != 2:
        raise DecodeError(f"expected [value, time] pair, got {pair!r}")
    value, at = pair
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise DecodeError(f"expected numeric datapoint value, got {value!r}")
    return DataPoint(time=decode_point_time(at), value=float(value))


def encode_duration(value: timedelta) -> str:
    """Encode a timedelta as a duration string such as ``1h30m`` or ``250ms``.

    Zero components are omitted; a zero duration is ``0s``.
    """
    total_ms = value // _ONE_MS
    if total_ms == 0:
        return "0s"
    sign = "-" if total_ms < 0 else ""
    remaining = abs(total_ms)
    parts = []
    for unit, size in (("h", 3_600_000), ("m", 60_000), ("s", 1000), ("ms", 1)):
        amount, remaining = divmod(remaining, size)
        if amount:
            parts.append(f"{amount}{unit}")
    return sign + "".join(parts)


def decode_duration(value: object) -> timedelta:
    """Decode a duration string into a timedelta.

    The grammar is an optional sign followed by one or more integer
    magnitude and unit pairs, units being ``ms``, ``s``, ``m``, ``h`` and
    ``d``. A bare ``0`` is also accepted.

    Raises:
        DecodeError: If the value is not a valid duration string. Fractional
            magnitudes (``1.5h``) are invalid.
    """
    if not isinstance(value, str):
        raise DecodeError(f"expected duration string, got {value!r}")
    match = _DURATION_RE.fullmatch(value)
    if match is None:
        raise DecodeError(f"invalid duration {value!r}")

    sign, body = match.groups()
    total = timedelta(0)
    try:
        for amount, unit in _DURATION_PART_RE.findall(body):
            total += int(amount) * _DURATION_UNITS[unit]
    except OverflowError as e:
        raise DecodeError(f"duration {value!r} out of range") from e
    return -total if sign == "-" else total

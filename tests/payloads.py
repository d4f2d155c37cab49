"""Request bodies and constants shared by the test modules."""

from datetime import UTC, datetime

# Range used by Grafana's documented sample request
RANGE_FROM = datetime(2016, 10, 31, 6, 33, 44, 866000, tzinfo=UTC)
RANGE_TO = datetime(2016, 10, 31, 12, 33, 44, 866000, tzinfo=UTC)
RANGE_TO_MS = 1477917224866


def query_body(*targets: dict[str, object], **extra: object) -> dict[str, object]:
    """Build a /query request body over the sample range."""
    body: dict[str, object] = {
        "range": {
            "from": "2016-10-31T06:33:44.866Z",
            "to": "2016-10-31T12:33:44.866Z",
            "raw": {"from": "now-6h", "to": "now"},
        },
        "interval": "30s",
        "intervalMs": 30000,
        "maxDataPoints": 550,
        "targets": list(targets),
    }
    body.update(extra)
    return body


def annotations_body(query: str = "") -> dict[str, object]:
    """Build an /annotations request body covering both sample annotations."""
    return {
        "range": {"from": "1970-01-01T00:00:00Z", "to": "1970-01-01T01:00:00Z"},
        "rangeRaw": {"from": "now-1h", "to": "now"},
        "annotation": {
            "name": "query",
            "datasource": "yoursjsource",
            "query": query,
            "enable": True,
            "iconColor": "#1234",
        },
    }


ECHOED_ANNOTATION = {
    "name": "query",
    "datasource": "yoursjsource",
    "query": "",
    "enable": True,
    "iconColor": "#1234",
}

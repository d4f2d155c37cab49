"""Demo datasource shared by the example applications."""

import math
from datetime import UTC, datetime, timedelta

from grafanasj.adapters.sources.in_memory import InMemorySource
from grafanasj.core.models import (
    Annotation,
    DataPoint,
    NumberColumn,
    StringColumn,
    TableColumn,
    TimeColumn,
)


def build_demo_source(now: datetime | None = None) -> InMemorySource:
    """Create a source with a day of minutely sine waves and a few annotations."""
    now = now or datetime.now(UTC)
    source = InMemorySource()

    minutes = range(24 * 60)
    for name, host, phase in (("cpu_web1", "web-1", 0.0), ("cpu_web2", "web-2", 1.0)):
        source.add_series(
            name,
            [
                DataPoint(
                    time=now - timedelta(minutes=m),
                    value=50 + 40 * math.sin(m / 60 + phase),
                )
                for m in reversed(minutes)
            ],
            labels={"host": host},
        )

    source.add_table(
        "deploys",
        [
            TableColumn("Time", TimeColumn([now - timedelta(hours=3), now])),
            TableColumn("Version", StringColumn(["v1.4.0", "v1.5.0"])),
            TableColumn("Duration", NumberColumn([42.0, 37.5])),
        ],
    )

    source.add_annotation(
        Annotation(
            time=now - timedelta(hours=3), title="Deploy v1.4.0", tags=("deploy",)
        )
    )
    source.add_annotation(
        Annotation(
            time=now - timedelta(hours=2),
            time_end=now - timedelta(hours=1, minutes=30),
            title="Partial outage",
            text="Elevated error rate on web-2",
            tags=("outage",),
        )
    )
    source.add_tag_values("region", ["eu-west", "us-east"])
    return source

"""BDD step definitions for the SimpleJSON datasource features."""

from datetime import UTC, datetime, timedelta

import pytest
from pytest_bdd import given, parsers, then, when
from tests.features.simplejson.steps_helpers import (
    SimpleJSONScenarioContext,
    post,
    response_of,
)
from tests.payloads import RANGE_TO, annotations_body, query_body

from grafanasj.core.config import BasicAuth
from grafanasj.core.models import (
    Annotation,
    DataPoint,
    NumberColumn,
    TableColumn,
)


@pytest.fixture
def ctx() -> SimpleJSONScenarioContext:
    """Fresh scenario context for each test."""
    return SimpleJSONScenarioContext()


def _at(seconds: int) -> datetime:
    return datetime.fromtimestamp(seconds, tz=UTC)


# === Given ===
@given(parsers.parse('a series "{name}" with two points stored newest first'))
def given_series(ctx: SimpleJSONScenarioContext, name: str) -> None:
    ctx.source.add_series(
        name,
        [
            DataPoint(time=RANGE_TO, value=1500.0),
            DataPoint(time=RANGE_TO - timedelta(seconds=5), value=1234.0),
        ],
    )


@given(parsers.parse('a table "{name}" with column lengths {first:d} and {second:d}'))
def given_uneven_table(
    ctx: SimpleJSONScenarioContext, name: str, first: int, second: int
) -> None:
    ctx.source.add_table(
        name,
        [
            TableColumn("A", NumberColumn([1.0] * first)),
            TableColumn("B", NumberColumn([1.0] * second)),
        ],
    )


@given(parsers.parse('a point annotation "{title}" at {at:d} seconds'))
def given_point_annotation(
    ctx: SimpleJSONScenarioContext, title: str, at: int
) -> None:
    ctx.source.add_annotation(Annotation(time=_at(at), title=title))


@given(
    parsers.parse(
        'a region annotation "{title}" from {start:d} to {end:d} seconds '
        'tagged "{tag}"'
    )
)
def given_region_annotation(
    ctx: SimpleJSONScenarioContext, title: str, start: int, end: int, tag: str
) -> None:
    ctx.source.add_annotation(
        Annotation(time=_at(start), time_end=_at(end), title=title, tags=(tag,))
    )


@given(parsers.parse('tag "{key}" with values "{values}"'))
def given_tag_values(ctx: SimpleJSONScenarioContext, key: str, values: str) -> None:
    ctx.source.add_tag_values(key, values.split(","))


@given(
    parsers.parse(
        'the datasource requires user "{username}" with password "{password}"'
    )
)
def given_basic_auth(
    ctx: SimpleJSONScenarioContext, username: str, password: str
) -> None:
    ctx.basic_auth = BasicAuth(username, password)


# === When ===
@when(parsers.parse('Grafana queries targets "{names}"'))
def when_query_targets(ctx: SimpleJSONScenarioContext, names: str) -> None:
    targets = [{"target": name} for name in names.split(",")]
    post(ctx, "/query", query_body(*targets))


@when(parsers.parse('Grafana queries "{first}" and a target of type "{kind}"'))
def when_query_mixed(ctx: SimpleJSONScenarioContext, first: str, kind: str) -> None:
    post(ctx, "/query", query_body({"target": first}, {"target": "x", "type": kind}))


@when(parsers.parse('Grafana queries table "{name}"'))
def when_query_table(ctx: SimpleJSONScenarioContext, name: str) -> None:
    post(ctx, "/query", query_body({"target": name, "type": "table"}))


@when("Grafana requests all annotations")
def when_all_annotations(ctx: SimpleJSONScenarioContext) -> None:
    post(ctx, "/annotations", annotations_body())


@when(parsers.parse('Grafana requests annotations matching "{query}"'))
def when_annotations_matching(ctx: SimpleJSONScenarioContext, query: str) -> None:
    post(ctx, "/annotations", annotations_body(query))


@when(parsers.parse('Grafana searches for "{target}"'))
def when_search(ctx: SimpleJSONScenarioContext, target: str) -> None:
    post(ctx, "/search", {"target": target})


@when("Grafana asks for the ad-hoc filter keys")
def when_tag_keys(ctx: SimpleJSONScenarioContext) -> None:
    post(ctx, "/tag-keys", {})


@when(parsers.parse('Grafana asks for the values of tag "{key}"'))
def when_tag_values(ctx: SimpleJSONScenarioContext, key: str) -> None:
    post(ctx, "/tag-values", {"key": key})


# === Then ===
@then(parsers.parse("the response status should be {status:d}"))
def then_status(ctx: SimpleJSONScenarioContext, status: int) -> None:
    assert response_of(ctx).status_code == status


@then(parsers.parse('the response text should contain "{text}"'))
def then_text_contains(ctx: SimpleJSONScenarioContext, text: str) -> None:
    assert text in response_of(ctx).text


@then(
    parsers.parse('target "{name}" should have {count:d} datapoints in ascending order')
)
def then_sorted_datapoints(
    ctx: SimpleJSONScenarioContext, name: str, count: int
) -> None:
    entry = next(e for e in response_of(ctx).json() if e["target"] == name)
    times = [time for _value, time in entry["datapoints"]]
    assert len(times) == count
    assert times == sorted(times)


@then("no series should have been queried")
def then_nothing_queried(ctx: SimpleJSONScenarioContext) -> None:
    assert ctx.source.queried == []


@then(parsers.parse("the response should hold {count:d} annotation records"))
def then_record_count(ctx: SimpleJSONScenarioContext, count: int) -> None:
    assert len(response_of(ctx).json()) == count


@then(parsers.parse('record {index:d} should be titled "{title}" without a regionId'))
def then_point_record(ctx: SimpleJSONScenarioContext, index: int, title: str) -> None:
    record = response_of(ctx).json()[index - 1]
    assert record["title"] == title
    assert "regionId" not in record


@then(
    parsers.parse("records {first:d} and {second:d} should share regionId {region:d}")
)
def then_shared_region(
    ctx: SimpleJSONScenarioContext, first: int, second: int, region: int
) -> None:
    records = response_of(ctx).json()
    assert records[first - 1]["regionId"] == region
    assert records[second - 1]["regionId"] == region


@then(parsers.parse('the response should list "{items}"'))
def then_lists(ctx: SimpleJSONScenarioContext, items: str) -> None:
    assert response_of(ctx).json() == items.split(",")


@then(parsers.parse('the response should list texts "{texts}"'))
def then_lists_texts(ctx: SimpleJSONScenarioContext, texts: str) -> None:
    assert [item["text"] for item in response_of(ctx).json()] == texts.split(",")


@then(parsers.parse('the response should challenge with realm "{realm}"'))
def then_challenge(ctx: SimpleJSONScenarioContext, realm: str) -> None:
    header = response_of(ctx).headers["www-authenticate"]
    assert header == f'Basic realm="{realm}"'

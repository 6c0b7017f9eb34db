"""Tests for legend normalization."""

from tsgraph.models import MetricSpec, QueryRequest
from tsgraph.query import QueryWindow, normalize_legend, parse_response


def test_single_metric_without_tags_uses_metric_name():
    legend = normalize_legend(["cpu.load "], [MetricSpec(name="cpu.load")])

    assert legend == {"cpu.load ": "cpu.load"}


def test_single_metric_keeps_only_filtered_tags():
    metrics = [MetricSpec(name="cpu.load", tags=["host=*"])]

    legend = normalize_legend(["cpu.load dc=east host=web1", "cpu.load dc=east host=web2"], metrics)

    assert legend == {
        "cpu.load dc=east host=web1": "host=web1",
        "cpu.load dc=east host=web2": "host=web2",
    }


def test_multiple_metrics_prefix_metric_name():
    metrics = [MetricSpec(name="cpu.load"), MetricSpec(name="mem.used")]

    legend = normalize_legend(["cpu.load ", "mem.used host=web1"], metrics)

    assert legend == {"cpu.load ": "cpu.load", "mem.used host=web1": "mem.used"}


def test_multiple_metrics_with_tags():
    metrics = [MetricSpec(name="cpu.load", tags=["host=web1"]), MetricSpec(name="mem.used", tags=["dc=*"])]

    legend = normalize_legend(["cpu.load host=web1 dc=east", "mem.used dc=east host=web1"], metrics)

    assert legend == {
        "cpu.load host=web1 dc=east": "cpu.load host=web1",
        "mem.used dc=east host=web1": "mem.used dc=east",
    }


def test_unknown_metric_gets_empty_tag_legend():
    metrics = [MetricSpec(name="cpu.load", tags=["host=*"])]

    legend = normalize_legend(["other.metric host=web1"], metrics)

    assert legend == {"other.metric host=web1": "other.metric"}


def test_unmatched_tags_yield_empty_legend():
    metrics = [MetricSpec(name="cpu.load", tags=["host=*"])]

    legend = normalize_legend(["cpu.load dc=east"], metrics)

    assert legend == {"cpu.load dc=east": ""}


def test_legend_covers_every_parsed_series():
    request = QueryRequest(metrics=[MetricSpec(name="cpu.load", tags=["host=*"]), MetricSpec(name="mem.used")])
    payload = "\n".join(
        [
            "cpu.load 100 1 host=a",
            "cpu.load 100 1 host=b",
            "mem.used 100 5 host=a",
            "mem.used 100 5",
            "unrequested 100 1 x=y",
        ]
    )

    graph_data = parse_response(payload, request, QueryWindow(start=0, end=1000))
    legend = normalize_legend(list(graph_data), request.metrics)

    assert set(legend) == set(graph_data)

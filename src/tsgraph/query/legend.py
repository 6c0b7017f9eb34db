"""Legend normalization: shorten raw series keys into readable graph labels."""

from __future__ import annotations

from tsgraph.logger import logger
from tsgraph.models import MetricSpec


def normalize_legend(raw_legends: list[str], metrics: list[MetricSpec]) -> dict[str, str]:
    """Reduce series keys to the tags that distinguish the requested series.

    Only tags the metric was explicitly filtered on are kept; anything else
    OpenTSDB reports for the series is dropped. With more than one metric in
    the query every label starts with its metric name.

    Args:
        raw_legends: Series keys as produced by the parser
        metrics: Requested metrics

    Returns:
        Mapping of every series key to its label.
    """
    query_metrics_tags: dict[str, list[str]] = {}
    for metric in metrics:
        query_metrics_tags[metric.name] = metric.tag_names

    save_metric_names = len(query_metrics_tags) > 1

    logger.debug(f"Normalizing legend for {len(raw_legends)} series, metrics: {', '.join(query_metrics_tags)}")

    legends: dict[str, str] = {}
    for series in raw_legends:
        metric_name, *tags = series.split(" ")
        filter_tags = query_metrics_tags.get(metric_name, [])

        if not filter_tags and not save_metric_names:
            legends[series] = metric_name
            continue

        parts = [metric_name] if save_metric_names else []
        parts.extend(tag for tag in tags if tag.split("=", 1)[0] in filter_tags)
        legends[series] = " ".join(parts).strip()

    return legends

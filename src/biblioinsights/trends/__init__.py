"""Topic trend analysis over two publication windows.

Pipeline: aggregate works per topic and window, compute growth ratios and
relative deltas, label each topic with the first matching insight rule,
then rank rows with a total order that tolerates infinite deltas.
"""

from biblioinsights.trends.aggregate import aggregate_period, aggregate_topics
from biblioinsights.trends.classifier import (
    INSIGHT_RULES,
    GrowthContext,
    InsightRule,
    classify,
    first_matching_rule,
)
from biblioinsights.trends.config import InsightsConfig, load_insights_config
from biblioinsights.trends.growth import (
    classify_metric_change,
    format_delta,
    growth_ratio,
    relative_delta,
)
from biblioinsights.trends.models import (
    InsightLabel,
    MetricTrend,
    Period,
    TopicInsight,
    TopicWindow,
)
from biblioinsights.trends.query import (
    build_insights,
    filter_insights,
    resolve_periods,
    resolve_query_periods,
)
from biblioinsights.trends.ranking import (
    SortKey,
    compare_values,
    rank_key,
    sort_insights,
    sort_values,
)
from biblioinsights.trends.summary import TopicCoverage, tally_labels, topic_coverage
from biblioinsights.trends.thresholds import InsightThresholds

__all__ = [
    "INSIGHT_RULES",
    "GrowthContext",
    "InsightLabel",
    "InsightRule",
    "InsightThresholds",
    "InsightsConfig",
    "MetricTrend",
    "Period",
    "SortKey",
    "TopicCoverage",
    "TopicInsight",
    "TopicWindow",
    "aggregate_period",
    "aggregate_topics",
    "build_insights",
    "classify",
    "classify_metric_change",
    "compare_values",
    "filter_insights",
    "first_matching_rule",
    "format_delta",
    "growth_ratio",
    "load_insights_config",
    "rank_key",
    "relative_delta",
    "resolve_periods",
    "resolve_query_periods",
    "sort_insights",
    "sort_values",
    "tally_labels",
    "topic_coverage",
]

"""Period aggregation and analytics over normalized price series."""

from .heatmap import HeatmapMatrix, build_heatmap
from .insights import Insights, summarize
from .periods import AggregatedPeriod, Granularity, PeriodKey, aggregate
from .ranges import DateRange, filter_by_range
from .report import TrendReport, build_trend_report

__all__ = [
    "AggregatedPeriod",
    "DateRange",
    "Granularity",
    "HeatmapMatrix",
    "Insights",
    "PeriodKey",
    "TrendReport",
    "aggregate",
    "build_heatmap",
    "build_trend_report",
    "filter_by_range",
    "summarize",
]

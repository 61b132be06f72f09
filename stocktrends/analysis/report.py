"""Aggregate → filter → {insights, heatmap} for one fetched series."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from stocktrends.analysis.heatmap import HeatmapMatrix, build_heatmap
from stocktrends.analysis.insights import Insights, summarize
from stocktrends.analysis.periods import AggregatedPeriod, Granularity, aggregate, parse_granularity
from stocktrends.analysis.ranges import DateRange, filter_by_range, parse_range
from stocktrends.marketdata.gateway import RawSeries


@dataclass(frozen=True)
class TrendReport:
    symbol: str
    source: str
    timeframe: Granularity
    date_range: DateRange
    periods: tuple[AggregatedPeriod, ...]
    insights: Insights | None
    heatmap: HeatmapMatrix

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "source": self.source,
            "timeframe": self.timeframe.value,
            "range": self.date_range.value,
            "periods": [p.to_dict() for p in self.periods],
            "insights": self.insights.to_dict() if self.insights else None,
            "heatmap": self.heatmap.to_dict(),
        }


def build_trend_report(
    series: RawSeries,
    timeframe: str | Granularity = Granularity.MONTHLY,
    date_range: str | DateRange = DateRange.FIVE_YEARS,
    *,
    today: date | None = None,
    strict: bool = False,
) -> TrendReport:
    gran = parse_granularity(timeframe)
    window = parse_range(date_range)

    periods = filter_by_range(
        aggregate(series.bars, gran).values(),
        window,
        today=today,
        strict=strict,
    )
    return TrendReport(
        symbol=series.symbol,
        source=series.source,
        timeframe=gran,
        date_range=window,
        periods=tuple(periods),
        insights=summarize(periods) if periods else None,
        heatmap=build_heatmap(periods, strict=strict),
    )

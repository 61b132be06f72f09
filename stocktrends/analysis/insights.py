"""Count and return statistics over an aggregated period list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from stocktrends.analysis.periods import AggregatedPeriod
from stocktrends.errors import EmptyInput
from stocktrends.utils import round2


@dataclass(frozen=True)
class Insights:
    bullish_count: int
    bearish_count: int
    avg_return: float
    total_return: float
    best: AggregatedPeriod
    worst: AggregatedPeriod

    def to_dict(self) -> dict[str, Any]:
        return {
            "bullishCount": self.bullish_count,
            "bearishCount": self.bearish_count,
            "avgReturn": self.avg_return,
            "totalReturn": self.total_return,
            "best": self.best.to_dict(),
            "worst": self.worst.to_dict(),
        }


def summarize(periods: Sequence[AggregatedPeriod]) -> Insights:
    """Summarize *periods*, which must be in chronological order.

    Flat periods (0%) count as neither bullish nor bearish. Ties for best
    and worst go to the earliest period.
    """
    if not periods:
        raise EmptyInput("Cannot summarize an empty period list")

    best = worst = periods[0]
    for p in periods[1:]:
        if p.change_percent > best.change_percent:
            best = p
        if p.change_percent < worst.change_percent:
            worst = p

    first, last = periods[0], periods[-1]
    return Insights(
        bullish_count=sum(1 for p in periods if p.change_percent > 0),
        bearish_count=sum(1 for p in periods if p.change_percent < 0),
        avg_return=round2(sum(p.change_percent for p in periods) / len(periods)),
        total_return=round2((last.close - first.open) / first.open * 100),
        best=best,
        worst=worst,
    )

"""Year × period-index matrix for heatmap rendering.

Rows are period indices (months 1-12, quarters 1-4, weeks 1-5, or 0 for
yearly buckets); columns are years. Each year also gets a total: the mean
percentage over the cells that are present and their summed dollar change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

from stocktrends.analysis.periods import AggregatedPeriod, Granularity, PeriodKey
from stocktrends.errors import InvalidPeriodKey
from stocktrends.utils import round2

logger = logging.getLogger(__name__)


class HeatBucket(str, Enum):
    STRONG_GAIN = "strong_gain"
    GAIN = "gain"
    SLIGHT_GAIN = "slight_gain"
    SLIGHT_LOSS = "slight_loss"
    LOSS = "loss"
    STRONG_LOSS = "strong_loss"
    NO_DATA = "no_data"


# (lower bound inclusive, bucket), checked top to bottom; below all → STRONG_LOSS.
CELL_THRESHOLDS: tuple[tuple[float, HeatBucket], ...] = (
    (10.0, HeatBucket.STRONG_GAIN),
    (5.0, HeatBucket.GAIN),
    (0.0, HeatBucket.SLIGHT_GAIN),
    (-5.0, HeatBucket.SLIGHT_LOSS),
    (-10.0, HeatBucket.LOSS),
)
TOTAL_THRESHOLDS: tuple[tuple[float, HeatBucket], ...] = CELL_THRESHOLDS

CELL_PALETTE: dict[HeatBucket, str] = {
    HeatBucket.STRONG_GAIN: "bg-green-700",
    HeatBucket.GAIN: "bg-green-600",
    HeatBucket.SLIGHT_GAIN: "bg-green-400",
    HeatBucket.SLIGHT_LOSS: "bg-red-400",
    HeatBucket.LOSS: "bg-red-600",
    HeatBucket.STRONG_LOSS: "bg-red-700",
    HeatBucket.NO_DATA: "bg-gray-100",
}
TOTAL_PALETTE: dict[HeatBucket, str] = {
    HeatBucket.STRONG_GAIN: "bg-green-200",
    HeatBucket.GAIN: "bg-green-100",
    HeatBucket.SLIGHT_GAIN: "bg-green-50",
    HeatBucket.SLIGHT_LOSS: "bg-red-50",
    HeatBucket.LOSS: "bg-red-100",
    HeatBucket.STRONG_LOSS: "bg-red-200",
    HeatBucket.NO_DATA: "bg-yellow-100",
}

_MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _classify(percent: float | None, thresholds: Sequence[tuple[float, HeatBucket]]) -> HeatBucket:
    if percent is None:
        return HeatBucket.NO_DATA
    for bound, bucket in thresholds:
        if percent >= bound:
            return bucket
    return HeatBucket.STRONG_LOSS


def classify_cell(percent: float | None) -> HeatBucket:
    return _classify(percent, CELL_THRESHOLDS)


def classify_total(percent: float | None) -> HeatBucket:
    return _classify(percent, TOTAL_THRESHOLDS)


def timeframe_of(periods: Sequence[AggregatedPeriod]) -> Granularity:
    """Granularity of the first decodable key; monthly when none decode."""
    for item in periods:
        try:
            return PeriodKey.decode(item.period).granularity
        except InvalidPeriodKey:
            continue
    return Granularity.MONTHLY


def period_label(index: int, granularity: Granularity) -> str:
    if granularity is Granularity.YEARLY:
        return "Year"
    if granularity is Granularity.QUARTERLY:
        return f"Q{index}"
    if granularity is Granularity.WEEKLY:
        return f"W{index}"
    if 1 <= index <= 12:
        return _MONTH_NAMES[index - 1]
    return str(index)


@dataclass(frozen=True)
class YearTotal:
    avg_percent: float
    total_dollar: float
    count: int

    def to_dict(self) -> dict[str, Any]:
        bucket = classify_total(self.avg_percent)
        return {
            "avgPercent": self.avg_percent,
            "totalDollar": self.total_dollar,
            "count": self.count,
            "bucket": bucket.value,
            "color": TOTAL_PALETTE[bucket],
        }


@dataclass(frozen=True)
class HeatmapMatrix:
    timeframe: Granularity
    years: tuple[int, ...]
    period_indices: tuple[int, ...]
    cells: dict[tuple[int, int], AggregatedPeriod] = field(default_factory=dict)
    year_totals: dict[int, YearTotal] = field(default_factory=dict)

    def cell(self, year: int, index: int) -> AggregatedPeriod | None:
        return self.cells.get((year, index))

    def to_dict(self) -> dict[str, Any]:
        rows = []
        for index in self.period_indices:
            row_cells = []
            for year in self.years:
                item = self.cell(year, index)
                bucket = classify_cell(item.change_percent if item else None)
                row_cells.append({
                    "year": year,
                    "bucket": bucket.value,
                    "color": CELL_PALETTE[bucket],
                    "period": item.to_dict() if item else None,
                })
            rows.append({
                "index": index,
                "label": period_label(index, self.timeframe),
                "cells": row_cells,
            })
        return {
            "timeframe": self.timeframe.value,
            "years": list(self.years),
            "periodIndices": list(self.period_indices),
            "rows": rows,
            "totals": {str(y): self.year_totals[y].to_dict() for y in self.years},
        }


def build_heatmap(periods: Sequence[AggregatedPeriod], *, strict: bool = False) -> HeatmapMatrix:
    """Reshape *periods* into a year × period-index grid.

    Keys that cannot be decoded are left out of the grid unless *strict*
    is set. A later period with the same (year, index) replaces an earlier one.
    """
    cells: dict[tuple[int, int], AggregatedPeriod] = {}
    for item in periods:
        try:
            key = PeriodKey.decode(item.period)
        except InvalidPeriodKey:
            if strict:
                raise
            logger.debug("Skipping undecodable period key %r", item.period)
            continue
        cells[(key.year, key.index)] = item

    years = tuple(sorted({y for y, _ in cells}))
    indices = tuple(sorted({i for _, i in cells}))

    totals: dict[int, YearTotal] = {}
    for year in years:
        present = [cells[(year, i)] for i in indices if (year, i) in cells]
        totals[year] = YearTotal(
            avg_percent=round2(sum(p.change_percent for p in present) / len(present)),
            total_dollar=round2(sum(p.change for p in present)),
            count=len(present),
        )

    return HeatmapMatrix(
        timeframe=timeframe_of(periods),
        years=years,
        period_indices=indices,
        cells=cells,
        year_totals=totals,
    )

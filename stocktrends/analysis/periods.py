"""Calendar bucketing of ascending bar sequences.

:class:`PeriodKey` is the single codec for the period tags used across the
package (``2023``, ``2023-07``, ``2023-Q2``, ``2023-W3``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterable

from stocktrends.errors import InvalidPeriodKey, InvalidRequest
from stocktrends.marketdata.normalize import OHLCBar
from stocktrends.utils import round2


class Granularity(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


def parse_granularity(token: str | Granularity) -> Granularity:
    try:
        return Granularity(token)
    except ValueError:
        choices = ", ".join(g.value for g in Granularity)
        raise InvalidRequest(f"Unknown timeframe {token!r}; expected one of {choices}") from None


# Valid suffix ranges per granularity.
_INDEX_BOUNDS = {
    Granularity.WEEKLY: (1, 5),
    Granularity.MONTHLY: (1, 12),
    Granularity.QUARTERLY: (1, 4),
    Granularity.YEARLY: (0, 0),
}


@dataclass(frozen=True)
class PeriodKey:
    year: int
    granularity: Granularity
    index: int = 0

    def __post_init__(self) -> None:
        lo, hi = _INDEX_BOUNDS[self.granularity]
        if not lo <= self.index <= hi:
            raise InvalidPeriodKey(f"{self.year}:{self.granularity.value}:{self.index}")

    @classmethod
    def for_date(cls, day: date, granularity: Granularity) -> PeriodKey:
        if granularity is Granularity.WEEKLY:
            return cls(day.year, granularity, math.ceil(day.day / 7))
        if granularity is Granularity.MONTHLY:
            return cls(day.year, granularity, day.month)
        if granularity is Granularity.QUARTERLY:
            return cls(day.year, granularity, (day.month - 1) // 3 + 1)
        return cls(day.year, Granularity.YEARLY, 0)

    def encode(self) -> str:
        if self.granularity is Granularity.WEEKLY:
            return f"{self.year}-W{self.index}"
        if self.granularity is Granularity.MONTHLY:
            return f"{self.year}-{self.index:02d}"
        if self.granularity is Granularity.QUARTERLY:
            return f"{self.year}-Q{self.index}"
        return str(self.year)

    def __str__(self) -> str:
        return self.encode()

    @classmethod
    def decode(cls, text: str) -> PeriodKey:
        """Parse a period tag; raises InvalidPeriodKey on anything else."""
        parts = (text or "").split("-")
        if len(parts) > 2 or not _is_year(parts[0]):
            raise InvalidPeriodKey(text)
        year = int(parts[0])
        if len(parts) == 1:
            return cls(year, Granularity.YEARLY, 0)

        suffix = parts[1]
        if suffix[:1] in ("Q", "W"):
            granularity = Granularity.QUARTERLY if suffix[0] == "Q" else Granularity.WEEKLY
            digits = suffix[1:]
        else:
            granularity = Granularity.MONTHLY
            digits = suffix
        if not digits.isdigit():
            raise InvalidPeriodKey(text)
        try:
            return cls(year, granularity, int(digits))
        except InvalidPeriodKey:
            raise InvalidPeriodKey(text) from None

    @property
    def start_date(self) -> date:
        """First calendar day covered by the key.

        Weekly keys carry no month, so they resolve to January 1st.
        """
        if self.granularity is Granularity.MONTHLY:
            return date(self.year, self.index, 1)
        if self.granularity is Granularity.QUARTERLY:
            return date(self.year, (self.index - 1) * 3 + 1, 1)
        return date(self.year, 1, 1)


def _is_year(text: str) -> bool:
    return len(text) == 4 and text.isdigit() and int(text) >= 1


@dataclass(frozen=True)
class AggregatedPeriod:
    period: str
    open: float
    close: float
    change: float
    change_percent: float

    @classmethod
    def from_bars(cls, period: str, first: OHLCBar, last: OHLCBar) -> AggregatedPeriod:
        change = last.close - first.open
        return cls(
            period=period,
            open=first.open,
            close=last.close,
            change=change,
            change_percent=round2(change / first.open * 100),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "period": self.period,
            "open": self.open,
            "close": self.close,
            "change": self.change,
            "changePercent": self.change_percent,
        }


def aggregate(
    bars: Iterable[OHLCBar],
    granularity: str | Granularity,
) -> dict[str, AggregatedPeriod]:
    """Group *bars* into calendar buckets, keyed by encoded PeriodKey.

    Bars are taken in the order given; the first bar seen in a bucket
    supplies its open and the last its close. Buckets come out in the order
    they were first encountered.
    """
    gran = parse_granularity(granularity)
    edges: dict[str, list[OHLCBar]] = {}
    for bar in bars:
        key = PeriodKey.for_date(bar.date, gran).encode()
        edge = edges.get(key)
        if edge is None:
            edges[key] = [bar, bar]
        else:
            edge[1] = bar
    return {key: AggregatedPeriod.from_bars(key, first, last) for key, (first, last) in edges.items()}

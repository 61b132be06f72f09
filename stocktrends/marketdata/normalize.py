"""Provider payload adapters.

Each upstream API returns monthly bars in its own shape. The functions here
turn one raw JSON payload into the canonical ascending list of
:class:`OHLCBar`, so field-naming quirks never leak past this module.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Iterable

logger = logging.getLogger(__name__)

ALPHA_VANTAGE_SERIES_KEY = "Monthly Time Series"
_ALPHA_VANTAGE_FIELDS = ("1. open", "2. high", "3. low", "4. close")


@dataclass(frozen=True)
class OHLCBar:
    date: date
    open: float
    high: float
    low: float
    close: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }


def _price(v: Any) -> float | None:
    try:
        out = float(v)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(out) or out <= 0:
        return None
    return out


def _make_bar(day: date, o: Any, h: Any, lo: Any, c: Any) -> OHLCBar | None:
    prices = [_price(v) for v in (o, h, lo, c)]
    if any(p is None for p in prices):
        return None
    return OHLCBar(day, *prices)


def _ascending(bars: Iterable[OHLCBar]) -> list[OHLCBar]:
    """Sort by date; a repeated date keeps the last row seen."""
    by_day: dict[date, OHLCBar] = {}
    for bar in bars:
        by_day[bar.date] = bar
    return [by_day[d] for d in sorted(by_day)]


def _epoch_to_date(seconds: float) -> date:
    return datetime.fromtimestamp(seconds, tz=timezone.utc).date()


def from_polygon(payload: dict[str, Any]) -> list[OHLCBar]:
    """``/v2/aggs`` results: ``t`` is epoch milliseconds, ``o/h/l/c`` prices."""
    rows = payload.get("results") or []
    bars: list[OHLCBar] = []
    skipped = 0
    for row in rows:
        try:
            day = _epoch_to_date(float(row["t"]) / 1000.0)
        except (KeyError, TypeError, ValueError, OverflowError, OSError):
            skipped += 1
            continue
        bar = _make_bar(day, row.get("o"), row.get("h"), row.get("l"), row.get("c"))
        if bar is None:
            skipped += 1
            continue
        bars.append(bar)
    if skipped:
        logger.debug("polygon: skipped %d malformed rows", skipped)
    return _ascending(bars)


def from_alpha_vantage(payload: dict[str, Any]) -> list[OHLCBar]:
    """``TIME_SERIES_MONTHLY``: a date-keyed map, newest first."""
    series = payload.get(ALPHA_VANTAGE_SERIES_KEY) or {}
    bars: list[OHLCBar] = []
    skipped = 0
    for day_str, values in series.items():
        try:
            day = date.fromisoformat(day_str)
        except (TypeError, ValueError):
            skipped += 1
            continue
        if not isinstance(values, dict):
            skipped += 1
            continue
        bar = _make_bar(day, *(values.get(f) for f in _ALPHA_VANTAGE_FIELDS))
        if bar is None:
            skipped += 1
            continue
        bars.append(bar)
    if skipped:
        logger.debug("alpha_vantage: skipped %d malformed rows", skipped)
    return _ascending(bars)


def from_finnhub(payload: dict[str, Any]) -> list[OHLCBar]:
    """``/stock/candle``: parallel ``t/o/h/l/c`` arrays, epoch seconds."""
    ts = payload.get("t") or []
    opens = payload.get("o") or []
    highs = payload.get("h") or []
    lows = payload.get("l") or []
    closes = payload.get("c") or []
    if ts and payload.get("s") != "ok":
        logger.debug("finnhub: status %r with %d candles", payload.get("s"), len(ts))

    bars: list[OHLCBar] = []
    for t, o, h, lo, c in zip(ts, opens, highs, lows, closes):
        try:
            day = _epoch_to_date(float(t))
        except (TypeError, ValueError, OverflowError, OSError):
            continue
        bar = _make_bar(day, o, h, lo, c)
        if bar is not None:
            bars.append(bar)
    return _ascending(bars)

"""Trailing-window filter over aggregated periods."""

from __future__ import annotations

import logging
from datetime import date
from enum import Enum
from typing import Iterable

from stocktrends.analysis.periods import AggregatedPeriod, PeriodKey
from stocktrends.errors import InvalidPeriodKey, InvalidRequest
from stocktrends.utils import utc_today, years_before

logger = logging.getLogger(__name__)


class DateRange(str, Enum):
    ONE_YEAR = "1y"
    THREE_YEARS = "3y"
    FIVE_YEARS = "5y"
    TEN_YEARS = "10y"
    ALL = "all"

    @property
    def years(self) -> int | None:
        if self is DateRange.ALL:
            return None
        return int(self.value[:-1])


def parse_range(token: str | DateRange) -> DateRange:
    try:
        return DateRange(token)
    except ValueError:
        choices = ", ".join(r.value for r in DateRange)
        raise InvalidRequest(f"Unknown range {token!r}; expected one of {choices}") from None


def range_cutoff(token: str | DateRange, today: date | None = None) -> date | None:
    years = parse_range(token).years
    if years is None:
        return None
    return years_before(today or utc_today(), years)


def filter_by_range(
    periods: Iterable[AggregatedPeriod],
    range_token: str | DateRange,
    *,
    today: date | None = None,
    strict: bool = False,
) -> list[AggregatedPeriod]:
    """Keep periods starting on or after ``today - N years``.

    A period whose key cannot be decoded is kept unless *strict* is set, in
    which case InvalidPeriodKey propagates.
    """
    cutoff = range_cutoff(range_token, today)
    if cutoff is None:
        return list(periods)

    kept: list[AggregatedPeriod] = []
    for item in periods:
        try:
            start = PeriodKey.decode(item.period).start_date
        except InvalidPeriodKey:
            if strict:
                raise
            logger.debug("Keeping undecodable period key %r", item.period)
            kept.append(item)
            continue
        if start >= cutoff:
            kept.append(item)
    return kept

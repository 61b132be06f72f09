"""Price history endpoints — raw monthly bars and the derived trend report."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from stocktrends.analysis.periods import parse_granularity
from stocktrends.analysis.ranges import parse_range
from stocktrends.analysis.report import build_trend_report
from stocktrends.api.deps import get_app_settings, get_gateway
from stocktrends.config import Settings
from stocktrends.errors import InvalidRequest
from stocktrends.marketdata import MarketDataGateway

router = APIRouter(tags=["stock-data"])


def _require_symbol(symbol: str | None) -> str:
    if not symbol or not symbol.strip():
        raise InvalidRequest("Symbol is required")
    return symbol


@router.get("/stock-data")
async def stock_data(
    symbol: str | None = None,
    gateway: MarketDataGateway = Depends(get_gateway),
):
    series = await gateway.fetch(_require_symbol(symbol))
    return series.to_dict()


@router.get("/stock-trends")
async def stock_trends(
    symbol: str | None = None,
    timeframe: str = "monthly",
    date_range: str = Query("5y", alias="range"),
    gateway: MarketDataGateway = Depends(get_gateway),
    settings: Settings = Depends(get_app_settings),
):
    symbol = _require_symbol(symbol)
    # Reject bad options before spending provider calls.
    gran = parse_granularity(timeframe)
    window = parse_range(date_range)

    series = await gateway.fetch(symbol)
    report = build_trend_report(series, gran, window, strict=settings.strict_period_keys)
    return report.to_dict()

"""Stock Trends — CLI entrypoint.

Serve the API or print a one-off trend report::

    python -m stocktrends.main --server
    python -m stocktrends.main --symbol AAPL --timeframe monthly --range 5y
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from stocktrends import __version__
from stocktrends.analysis.periods import Granularity
from stocktrends.analysis.ranges import DateRange
from stocktrends.analysis.report import build_trend_report
from stocktrends.config import get_settings
from stocktrends.errors import StockTrendsError
from stocktrends.marketdata import MarketDataGateway
from stocktrends.utils import setup_logging

logger = logging.getLogger("stocktrends")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stocktrends",
        description="Stock Trends — period heatmaps from multi-provider price history",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--server", action="store_true", help="Run the FastAPI server")
    mode.add_argument("--symbol", help="Fetch SYMBOL and print its trend report as JSON")

    parser.add_argument(
        "--timeframe",
        default=Granularity.MONTHLY.value,
        choices=[g.value for g in Granularity],
    )
    parser.add_argument(
        "--range",
        dest="date_range",
        default=DateRange.FIVE_YEARS.value,
        choices=[r.value for r in DateRange],
    )
    parser.add_argument("--raw", action="store_true", help="Print the fetched bars instead of the report")
    return parser


async def _report(args: argparse.Namespace) -> int:
    settings = get_settings()
    gateway = MarketDataGateway(settings)
    try:
        series = await gateway.fetch(args.symbol)
    except StockTrendsError as exc:
        print(json.dumps(exc.to_payload(), indent=2))
        return 1

    if args.raw:
        payload = series.to_dict()
    else:
        report = build_trend_report(
            series,
            args.timeframe,
            args.date_range,
            strict=settings.strict_period_keys,
        )
        payload = report.to_dict()
    print(json.dumps(payload, indent=2))
    return 0


async def _serve() -> None:
    import uvicorn
    from stocktrends.api.app import create_app

    settings = get_settings()
    config = uvicorn.Config(
        create_app(),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings.log_level)

    try:
        if args.server:
            asyncio.run(_serve())
        else:
            sys.exit(asyncio.run(_report(args)))
    except KeyboardInterrupt:
        logger.info("Interrupted — shutting down")


if __name__ == "__main__":
    main()

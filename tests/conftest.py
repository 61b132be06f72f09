from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Callable

import httpx
import pytest

from stocktrends.config import Settings
from stocktrends.marketdata import MarketDataGateway, OHLCBar

POLYGON_HOST = "api.polygon.io"
ALPHA_VANTAGE_HOST = "www.alphavantage.co"
FINNHUB_HOST = "finnhub.io"


def _month_starts(n: int, start_year: int = 2020) -> list[datetime]:
    return [
        datetime(start_year + i // 12, i % 12 + 1, 1, tzinfo=timezone.utc)
        for i in range(n)
    ]


def polygon_payload(n: int, start_year: int = 2020) -> dict[str, Any]:
    results = [
        {
            "t": int(ts.timestamp() * 1000),
            "o": 100.0 + i,
            "h": 110.0 + i,
            "l": 95.0 + i,
            "c": 105.0 + i,
            "v": 1_000_000,
        }
        for i, ts in enumerate(_month_starts(n, start_year))
    ]
    return {"status": "OK", "resultsCount": n, "results": results}


def alpha_vantage_payload(n: int, start_year: int = 2015) -> dict[str, Any]:
    series = {}
    # Alpha Vantage lists the newest month first.
    for i, ts in reversed(list(enumerate(_month_starts(n, start_year)))):
        series[ts.date().replace(day=28).isoformat()] = {
            "1. open": f"{50.0 + i:.4f}",
            "2. high": f"{60.0 + i:.4f}",
            "3. low": f"{45.0 + i:.4f}",
            "4. close": f"{55.0 + i:.4f}",
            "5. volume": "123456",
        }
    return {"Meta Data": {"2. Symbol": "TEST"}, "Monthly Time Series": series}


def finnhub_payload(n: int, start_year: int = 2021) -> dict[str, Any]:
    stamps = _month_starts(n, start_year)
    return {
        "s": "ok",
        "t": [int(ts.timestamp()) for ts in stamps],
        "o": [20000.0 + i for i in range(n)],
        "h": [21000.0 + i for i in range(n)],
        "l": [19000.0 + i for i in range(n)],
        "c": [20500.0 + i for i in range(n)],
        "v": [10.0] * n,
    }


class FakeProviders:
    """httpx handler answering per upstream host and recording every request."""

    def __init__(self, **by_host: Any) -> None:
        self.by_host = by_host
        self.requests: list[httpx.Request] = []

    @property
    def hosts(self) -> list[str]:
        return [r.url.host for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        answer = self.by_host.get(request.url.host)
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, httpx.Response):
            return answer
        if answer is None:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(200, json=answer)


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {
        "polygon_api_key": "poly-key",
        "alpha_vantage_api_key": "av-key",
        "finnhub_api_key": "fh-key",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def fake_providers() -> Callable[..., FakeProviders]:
    return FakeProviders


@pytest.fixture
def gateway_factory() -> Callable[..., MarketDataGateway]:
    def _make(providers: FakeProviders, **settings: Any) -> MarketDataGateway:
        return MarketDataGateway(make_settings(**settings), transport=httpx.MockTransport(providers))

    return _make


@pytest.fixture
def payloads() -> dict[str, Callable[..., dict[str, Any]]]:
    return {
        POLYGON_HOST: polygon_payload,
        ALPHA_VANTAGE_HOST: alpha_vantage_payload,
        FINNHUB_HOST: finnhub_payload,
    }


@pytest.fixture
def bar() -> Callable[..., OHLCBar]:
    def _bar(day: str, open_: float, close: float) -> OHLCBar:
        return OHLCBar(
            date=date.fromisoformat(day),
            open=open_,
            high=max(open_, close) + 1.0,
            low=min(open_, close) - 1.0,
            close=close,
        )

    return _bar


@pytest.fixture
def settings_factory() -> Callable[..., Settings]:
    return make_settings

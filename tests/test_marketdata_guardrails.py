from __future__ import annotations

from pathlib import Path

import pytest

from stocktrends.marketdata import MarketDataGateway


def test_no_outbound_http_outside_gateway() -> None:
    root = Path(__file__).resolve().parents[1] / "stocktrends"
    allow = {(root / "marketdata" / "gateway.py").resolve()}
    offenders: list[str] = []
    for p in root.rglob("*.py"):
        if p.resolve() in allow or "__pycache__" in p.parts:
            continue
        text = p.read_text(encoding="utf-8", errors="ignore")
        if "import httpx" in text or "import requests" in text:
            offenders.append(str(p.relative_to(root)))
    assert offenders == [], f"Direct HTTP client imports found outside gateway: {offenders}"


def test_provider_order_is_fixed(settings_factory) -> None:  # noqa: ANN001
    gw = MarketDataGateway(settings_factory())
    assert [step.name for step in gw.provider_chain()] == ["Polygon.io", "Alpha Vantage", "Finnhub"]


@pytest.mark.asyncio
async def test_calls_are_sequential(fake_providers, gateway_factory, payloads) -> None:  # noqa: ANN001
    providers = fake_providers(**{
        "api.polygon.io": payloads["api.polygon.io"](3),
        "www.alphavantage.co": {"Monthly Time Series": {}},
        "finnhub.io": payloads["finnhub.io"](5),
    })
    series = await gateway_factory(providers).fetch("ETHUSD")
    assert providers.hosts == ["api.polygon.io", "www.alphavantage.co", "finnhub.io"]
    assert series.fallback_chain == (
        "Polygon.io:shallow_3",
        "Alpha Vantage:no_data",
        "Finnhub:ok",
    )

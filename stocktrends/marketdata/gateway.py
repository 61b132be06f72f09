"""Historical price gateway with ordered provider fallback.

Providers are tried strictly in sequence. Each one is described by a
:class:`ProviderStep` whose acceptance predicate decides whether its bars are
returned or the chain moves on to the next provider.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable
from urllib.parse import quote

import httpx

from stocktrends.config import Settings, get_settings
from stocktrends.errors import (
    InvalidRequest,
    MisconfiguredProvider,
    NotFound,
    ProviderUnavailable,
)
from stocktrends.marketdata.normalize import (
    OHLCBar,
    from_alpha_vantage,
    from_finnhub,
    from_polygon,
)
from stocktrends.utils import to_epoch, utc_now, years_before

logger = logging.getLogger(__name__)

POLYGON = "Polygon.io"
ALPHA_VANTAGE = "Alpha Vantage"
FINNHUB = "Finnhub"

_POLYGON_AGGS_URL = "https://api.polygon.io/v2/aggs/ticker"
_ALPHA_VANTAGE_URL = "https://www.alphavantage.co/query"
_FINNHUB_BASE = "https://finnhub.io/api/v1"

_CRYPTO_MARKERS = ("USD", "BTC", "ETH")


@dataclass(frozen=True)
class RawSeries:
    symbol: str
    source: str
    bars: tuple[OHLCBar, ...]
    fallback_chain: tuple[str, ...] = ()

    @property
    def count(self) -> int:
        return len(self.bars)

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "data": [b.to_dict() for b in self.bars],
            "source": self.source,
            "count": self.count,
        }


# ── Acceptance / eligibility predicates ───────────────────────────────

def has_any_bars(bars: list[OHLCBar]) -> bool:
    return len(bars) > 0


def has_deep_coverage(bars: list[OHLCBar], min_bars: int = 60) -> bool:
    """Coverage-quality rule: prefer a deeper source over a shallow answer."""
    return len(bars) >= min_bars


def looks_like_crypto(symbol: str) -> bool:
    return any(marker in symbol for marker in _CRYPTO_MARKERS)


def _always(symbol: str) -> bool:
    return True


@dataclass(frozen=True)
class ProviderStep:
    name: str
    credential: str
    load: Callable[[str], Awaitable[list[OHLCBar]]]
    accept: Callable[[list[OHLCBar]], bool] = has_any_bars
    eligible: Callable[[str], bool] = _always

    @property
    def configured(self) -> bool:
        return bool(self.credential)


class MarketDataGateway:
    """Single entrypoint for historical monthly bars."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._transport = transport

    def provider_chain(self) -> tuple[ProviderStep, ...]:
        s = self._settings
        min_bars = s.polygon_min_bars
        return (
            ProviderStep(
                name=POLYGON,
                credential=s.polygon_api_key.strip(),
                load=self._load_polygon,
                accept=lambda bars: has_deep_coverage(bars, min_bars),
            ),
            ProviderStep(
                name=ALPHA_VANTAGE,
                credential=s.alpha_vantage_api_key.strip(),
                load=self._load_alpha_vantage,
            ),
            ProviderStep(
                name=FINNHUB,
                credential=s.finnhub_api_key.strip(),
                load=self._load_finnhub,
                eligible=looks_like_crypto,
            ),
        )

    async def fetch(self, symbol: str) -> RawSeries:
        """Return the first accepted series for *symbol*.

        Raises:
            InvalidRequest: *symbol* is blank.
            MisconfiguredProvider: no provider has a credential.
            NotFound: every reachable provider came back empty or failed.
        """
        raw = symbol or ""
        norm = raw.strip().upper()
        if not norm:
            raise InvalidRequest("Symbol is required")

        steps = self.provider_chain()
        if not any(step.configured for step in steps):
            logger.error("No market data provider credentials configured")
            raise MisconfiguredProvider(raw)

        fallback_chain: list[str] = []
        for step in steps:
            if not step.configured:
                fallback_chain.append(f"{step.name}:not_configured")
                continue
            if not step.eligible(norm):
                fallback_chain.append(f"{step.name}:not_eligible")
                continue

            try:
                bars = await step.load(norm)
            except ProviderUnavailable as exc:
                logger.warning("%s unavailable for %s: %s", step.name, norm, exc.code)
                fallback_chain.append(f"{step.name}:{exc.code}")
                continue
            except Exception:
                logger.exception("%s failed for %s", step.name, norm)
                fallback_chain.append(f"{step.name}:PROVIDER_ERROR")
                continue

            if not bars:
                logger.info("%s returned no data for %s", step.name, norm)
                fallback_chain.append(f"{step.name}:no_data")
                continue
            if not step.accept(bars):
                logger.info(
                    "%s returned %d bars for %s, below coverage; trying next provider",
                    step.name, len(bars), norm,
                )
                fallback_chain.append(f"{step.name}:shallow_{len(bars)}")
                continue

            fallback_chain.append(f"{step.name}:ok")
            logger.info(
                "Fetched %d bars for %s from %s (chain=%s)",
                len(bars), norm, step.name, ",".join(fallback_chain),
            )
            return RawSeries(
                symbol=norm,
                source=step.name,
                bars=tuple(bars),
                fallback_chain=tuple(fallback_chain),
            )

        logger.warning("No provider had data for %s (chain=%s)", norm, ",".join(fallback_chain))
        raise NotFound(raw)

    # ── provider loaders ───────────────────────────────────────────────

    async def _load_polygon(self, symbol: str) -> list[OHLCBar]:
        s = self._settings
        url = (
            f"{_POLYGON_AGGS_URL}/{quote(symbol, safe=':.')}/range/1/month/"
            f"{s.polygon_start_date}/{s.polygon_end_date}"
        )
        raw = await self._get_json(POLYGON, url, {"apiKey": s.polygon_api_key.strip()})
        return from_polygon(raw)

    async def _load_alpha_vantage(self, symbol: str) -> list[OHLCBar]:
        raw = await self._get_json(
            ALPHA_VANTAGE,
            _ALPHA_VANTAGE_URL,
            {
                "function": "TIME_SERIES_MONTHLY",
                "symbol": symbol,
                "apikey": self._settings.alpha_vantage_api_key.strip(),
            },
        )
        bars = from_alpha_vantage(raw)
        if bars:
            notice = raw.get("Note") or raw.get("Information")
            if notice:
                logger.debug("Alpha Vantage notice for %s: %s", symbol, notice)
            return bars
        if raw.get("Error Message"):
            raise ProviderUnavailable(ALPHA_VANTAGE, "SYMBOL_NOT_FOUND")
        if raw.get("Note") or raw.get("Information"):
            raise ProviderUnavailable(ALPHA_VANTAGE, "RATE_LIMITED")
        return bars

    async def _load_finnhub(self, symbol: str) -> list[OHLCBar]:
        end = utc_now()
        start = years_before(end, self._settings.finnhub_lookback_years)
        raw = await self._get_json(
            FINNHUB,
            f"{_FINNHUB_BASE}/stock/candle",
            {
                "symbol": symbol,
                "resolution": "M",
                "from": to_epoch(start),
                "to": to_epoch(end),
                "token": self._settings.finnhub_api_key.strip(),
            },
        )
        return from_finnhub(raw)

    async def _get_json(self, provider: str, url: str, params: dict[str, Any]) -> dict[str, Any]:
        """GET *url* and decode a JSON object, or raise ProviderUnavailable."""
        try:
            async with httpx.AsyncClient(
                timeout=self._settings.provider_timeout_seconds,
                transport=self._transport,
            ) as client:
                resp = await client.get(url, params=params)
            if resp.status_code in (401, 403):
                raise ProviderUnavailable(provider, "AUTH_FAIL")
            if resp.status_code != 200:
                raise ProviderUnavailable(provider, f"HTTP_{resp.status_code}")
            data = resp.json()
        except httpx.TimeoutException as exc:
            raise ProviderUnavailable(provider, "TIMEOUT") from exc
        except httpx.HTTPError as exc:
            raise ProviderUnavailable(provider, "TRANSPORT_ERROR") from exc
        except ValueError as exc:
            raise ProviderUnavailable(provider, "MALFORMED_JSON") from exc

        if not isinstance(data, dict):
            raise ProviderUnavailable(provider, "MALFORMED_JSON")
        return data

"""Exception taxonomy shared by the gateway, the analytics and the API."""

from __future__ import annotations

SYMBOL_HINT = (
    "Try a stock (AAPL, MSFT, NVDA), an ETF (SPY, QQQ, IWM), "
    "a forex pair (EURUSD, GBPUSD, USDJPY) or a crypto pair (BTCUSD, ETHUSD, SOLUSD)."
)


class StockTrendsError(Exception):
    """Base class for every error this package raises on purpose."""

    status_code = 500

    def to_payload(self) -> dict[str, str]:
        return {"error": str(self)}


class InvalidRequest(StockTrendsError):
    status_code = 400


class ProviderUnavailable(StockTrendsError):
    """A single provider call failed. Never escapes the gateway."""

    def __init__(self, provider: str, code: str) -> None:
        super().__init__(f"{provider}: {code}")
        self.provider = provider
        self.code = code


class NotFound(StockTrendsError):
    status_code = 404

    def __init__(self, symbol: str, hint: str = SYMBOL_HINT) -> None:
        super().__init__(f"No data found for '{symbol}'")
        self.symbol = symbol
        self.hint = hint

    def to_payload(self) -> dict[str, str]:
        return {"error": str(self), "hint": self.hint}


class MisconfiguredProvider(NotFound):
    """No provider credential is configured, so nothing was attempted."""


class EmptyInput(StockTrendsError):
    pass


class InvalidPeriodKey(StockTrendsError):
    def __init__(self, key: str) -> None:
        super().__init__(f"Unrecognised period key: {key!r}")
        self.key = key

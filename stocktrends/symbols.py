"""Read-only symbol directory backing the search-box autocomplete."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class SymbolInfo:
    symbol: str
    name: str
    exchange: str
    country: str = "US"

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "exchange": self.exchange,
            "country": self.country,
        }


DEFAULT_SYMBOLS: tuple[SymbolInfo, ...] = (
    SymbolInfo("AAPL", "Apple Inc.", "NASDAQ"),
    SymbolInfo("MSFT", "Microsoft Corporation", "NASDAQ"),
    SymbolInfo("NVDA", "NVIDIA Corporation", "NASDAQ"),
    SymbolInfo("TSLA", "Tesla Inc.", "NASDAQ"),
    SymbolInfo("GOOGL", "Alphabet Inc.", "NASDAQ"),
    SymbolInfo("GOOG", "Alphabet Inc. (Class C)", "NASDAQ"),
    SymbolInfo("AMZN", "Amazon.com Inc.", "NASDAQ"),
    SymbolInfo("META", "Meta Platforms Inc.", "NASDAQ"),
    SymbolInfo("AMD", "Advanced Micro Devices", "NASDAQ"),
    SymbolInfo("INTC", "Intel Corporation", "NASDAQ"),
    SymbolInfo("NFLX", "Netflix Inc.", "NASDAQ"),
    SymbolInfo("ADBE", "Adobe Inc.", "NASDAQ"),
    SymbolInfo("PYPL", "PayPal Holdings", "NASDAQ"),
    SymbolInfo("UBER", "Uber Technologies", "NYSE"),
    SymbolInfo("LYFT", "Lyft Inc.", "NASDAQ"),
    SymbolInfo("SPOT", "Spotify Technology", "NYSE", "SE"),
    SymbolInfo("TLRY", "Tilray Brands", "NASDAQ", "CA"),
    SymbolInfo("GM", "General Motors", "NYSE"),
    SymbolInfo("F", "Ford Motor Company", "NYSE"),
    SymbolInfo("GE", "General Electric", "NYSE"),
    SymbolInfo("JPM", "JPMorgan Chase", "NYSE"),
    SymbolInfo("BAC", "Bank of America", "NYSE"),
    SymbolInfo("WFC", "Wells Fargo", "NYSE"),
    SymbolInfo("GS", "Goldman Sachs Group", "NYSE"),
    SymbolInfo("MS", "Morgan Stanley", "NYSE"),
    SymbolInfo("SPY", "S&P 500 ETF", "ARCA"),
    SymbolInfo("QQQ", "Nasdaq 100 ETF", "ARCA"),
    SymbolInfo("IWM", "Russell 2000 ETF", "ARCA"),
    SymbolInfo("EEM", "Emerging Markets ETF", "ARCA"),
    SymbolInfo("EWJ", "iShares MSCI Japan ETF", "ARCA"),
    SymbolInfo("FXI", "iShares China Large-Cap ETF", "ARCA"),
    SymbolInfo("VTSAX", "Vanguard Total Stock Market", "MUTUAL"),
    SymbolInfo("BRK.B", "Berkshire Hathaway B", "NYSE"),
    SymbolInfo("JNJ", "Johnson & Johnson", "NYSE"),
    SymbolInfo("PG", "Procter & Gamble", "NYSE"),
    SymbolInfo("KO", "The Coca-Cola Company", "NYSE"),
    SymbolInfo("PEP", "PepsiCo Inc.", "NASDAQ"),
    SymbolInfo("MCD", "McDonald's Corporation", "NYSE"),
    SymbolInfo("CMCSA", "Comcast Corporation", "NASDAQ"),
    SymbolInfo("DIS", "The Walt Disney Company", "NYSE"),
    SymbolInfo("AMGN", "Amgen Inc.", "NASDAQ"),
)


class SymbolDirectory:
    """Substring search over a fixed symbol table."""

    def __init__(self, entries: Iterable[SymbolInfo] = DEFAULT_SYMBOLS) -> None:
        self._entries = tuple(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def search(self, query: str, limit: int = 10) -> list[SymbolInfo]:
        needle = (query or "").strip().upper()
        if not needle or limit <= 0:
            return []
        out: list[SymbolInfo] = []
        for entry in self._entries:
            if needle in entry.symbol or needle in entry.name.upper():
                out.append(entry)
                if len(out) >= limit:
                    break
        return out

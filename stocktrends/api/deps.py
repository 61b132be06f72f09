"""FastAPI dependency providers; tests swap these via ``dependency_overrides``."""

from __future__ import annotations

import functools

from fastapi import Depends

from stocktrends.config import Settings, get_settings
from stocktrends.marketdata import MarketDataGateway
from stocktrends.symbols import SymbolDirectory


def get_app_settings() -> Settings:
    return get_settings()


def get_gateway(settings: Settings = Depends(get_app_settings)) -> MarketDataGateway:
    return MarketDataGateway(settings)


@functools.lru_cache(maxsize=1)
def get_symbol_directory() -> SymbolDirectory:
    return SymbolDirectory()

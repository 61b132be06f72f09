"""Market data interfaces for Stock Trends."""

from .gateway import MarketDataGateway, ProviderStep, RawSeries
from .normalize import OHLCBar

__all__ = ["MarketDataGateway", "OHLCBar", "ProviderStep", "RawSeries"]

"""Stock Trends — multi-provider price history with period heatmaps."""

__version__ = "1.2.0"

from .schemas import Metric, MetricRecord, Observation
from .market_chart import MarketDataError, load_observations, parse_market_chart
from .synthetic import synthetic_series

__all__ = [
    "Metric",
    "MetricRecord",
    "Observation",
    "MarketDataError",
    "load_observations",
    "parse_market_chart",
    "synthetic_series",
]

"""Shared test fixtures."""

from datetime import date, timedelta

import pytest

from config import Settings
from producers.schemas import Observation


@pytest.fixture
def make_series():
    """Factory for consecutive daily observations; caps and volumes default to constants."""

    def _make(prices, start=date(2024, 1, 1), market_caps=None, volumes=None):
        n = len(prices)
        market_caps = market_caps or [1_000_000.0] * n
        volumes = volumes or [50_000.0] * n
        return [
            Observation(
                date=start + timedelta(days=i),
                price=prices[i],
                market_cap=market_caps[i],
                volume=volumes[i],
            )
            for i in range(n)
        ]

    return _make


@pytest.fixture
def settings():
    """Test settings with the dashboard defaults."""
    return Settings(anomaly_z_threshold=1.5, anomaly_window_size=7, log_level="WARNING")


@pytest.fixture
def jump_series(make_series):
    """Seven flat days followed by a 30% price jump."""
    return make_series([100.0] * 7 + [130.0])

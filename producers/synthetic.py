"""Synthetic daily market series for demos and tests."""

import math
import random
from datetime import date, timedelta

from producers.schemas import Observation


def synthetic_series(
    days: int,
    start: date | None = None,
    seed: int | None = None,
    base_price: float = 100.0,
    supply: float = 19_000_000.0,
    base_volume: float = 2.5e10,
    volatility: float = 0.02,
    spike_probability: float = 0.05,
    spike_magnitude: float = 0.25,
) -> list[Observation]:
    """
    Geometric random walk on price with occasional jumps, one observation per day.

    Market cap tracks price times a fixed supply. Volume is lognormal around
    base_volume and spikes together with price. The same seed always yields
    the same series.
    """
    if days < 1:
        raise ValueError("days must be at least 1")

    rng = random.Random(seed)
    start = start or date.today() - timedelta(days=days - 1)
    price = base_price
    series = []

    for i in range(days):
        shock = rng.gauss(0.0, volatility)
        spiked = rng.random() < spike_probability
        if spiked:
            shock += spike_magnitude * rng.choice([-1, 1])
        price = max(price * math.exp(shock), 0.01)
        volume = base_volume * math.exp(rng.gauss(0.0, 0.1)) * (3.0 if spiked else 1.0)
        series.append(
            Observation(
                date=start + timedelta(days=i),
                price=price,
                market_cap=price * supply,
                volume=volume,
            )
        )
    return series

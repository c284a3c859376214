"""Observation sources: market_chart payloads and JSON fixture files."""

import json
from datetime import datetime, timezone
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from producers.schemas import Observation

SERIES_KEYS = ("prices", "market_caps", "total_volumes")

_observation_list = TypeAdapter(list[Observation])


class MarketDataError(Exception):
    """Raised when a payload or fixture file cannot be turned into observations."""


def _series(payload: dict, key: str) -> dict[int, float]:
    raw = payload.get(key)
    if not isinstance(raw, list):
        raise MarketDataError(f"market_chart payload is missing the '{key}' series")
    samples = {}
    for point in raw:
        if not isinstance(point, (list, tuple)) or len(point) != 2:
            raise MarketDataError(f"malformed sample in '{key}': {point!r}")
        timestamp, value = point
        try:
            samples[int(timestamp)] = value
        except (TypeError, ValueError) as e:
            raise MarketDataError(f"bad timestamp in '{key}': {timestamp!r}") from e
    return samples


def _utc_date(timestamp_ms: int):
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc).date()


def parse_market_chart(payload: dict) -> list[Observation]:
    """
    Pair a market_chart response's price, market cap and volume samples into observations.

    Each series is a list of [timestamp_ms, value]. Samples are matched by
    timestamp and dated by their UTC calendar day. The provider's daily series
    usually ends with an intraday sample on the same day as the last daily
    close; when several samples share a date the latest one wins.
    """
    if not isinstance(payload, dict):
        raise MarketDataError("market_chart payload must be a JSON object")

    prices, caps, volumes = (_series(payload, key) for key in SERIES_KEYS)

    by_date: dict = {}
    for timestamp in sorted(prices):
        if timestamp not in caps or timestamp not in volumes:
            raise MarketDataError(f"series are not aligned at timestamp {timestamp}")
        try:
            obs = Observation(
                date=_utc_date(timestamp),
                price=prices[timestamp],
                market_cap=caps[timestamp],
                volume=volumes[timestamp],
            )
        except ValidationError as e:
            raise MarketDataError(f"invalid sample at timestamp {timestamp}: {e}") from e
        by_date[obs.date] = obs

    return list(by_date.values())


def load_observations(path: str | Path) -> list[Observation]:
    """
    Read observations from a JSON file.

    Accepts either a market_chart payload (an object with prices, market_caps
    and total_volumes) or a list of observation objects.
    """
    try:
        data = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise MarketDataError(f"cannot read observations from {path}: {e}") from e

    if isinstance(data, dict):
        return parse_market_chart(data)
    try:
        return _observation_list.validate_python(data)
    except ValidationError as e:
        raise MarketDataError(f"invalid observations in {path}: {e}") from e

"""Trailing-window z-score anomaly labeling for daily market series."""

import math
import statistics
from collections.abc import Sequence
from datetime import timedelta

import structlog

from producers.schemas import Metric, MetricRecord, Observation

DEFAULT_THRESHOLD = 1.5
DEFAULT_WINDOW_SIZE = 7
Z_SCORE_DECIMALS = 2


class InvalidInput(ValueError):
    """Raised before any work is done when the analyzer's arguments are unusable."""


def rolling_zscore(values: Sequence[float], index: int, window_size: int) -> float | None:
    """
    Unrounded z-score of values[index] against the trailing window ending at index.

    The window holds up to window_size values, the current one included; near
    the start of the series it is simply shorter. Uses the population standard
    deviation. Returns None when the window has no variance.

    Both statistics are computed from exact sums, so finite values up to the
    float maximum never overflow.
    """
    window = values[max(0, index - window_size + 1) : index + 1]
    dev = statistics.pstdev(window)
    if dev == 0:
        return None
    return (values[index] - statistics.mean(window)) / dev


def _validate(observations: Sequence[Observation], threshold: float, window_size: int):
    if not observations:
        raise InvalidInput("observations must not be empty")
    if not math.isfinite(threshold) or threshold <= 0:
        raise InvalidInput(f"threshold must be a positive number, got {threshold!r}")
    if window_size < 1:
        raise InvalidInput(f"window_size must be at least 1, got {window_size!r}")
    for prev, cur in zip(observations, observations[1:]):
        if cur.date <= prev.date:
            raise InvalidInput(
                f"observation dates must be strictly ascending: {cur.date} follows {prev.date}"
            )


def find_gaps(observations: Sequence[Observation]) -> list[tuple[int, int]]:
    """
    Positions where consecutive observations are more than one calendar day apart.

    Returns (index, missing_days) for the observation right after each gap.
    Gaps do not change the analysis: windows are positional, so the days on
    either side of a gap count as adjacent slots.
    """
    gaps = []
    for i in range(1, len(observations)):
        delta = observations[i].date - observations[i - 1].date
        if delta > timedelta(days=1):
            gaps.append((i, delta.days - 1))
    return gaps


def analyze(
    observations: Sequence[Observation],
    threshold: float = DEFAULT_THRESHOLD,
    window_size: int = DEFAULT_WINDOW_SIZE,
) -> list[MetricRecord]:
    """
    Label every observation with a rolling z-score and anomaly flag per metric.

    Output is one record per input observation, in input order. For each
    metric the z-score is rounded to 2 decimals with round(); the anomaly
    flag compares the unrounded score, |z| > threshold. Zero-variance
    windows (always the case at index 0) give a None score and no flag.

    Raises InvalidInput for an empty sequence, a non-positive threshold, a
    window size below 1, or dates that are not strictly ascending.
    """
    _validate(observations, threshold, window_size)

    series = {metric: [o.value(metric) for o in observations] for metric in Metric}

    def score(metric: Metric, index: int) -> tuple[float | None, bool]:
        raw_z = rolling_zscore(series[metric], index, window_size)
        if raw_z is None:
            return None, False
        return round(raw_z, Z_SCORE_DECIMALS), abs(raw_z) > threshold

    records = []
    for i, obs in enumerate(observations):
        z_price, flag_price = score(Metric.PRICE, i)
        z_cap, flag_cap = score(Metric.MARKET_CAP, i)
        z_vol, flag_vol = score(Metric.VOLUME, i)
        records.append(
            MetricRecord(
                date=obs.date,
                price=obs.price,
                market_cap=obs.market_cap,
                volume=obs.volume,
                z_score_price=z_price,
                z_score_market_cap=z_cap,
                z_score_volume=z_vol,
                anomaly_price=flag_price,
                anomaly_market_cap=flag_cap,
                anomaly_volume=flag_vol,
            )
        )
    return records


class AnomalyAnalyzer:
    """
    Configured front end to analyze().

    Holds the threshold and window size (usually from Settings) and logs
    calendar gaps and a per-run summary. The computation itself stays in the
    pure analyze() function.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        window_size: int = DEFAULT_WINDOW_SIZE,
        log: structlog.BoundLogger | None = None,
    ):
        self.threshold = threshold
        self.window_size = window_size
        self.log = log or structlog.get_logger(component="anomaly-analyzer")

    def analyze(
        self,
        observations: Sequence[Observation],
        threshold: float | None = None,
        window_size: int | None = None,
    ) -> list[MetricRecord]:
        threshold = self.threshold if threshold is None else threshold
        window_size = self.window_size if window_size is None else window_size

        records = analyze(observations, threshold, window_size)

        for index, missing_days in find_gaps(observations):
            self.log.warning(
                "calendar_gap_detected",
                date=observations[index].date.isoformat(),
                missing_days=missing_days,
            )

        self.log.info(
            "analysis_complete",
            observations=len(records),
            threshold=threshold,
            window_size=window_size,
            **{
                f"anomalies_{metric.value}": sum(r.is_anomalous(metric) for r in records)
                for metric in Metric
            },
        )
        return records

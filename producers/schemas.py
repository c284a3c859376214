"""Canonical data shapes: daily observations in, labeled metric records out."""

from datetime import date as Date
from enum import Enum
from typing import Callable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Metric(str, Enum):
    PRICE = "price"
    MARKET_CAP = "market_cap"
    VOLUME = "volume"

    @property
    def z_field(self) -> str:
        return f"z_score_{self.value}"

    @property
    def anomaly_field(self) -> str:
        return f"anomaly_{self.value}"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    Metric.PRICE: "Price",
    Metric.MARKET_CAP: "Market Cap",
    Metric.VOLUME: "Volume",
}


class Observation(BaseModel):
    """One trading day for one instrument. Immutable once created."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    date: Date
    price: float = Field(gt=0, validation_alias=AliasChoices("price", "price_usd"))
    market_cap: float = Field(ge=0)
    volume: float = Field(ge=0, validation_alias=AliasChoices("volume", "total_volume"))

    def value(self, metric: Metric) -> float:
        return _EXTRACTORS[metric](self)


_EXTRACTORS: dict[Metric, Callable[[Observation], float]] = {
    Metric.PRICE: lambda o: o.price,
    Metric.MARKET_CAP: lambda o: o.market_cap,
    Metric.VOLUME: lambda o: o.volume,
}


class MetricRecord(Observation):
    """An Observation plus a rolling z-score and anomaly flag for every metric.

    A z-score of None means the trailing window had no variance; the matching
    flag is then always False.
    """

    z_score_price: float | None = None
    z_score_market_cap: float | None = None
    z_score_volume: float | None = None
    anomaly_price: bool = False
    anomaly_market_cap: bool = False
    anomaly_volume: bool = False

    def z_score(self, metric: Metric) -> float | None:
        return _Z_SCORES[metric](self)

    def is_anomalous(self, metric: Metric) -> bool:
        return _FLAGS[metric](self)

    @property
    def has_anomaly(self) -> bool:
        return self.anomaly_price or self.anomaly_market_cap or self.anomaly_volume


_Z_SCORES: dict[Metric, Callable[[MetricRecord], float | None]] = {
    Metric.PRICE: lambda r: r.z_score_price,
    Metric.MARKET_CAP: lambda r: r.z_score_market_cap,
    Metric.VOLUME: lambda r: r.z_score_volume,
}

_FLAGS: dict[Metric, Callable[[MetricRecord], bool]] = {
    Metric.PRICE: lambda r: r.anomaly_price,
    Metric.MARKET_CAP: lambda r: r.anomaly_market_cap,
    Metric.VOLUME: lambda r: r.anomaly_volume,
}

"""Consumer-side views over labeled records: anomaly rows and period summaries."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel

from producers.schemas import Metric, MetricRecord


@dataclass
class AnomalyRow:
    date: date
    metric: Metric
    label: str
    value: float
    z_score: float


@dataclass
class PeriodSummary:
    start: date
    end: date
    days: int
    latest_price: float
    latest_market_cap: float
    latest_volume: float
    daily_price_change_pct: float
    price_change_pct: float
    market_cap_change_pct: float
    volume_change_pct: float
    anomaly_counts: dict[str, int]


@dataclass
class CombinedSummary:
    instruments: list[str]
    total_market_cap: float
    total_volume: float
    daily_price_change_pct: dict[str, float]
    anomaly_counts: dict[str, int]


class AnomalyReport(BaseModel):
    anomalies: list[AnomalyRow]
    summary: PeriodSummary


def build_report(records: Sequence[MetricRecord]) -> AnomalyReport:
    return AnomalyReport(anomalies=anomaly_rows(records), summary=summarize(records))


def anomalous_records(records: Sequence[MetricRecord]) -> list[MetricRecord]:
    """Records with at least one anomaly flag, in their original order."""
    return [r for r in records if r.has_anomaly]


def anomaly_rows(records: Sequence[MetricRecord]) -> list[AnomalyRow]:
    """One row per flagged (record, metric) pair, record order then metric order."""
    rows = []
    for record in records:
        for metric in Metric:
            if record.is_anomalous(metric):
                rows.append(
                    AnomalyRow(
                        date=record.date,
                        metric=metric,
                        label=metric.label,
                        value=record.value(metric),
                        z_score=record.z_score(metric),
                    )
                )
    return rows


def pct_change(old: float, new: float) -> float:
    if old == 0:
        return 0.0
    return (new - old) / old * 100


def summarize(records: Sequence[MetricRecord]) -> PeriodSummary:
    """
    Latest values and percentage changes over the analyzed period.

    The day-over-day change compares the last two records' prices and is 0
    for a single record. Period changes compare the first and last records.
    """
    if not records:
        raise ValueError("cannot summarize an empty record sequence")

    first, last = records[0], records[-1]
    daily = pct_change(records[-2].price, last.price) if len(records) > 1 else 0.0

    return PeriodSummary(
        start=first.date,
        end=last.date,
        days=len(records),
        latest_price=last.price,
        latest_market_cap=last.market_cap,
        latest_volume=last.volume,
        daily_price_change_pct=daily,
        price_change_pct=pct_change(first.price, last.price),
        market_cap_change_pct=pct_change(first.market_cap, last.market_cap),
        volume_change_pct=pct_change(first.volume, last.volume),
        anomaly_counts={
            metric.value: sum(r.is_anomalous(metric) for r in records) for metric in Metric
        },
    )


def combined_summary(series: Mapping[str, Sequence[MetricRecord]]) -> CombinedSummary:
    """
    Totals across several instruments, keyed by instrument id.

    Market cap and volume are summed over each instrument's latest record.
    Daily price change and the total anomaly flag count stay per instrument.
    """
    if not series:
        raise ValueError("cannot summarize an empty set of instruments")

    summaries = {}
    for instrument, records in series.items():
        if not records:
            raise ValueError(f"no records for instrument '{instrument}'")
        summaries[instrument] = summarize(records)

    return CombinedSummary(
        instruments=list(summaries),
        total_market_cap=sum(s.latest_market_cap for s in summaries.values()),
        total_volume=sum(s.latest_volume for s in summaries.values()),
        daily_price_change_pct={i: s.daily_price_change_pct for i, s in summaries.items()},
        anomaly_counts={i: sum(s.anomaly_counts.values()) for i, s in summaries.items()},
    )

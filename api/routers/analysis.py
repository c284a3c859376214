"""REST endpoints for labeling daily series and listing their anomalies."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.dependencies import AnalysisStats, get_analyzer, get_stats
from processor.anomaly import AnomalyAnalyzer, InvalidInput
from processor.report import AnomalyReport, CombinedSummary, build_report, combined_summary
from producers.schemas import Metric, MetricRecord, Observation

router = APIRouter(prefix="/api/v1")


class AnalyzeRequest(BaseModel):
    observations: list[Observation]
    threshold: float | None = Field(default=None, description="Overrides the configured threshold")
    window_size: int | None = Field(default=None, description="Overrides the configured window")


class BatchAnalyzeRequest(BaseModel):
    instruments: dict[str, list[Observation]] = Field(
        description="Observations keyed by instrument id, e.g. bitcoin"
    )
    threshold: float | None = Field(default=None, description="Overrides the configured threshold")
    window_size: int | None = Field(default=None, description="Overrides the configured window")


class BatchAnalysis(BaseModel):
    instruments: dict[str, list[MetricRecord]]
    combined: CombinedSummary


def _label(
    observations: list[Observation],
    threshold: float | None,
    window_size: int | None,
    analyzer: AnomalyAnalyzer,
    stats: AnalysisStats,
) -> list[MetricRecord]:
    records = analyzer.analyze(observations, threshold, window_size)
    stats.observations += len(records)
    stats.anomalies += sum(r.is_anomalous(m) for r in records for m in Metric)
    return records


@router.post("/analyze", response_model=list[MetricRecord])
async def analyze_series(
    body: AnalyzeRequest,
    analyzer: AnomalyAnalyzer = Depends(get_analyzer),
    stats: AnalysisStats = Depends(get_stats),
):
    """Every observation with its rolling z-scores and anomaly flags."""
    records = _label(body.observations, body.threshold, body.window_size, analyzer, stats)
    stats.requests += 1
    return records


@router.post("/analyze/batch", response_model=BatchAnalysis)
async def analyze_batch(
    body: BatchAnalyzeRequest,
    analyzer: AnomalyAnalyzer = Depends(get_analyzer),
    stats: AnalysisStats = Depends(get_stats),
):
    """Each instrument labeled on its own, plus market cap and volume totals across them."""
    if not body.instruments:
        raise InvalidInput("instruments must not be empty")

    labeled = {}
    for instrument, observations in body.instruments.items():
        try:
            labeled[instrument] = _label(
                observations, body.threshold, body.window_size, analyzer, stats
            )
        except InvalidInput as e:
            raise InvalidInput(f"{instrument}: {e}") from e
    stats.requests += 1
    return BatchAnalysis(instruments=labeled, combined=combined_summary(labeled))


@router.post("/anomalies", response_model=AnomalyReport)
async def list_anomalies(
    body: AnalyzeRequest,
    analyzer: AnomalyAnalyzer = Depends(get_analyzer),
    stats: AnalysisStats = Depends(get_stats),
):
    """Flagged (day, metric) rows plus a summary of the period."""
    records = _label(body.observations, body.threshold, body.window_size, analyzer, stats)
    stats.requests += 1
    return build_report(records)

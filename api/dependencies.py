"""FastAPI dependency injection."""

from dataclasses import dataclass

from fastapi import Request

from config import Settings
from processor.anomaly import AnomalyAnalyzer


@dataclass
class AnalysisStats:
    requests: int = 0
    observations: int = 0
    anomalies: int = 0


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_analyzer(request: Request) -> AnomalyAnalyzer:
    return request.app.state.analyzer


def get_stats(request: Request) -> AnalysisStats:
    return request.app.state.stats

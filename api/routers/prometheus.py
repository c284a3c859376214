"""Prometheus-compatible metrics endpoint."""

import time

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/metrics")
async def prometheus_metrics(request: Request):
    """Expose metrics in Prometheus text exposition format."""
    stats = request.app.state.stats
    uptime = time.time() - request.app.state.start_time

    lines = [
        "# HELP analysis_requests_total Analysis requests served",
        "# TYPE analysis_requests_total counter",
        f"analysis_requests_total {stats.requests}",
        "",
        "# HELP observations_analyzed_total Observations labeled across all requests",
        "# TYPE observations_analyzed_total counter",
        f"observations_analyzed_total {stats.observations}",
        "",
        "# HELP anomalies_flagged_total Anomaly flags raised across all metrics",
        "# TYPE anomalies_flagged_total counter",
        f"anomalies_flagged_total {stats.anomalies}",
        "",
        "# HELP api_uptime_seconds Seconds since API start",
        "# TYPE api_uptime_seconds gauge",
        f"api_uptime_seconds {uptime:.1f}",
    ]
    return PlainTextResponse("\n".join(lines) + "\n", media_type="text/plain; version=0.0.4")

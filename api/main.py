"""FastAPI application factory with lifespan management."""

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Settings, configure_logging
from processor.anomaly import AnomalyAnalyzer, InvalidInput
from api.dependencies import AnalysisStats
from api.routers import analysis, health, prometheus


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    settings = app.state.settings
    log = configure_logging("anomaly-api", settings.log_level)

    app.state.analyzer = AnomalyAnalyzer(
        threshold=settings.anomaly_z_threshold,
        window_size=settings.anomaly_window_size,
        log=log,
    )
    app.state.stats = AnalysisStats()
    app.state.log = log
    app.state.start_time = time.time()
    log.info("api_started", threshold=settings.anomaly_z_threshold,
             window_size=settings.anomaly_window_size)

    yield

    log.info("api_stopped", requests=app.state.stats.requests)


async def invalid_input_handler(request: Request, exc: InvalidInput):
    request.app.state.log.warning("invalid_input", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=422, content={"detail": str(exc)})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Rejected inputs are not echoed back: non-finite numbers cannot be rendered as JSON
    errors = [{"loc": e["loc"], "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
    return JSONResponse(status_code=422, content={"detail": errors})


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(
        title="Market Anomaly Analyzer API",
        version="1.0.0",
        description="Rolling z-score anomaly labeling for daily price, market cap and volume",
        lifespan=lifespan,
    )
    app.state.settings = settings or Settings()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InvalidInput, invalid_input_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(analysis.router)
    app.include_router(prometheus.router)

    return app


app = create_app()


def serve():
    settings = app.state.settings
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)


if __name__ == "__main__":
    serve()

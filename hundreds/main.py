import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from loguru import logger

from hundreds.api.calendar import router as calendar_router
from hundreds.api.progress import router as progress_router
from hundreds.api.transfer import router as transfer_router
from hundreds.bootstrap import build_tracker
from hundreds.config.settings import Settings, settings
from hundreds.core.logger import setup_logger
from hundreds.progress.engine import DayRecordEngine
from hundreds.progress.scheduler import start_rollover_scheduler


def create_app(
    tracker: DayRecordEngine | None = None,
    config: Settings | None = None,
    *,
    start_scheduler: bool = True,
) -> FastAPI:
    """Build the FastAPI application around one tracker engine.

    Args:
        tracker: Engine to serve; built from config when None
        config: Settings to use (defaults to the process-wide settings)
        start_scheduler: Whether to run the background day-rollover check
    """
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the tracker and start the rollover scheduler on startup."""
        app.state.tracker = tracker or build_tracker(config)

        scheduler = None
        if start_scheduler:
            scheduler = start_rollover_scheduler(app.state.tracker, config.rollover_interval_seconds)

        # Yield control to FastAPI (use await to satisfy async requirement)
        await asyncio.sleep(0)
        yield

        if scheduler is not None:
            scheduler.shutdown(wait=False)
            logger.info("[SCHEDULER] Stopped day rollover check")

    app = FastAPI(title="Hundreds", lifespan=lifespan)
    app.include_router(progress_router)
    app.include_router(calendar_router)
    app.include_router(transfer_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all HTTP requests."""
        logger.debug(f"Request: {request.method} {request.url.path}")
        response = await call_next(request)
        logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
        return response

    logger.info("FastAPI application initialized")
    return app


def run() -> None:
    """Entry point for `hundreds-api`."""
    setup_logger(level=settings.log_level, log_file=settings.log_file)
    uvicorn.run(create_app(), host="127.0.0.1", port=8000)

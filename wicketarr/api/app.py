"""FastAPI application factory - admin API and tick scheduler host."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from wicketarr.api.routes import health, matches, scheduler, tenants
from wicketarr.config import VERSION, Config, SchedulerSettings, get_scheduler_settings
from wicketarr.consumers.scheduler import (
    TickScheduler,
    start_tick_scheduler,
    stop_tick_scheduler,
)
from wicketarr.core.exceptions import InvalidTenantSetting, ScorecardUnavailable
from wicketarr.core.interfaces import MatchSource, Publisher, TenantStateStore
from wicketarr.services import create_match_service, create_tenant_service
from wicketarr.utilities.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    from wicketarr.database import SqliteTenantStore, init_db
    from wicketarr.providers import create_match_source
    from wicketarr.publishers import create_publisher

    # Startup
    setup_logging()
    logger.info("Starting Wicketarr %s...", VERSION)

    state = app.state
    if state.settings is None:
        state.settings = get_scheduler_settings()
    if state.store is None:
        init_db()
        state.store = SqliteTenantStore(default_daily_time=state.settings.default_daily_time)
    if state.source is None:
        state.source = create_match_source()
    if state.publisher is None:
        state.publisher = create_publisher()

    state.tenant_service = create_tenant_service(state.store, state.publisher)
    state.match_service = create_match_service(state.source, state.store)
    state.scheduler = TickScheduler(
        store=state.store,
        source=state.source,
        publisher=state.publisher,
        settings=state.settings,
    )

    if start_tick_scheduler(state.scheduler, enabled=state.start_scheduler):
        logger.info("Tick scheduler started (cron: %s)", state.settings.tick_cron)
    else:
        logger.info("Tick scheduler not started; ticks run only on demand")

    logger.info("Wicketarr ready")

    yield

    # Shutdown
    logger.info("Shutting down Wicketarr...")
    stop_tick_scheduler()
    state.scheduler.stop()

    for component in (state.source, state.publisher):
        close = getattr(getattr(component, "client", component), "close", None)
        if callable(close):
            close()

    logger.info("Wicketarr stopped")


async def _invalid_setting_handler(request: Request, exc: InvalidTenantSetting) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": str(exc)},
    )


async def _scorecard_unavailable_handler(
    request: Request, exc: ScorecardUnavailable
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "detail": "Scorecard unavailable, try again later",
            "match_id": exc.match_id,
        },
    )


def create_app(
    store: TenantStateStore | None = None,
    source: MatchSource | None = None,
    publisher: Publisher | None = None,
    settings: SchedulerSettings | None = None,
    start_scheduler: bool | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Components left as None are built from Config at startup.
    """
    app = FastAPI(
        title="Wicketarr API",
        description="Cricket match feeds for chat communities",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.store = store
    app.state.source = source
    app.state.publisher = publisher
    app.state.settings = settings
    app.state.start_scheduler = (
        Config.SCHEDULER_ENABLED if start_scheduler is None else start_scheduler
    )

    app.add_exception_handler(InvalidTenantSetting, _invalid_setting_handler)
    app.add_exception_handler(ScorecardUnavailable, _scorecard_unavailable_handler)

    app.include_router(health.router, tags=["Health"])
    app.include_router(tenants.router, prefix="/api/v1", tags=["Tenants"])
    app.include_router(matches.router, prefix="/api/v1", tags=["Matches"])
    app.include_router(scheduler.router, prefix="/api/v1", tags=["Scheduler"])

    return app


app = create_app()

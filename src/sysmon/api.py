"""HTTP API exposing the metrics cache."""

import logging
from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sysmon.cache import MetricsCache
from sysmon.config import Settings
from sysmon.cpu import sample_cpu
from sysmon.refresher import CacheRefresher
from sysmon.schemas import (
    ErrorResponse,
    MessageResponse,
    ProcessesResponse,
    ProcessSchema,
    SystemInfoResponse,
    SystemInfoSchema,
    UsageResponse,
    UsageSchema,
)
from sysmon.sysinfo import get_system_info

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"


def build_cache(settings: Settings) -> MetricsCache:
    """Create the cache described by ``settings``."""
    return MetricsCache(
        sampler=partial(sample_cpu, interval=settings.cpu_sample_interval),
        usage_ttl=settings.usage_ttl,
        processes_ttl=settings.processes_ttl,
    )


def create_app(
    settings: Settings | None = None,
    cache: MetricsCache | None = None,
    refresh_in_background: bool = True,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Runtime settings. Read from the environment when omitted.
        cache: Cache to serve. Built from ``settings`` when omitted.
        refresh_in_background: Run a CacheRefresher for the app's lifetime.
    """
    settings = settings or Settings.from_env()
    cache = cache or build_cache(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        refresher = CacheRefresher(cache, interval=settings.refresh_interval)
        if refresh_in_background:
            refresher.start()
        try:
            yield
        finally:
            await refresher.stop()

    app = FastAPI(
        title="sysmon",
        description="CPU, memory and process metrics",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.cache = cache

    def failure(exc: Exception, route: str) -> JSONResponse:
        logger.error("Error in route %s: %s", route, exc, exc_info=exc)
        message = str(exc) if settings.is_development else "Something went wrong"
        body = ErrorResponse(error=INTERNAL_ERROR, message=message)
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.get("/api/usage", response_model=UsageResponse)
    async def get_usage():
        try:
            usage = await cache.get_usage()
            return UsageResponse(data=UsageSchema.model_validate(usage))
        except Exception as exc:
            return failure(exc, "/api/usage")

    @app.get("/api/processes", response_model=ProcessesResponse)
    async def get_processes():
        try:
            processes = await cache.get_processes()
            return ProcessesResponse(
                data=[ProcessSchema.model_validate(proc) for proc in processes],
                count=len(processes),
            )
        except Exception as exc:
            return failure(exc, "/api/processes")

    @app.get("/api/system-info", response_model=SystemInfoResponse)
    async def system_info():
        try:
            return SystemInfoResponse(data=SystemInfoSchema.model_validate(get_system_info()))
        except Exception as exc:
            return failure(exc, "/api/system-info")

    @app.post("/api/kill-process/{pid}", response_model=MessageResponse)
    async def kill_process(pid: str):
        # Acknowledgment only, no signal is ever sent
        logger.info("Simulated termination of process PID %s", pid)
        return MessageResponse(message=f"Process {pid} was terminated (simulated)")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            body = ErrorResponse(
                error="Route not found",
                message=f"Route {request.url.path} does not exist",
            )
        else:
            body = ErrorResponse(error=str(exc.detail))
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
        message = str(exc) if settings.is_development else "Something went wrong"
        body = ErrorResponse(error=INTERNAL_ERROR, message=message)
        return JSONResponse(status_code=500, content=body.model_dump())

    return app

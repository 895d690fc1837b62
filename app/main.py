import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.exceptions import ConfigurationError
from app.services.scheduling.cache import ScheduleCache
from app.services.scheduling.intervals import validate_task_tables

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    validate_task_tables()
    app.state.schedule_cache.start()
    yield
    # Shutdown
    await app.state.schedule_cache.stop()


app = FastAPI(
    title="GardenPlan Scheduler API",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

app.state.schedule_cache = ScheduleCache(
    ttl_seconds=settings.SCHEDULE_CACHE_DURATION_SECONDS,
    sweep_interval_seconds=settings.cache_sweep_seconds,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next) -> Response:
    start = time.monotonic()
    response = await call_next(request)
    latency_ms = int((time.monotonic() - start) * 1000)
    logger.info(
        "%s %s -> %d (%dms)", request.method, request.url.path, response.status_code, latency_ms
    )
    return response


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("configuration error serving %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Scheduling configuration error"})


@app.get("/api/health", tags=["health"])
async def health():
    return {"status": "ok"}


app.include_router(api_router, prefix="/api/v1")

from __future__ import annotations

from datetime import datetime, timezone

import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text

from humanizer.api.v1.router import router as v1_router
from humanizer.core.config import get_settings
from humanizer.core.errors import InvalidInputError, NotReadyError, PipelineFailure
from humanizer.core.logging import configure_logging, get_logger
from humanizer.core.redis import close_redis, get_redis
from humanizer.db.base import Base
from humanizer.db.session import SessionLocal, engine
from humanizer.schemas.common import ErrorResponse, HealthResponse
from humanizer.services.backends import ModelLoadConfig
from humanizer.services.cache import MemoryResultCache, RedisResultCache, ResultCache
from humanizer.services.datasets import SqlDatasetStore
from humanizer.services.orchestrator import HumanizationOrchestrator
from humanizer.utils.trace import get_trace_id, trace_context_middleware

settings = get_settings()
configure_logging()
logger = get_logger(__name__)

if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn, environment=settings.environment)


app = FastAPI(title=settings.app_name, default_response_class=ORJSONResponse)
app.middleware("http")(trace_context_middleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


def _error(status_code: int, detail: str) -> ORJSONResponse:
    return ORJSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=detail, trace_id=get_trace_id()).model_dump(),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_: Request, exc: RequestValidationError):
    return _error(422, str(exc))


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(_: Request, exc: InvalidInputError):
    return _error(422, str(exc))


@app.exception_handler(NotReadyError)
async def not_ready_handler(_: Request, exc: NotReadyError):
    return _error(503, str(exc))


@app.exception_handler(PipelineFailure)
async def pipeline_failure_handler(_: Request, exc: PipelineFailure):
    logger.error("pipeline_failure", session_id=exc.session_id, error=str(exc), trace_id=get_trace_id())
    return _error(500, f"Humanization failed for session {exc.session_id}")


@app.exception_handler(Exception)
async def unhandled_exception_handler(_: Request, exc: Exception):
    logger.exception("unhandled_exception", error=str(exc), trace_id=get_trace_id())
    return _error(500, "Internal server error")


async def build_cache() -> ResultCache:
    if settings.use_redis_cache:
        return RedisResultCache(await get_redis(), ttl_seconds=settings.cache_ttl_seconds)
    return MemoryResultCache(max_entries=settings.cache_max_entries, ttl_seconds=settings.cache_ttl_seconds)


@app.on_event("startup")
async def startup_event() -> None:
    if settings.environment == "development":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    orchestrator = HumanizationOrchestrator(cache=await build_cache())
    await orchestrator.detector.load_model(settings.detector_model_path, settings.detector_model_kind)
    if settings.generation_autoload:
        orchestrator.initialize_model(
            ModelLoadConfig(
                model_path=settings.generation_model_path,
                device=settings.generation_device,
                seed=settings.random_seed,
            )
        )
    app.state.engine = orchestrator
    app.state.dataset_store = SqlDatasetStore(SessionLocal)

    Instrumentator().instrument(app).expose(app)
    logger.info(
        "startup_complete",
        environment=settings.environment,
        cache_backend="redis" if settings.use_redis_cache else "memory",
        model_loaded=orchestrator.is_model_loaded(),
    )


@app.on_event("shutdown")
async def shutdown_event() -> None:
    orchestrator: HumanizationOrchestrator | None = getattr(app.state, "engine", None)
    if orchestrator is not None and orchestrator.is_model_loaded():
        orchestrator.unload_model()
    await close_redis()
    await engine.dispose()


@app.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    return HealthResponse(status="ok")


@app.get("/readyz")
async def readyz(request: Request):
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    orchestrator: HumanizationOrchestrator | None = getattr(request.app.state, "engine", None)
    if orchestrator is None or not orchestrator.is_model_loaded():
        return _error(503, "Generation model not initialized")
    return {"status": "ready", "time": datetime.now(timezone.utc).isoformat()}


app.include_router(v1_router, prefix=settings.api_prefix)

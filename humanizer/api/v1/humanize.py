from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from humanizer.api.deps import get_engine
from humanizer.core.logging import get_logger
from humanizer.schemas.humanize import (
    HumanizeRequest,
    HumanizeResponse,
    SessionResponse,
    StatsResponse,
    UsageCount,
)
from humanizer.services.orchestrator import HumanizationOrchestrator
from humanizer.services.types import HumanizationRequest

router = APIRouter()
logger = get_logger(__name__)


@router.post("/humanize", response_model=HumanizeResponse)
async def humanize_text(
    body: HumanizeRequest,
    engine: HumanizationOrchestrator = Depends(get_engine),
) -> HumanizeResponse:
    result = await engine.humanize(
        HumanizationRequest(
            input_text=body.text,
            target_style=body.target_style,
            target_complexity=body.target_complexity,
            selected_patterns=body.patterns,
            use_cache=body.use_cache,
            model_version_id=body.model_version_id,
            metadata=body.metadata,
        )
    )
    return HumanizeResponse(
        session_id=result.session_id,
        output_text=result.output_text,
        detection_score_before=result.detection_score_before,
        detection_score_after=result.detection_score_after,
        quality_score=result.quality_score,
        elapsed_ms=result.elapsed_ms,
        applied_patterns=result.applied_patterns,
        cache_hit=result.cache_hit,
        metadata=result.metadata,
    )


@router.get("/sessions", response_model=list[SessionResponse])
async def list_sessions(engine: HumanizationOrchestrator = Depends(get_engine)) -> list[SessionResponse]:
    return [SessionResponse(**session.to_dict()) for session in engine.all_sessions()]


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, engine: HumanizationOrchestrator = Depends(get_engine)) -> SessionResponse:
    session = engine.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return SessionResponse(**session.to_dict())


@router.get("/stats", response_model=StatsResponse)
async def get_stats(engine: HumanizationOrchestrator = Depends(get_engine)) -> StatsResponse:
    stats = engine.stats()
    return StatsResponse(
        total_sessions=stats.total_sessions,
        successful_sessions=stats.successful_sessions,
        failed_sessions=stats.failed_sessions,
        cancelled_sessions=stats.cancelled_sessions,
        avg_elapsed_ms=stats.avg_elapsed_ms,
        p95_elapsed_ms=stats.p95_elapsed_ms,
        avg_detection_score_after=stats.avg_detection_score_after,
        avg_quality_score=stats.avg_quality_score,
        cache_hit_rate=stats.cache_hit_rate,
        cache_size=await engine.cache_size(),
        most_used_styles=[UsageCount(name=name, count=count) for name, count in stats.most_used_styles],
        most_used_patterns=[UsageCount(name=name, count=count) for name, count in stats.most_used_patterns],
    )


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(engine: HumanizationOrchestrator = Depends(get_engine)) -> None:
    await engine.clear_cache()

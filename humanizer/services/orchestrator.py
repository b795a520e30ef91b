from __future__ import annotations

import asyncio
import time
from collections import Counter
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone

import numpy as np

from humanizer.core.errors import InvalidInputError, NotReadyError, PipelineFailure
from humanizer.core.logging import get_logger
from humanizer.services import analyzer, quality, scoring, selector
from humanizer.services.backends import GenerationBackend, ModelLoadConfig, RuleBasedBackend
from humanizer.services.cache import MemoryResultCache, ResultCache, cache_key
from humanizer.services.detector import HeuristicDetector
from humanizer.services.patterns import PatternCatalog
from humanizer.services.sessions import Session, SessionStore
from humanizer.services.types import (
    TARGET_STYLES,
    CacheEntry,
    DetectionResult,
    HumanizationRequest,
    HumanizationResult,
    Pattern,
)

logger = get_logger(__name__)

MIN_COMPLEXITY = 1.0
MAX_COMPLEXITY = 10.0
TOP_N_USAGE = 5


@dataclass(frozen=True)
class InferenceStats:
    total_sessions: int
    successful_sessions: int
    failed_sessions: int
    cancelled_sessions: int
    avg_elapsed_ms: float
    p95_elapsed_ms: float
    avg_detection_score_after: float
    avg_quality_score: float
    cache_hit_rate: float
    most_used_styles: list[tuple[str, int]] = field(default_factory=list)
    most_used_patterns: list[tuple[str, int]] = field(default_factory=list)


def validate_request(request: HumanizationRequest) -> None:
    if not request.input_text or not request.input_text.strip():
        raise InvalidInputError("Input text cannot be empty")
    if request.target_complexity is not None and not (
        MIN_COMPLEXITY <= request.target_complexity <= MAX_COMPLEXITY
    ):
        raise InvalidInputError("Target complexity must be between 1 and 10")
    if request.target_style is not None and request.target_style not in TARGET_STYLES:
        raise InvalidInputError(f"Unknown target style: {request.target_style}")


def _mean(values: list[float]) -> float:
    return float(np.mean(values)) if values else 0.0


class HumanizationOrchestrator:
    def __init__(
        self,
        *,
        catalog: PatternCatalog | None = None,
        backend: GenerationBackend | None = None,
        detector: HeuristicDetector | None = None,
        cache: ResultCache | None = None,
        sessions: SessionStore | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self.catalog = catalog if catalog is not None else PatternCatalog()
        self.backend: GenerationBackend = backend or RuleBasedBackend()
        self.detector = detector or HeuristicDetector()
        self.cache: ResultCache = cache if cache is not None else MemoryResultCache()
        self.sessions = sessions if sessions is not None else SessionStore()
        self._clock = clock

    def initialize_model(self, config: ModelLoadConfig) -> None:
        self.backend.initialize(config)

    def unload_model(self) -> None:
        self.backend.unload()

    def is_model_loaded(self) -> bool:
        return self.backend.is_ready

    def get_session(self, session_id: str) -> Session | None:
        return self.sessions.get(session_id)

    def all_sessions(self) -> list[Session]:
        return self.sessions.all()

    async def clear_cache(self) -> None:
        await self.cache.clear()
        logger.info("result_cache_cleared")

    async def cache_size(self) -> int:
        return await self.cache.size()

    def detect(self, text: str) -> DetectionResult:
        if not text or not text.strip():
            raise InvalidInputError("Input text cannot be empty")
        return self.detector.detect(text)

    async def _cache_get(self, key: str) -> CacheEntry | None:
        try:
            return await self.cache.get(key)
        except Exception:
            logger.exception("result_cache_read_failed", key=key[-12:])
            return None

    async def _cache_set(self, key: str, entry: CacheEntry) -> None:
        try:
            await self.cache.set(key, entry)
        except Exception:
            logger.exception("result_cache_write_failed", key=key[-12:])

    def _elapsed_ms(self, started: float) -> float:
        return round((self._clock() - started) * 1000, 3)

    async def humanize(self, request: HumanizationRequest) -> HumanizationResult:
        if not self.backend.is_ready:
            raise NotReadyError("Generation model not initialized")
        validate_request(request)

        started = self._clock()
        session = self.sessions.create(request)
        session.start()
        logger.info("humanize_started", session_id=session.id, chars=len(request.input_text))

        try:
            result = await self._run(session, request, started)
        except asyncio.CancelledError:
            session.cancel()
            logger.warning("humanize_cancelled", session_id=session.id)
            raise
        except Exception as exc:
            session.fail(str(exc) or exc.__class__.__name__)
            logger.exception("humanize_failed", session_id=session.id)
            raise PipelineFailure(f"Humanization failed: {exc}", session_id=session.id) from exc

        logger.info(
            "humanize_completed",
            session_id=session.id,
            cache_hit=result.cache_hit,
            elapsed_ms=result.elapsed_ms,
            score_before=result.detection_score_before,
            score_after=result.detection_score_after,
        )
        return result

    async def _run(self, session: Session, request: HumanizationRequest, started: float) -> HumanizationResult:
        key = cache_key(request)
        if request.use_cache:
            cached = await self._cache_get(key)
            if cached is not None:
                elapsed_ms = self._elapsed_ms(started)
                session.complete(
                    output_text=cached.output_text,
                    detection_score_before=cached.detection_score_before,
                    detection_score_after=cached.detection_score_after,
                    quality_score=cached.quality_score,
                    elapsed_ms=elapsed_ms,
                    applied_patterns=list(cached.applied_patterns),
                    cache_hit=True,
                )
                return HumanizationResult(
                    session_id=session.id,
                    output_text=cached.output_text,
                    detection_score_before=cached.detection_score_before,
                    detection_score_after=cached.detection_score_after,
                    quality_score=cached.quality_score,
                    elapsed_ms=elapsed_ms,
                    applied_patterns=list(cached.applied_patterns),
                    cache_hit=True,
                    metadata=dict(request.metadata),
                )

        text = request.input_text
        features = analyzer.analyze(text)
        session.input_category = features.suggested_category
        score_before = scoring.estimate(text)

        patterns: list[Pattern]
        if request.selected_patterns is not None:
            patterns, missing = self.catalog.resolve(request.selected_patterns)
            if missing:
                logger.warning("humanize_unknown_patterns", session_id=session.id, names=missing)
            applied = list(request.selected_patterns)
            session.plan_confidence = selector.mean_confidence(patterns)
            session.expected_detection_score = selector.expected_detection_score(
                text, patterns, session.plan_confidence
            )
        else:
            target = request.target_complexity if request.target_complexity is not None else features.complexity_score
            plan = selector.select_plan(text, features.suggested_category, target, self.catalog)
            patterns = list(plan.selected_patterns)
            applied = plan.pattern_names
            session.plan_confidence = plan.confidence
            session.expected_detection_score = plan.expected_detection_score

        output = await self.backend.generate(
            text,
            patterns=patterns,
            target_style=request.target_style,
            target_complexity=request.target_complexity,
        )

        score_after = scoring.estimate(output)
        quality_score = quality.quality(text, output)
        elapsed_ms = self._elapsed_ms(started)

        await self._cache_set(
            key,
            CacheEntry(
                output_text=output,
                detection_score_before=score_before,
                detection_score_after=score_after,
                quality_score=quality_score,
                applied_patterns=tuple(applied),
                cached_at=datetime.now(timezone.utc),
            ),
        )

        session.complete(
            output_text=output,
            detection_score_before=score_before,
            detection_score_after=score_after,
            quality_score=quality_score,
            elapsed_ms=elapsed_ms,
            applied_patterns=applied,
        )
        return HumanizationResult(
            session_id=session.id,
            output_text=output,
            detection_score_before=score_before,
            detection_score_after=score_after,
            quality_score=quality_score,
            elapsed_ms=elapsed_ms,
            applied_patterns=applied,
            cache_hit=False,
            metadata=dict(request.metadata),
        )

    def stats(self) -> InferenceStats:
        sessions = self.sessions.all()
        completed = [s for s in sessions if s.status == "completed"]
        elapsed = [s.elapsed_ms for s in completed if s.elapsed_ms is not None]

        styles = Counter(s.request.get("target_style") or "neutral" for s in sessions)
        pattern_usage: Counter[str] = Counter()
        for s in completed:
            pattern_usage.update(s.applied_patterns)

        return InferenceStats(
            total_sessions=len(sessions),
            successful_sessions=len(completed),
            failed_sessions=sum(1 for s in sessions if s.status == "failed"),
            cancelled_sessions=sum(1 for s in sessions if s.status == "cancelled"),
            avg_elapsed_ms=round(_mean(elapsed), 3),
            p95_elapsed_ms=round(float(np.percentile(elapsed, 95)), 3) if elapsed else 0.0,
            avg_detection_score_after=round(
                _mean([s.detection_score_after for s in completed if s.detection_score_after is not None]), 4
            ),
            avg_quality_score=round(_mean([s.quality_score for s in completed if s.quality_score is not None]), 4),
            cache_hit_rate=round(sum(1 for s in completed if s.cache_hit) / len(completed), 4) if completed else 0.0,
            most_used_styles=styles.most_common(TOP_N_USAGE),
            most_used_patterns=pattern_usage.most_common(TOP_N_USAGE),
        )

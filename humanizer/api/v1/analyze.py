from __future__ import annotations

from fastapi import APIRouter, Depends

from humanizer.api.deps import get_engine
from humanizer.schemas.analyze import AnalyzeResponse, DetectResponse, TextRequest
from humanizer.services.analyzer import analyze
from humanizer.services.orchestrator import HumanizationOrchestrator
from humanizer.services.scoring import estimate

router = APIRouter()


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_text(body: TextRequest) -> AnalyzeResponse:
    features = analyze(body.text)
    return AnalyzeResponse(
        word_count=features.word_count,
        sentence_count=features.sentence_count,
        avg_sentence_length=features.avg_sentence_length,
        complexity_score=features.complexity_score,
        formality_score=features.formality_score,
        sentiment_score=features.sentiment_score,
        detected_patterns=sorted(features.detected_patterns),
        suggested_category=features.suggested_category,
        suggested_style=features.suggested_style,
        detection_score=estimate(body.text),
    )


@router.post("/detect", response_model=DetectResponse)
async def detect_text(body: TextRequest, engine: HumanizationOrchestrator = Depends(get_engine)) -> DetectResponse:
    result = engine.detect(body.text)
    return DetectResponse(
        is_machine_generated=result.is_machine_generated,
        confidence=result.confidence,
        sub_scores=result.sub_scores,
        explanations=result.explanations,
        model_id=engine.detector.active_model,
    )

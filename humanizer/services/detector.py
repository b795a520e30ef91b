from __future__ import annotations

import asyncio
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

from humanizer.core.errors import InvalidInputError, NotReadyError
from humanizer.core.logging import get_logger
from humanizer.services.types import DetectionResult
from humanizer.utils.text import clamp, contains_any, sentences

logger = get_logger(__name__)

AI_INDICATORS = (
    "furthermore",
    "moreover",
    "consequently",
    "nevertheless",
    "in conclusion",
    "to summarize",
    "it is important to note",
)
OVERLY_FORMAL_WORDS = ("utilize", "facilitate", "implement", "optimize")
TRANSITION_WORDS = (
    "however",
    "therefore",
    "furthermore",
    "moreover",
    "consequently",
    "nevertheless",
    "nonetheless",
    "additionally",
    "subsequently",
)
LOGICAL_SEQUENCE_WORDS = ("first", "second", "third", "finally", "in conclusion", "in summary", "to summarize")
MODEL_KINDS = frozenset({"statistical", "neural", "hybrid"})

SUB_SCORE_WEIGHTS: dict[str, float] = {
    "base_patterns": 0.3,
    "text_patterns": 0.3,
    "linguistic_features": 0.2,
    "structural_analysis": 0.2,
}

_EXPLANATIONS: dict[str, str] = {
    "base_patterns": "Text contains common AI writing patterns and formal connectors",
    "text_patterns": "Perfect grammar and lack of contractions suggest AI generation",
    "linguistic_features": "High vocabulary diversity and complex sentence structures detected",
    "structural_analysis": "Logical flow and transition word usage indicate AI writing",
}
HUMAN_EXPLANATION = "Text shows characteristics of human writing"
EXPLANATION_THRESHOLD = 0.6

_WS_RE = re.compile(r"\s+")
_PARAGRAPH_RE = re.compile(r"\n\n+")
_LEADING_CAPITAL_RE = re.compile(r"^[A-Z]")
_TRAILING_PUNCT_RE = re.compile(r"[.!?]$")
_VOWEL_RUN_RE = re.compile(r"\b\w*[aeiou]{4,}\w*\b", re.IGNORECASE)
_SERIAL_COMMA_RE = re.compile(r",\s*and")
_CONTRACTION_RE = re.compile(r"\b(don't|can't|won't|it's|you're|we're)\b")
_PASSIVE_RES = (
    re.compile(r"\b(is|are|was|were)\s+\w+ed\b"),
    re.compile(r"\bhas been\s+\w+ed\b"),
    re.compile(r"\bhave been\s+\w+ed\b"),
)
_SUBORDINATE_CLAUSE_RE = re.compile(r"\b(although|while|because)\b[^.!?]*,")
_TOPIC_SENTENCE_RE = re.compile(r"\b(the|this|these|those)\s+\w+\s+(is|are)\s+")


def _token_count(text: str) -> int:
    return max(1, len([token for token in _WS_RE.split(text.strip()) if token]))


def base_pattern_score(text: str) -> float:
    lowered = text.lower()
    score = 0.3 + 0.05 * contains_any(lowered, AI_INDICATORS)

    chunks = sentences(text)
    if len(chunks) > 2:
        mean = sum(len(chunk) for chunk in chunks) / len(chunks)
        variance = sum((len(chunk) - mean) ** 2 for chunk in chunks) / len(chunks)
        if variance < 100:
            score += 0.1

    score += (contains_any(lowered, OVERLY_FORMAL_WORDS) / _token_count(text)) * 0.2
    return clamp(score, 0.0, 1.0)


def surface_pattern_score(text: str) -> float:
    score = 0.2
    if _LEADING_CAPITAL_RE.search(text) and _TRAILING_PUNCT_RE.search(text):
        score += 0.05
    if not _VOWEL_RUN_RE.search(text):
        score += 0.05
    if _SERIAL_COMMA_RE.search(text):
        score += 0.05
    if not _CONTRACTION_RE.search(text):
        score += 0.05
    return clamp(score, 0.0, 1.0)


def linguistic_feature_score(text: str) -> float:
    score = 0.2
    tokens = text.lower().split()
    if tokens:
        if len(set(tokens)) / len(tokens) > 0.8:
            score += 0.05
        if sum(len(token) for token in tokens) / len(tokens) > 5:
            score += 0.05

    passive = sum(len(pattern.findall(text)) for pattern in _PASSIVE_RES)
    if passive > _token_count(text) * 0.1:
        score += 0.05
    if _SUBORDINATE_CLAUSE_RE.search(text.lower()):
        score += 0.05
    return clamp(score, 0.0, 1.0)


def structural_score(text: str) -> float:
    score = 0.2
    paragraphs = [paragraph for paragraph in _PARAGRAPH_RE.split(text) if paragraph.strip()]
    if len(paragraphs) == 1:
        score += 0.05

    for paragraph in paragraphs:
        chunks = sentences(paragraph)
        if chunks and _TOPIC_SENTENCE_RE.search(chunks[0]):
            score += 0.02

    lowered = text.lower()
    if contains_any(lowered, TRANSITION_WORDS) > _token_count(text) * 0.05:
        score += 0.05
    if contains_any(lowered, LOGICAL_SEQUENCE_WORDS) > 0:
        score += 0.03
    return clamp(score, 0.0, 1.0)


def explain(sub_scores: dict[str, float]) -> list[str]:
    explanations = [
        message for key, message in _EXPLANATIONS.items() if sub_scores.get(key, 0.0) > EXPLANATION_THRESHOLD
    ]
    return explanations or [HUMAN_EXPLANATION]


def score_composite(text: str) -> DetectionResult:
    sub_scores = {
        "base_patterns": round(base_pattern_score(text), 6),
        "text_patterns": round(surface_pattern_score(text), 6),
        "linguistic_features": round(linguistic_feature_score(text), 6),
        "structural_analysis": round(structural_score(text), 6),
    }
    overall = clamp(sum(sub_scores[key] * weight for key, weight in SUB_SCORE_WEIGHTS.items()), 0.0, 1.0)
    return DetectionResult(
        is_machine_generated=overall > 0.5,
        confidence=round(overall, 6),
        sub_scores=sub_scores,
        explanations=explain(sub_scores),
    )


@dataclass(frozen=True)
class LoadedModel:
    model_id: str
    path: str
    kind: str
    loaded_at: datetime


class HeuristicDetector:
    """Detection backend whose classifier is the weighted composite heuristic.

    A trained classifier can replace it behind the same ``load_model`` and
    ``detect`` signatures.
    """

    def __init__(self) -> None:
        self._models: dict[str, LoadedModel] = {}
        self._active: str | None = None

    async def load_model(self, path: str, kind: str = "statistical") -> str:
        if kind not in MODEL_KINDS:
            raise InvalidInputError(f"Unsupported detection model kind: {kind}")
        await asyncio.sleep(0)
        model_id = f"{kind}_{uuid.uuid4().hex[:12]}"
        self._models[model_id] = LoadedModel(
            model_id=model_id,
            path=path,
            kind=kind,
            loaded_at=datetime.now(timezone.utc),
        )
        self._active = model_id
        logger.info("detector_model_loaded", model_id=model_id, kind=kind, path=path)
        return model_id

    def loaded_models(self) -> list[LoadedModel]:
        return list(self._models.values())

    @property
    def active_model(self) -> str | None:
        return self._active

    def set_active_model(self, model_id: str) -> None:
        if model_id not in self._models:
            raise InvalidInputError(f"Model {model_id} not found")
        self._active = model_id

    def unload_model(self, model_id: str) -> None:
        self._models.pop(model_id, None)
        if self._active == model_id:
            self._active = None
        logger.info("detector_model_unloaded", model_id=model_id)

    def is_model_loaded(self) -> bool:
        return self._active is not None

    def detect(self, text: str) -> DetectionResult:
        if self._active is None:
            raise NotReadyError("No AI detection model loaded")
        return score_composite(text)

    async def batch_detect(self, texts: list[str]) -> list[tuple[str, DetectionResult]]:
        results: list[tuple[str, DetectionResult]] = []
        for text in texts:
            results.append((text, self.detect(text)))
            await asyncio.sleep(0)
        return results

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Literal, Union

Category = Literal["academic", "technical", "formal", "casual", "conversational", "professional", "general"]
Style = Literal["formal", "casual", "neutral"]
TargetStyle = Literal["formal", "casual", "academic", "neutral"]
PatternType = Literal["lexical", "syntactic", "semantic", "stylistic"]

TARGET_STYLES: frozenset[str] = frozenset({"formal", "casual", "academic", "neutral"})


@dataclass(frozen=True)
class TextFeatures:
    word_count: int
    sentence_count: int
    avg_sentence_length: float
    complexity_score: float
    formality_score: float
    sentiment_score: float
    detected_patterns: frozenset[str]
    suggested_category: Category
    suggested_style: Style


@dataclass(frozen=True)
class ParagraphAnalysis:
    word_count: int
    sentence_count: int
    avg_sentence_length: float
    complexity_score: int
    detected_patterns: frozenset[str]
    quality_score: float
    suggested_category: str
    suggested_style_tags: tuple[str, ...]


@dataclass(frozen=True)
class SynonymReplacement:
    kind: ClassVar[str] = "synonym_replacement"
    target_words: tuple[str, ...]
    replacements: dict[str, tuple[str, ...]]
    probability: float


@dataclass(frozen=True)
class SentenceRestructuring:
    kind: ClassVar[str] = "sentence_restructuring"
    operations: tuple[str, ...]
    probability: float


@dataclass(frozen=True)
class ConversationalEnhancement:
    kind: ClassVar[str] = "conversational_enhancement"
    insertions: tuple[str, ...]
    max_frequency: float
    probability: float


@dataclass(frozen=True)
class ContractionExpansion:
    kind: ClassVar[str] = "contraction_expansion"
    contractions: dict[str, str]
    probability: float


@dataclass(frozen=True)
class SemanticRephrasing:
    kind: ClassVar[str] = "semantic_rephrasing"
    strategies: tuple[str, ...]
    probability: float


@dataclass(frozen=True)
class PunctuationModification:
    kind: ClassVar[str] = "punctuation_modification"
    operations: tuple[str, ...]
    probability: float


TransformationRule = Union[
    SynonymReplacement,
    SentenceRestructuring,
    ConversationalEnhancement,
    ContractionExpansion,
    SemanticRephrasing,
    PunctuationModification,
]


@dataclass(frozen=True)
class Pattern:
    name: str
    pattern_type: PatternType
    description: str
    transformation_rule: TransformationRule
    confidence_weight: float
    applicable_categories: frozenset[str]


@dataclass(frozen=True)
class TransformationPlan:
    selected_patterns: tuple[Pattern, ...]
    confidence: float
    expected_detection_score: float

    @property
    def pattern_names(self) -> list[str]:
        return [pattern.name for pattern in self.selected_patterns]


@dataclass
class HumanizationRequest:
    input_text: str
    target_style: TargetStyle | None = None
    target_complexity: float | None = None
    selected_patterns: list[str] | None = None
    use_cache: bool = True
    model_version_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def cache_key_fields(self) -> dict[str, Any]:
        return {
            "input_text": self.input_text,
            "target_style": self.target_style,
            "target_complexity": self.target_complexity,
            "selected_patterns": self.selected_patterns,
            "model_version_id": self.model_version_id,
        }


@dataclass(frozen=True)
class HumanizationResult:
    session_id: str
    output_text: str
    detection_score_before: float
    detection_score_after: float
    quality_score: float
    elapsed_ms: float
    applied_patterns: list[str]
    cache_hit: bool
    metadata: dict[str, Any]


@dataclass(frozen=True)
class CacheEntry:
    output_text: str
    detection_score_before: float
    detection_score_after: float
    quality_score: float
    applied_patterns: tuple[str, ...]
    cached_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "output_text": self.output_text,
            "detection_score_before": self.detection_score_before,
            "detection_score_after": self.detection_score_after,
            "quality_score": self.quality_score,
            "applied_patterns": list(self.applied_patterns),
            "cached_at": self.cached_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> CacheEntry:
        return cls(
            output_text=str(payload["output_text"]),
            detection_score_before=float(payload["detection_score_before"]),
            detection_score_after=float(payload["detection_score_after"]),
            quality_score=float(payload["quality_score"]),
            applied_patterns=tuple(payload.get("applied_patterns", [])),
            cached_at=datetime.fromisoformat(payload["cached_at"]),
        )


@dataclass(frozen=True)
class DetectionResult:
    is_machine_generated: bool
    confidence: float
    sub_scores: dict[str, float]
    explanations: list[str]

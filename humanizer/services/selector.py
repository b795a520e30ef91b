from __future__ import annotations

from collections.abc import Iterable

from humanizer.services.scoring import baseline_estimate
from humanizer.services.types import Pattern, TransformationPlan
from humanizer.utils.text import round_half_up

IMPACT_WEIGHTS: dict[str, float] = {
    "lexical": 1.0,
    "syntactic": 2.0,
    "semantic": 3.0,
    "stylistic": 1.5,
}

EFFECTIVENESS_WEIGHTS: dict[str, float] = {
    "lexical": 0.15,
    "syntactic": 0.25,
    "semantic": 0.30,
    "stylistic": 0.20,
}

IMPACT_THRESHOLD_RATIO = 0.8


def complexity_impact(pattern: Pattern) -> float:
    return IMPACT_WEIGHTS[pattern.pattern_type] * pattern.confidence_weight


def effectiveness(pattern: Pattern) -> float:
    return EFFECTIVENESS_WEIGHTS[pattern.pattern_type] * pattern.confidence_weight


def mean_confidence(patterns: list[Pattern]) -> float:
    if not patterns:
        return 0.0
    return sum(pattern.confidence_weight for pattern in patterns) / len(patterns)


def expected_detection_score(text: str, patterns: list[Pattern], confidence: float) -> float:
    baseline = baseline_estimate(text)
    if not patterns:
        return round_half_up(baseline, 2)
    improvement = sum(effectiveness(pattern) for pattern in patterns) * confidence / len(patterns)
    return round_half_up(max(0.0, baseline - improvement), 2)


def select_plan(
    text: str,
    target_category: str,
    target_complexity: float,
    available_patterns: Iterable[Pattern],
) -> TransformationPlan:
    applicable = [pattern for pattern in available_patterns if target_category in pattern.applicable_categories]
    # sorted() is stable, so equal weights keep catalog order.
    ranked = sorted(applicable, key=lambda pattern: pattern.confidence_weight, reverse=True)

    selected: list[Pattern] = []
    accumulated = 0.0
    threshold = target_complexity * IMPACT_THRESHOLD_RATIO
    for pattern in ranked:
        if accumulated >= threshold:
            break
        selected.append(pattern)
        accumulated += complexity_impact(pattern)

    confidence = mean_confidence(selected)
    return TransformationPlan(
        selected_patterns=tuple(selected),
        confidence=confidence,
        expected_detection_score=expected_detection_score(text, selected, confidence),
    )

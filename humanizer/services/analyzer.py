"""Feature extraction for raw text.

Two entry points share the same primitives but keep their own category
heuristics: :func:`analyze` serves the humanization pipeline and
:func:`analyze_paragraph` serves dataset ingestion.
"""

from __future__ import annotations

import re

from humanizer.services.types import ParagraphAnalysis, TextFeatures
from humanizer.utils.text import clamp, contains_any, round_half_up, sentences, words

COMPLEX_CONNECTIVES = ("consequently", "nevertheless", "furthermore", "subsequently")
FORMAL_CONNECTORS = ("furthermore", "consequently", "nevertheless", "moreover", "therefore")
INFORMAL_SLANG = ("yeah", "gonna", "wanna", "kinda", "sorta")
POSITIVE_WORDS = ("good", "great", "excellent", "amazing", "wonderful")
NEGATIVE_WORDS = ("bad", "terrible", "awful", "horrible", "disappointing")

STYLE_INDICATORS: dict[str, tuple[str, ...]] = {
    "formal": ("furthermore", "consequently", "nevertheless", "moreover"),
    "casual": ("yeah", "gonna", "wanna", "kinda", "sorta"),
    "academic": ("hypothesis", "methodology", "subsequently", "empirical"),
    "conversational": ("you know", "i mean", "like", "basically"),
    "technical": ("algorithm", "implementation", "optimization", "architecture"),
}

_CONTRAST_RE = re.compile(r"\bhowever\b|\bbut\b|\balthough\b", re.IGNORECASE)
_CAUSAL_RE = re.compile(r"\bbecause\b|\bsince\b|\btherefore\b", re.IGNORECASE)
_EXEMPLIFICATION_RE = re.compile(r"\bfor example\b|\bsuch as\b|\blike\b", re.IGNORECASE)
_PARENTHETICAL_RE = re.compile(r"\([^)]+\)")
_LEADING_CAPITAL_RE = re.compile(r"^[A-Z]")
_TRAILING_PUNCT_RE = re.compile(r"[.!?]$")

_STYLE_TAG_RULES: tuple[tuple[str, str], ...] = (
    ("formal", "formal"),
    ("casual", "casual"),
    ("academic", "academic"),
    ("conversational", "conversational"),
    ("technical", "technical"),
    ("contrast_structure", "argumentative"),
    ("causal_structure", "analytical"),
    ("exemplification", "explanatory"),
)


def raw_complexity(text: str, tokens: list[str], avg_sentence_length: float) -> float:
    score = 1.0
    if tokens:
        long_words = sum(1 for token in tokens if len(token) > 6)
        score += (long_words / len(tokens)) * 3
    if avg_sentence_length > 20:
        score += 2
    elif avg_sentence_length > 15:
        score += 1
    score += contains_any(text.lower(), COMPLEX_CONNECTIVES)
    return score


def complexity_score(text: str) -> float:
    tokens = words(text)
    sentence_count = len(sentences(text))
    avg = len(tokens) / sentence_count if sentence_count else 0.0
    return round_half_up(clamp(raw_complexity(text, tokens, avg), 1.0, 10.0), 1)


def formality_score(text: str, word_count: int) -> float:
    if word_count == 0:
        return 0.5
    lowered = text.lower()
    ratio = (contains_any(lowered, FORMAL_CONNECTORS) - contains_any(lowered, INFORMAL_SLANG)) / word_count
    return clamp(0.5 + ratio * 10, 0.0, 1.0)


def sentiment_score(text: str) -> float:
    lowered = text.lower()
    positive = contains_any(lowered, POSITIVE_WORDS)
    negative = contains_any(lowered, NEGATIVE_WORDS)
    if positive + negative == 0:
        return 0.5
    return positive / (positive + negative)


def structural_patterns(text: str) -> set[str]:
    tags: set[str] = set()
    if "," in text:
        tags.add("comma_usage")
    if ";" in text:
        tags.add("semicolon_usage")
    if _CONTRAST_RE.search(text):
        tags.add("contrast_structure")
    if _CAUSAL_RE.search(text):
        tags.add("causal_structure")
    if _EXEMPLIFICATION_RE.search(text):
        tags.add("exemplification")
    return tags


def suggest_category(text: str, patterns: frozenset[str] | set[str]) -> str:
    lowered = text.lower()
    if "research" in lowered or "study" in lowered:
        return "academic"
    if "system" in lowered or "technical" in lowered:
        return "technical"
    if "business" in lowered or "professional" in lowered:
        return "professional"
    if any("conversational" in tag for tag in patterns):
        return "casual"
    return "general"


def suggest_dataset_category(text: str, patterns: frozenset[str] | set[str]) -> str:
    for style in ("academic", "technical", "formal", "casual", "conversational"):
        if any(style in tag for tag in patterns):
            return style

    lowered = text.lower()
    if contains_any(lowered, ("research", "study", "analysis")):
        return "academic"
    if contains_any(lowered, ("system", "code", "algorithm")):
        return "technical"
    if contains_any(lowered, ("business", "professional", "corporate")):
        return "formal"
    return "general"


def suggest_style(formality: float) -> str:
    if formality > 0.7:
        return "formal"
    if formality < 0.3:
        return "casual"
    return "neutral"


def analyze(text: str) -> TextFeatures:
    tokens = words(text)
    sentence_count = len(sentences(text))
    word_count = len(tokens)
    avg = word_count / sentence_count if sentence_count else 0.0

    formality = formality_score(text, word_count)
    detected = frozenset(structural_patterns(text))

    return TextFeatures(
        word_count=word_count,
        sentence_count=sentence_count,
        avg_sentence_length=avg,
        complexity_score=round_half_up(clamp(raw_complexity(text, tokens, avg), 1.0, 10.0), 1),
        formality_score=formality,
        sentiment_score=sentiment_score(text),
        detected_patterns=detected,
        suggested_category=suggest_category(text, detected),
        suggested_style=suggest_style(formality),
    )


def _dataset_patterns(text: str) -> set[str]:
    lowered = text.lower()
    tags: set[str] = set()
    for style, indicators in STYLE_INDICATORS.items():
        matches = contains_any(lowered, indicators)
        if matches:
            tags.add(f"{style}_style_{matches}")

    tags |= structural_patterns(text)
    if ":" in text:
        tags.add("colon_usage")
    if _PARENTHETICAL_RE.search(text):
        tags.add("parenthetical_usage")
    return tags


def _paragraph_quality(text: str, complexity: int) -> float:
    quality = 0.5

    if 50 <= len(words(text)) <= 300:
        quality += 0.2

    lengths = [len(words(chunk)) for chunk in sentences(text)]
    if lengths:
        mean = sum(lengths) / len(lengths)
        variance = sum((length - mean) ** 2 for length in lengths) / len(lengths)
        if variance > 4:
            quality += 0.1

    if 3 <= complexity <= 7:
        quality += 0.2
    if _LEADING_CAPITAL_RE.search(text):
        quality += 0.05
    if _TRAILING_PUNCT_RE.search(text):
        quality += 0.05

    return min(1.0, round_half_up(quality, 2))


def _style_tags(patterns: set[str]) -> tuple[str, ...]:
    tags: list[str] = []
    for tag in sorted(patterns):
        for needle, label in _STYLE_TAG_RULES:
            if needle in tag and label not in tags:
                tags.append(label)
    return tuple(tags) if tags else ("neutral",)


def analyze_paragraph(text: str) -> ParagraphAnalysis:
    tokens = words(text)
    sentence_count = len(sentences(text))
    word_count = len(tokens)
    avg = word_count / sentence_count if sentence_count else 0.0

    complexity = int(clamp(round_half_up(raw_complexity(text, tokens, avg)), 1, 10))
    detected = _dataset_patterns(text)

    return ParagraphAnalysis(
        word_count=word_count,
        sentence_count=sentence_count,
        avg_sentence_length=round_half_up(avg, 2),
        complexity_score=complexity,
        detected_patterns=frozenset(detected),
        quality_score=_paragraph_quality(text, complexity),
        suggested_category=suggest_dataset_category(text, detected),
        suggested_style_tags=_style_tags(detected),
    )


def validate_paragraph(
    text: str | None,
    category: str | None,
    complexity: float | None = None,
    quality: float | None = None,
) -> list[str]:
    errors: list[str] = []
    if not text or not text.strip():
        errors.append("Original text is required")
    elif len(text) < 20:
        errors.append("Text must be at least 20 characters long")
    elif len(text) > 2000:
        errors.append("Text must not exceed 2000 characters")

    if not category:
        errors.append("Category is required")
    if complexity is not None and not 1 <= complexity <= 10:
        errors.append("Complexity score must be between 1 and 10")
    if quality is not None and not 0 <= quality <= 1:
        errors.append("Quality score must be between 0 and 1")
    return errors

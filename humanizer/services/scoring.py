from __future__ import annotations

import re

from humanizer.utils.text import clamp

_VERY_ADJECTIVE_RE = re.compile(r"\bvery \w+\b")
_CONTRACTION_RE = re.compile(r"\bdon't\b|\bcan't\b|\bwon't\b")
_CONVERSATIONAL_RE = re.compile(r"\byou know\b|\bI mean\b")

# Plan baselines only count long sentences as uniform past this many fragments.
BASELINE_MIN_FRAGMENTS = 5


def _score(text: str, min_fragments: int) -> float:
    score = 0.5

    if "furthermore" in text or "moreover" in text:
        score += 0.1
    if "consequently" in text or "therefore" in text:
        score += 0.1
    if _VERY_ADJECTIVE_RE.search(text):
        score += 0.05

    fragments = [fragment.strip() for fragment in text.split(".")]
    if len(fragments) > min_fragments and all(len(fragment) > 20 for fragment in fragments):
        score += 0.1

    if _CONTRACTION_RE.search(text):
        score -= 0.1
    if _CONVERSATIONAL_RE.search(text):
        score -= 0.05
    if any(len(fragment) < 10 for fragment in fragments):
        score -= 0.05

    return clamp(round(score, 4), 0.0, 1.0)


def estimate(text: str) -> float:
    """Cheap machine-generation likelihood used before and after rewriting."""
    return _score(text, min_fragments=0)


def baseline_estimate(text: str) -> float:
    """Starting score for a transformation plan's expected detection score."""
    return _score(text, min_fragments=BASELINE_MIN_FRAGMENTS)

from __future__ import annotations

from humanizer.utils.text import clamp


def type_token_ratio(text: str) -> float:
    tokens = text.lower().split()
    if not tokens:
        return 0.0
    return len(set(tokens)) / len(tokens)


def quality(original: str, rewritten: str) -> float:
    score = 0.5

    if original:
        length_ratio = len(rewritten) / len(original)
        if 0.8 <= length_ratio <= 1.2:
            score += 0.2

    original_words = set(original.lower().split())
    rewritten_words = set(rewritten.lower().split())
    if original_words:
        overlap = len(original_words & rewritten_words) / len(original_words)
        score += overlap * 0.2

    if type_token_ratio(rewritten) > type_token_ratio(original):
        score += 0.1

    return round(clamp(score, 0.0, 1.0), 4)

import math
import re

_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def words(text: str) -> list[str]:
    return [token for token in _WHITESPACE_RE.split(text.strip()) if token]


def sentences(text: str) -> list[str]:
    return [chunk for chunk in _SENTENCE_SPLIT_RE.split(text) if chunk.strip()]


def contains_any(haystack: str, needles: tuple[str, ...] | list[str]) -> int:
    return sum(1 for needle in needles if needle in haystack)


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def round_half_up(value: float, digits: int = 0) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


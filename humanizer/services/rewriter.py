from __future__ import annotations

import random
import re
from collections.abc import Mapping, Sequence
from typing import Protocol

from humanizer.services.analyzer import complexity_score
from humanizer.services.types import ContractionExpansion, Pattern, SentenceRestructuring, SynonymReplacement
from humanizer.utils.text import sentences

DEFAULT_SYNONYMS: dict[str, tuple[str, ...]] = {
    "good": ("excellent", "outstanding", "superb", "remarkable"),
    "bad": ("poor", "inadequate", "substandard", "deficient"),
    "big": ("large", "substantial", "significant", "considerable"),
    "small": ("tiny", "minor", "modest", "limited"),
    "important": ("crucial", "vital", "essential", "critical"),
    "very": ("extremely", "highly", "particularly", "especially"),
}
TRANSITIONS = ("However,", "Therefore,", "In addition,", "Furthermore,")
ACADEMIC_CONNECTORS = ("furthermore,", "consequently,", "nevertheless,")
SIMPLE_TO_COMPLEX: dict[str, str] = {
    "show": "demonstrate",
    "use": "utilize",
    "help": "facilitate",
    "make": "fabricate",
    "get": "obtain",
}
COMPLEX_TO_SIMPLE: dict[str, str] = {complex_: simple for simple, complex_ in SIMPLE_TO_COMPLEX.items()}

TRANSITION_PROBABILITY = 0.3
ACADEMIC_CONNECTOR_PROBABILITY = 0.4
COMPLEXITY_SWAP_PROBABILITY = 0.3

_CASUAL_REWRITES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bdo not\b"), "don't"),
    (re.compile(r"\bwill not\b"), "won't"),
    (re.compile(r"\bcannot\b"), "can't"),
    (re.compile(r"\bit is\b"), "it's"),
)
_FORMAL_REWRITES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\bdon't\b"), "do not"),
    (re.compile(r"\bwon't\b"), "will not"),
    (re.compile(r"\bcan't\b"), "cannot"),
    (re.compile(r"\bit's\b"), "it is"),
)


class RandomSource(Protocol):
    def random(self) -> float: ...


def _word_re(word: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(word)}\b", re.IGNORECASE)


class Rewriter:
    def __init__(self, rng: RandomSource | None = None) -> None:
        self.rng: RandomSource = rng if rng is not None else random.Random()

    def _pick(self, options: Sequence[str]) -> str:
        index = int(self.rng.random() * len(options))
        return options[min(index, len(options) - 1)]

    def lexical_substitution(self, text: str, replacements: Mapping[str, Sequence[str]] | None = None) -> str:
        result = text
        for word, synonyms in (replacements or DEFAULT_SYNONYMS).items():
            if not synonyms:
                continue
            pattern = _word_re(word)
            if pattern.search(result):
                synonym = self._pick(synonyms)
                result = pattern.sub(lambda _match: synonym, result)
        return result

    def syntactic_variation(self, text: str) -> str:
        chunks = sentences(text)
        if not chunks:
            return text

        varied: list[str] = []
        for chunk in chunks:
            trimmed = chunk.strip()
            if self.rng.random() < TRANSITION_PROBABILITY:
                transition = self._pick(TRANSITIONS)
                trimmed = f"{transition} {trimmed[:1].lower()}{trimmed[1:]}"
            varied.append(trimmed)
        return ". ".join(varied) + "."

    def contraction_usage(self, text: str, contractions: Mapping[str, str], probability: float) -> str:
        result = text
        for phrase, contraction in contractions.items():
            pattern = re.compile(rf"\b{re.escape(phrase)}\b")
            if pattern.search(result) and self.rng.random() < probability:
                result = pattern.sub(contraction, result)
        return result

    def stylistic_adjustment(self, text: str, style: str | None) -> str:
        if style == "casual":
            rewrites = _CASUAL_REWRITES
        elif style == "formal":
            rewrites = _FORMAL_REWRITES
        elif style == "academic":
            if self.rng.random() < ACADEMIC_CONNECTOR_PROBABILITY:
                return f"{self._pick(ACADEMIC_CONNECTORS)} {text}"
            return text
        else:
            return text

        result = text
        for pattern, replacement in rewrites:
            result = pattern.sub(replacement, result)
        return result

    def complexity_adjustment(self, text: str, target_complexity: float | None) -> str:
        if target_complexity is None:
            return text

        current = complexity_score(text)
        if target_complexity > current:
            swaps = SIMPLE_TO_COMPLEX
        elif target_complexity < current:
            swaps = COMPLEX_TO_SIMPLE
        else:
            return text

        result = text
        for source, replacement in swaps.items():
            if self.rng.random() < COMPLEXITY_SWAP_PROBABILITY:
                result = _word_re(source).sub(replacement, result)
        return result

    def apply(
        self,
        text: str,
        *,
        patterns: Sequence[Pattern] | None = None,
        target_style: str | None = None,
        target_complexity: float | None = None,
    ) -> str:
        """Run the rewrite stages in order.

        ``patterns=None`` enables lexical and syntactic variation. Otherwise
        lexical substitution runs only when a synonym rule is present (and
        uses its replacement map), syntactic variation only when a
        restructuring rule is, and a contraction rule contracts its phrases
        before the style stage. Other rules do not change the text.
        """
        if patterns is None:
            lexical_enabled, syntactic_enabled = True, True
            replacements: Mapping[str, Sequence[str]] | None = None
            contraction_rule: ContractionExpansion | None = None
        else:
            synonym_rules = [p.transformation_rule for p in patterns if isinstance(p.transformation_rule, SynonymReplacement)]
            lexical_enabled = bool(synonym_rules)
            syntactic_enabled = any(isinstance(p.transformation_rule, SentenceRestructuring) for p in patterns)
            replacements = synonym_rules[0].replacements if synonym_rules else None
            contraction_rule = next(
                (p.transformation_rule for p in patterns if isinstance(p.transformation_rule, ContractionExpansion)),
                None,
            )

        result = text
        if lexical_enabled:
            result = self.lexical_substitution(result, replacements)
        if syntactic_enabled:
            result = self.syntactic_variation(result)
        if contraction_rule is not None:
            result = self.contraction_usage(result, contraction_rule.contractions, contraction_rule.probability)
        result = self.stylistic_adjustment(result, target_style)
        result = self.complexity_adjustment(result, target_complexity)
        return result

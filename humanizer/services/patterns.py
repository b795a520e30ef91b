from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from humanizer.services.types import (
    ContractionExpansion,
    ConversationalEnhancement,
    Pattern,
    PunctuationModification,
    SemanticRephrasing,
    SentenceRestructuring,
    SynonymReplacement,
)

_DEFAULT_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        name="Synonym Variation",
        pattern_type="lexical",
        description="Replace common words with appropriate synonyms to reduce repetition",
        transformation_rule=SynonymReplacement(
            target_words=("good", "bad", "big", "small", "important", "very"),
            replacements={
                "good": ("excellent", "outstanding", "superb", "remarkable", "exceptional"),
                "bad": ("poor", "inadequate", "substandard", "deficient", "unsatisfactory"),
                "big": ("large", "substantial", "significant", "considerable", "extensive"),
                "small": ("tiny", "minor", "modest", "limited", "compact"),
                "important": ("crucial", "vital", "essential", "significant", "critical"),
                "very": ("extremely", "highly", "particularly", "especially", "remarkably"),
            },
            probability=0.7,
        ),
        confidence_weight=0.8,
        applicable_categories=frozenset({"formal", "academic", "technical", "general"}),
    ),
    Pattern(
        name="Sentence Structure Variation",
        pattern_type="syntactic",
        description="Vary sentence structures to create more natural flow",
        transformation_rule=SentenceRestructuring(
            operations=(
                "invert_subject_verb",
                "add_transitional_phrases",
                "vary_sentence_length",
                "use_participial_phrases",
            ),
            probability=0.6,
        ),
        confidence_weight=0.9,
        applicable_categories=frozenset({"formal", "academic", "technical"}),
    ),
    Pattern(
        name="Conversational Insertions",
        pattern_type="stylistic",
        description="Add natural conversational elements and filler words",
        transformation_rule=ConversationalEnhancement(
            insertions=("you know", "I mean", "to be honest", "frankly", "actually", "basically"),
            max_frequency=0.1,
            probability=0.4,
        ),
        confidence_weight=0.7,
        applicable_categories=frozenset({"casual", "conversational"}),
    ),
    Pattern(
        name="Contractions Usage",
        pattern_type="lexical",
        description="Introduce appropriate contractions for natural writing",
        transformation_rule=ContractionExpansion(
            contractions={
                "do not": "don't",
                "will not": "won't",
                "cannot": "can't",
                "it is": "it's",
                "that is": "that's",
                "I am": "I'm",
                "you are": "you're",
                "we are": "we're",
            },
            probability=0.8,
        ),
        confidence_weight=0.6,
        applicable_categories=frozenset({"casual", "conversational", "general"}),
    ),
    Pattern(
        name="Semantic Variation",
        pattern_type="semantic",
        description="Rephrase concepts using different semantic approaches",
        transformation_rule=SemanticRephrasing(
            strategies=("change_voice", "reorder_clauses", "substitute_concepts", "modify_perspective"),
            probability=0.5,
        ),
        confidence_weight=0.9,
        applicable_categories=frozenset({"academic", "formal", "technical"}),
    ),
    Pattern(
        name="Punctuation Variation",
        pattern_type="syntactic",
        description="Vary punctuation usage for more natural rhythm",
        transformation_rule=PunctuationModification(
            operations=(
                "replace_periods_with_semicolons",
                "add_em_dashes",
                "use_parenthetical_asides",
                "vary_comma_usage",
            ),
            probability=0.3,
        ),
        confidence_weight=0.5,
        applicable_categories=frozenset({"formal", "academic", "creative"}),
    ),
)


def default_patterns() -> tuple[Pattern, ...]:
    return _DEFAULT_PATTERNS


class PatternCatalog:
    """Read-only registry of transformation patterns, in declaration order."""

    def __init__(self, patterns: Iterable[Pattern] | None = None) -> None:
        items = tuple(default_patterns() if patterns is None else patterns)
        by_name: dict[str, Pattern] = {}
        for pattern in items:
            if pattern.name in by_name:
                raise ValueError(f"Duplicate pattern name: {pattern.name}")
            if not 0.0 <= pattern.confidence_weight <= 1.0:
                raise ValueError(f"Confidence weight out of range for {pattern.name}")
            by_name[pattern.name] = pattern
        self._patterns = items
        self._by_name = by_name

    @property
    def patterns(self) -> tuple[Pattern, ...]:
        return self._patterns

    def get(self, name: str) -> Pattern | None:
        return self._by_name.get(name)

    def resolve(self, names: Sequence[str]) -> tuple[list[Pattern], list[str]]:
        found: list[Pattern] = []
        missing: list[str] = []
        for name in names:
            pattern = self._by_name.get(name)
            if pattern is None:
                missing.append(name)
            else:
                found.append(pattern)
        return found, missing

    def __iter__(self) -> Iterator[Pattern]:
        return iter(self._patterns)

    def __len__(self) -> int:
        return len(self._patterns)

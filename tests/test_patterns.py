import pytest

from humanizer.services.patterns import PatternCatalog, default_patterns
from humanizer.services.selector import expected_detection_score, select_plan
from humanizer.services.scoring import baseline_estimate
from humanizer.services.types import Pattern, SemanticRephrasing, SynonymReplacement
from humanizer.utils.text import round_half_up

ACADEMIC_TEXT = "The study examines how the method performs across settings."


def test_default_catalog_has_six_patterns_in_order():
    names = [pattern.name for pattern in default_patterns()]

    assert names == [
        "Synonym Variation",
        "Sentence Structure Variation",
        "Conversational Insertions",
        "Contractions Usage",
        "Semantic Variation",
        "Punctuation Variation",
    ]


def test_rule_payloads_are_tagged():
    kinds = [pattern.transformation_rule.kind for pattern in default_patterns()]

    assert kinds == [
        "synonym_replacement",
        "sentence_restructuring",
        "conversational_enhancement",
        "contraction_expansion",
        "semantic_rephrasing",
        "punctuation_modification",
    ]
    synonym_rule = default_patterns()[0].transformation_rule
    assert isinstance(synonym_rule, SynonymReplacement)
    assert synonym_rule.replacements["good"][0] == "excellent"


def test_catalog_resolve_reports_unknown_names():
    catalog = PatternCatalog()

    found, missing = catalog.resolve(["Contractions Usage", "Nope"])

    assert [pattern.name for pattern in found] == ["Contractions Usage"]
    assert missing == ["Nope"]
    assert len(catalog) == 6


def test_catalog_rejects_duplicates_and_bad_weights():
    pattern = default_patterns()[0]
    with pytest.raises(ValueError):
        PatternCatalog([pattern, pattern])

    bad = Pattern(
        name="Overweight",
        pattern_type="semantic",
        description="",
        transformation_rule=SemanticRephrasing(strategies=(), probability=0.1),
        confidence_weight=1.5,
        applicable_categories=frozenset({"general"}),
    )
    with pytest.raises(ValueError):
        PatternCatalog([bad])


def test_empty_pattern_list_gives_baseline_plan():
    plan = select_plan(ACADEMIC_TEXT, "academic", 5, [])

    assert plan.selected_patterns == ()
    assert plan.confidence == 0.0
    assert plan.expected_detection_score == round_half_up(baseline_estimate(ACADEMIC_TEXT), 2)


def test_greedy_selection_stops_at_threshold():
    plan = select_plan(ACADEMIC_TEXT, "academic", 5, default_patterns())

    assert plan.pattern_names == ["Sentence Structure Variation", "Semantic Variation"]
    assert plan.confidence == pytest.approx(0.9)
    expected = round_half_up(max(0.0, baseline_estimate(ACADEMIC_TEXT) - (0.25 * 0.9 + 0.30 * 0.9) * 0.9 / 2), 2)
    assert plan.expected_detection_score == expected


def test_low_target_selects_single_pattern():
    plan = select_plan(ACADEMIC_TEXT, "academic", 1, default_patterns())

    assert plan.pattern_names == ["Sentence Structure Variation"]


def test_selection_filters_by_category():
    plan = select_plan("hey there", "casual", 10, default_patterns())

    assert set(plan.pattern_names) <= {"Conversational Insertions", "Contractions Usage"}
    assert plan.pattern_names[0] == "Conversational Insertions"


@pytest.mark.parametrize("category", ["academic", "formal", "technical", "casual", "general"])
def test_plan_size_is_monotonic_in_target(category):
    sizes = [len(select_plan(ACADEMIC_TEXT, category, target, default_patterns()).selected_patterns) for target in range(1, 11)]

    assert sizes == sorted(sizes)


def test_expected_score_never_negative():
    patterns = list(default_patterns())

    assert expected_detection_score("", patterns, 1.0) >= 0.0

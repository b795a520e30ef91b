import pytest

from humanizer.services.patterns import PatternCatalog
from humanizer.services.quality import quality, type_token_ratio
from humanizer.services.rewriter import Rewriter
from tests.conftest import SequenceRandom


def test_lexical_substitution_reuses_one_synonym_per_word():
    rewriter = Rewriter(SequenceRandom([0.0]))

    assert rewriter.lexical_substitution("Good food, good mood, bad day") == "excellent food, excellent mood, poor day"


def test_lexical_substitution_uses_supplied_map():
    rewriter = Rewriter(SequenceRandom([0.99]))

    assert rewriter.lexical_substitution("a big win", {"big": ("huge", "vast")}) == "a vast win"


def test_lexical_substitution_matches_whole_words_only():
    rewriter = Rewriter(SequenceRandom([0.0]))

    assert rewriter.lexical_substitution("goodness badge") == "goodness badge"


def test_syntactic_variation_prepends_transitions():
    rewriter = Rewriter(SequenceRandom([0.1, 0.0, 0.9]))

    assert rewriter.syntactic_variation("First point. Second point.") == "However, first point. Second point."


def test_syntactic_variation_without_sentences_is_noop():
    assert Rewriter(SequenceRandom([0.0])).syntactic_variation("...") == "..."


def test_casual_style_contracts():
    rewriter = Rewriter(SequenceRandom([0.0]))

    assert rewriter.stylistic_adjustment("I do not know, it is fine", "casual") == "I don't know, it's fine"


def test_formal_style_is_idempotent():
    rewriter = Rewriter(SequenceRandom([0.0]))
    text = "I don't know, it's fine and we can't stop, we won't."

    once = rewriter.stylistic_adjustment(text, "formal")
    twice = rewriter.stylistic_adjustment(once, "formal")

    assert once == "I do not know, it is fine and we cannot stop, we will not."
    assert twice == once


@pytest.mark.parametrize(("draws", "expected"), [([0.1, 0.0], "furthermore, text"), ([0.9], "text")])
def test_academic_style_prepends_connector(draws, expected):
    assert Rewriter(SequenceRandom(draws)).stylistic_adjustment("text", "academic") == expected


def test_complexity_adjustment_direction():
    rewriter = Rewriter(SequenceRandom([0.0]))

    assert rewriter.complexity_adjustment("We use tools to help people", 9) == "We utilize tools to facilitate people"
    assert rewriter.complexity_adjustment("We use tools", None) == "We use tools"


def test_complexity_adjustment_simplifies_when_above_target():
    rewriter = Rewriter(SequenceRandom([0.0]))
    text = "Consequently we utilize tools to facilitate progress."

    assert rewriter.complexity_adjustment(text, 1) == "Consequently we use tools to help progress."


def test_apply_gates_lexical_and_syntactic_stages():
    catalog = PatternCatalog()
    rewriter = Rewriter(SequenceRandom([0.0]))
    contractions = [catalog.get("Contractions Usage")]

    assert rewriter.apply("A good plan. It is fine.", patterns=contractions) == "A good plan. It is fine."
    assert rewriter.apply("A good plan", patterns=[catalog.get("Synonym Variation")]) == "A excellent plan"


def test_contraction_rule_contracts_listed_phrases():
    rule = PatternCatalog().get("Contractions Usage")

    contracted = Rewriter(SequenceRandom([0.0])).apply("We think it is fine and that is all.", patterns=[rule])
    skipped = Rewriter(SequenceRandom([0.9])).apply("We think it is fine and that is all.", patterns=[rule])

    assert contracted == "We think it's fine and that's all."
    assert skipped == "We think it is fine and that is all."


def test_apply_runs_every_stage_without_patterns():
    rewriter = Rewriter(SequenceRandom([0.0]))

    assert rewriter.apply("A good plan. It is fine.", target_style="casual") == "However, a excellent plan. However, it's fine."


def test_quality_of_identical_text():
    text = "the quick brown fox"

    assert quality(text, text) == pytest.approx(0.9)


def test_quality_rewards_diversity_and_bounds():
    assert quality("", "fresh words") == pytest.approx(0.6)
    assert 0.0 <= quality("a a a a", "completely different longer rewritten output text") <= 1.0
    assert type_token_ratio("") == 0.0

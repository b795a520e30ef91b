import pytest

from humanizer.services.detector import HeuristicDetector, explain, score_composite
from humanizer.services.scoring import baseline_estimate, estimate
from humanizer.core.errors import InvalidInputError, NotReadyError

UNIFORM = ". ".join(f"The {ordinal} sentence here is rather long" for ordinal in ("first", "second", "third", "fourth", "fifth", "sixth"))


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("", 0.45),
        ("This is very good and it's a big improvement.", 0.5),
        ("The quarterly figures were reviewed carefully", 0.6),
        ("the model is robust and furthermore it is fast", 0.7),
        ("Furthermore the model is robust", 0.6),
        ("consequently the plan is sound and therefore safe", 0.7),
        ("I don't think so, you know", 0.45),
        (UNIFORM, 0.6),
        (UNIFORM + ".", 0.45),
    ],
)
def test_lightweight_estimate(text, expected):
    assert estimate(text) == pytest.approx(expected)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("The quarterly figures were reviewed carefully", 0.5),
        ("the model is robust and furthermore it is fast", 0.6),
        (UNIFORM, 0.6),
    ],
)
def test_plan_baseline_needs_more_than_five_long_sentences(text, expected):
    assert baseline_estimate(text) == pytest.approx(expected)


def test_lightweight_estimate_is_pure():
    text = "Furthermore, the results are very strong. Moreover they hold."

    assert estimate(text) == estimate(text)
    assert 0.0 <= estimate(text) <= 1.0


def test_composite_marks_casual_text_human():
    result = score_composite("yeah I don't think so, you know")

    assert result.is_machine_generated is False
    assert result.confidence == pytest.approx(0.265)
    assert result.explanations == ["Text shows characteristics of human writing"]
    assert set(result.sub_scores) == {"base_patterns", "text_patterns", "linguistic_features", "structural_analysis"}


def test_composite_sub_scores_are_clamped():
    text = " ".join(["Furthermore, moreover, consequently, nevertheless, in conclusion, to summarize, it is important to note."] * 5)

    result = score_composite(text)

    assert all(0.0 <= value <= 1.0 for value in result.sub_scores.values())
    assert 0.0 <= result.confidence <= 1.0


def test_explanations_follow_threshold():
    assert explain({"base_patterns": 0.7, "text_patterns": 0.2}) == [
        "Text contains common AI writing patterns and formal connectors"
    ]


@pytest.mark.asyncio
async def test_detector_requires_loaded_model():
    detector = HeuristicDetector()
    with pytest.raises(NotReadyError):
        detector.detect("some text")

    model_id = await detector.load_model("models/detector", "hybrid")

    assert detector.is_model_loaded()
    assert detector.active_model == model_id
    assert detector.detect("some text").sub_scores

    detector.unload_model(model_id)
    assert not detector.is_model_loaded()


@pytest.mark.asyncio
async def test_detector_rejects_unknown_kind():
    with pytest.raises(InvalidInputError):
        await HeuristicDetector().load_model("models/detector", "quantum")


@pytest.mark.asyncio
async def test_batch_detect_preserves_order():
    detector = HeuristicDetector()
    await detector.load_model("models/detector")

    results = await detector.batch_detect(["one text", "another text"])

    assert [text for text, _ in results] == ["one text", "another text"]

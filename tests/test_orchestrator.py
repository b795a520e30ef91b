import asyncio

import pytest

from humanizer.core.errors import InvalidInputError, NotReadyError, PipelineFailure
from humanizer.services.backends import ModelLoadConfig, RuleBasedBackend
from humanizer.services.orchestrator import HumanizationOrchestrator
from humanizer.services.patterns import default_patterns
from humanizer.services.types import HumanizationRequest

SCENARIO_TEXT = "This is very good and it's a big improvement."


class BrokenBackend:
    is_ready = True

    def initialize(self, config):
        pass

    def unload(self):
        pass

    async def generate(self, text, **kwargs):
        raise RuntimeError("rewrite exploded")


class BlockingBackend:
    is_ready = True

    def __init__(self) -> None:
        self.started = asyncio.Event()

    def initialize(self, config):
        pass

    def unload(self):
        pass

    async def generate(self, text, **kwargs):
        self.started.set()
        await asyncio.Event().wait()


class FailingCache:
    async def get(self, key):
        raise ConnectionError("cache down")

    async def set(self, key, entry):
        raise ConnectionError("cache down")

    async def clear(self):
        pass

    async def size(self):
        return 0


@pytest.mark.asyncio
async def test_casual_scenario_keeps_contraction_and_swaps_synonyms(orchestrator):
    result = await orchestrator.humanize(HumanizationRequest(input_text=SCENARIO_TEXT, target_style="casual"))

    synonyms = default_patterns()[0].transformation_rule.replacements
    assert "it's" in result.output_text
    assert any(word in result.output_text for word in synonyms["good"])
    assert any(word in result.output_text for word in synonyms["big"])
    assert result.applied_patterns == ["Synonym Variation", "Contractions Usage"]
    assert result.cache_hit is False
    assert 0.0 <= result.quality_score <= 1.0

    session = orchestrator.get_session(result.session_id)
    assert session.status == "completed"
    assert session.input_category == "general"
    assert session.output_text == result.output_text


@pytest.mark.asyncio
async def test_second_identical_request_hits_cache(orchestrator):
    request = HumanizationRequest(input_text=SCENARIO_TEXT, target_style="casual")

    first = await orchestrator.humanize(request)
    second = await orchestrator.humanize(HumanizationRequest(input_text=SCENARIO_TEXT, target_style="casual"))

    assert second.cache_hit is True
    assert second.session_id != first.session_id
    assert second.output_text == first.output_text
    assert second.detection_score_before == first.detection_score_before
    assert second.detection_score_after == first.detection_score_after
    assert second.quality_score == first.quality_score
    assert second.applied_patterns == first.applied_patterns
    assert await orchestrator.cache_size() == 1


@pytest.mark.asyncio
async def test_use_cache_false_writes_but_does_not_read(orchestrator):
    first = await orchestrator.humanize(HumanizationRequest(input_text=SCENARIO_TEXT, use_cache=False))
    assert first.cache_hit is False
    assert await orchestrator.cache_size() == 1

    bypassed = await orchestrator.humanize(HumanizationRequest(input_text=SCENARIO_TEXT, use_cache=False))
    assert bypassed.cache_hit is False

    warmed = await orchestrator.humanize(HumanizationRequest(input_text=SCENARIO_TEXT, use_cache=True))
    assert warmed.cache_hit is True
    assert warmed.output_text == bypassed.output_text


@pytest.mark.asyncio
async def test_humanize_before_initialization_is_not_ready():
    engine = HumanizationOrchestrator()

    with pytest.raises(NotReadyError):
        await engine.humanize(HumanizationRequest(input_text=SCENARIO_TEXT))

    assert engine.all_sessions() == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "request_kwargs",
    [
        {"input_text": "   "},
        {"input_text": "hello", "target_complexity": 11},
        {"input_text": "hello", "target_complexity": 0.5},
        {"input_text": "hello", "target_style": "pirate"},
    ],
)
async def test_invalid_requests_are_rejected_before_sessions(orchestrator, request_kwargs):
    with pytest.raises(InvalidInputError):
        await orchestrator.humanize(HumanizationRequest(**request_kwargs))

    assert orchestrator.all_sessions() == []


@pytest.mark.asyncio
async def test_explicit_patterns_bypass_selection(orchestrator):
    result = await orchestrator.humanize(
        HumanizationRequest(input_text="A good plan. We know it is fine.", selected_patterns=["Contractions Usage", "Nope"])
    )

    assert result.applied_patterns == ["Contractions Usage", "Nope"]
    assert result.output_text == "A good plan. We know it's fine."
    session = orchestrator.get_session(result.session_id)
    assert session.plan_confidence == pytest.approx(0.6)


@pytest.mark.asyncio
async def test_pipeline_failure_marks_session_failed():
    engine = HumanizationOrchestrator(backend=BrokenBackend())

    with pytest.raises(PipelineFailure) as excinfo:
        await engine.humanize(HumanizationRequest(input_text=SCENARIO_TEXT))

    session = engine.get_session(excinfo.value.session_id)
    assert session.status == "failed"
    assert session.error_message == "rewrite exploded"
    assert isinstance(excinfo.value.__cause__, RuntimeError)


@pytest.mark.asyncio
async def test_cancellation_marks_session_cancelled():
    backend = BlockingBackend()
    engine = HumanizationOrchestrator(backend=backend)

    task = asyncio.create_task(engine.humanize(HumanizationRequest(input_text=SCENARIO_TEXT)))
    await backend.started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    [session] = engine.all_sessions()
    assert session.status == "cancelled"
    assert session.error_message


@pytest.mark.asyncio
async def test_cache_errors_fall_back_to_computation(zero_rng):
    engine = HumanizationOrchestrator(backend=RuleBasedBackend(rng=zero_rng), cache=FailingCache())
    engine.initialize_model(ModelLoadConfig())

    result = await engine.humanize(HumanizationRequest(input_text=SCENARIO_TEXT))

    assert result.cache_hit is False
    assert engine.get_session(result.session_id).status == "completed"


@pytest.mark.asyncio
async def test_stats_summarize_sessions(orchestrator):
    request = HumanizationRequest(input_text=SCENARIO_TEXT, target_style="casual")
    await orchestrator.humanize(request)
    await orchestrator.humanize(request)

    stats = orchestrator.stats()

    assert stats.total_sessions == 2
    assert stats.successful_sessions == 2
    assert stats.failed_sessions == 0
    assert stats.cache_hit_rate == 0.5
    assert stats.most_used_styles == [("casual", 2)]
    assert stats.most_used_patterns[0] == ("Synonym Variation", 2)
    assert stats.p95_elapsed_ms >= 0.0


def test_stats_on_empty_engine():
    stats = HumanizationOrchestrator().stats()

    assert stats.total_sessions == 0
    assert stats.avg_elapsed_ms == 0.0
    assert stats.cache_hit_rate == 0.0


@pytest.mark.asyncio
async def test_clear_cache_and_model_lifecycle(orchestrator):
    await orchestrator.humanize(HumanizationRequest(input_text=SCENARIO_TEXT))
    await orchestrator.clear_cache()
    assert await orchestrator.cache_size() == 0

    orchestrator.unload_model()
    assert not orchestrator.is_model_loaded()
    with pytest.raises(NotReadyError):
        await orchestrator.humanize(HumanizationRequest(input_text=SCENARIO_TEXT))


@pytest.mark.asyncio
async def test_detect_delegates_to_loaded_detector(orchestrator):
    with pytest.raises(NotReadyError):
        orchestrator.detect("some text")

    await orchestrator.detector.load_model("models/detector")

    assert orchestrator.detect("yeah I don't think so, you know").is_machine_generated is False

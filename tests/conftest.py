from __future__ import annotations

from collections.abc import Sequence

import pytest

from humanizer.services.backends import ModelLoadConfig, RuleBasedBackend
from humanizer.services.cache import MemoryResultCache
from humanizer.services.orchestrator import HumanizationOrchestrator


class SequenceRandom:
    """Replays a fixed list of draws, cycling when exhausted."""

    def __init__(self, values: Sequence[float]) -> None:
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


@pytest.fixture
def zero_rng() -> SequenceRandom:
    return SequenceRandom([0.0])


@pytest.fixture
def orchestrator(zero_rng) -> HumanizationOrchestrator:
    engine = HumanizationOrchestrator(
        backend=RuleBasedBackend(rng=zero_rng),
        cache=MemoryResultCache(max_entries=16),
    )
    engine.initialize_model(ModelLoadConfig())
    return engine

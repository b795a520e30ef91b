from __future__ import annotations

import asyncio
import random
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from humanizer.core.errors import NotReadyError
from humanizer.core.logging import get_logger
from humanizer.services.rewriter import RandomSource, Rewriter
from humanizer.services.types import Pattern

logger = get_logger(__name__)


@dataclass(frozen=True)
class ModelLoadConfig:
    model_path: str = "rule-based"
    device: str = "cpu"
    seed: int | None = None


class GenerationBackend(Protocol):
    @property
    def is_ready(self) -> bool: ...

    def initialize(self, config: ModelLoadConfig) -> None: ...

    def unload(self) -> None: ...

    async def generate(
        self,
        text: str,
        *,
        patterns: Sequence[Pattern] | None = None,
        target_style: str | None = None,
        target_complexity: float | None = None,
    ) -> str: ...


class RuleBasedBackend:
    """Generation backend that rewrites with the heuristic ``Rewriter``.

    The rewrite runs in a worker thread so a long passage never blocks the
    event loop.
    """

    def __init__(self, rng: RandomSource | None = None) -> None:
        self._rng = rng
        self._rewriter: Rewriter | None = None
        self.config: ModelLoadConfig | None = None

    @property
    def is_ready(self) -> bool:
        return self._rewriter is not None

    def initialize(self, config: ModelLoadConfig) -> None:
        rng = self._rng
        if rng is None and config.seed is not None:
            rng = random.Random(config.seed)
        self._rewriter = Rewriter(rng)
        self.config = config
        logger.info("generation_backend_ready", model_path=config.model_path, device=config.device, seeded=config.seed is not None)

    def unload(self) -> None:
        self._rewriter = None
        self.config = None
        logger.info("generation_backend_unloaded")

    async def generate(
        self,
        text: str,
        *,
        patterns: Sequence[Pattern] | None = None,
        target_style: str | None = None,
        target_complexity: float | None = None,
    ) -> str:
        rewriter = self._rewriter
        if rewriter is None:
            raise NotReadyError("Generation model not initialized")
        return await asyncio.to_thread(
            rewriter.apply,
            text,
            patterns=patterns,
            target_style=target_style,
            target_complexity=target_complexity,
        )

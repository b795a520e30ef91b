from __future__ import annotations

import asyncio
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from humanizer.core.errors import InvalidInputError
from humanizer.core.logging import get_logger
from humanizer.models.entities import ParagraphEntity
from humanizer.services.analyzer import analyze_paragraph, validate_paragraph

logger = get_logger(__name__)


@dataclass(frozen=True)
class Paragraph:
    id: str
    dataset_id: str
    original_text: str
    category: str
    style_tags: tuple[str, ...]
    complexity_score: int
    word_count: int
    sentence_count: int
    avg_sentence_length: float
    quality_score: float
    detected_patterns: tuple[str, ...] = ()
    source_reference: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ParagraphInput:
    text: str
    category: str | None = None
    source_reference: str | None = None


@dataclass(frozen=True)
class RejectedParagraph:
    index: int
    errors: list[str]


@dataclass(frozen=True)
class IngestReport:
    dataset_id: str
    accepted: list[Paragraph]
    rejected: list[RejectedParagraph]


class DatasetStore(Protocol):
    async def write(self, dataset_id: str, paragraphs: Sequence[Paragraph]) -> None: ...

    async def read(self, dataset_id: str) -> list[Paragraph]: ...


class InMemoryDatasetStore:
    def __init__(self) -> None:
        self._datasets: dict[str, list[Paragraph]] = {}
        self._lock = asyncio.Lock()

    async def write(self, dataset_id: str, paragraphs: Sequence[Paragraph]) -> None:
        async with self._lock:
            self._datasets.setdefault(dataset_id, []).extend(paragraphs)

    async def read(self, dataset_id: str) -> list[Paragraph]:
        async with self._lock:
            return list(self._datasets.get(dataset_id, []))


class SqlDatasetStore:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def write(self, dataset_id: str, paragraphs: Sequence[Paragraph]) -> None:
        async with self.session_factory() as db:
            db.add_all(
                [
                    ParagraphEntity(
                        paragraph_id=paragraph.id,
                        dataset_id=dataset_id,
                        original_text=paragraph.original_text,
                        category=paragraph.category,
                        style_tags=list(paragraph.style_tags),
                        complexity_score=paragraph.complexity_score,
                        word_count=paragraph.word_count,
                        sentence_count=paragraph.sentence_count,
                        avg_sentence_length=paragraph.avg_sentence_length,
                        quality_score=paragraph.quality_score,
                        detected_patterns=list(paragraph.detected_patterns),
                        source_reference=paragraph.source_reference,
                        created_at=paragraph.created_at,
                    )
                    for paragraph in paragraphs
                ]
            )
            await db.commit()

    async def read(self, dataset_id: str) -> list[Paragraph]:
        async with self.session_factory() as db:
            rows = (
                await db.scalars(
                    select(ParagraphEntity)
                    .where(ParagraphEntity.dataset_id == dataset_id)
                    .order_by(ParagraphEntity.id)
                )
            ).all()
        return [
            Paragraph(
                id=row.paragraph_id,
                dataset_id=row.dataset_id,
                original_text=row.original_text,
                category=row.category,
                style_tags=tuple(row.style_tags or []),
                complexity_score=row.complexity_score,
                word_count=row.word_count,
                sentence_count=row.sentence_count,
                avg_sentence_length=row.avg_sentence_length,
                quality_score=row.quality_score,
                detected_patterns=tuple(row.detected_patterns or []),
                source_reference=row.source_reference,
                created_at=row.created_at,
            )
            for row in rows
        ]


class DatasetIngestor:
    """Analyzes raw paragraphs, drops the invalid ones and stores the rest."""

    def __init__(
        self,
        store: DatasetStore,
        *,
        quality_threshold: float = 0.0,
        complexity_range: tuple[int, int] = (1, 10),
    ) -> None:
        low, high = complexity_range
        if not 1 <= low <= high <= 10:
            raise InvalidInputError("Complexity range must lie within 1..10")
        if not 0.0 <= quality_threshold <= 1.0:
            raise InvalidInputError("Quality threshold must be between 0 and 1")
        self.store = store
        self.quality_threshold = quality_threshold
        self.complexity_range = (low, high)

    def prepare(self, dataset_id: str, index: int, item: ParagraphInput) -> Paragraph | RejectedParagraph:
        text = item.text.strip() if item.text else ""
        if not text:
            return RejectedParagraph(index=index, errors=validate_paragraph(text, item.category))

        analysis = analyze_paragraph(text)
        category = item.category or analysis.suggested_category
        errors = validate_paragraph(text, category, analysis.complexity_score, analysis.quality_score)

        low, high = self.complexity_range
        if not low <= analysis.complexity_score <= high:
            errors.append(f"Complexity score {analysis.complexity_score} outside range {low}-{high}")
        if analysis.quality_score < self.quality_threshold:
            errors.append(f"Quality score {analysis.quality_score} below threshold {self.quality_threshold}")
        if errors:
            return RejectedParagraph(index=index, errors=errors)

        return Paragraph(
            id=uuid.uuid4().hex,
            dataset_id=dataset_id,
            original_text=text,
            category=category,
            style_tags=analysis.suggested_style_tags,
            complexity_score=analysis.complexity_score,
            word_count=analysis.word_count,
            sentence_count=analysis.sentence_count,
            avg_sentence_length=analysis.avg_sentence_length,
            quality_score=analysis.quality_score,
            detected_patterns=tuple(sorted(analysis.detected_patterns)),
            source_reference=item.source_reference,
        )

    async def ingest(self, dataset_id: str, items: Sequence[ParagraphInput]) -> IngestReport:
        if not dataset_id.strip():
            raise InvalidInputError("Dataset ID is required")

        accepted: list[Paragraph] = []
        rejected: list[RejectedParagraph] = []
        for index, item in enumerate(items):
            prepared = self.prepare(dataset_id, index, item)
            if isinstance(prepared, RejectedParagraph):
                rejected.append(prepared)
            else:
                accepted.append(prepared)

        if accepted:
            await self.store.write(dataset_id, accepted)
        logger.info("dataset_ingested", dataset_id=dataset_id, accepted=len(accepted), rejected=len(rejected))
        return IngestReport(dataset_id=dataset_id, accepted=accepted, rejected=rejected)

    async def paragraphs(self, dataset_id: str) -> list[Paragraph]:
        return await self.store.read(dataset_id)

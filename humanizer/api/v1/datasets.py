from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from humanizer.api.deps import get_dataset_store
from humanizer.schemas.datasets import (
    IngestRequest,
    IngestResponse,
    ParagraphListResponse,
    ParagraphOut,
    RejectedOut,
)
from humanizer.services.datasets import DatasetIngestor, DatasetStore, Paragraph, ParagraphInput

router = APIRouter()


def _paragraph_out(paragraph: Paragraph) -> ParagraphOut:
    return ParagraphOut(
        id=paragraph.id,
        dataset_id=paragraph.dataset_id,
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


@router.post("/datasets/{dataset_id}/paragraphs", response_model=IngestResponse, status_code=status.HTTP_201_CREATED)
async def ingest_paragraphs(
    dataset_id: str,
    body: IngestRequest,
    store: DatasetStore = Depends(get_dataset_store),
) -> IngestResponse:
    if body.complexity_min > body.complexity_max:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="complexity_min exceeds complexity_max")

    ingestor = DatasetIngestor(
        store,
        quality_threshold=body.quality_threshold,
        complexity_range=(body.complexity_min, body.complexity_max),
    )
    report = await ingestor.ingest(
        dataset_id,
        [ParagraphInput(text=item.text, category=item.category, source_reference=item.source_reference) for item in body.paragraphs],
    )
    return IngestResponse(
        dataset_id=report.dataset_id,
        accepted=[_paragraph_out(paragraph) for paragraph in report.accepted],
        rejected=[RejectedOut(index=item.index, errors=item.errors) for item in report.rejected],
    )


@router.get("/datasets/{dataset_id}/paragraphs", response_model=ParagraphListResponse)
async def list_paragraphs(dataset_id: str, store: DatasetStore = Depends(get_dataset_store)) -> ParagraphListResponse:
    paragraphs = await store.read(dataset_id)
    return ParagraphListResponse(
        dataset_id=dataset_id,
        total=len(paragraphs),
        paragraphs=[_paragraph_out(paragraph) for paragraph in paragraphs],
    )

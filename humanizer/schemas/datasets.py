from datetime import datetime

from pydantic import BaseModel, Field


class ParagraphIn(BaseModel):
    text: str
    category: str | None = None
    source_reference: str | None = None


class IngestRequest(BaseModel):
    paragraphs: list[ParagraphIn] = Field(min_length=1, max_length=500)
    quality_threshold: float = Field(default=0.0, ge=0, le=1)
    complexity_min: int = Field(default=1, ge=1, le=10)
    complexity_max: int = Field(default=10, ge=1, le=10)


class ParagraphOut(BaseModel):
    id: str
    dataset_id: str
    original_text: str
    category: str
    style_tags: list[str]
    complexity_score: int
    word_count: int
    sentence_count: int
    avg_sentence_length: float
    quality_score: float
    detected_patterns: list[str]
    source_reference: str | None = None
    created_at: datetime


class RejectedOut(BaseModel):
    index: int
    errors: list[str]


class IngestResponse(BaseModel):
    dataset_id: str
    accepted: list[ParagraphOut]
    rejected: list[RejectedOut]


class ParagraphListResponse(BaseModel):
    dataset_id: str
    total: int
    paragraphs: list[ParagraphOut]

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class HumanizeRequest(BaseModel):
    text: str = Field(min_length=1, max_length=20000)
    target_style: str | None = Field(default=None, pattern="^(formal|casual|academic|neutral)$")
    target_complexity: float | None = Field(default=None, ge=1, le=10)
    patterns: list[str] | None = None
    use_cache: bool = True
    model_version_id: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class HumanizeResponse(BaseModel):
    session_id: str
    output_text: str
    detection_score_before: float
    detection_score_after: float
    quality_score: float
    elapsed_ms: float
    applied_patterns: list[str]
    cache_hit: bool
    metadata: dict[str, Any] = Field(default_factory=dict)


class SessionResponse(BaseModel):
    id: str
    status: str
    request: dict[str, Any]
    input_category: str | None = None
    plan_confidence: float | None = None
    expected_detection_score: float | None = None
    output_text: str | None = None
    detection_score_before: float | None = None
    detection_score_after: float | None = None
    quality_score: float | None = None
    elapsed_ms: float | None = None
    applied_patterns: list[str] = Field(default_factory=list)
    cache_hit: bool = False
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime


class UsageCount(BaseModel):
    name: str
    count: int


class StatsResponse(BaseModel):
    total_sessions: int
    successful_sessions: int
    failed_sessions: int
    cancelled_sessions: int
    avg_elapsed_ms: float
    p95_elapsed_ms: float
    avg_detection_score_after: float
    avg_quality_score: float
    cache_hit_rate: float
    cache_size: int
    most_used_styles: list[UsageCount]
    most_used_patterns: list[UsageCount]

from pydantic import BaseModel, Field


class TextRequest(BaseModel):
    text: str = Field(min_length=1, max_length=20000)


class AnalyzeResponse(BaseModel):
    word_count: int
    sentence_count: int
    avg_sentence_length: float
    complexity_score: float
    formality_score: float
    sentiment_score: float
    detected_patterns: list[str]
    suggested_category: str
    suggested_style: str
    detection_score: float


class DetectResponse(BaseModel):
    is_machine_generated: bool
    confidence: float
    sub_scores: dict[str, float]
    explanations: list[str]
    model_id: str | None = None

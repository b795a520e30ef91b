from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from humanizer.db.base import Base


class ParagraphEntity(Base):
    __tablename__ = "dataset_paragraphs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    paragraph_id: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    dataset_id: Mapped[str] = mapped_column(String(64), index=True)
    original_text: Mapped[str] = mapped_column(Text)
    category: Mapped[str] = mapped_column(String(32))
    style_tags: Mapped[list] = mapped_column(JSON, default=list)
    complexity_score: Mapped[int] = mapped_column(Integer)
    word_count: Mapped[int] = mapped_column(Integer)
    sentence_count: Mapped[int] = mapped_column(Integer)
    avg_sentence_length: Mapped[float] = mapped_column(Float)
    quality_score: Mapped[float] = mapped_column(Float)
    detected_patterns: Mapped[list] = mapped_column(JSON, default=list)
    source_reference: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Literal

from humanizer.services.types import HumanizationRequest

SessionStatus = Literal["pending", "processing", "completed", "failed", "cancelled"]

TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "failed", "cancelled"})

_TRANSITIONS: dict[str, frozenset[str]] = {
    "pending": frozenset({"processing", "failed", "cancelled"}),
    "processing": frozenset({"completed", "failed", "cancelled"}),
    "completed": frozenset(),
    "failed": frozenset(),
    "cancelled": frozenset(),
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InvalidTransition(RuntimeError):
    pass


@dataclass
class Session:
    id: str
    request: dict[str, Any]
    status: SessionStatus = "pending"
    input_category: str | None = None
    plan_confidence: float | None = None
    expected_detection_score: float | None = None
    output_text: str | None = None
    detection_score_before: float | None = None
    detection_score_after: float | None = None
    quality_score: float | None = None
    elapsed_ms: float | None = None
    applied_patterns: list[str] = field(default_factory=list)
    cache_hit: bool = False
    error_message: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def _move(self, status: SessionStatus) -> None:
        if status not in _TRANSITIONS[self.status]:
            raise InvalidTransition(f"Session {self.id} cannot move from {self.status} to {status}")
        self.status = status
        self.updated_at = _utcnow()

    def start(self) -> None:
        self._move("processing")

    def complete(
        self,
        *,
        output_text: str,
        detection_score_before: float,
        detection_score_after: float,
        quality_score: float,
        elapsed_ms: float,
        applied_patterns: list[str],
        cache_hit: bool = False,
    ) -> None:
        self._move("completed")
        self.output_text = output_text
        self.detection_score_before = detection_score_before
        self.detection_score_after = detection_score_after
        self.quality_score = quality_score
        self.elapsed_ms = elapsed_ms
        self.applied_patterns = list(applied_patterns)
        self.cache_hit = cache_hit

    def fail(self, message: str) -> None:
        self._move("failed")
        self.error_message = message

    def cancel(self, message: str = "Request cancelled") -> None:
        self._move("cancelled")
        self.error_message = message

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status,
            "request": dict(self.request),
            "input_category": self.input_category,
            "plan_confidence": self.plan_confidence,
            "expected_detection_score": self.expected_detection_score,
            "output_text": self.output_text,
            "detection_score_before": self.detection_score_before,
            "detection_score_after": self.detection_score_after,
            "quality_score": self.quality_score,
            "elapsed_ms": self.elapsed_ms,
            "applied_patterns": list(self.applied_patterns),
            "cache_hit": self.cache_hit,
            "error_message": self.error_message,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


def request_snapshot(request: HumanizationRequest) -> dict[str, Any]:
    return {
        "input_text": request.input_text,
        "target_style": request.target_style,
        "target_complexity": request.target_complexity,
        "selected_patterns": list(request.selected_patterns) if request.selected_patterns is not None else None,
        "use_cache": request.use_cache,
        "model_version_id": request.model_version_id,
        "metadata": dict(request.metadata),
    }


class SessionStore:
    """Process-local session registry.

    Each session is mutated only by the request that created it.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def create(self, request: HumanizationRequest) -> Session:
        session = Session(id=str(uuid.uuid4()), request=request_snapshot(request))
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def all(self) -> list[Session]:
        return list(self._sessions.values())

    def __len__(self) -> int:
        return len(self._sessions)

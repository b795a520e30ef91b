import pytest

from humanizer.services.sessions import InvalidTransition, SessionStore
from humanizer.services.types import HumanizationRequest


def _session():
    return SessionStore().create(HumanizationRequest(input_text="hello", metadata={"source": "test"}))


def test_new_session_is_pending_with_snapshot():
    session = _session()

    assert session.status == "pending"
    assert session.request["input_text"] == "hello"
    assert session.request["metadata"] == {"source": "test"}
    assert session.created_at.tzinfo is not None


def test_complete_records_scores():
    session = _session()
    session.start()
    session.complete(
        output_text="hi",
        detection_score_before=0.5,
        detection_score_after=0.4,
        quality_score=0.8,
        elapsed_ms=1.5,
        applied_patterns=["Synonym Variation"],
    )

    assert session.status == "completed"
    assert session.is_terminal
    payload = session.to_dict()
    assert payload["output_text"] == "hi"
    assert payload["error_message"] is None


def test_terminal_session_rejects_transitions():
    session = _session()
    session.start()
    session.fail("boom")

    assert session.error_message == "boom"
    with pytest.raises(InvalidTransition):
        session.cancel()


def test_pending_cannot_complete_directly():
    session = _session()

    with pytest.raises(InvalidTransition):
        session.complete(
            output_text="x",
            detection_score_before=0.5,
            detection_score_after=0.5,
            quality_score=0.5,
            elapsed_ms=0.0,
            applied_patterns=[],
        )


def test_store_lookup():
    store = SessionStore()
    session = store.create(HumanizationRequest(input_text="a"))

    assert store.get(session.id) is session
    assert store.get("missing") is None
    assert store.all() == [session]
    assert len(store) == 1

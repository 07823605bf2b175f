from __future__ import annotations

from grading_core.attempts import best_score, latest_attempts
from grading_core.types import AttemptRecord

RECORDS = [
    AttemptRecord(id="r1", activity_id="a1", answers="x", score=0, completed_at="2024-03-01T10:00:00+00:00"),
    AttemptRecord(id="r2", activity_id="a1", answers="y", score=100, completed_at="2024-03-02T09:00:00+00:00"),
    AttemptRecord(id="r3", activity_id="a2", answers=None, score=None, completed_at="2024-03-01T08:00:00+00:00"),
    {"id": "r4", "learningActivityId": "a1", "answers": "z", "score": 50,
     "completedAt": "2024-03-01T12:00:00+00:00", "timeSpent": 30},
    AttemptRecord(id="r5", activity_id="other", score=100, completed_at="2025-01-01T00:00:00+00:00"),
]


def test_latest_attempt_and_count_per_activity():
    out = latest_attempts(RECORDS, ["a1", "a2"])
    assert set(out) == {"a1", "a2"}
    assert out["a1"]["attempt_count"] == 3
    assert out["a1"]["most_recent_attempt"]["id"] == "r2"
    assert out["a1"]["most_recent_attempt"]["score"] == 100
    assert out["a2"]["attempt_count"] == 1
    assert out["a2"]["most_recent_attempt"]["id"] == "r3"


def test_requested_ids_without_attempts_are_present():
    out = latest_attempts(RECORDS, ["a3"])
    assert out == {"a3": {"most_recent_attempt": None, "attempt_count": 0}}


def test_no_ids_means_empty_result():
    assert latest_attempts(RECORDS, []) == {}


def test_camel_case_records_are_read():
    out = latest_attempts(RECORDS[3:4], ["a1"])
    recent = out["a1"]["most_recent_attempt"]
    assert recent["time_spent"] == 30
    assert recent["completed_at"] == "2024-03-01T12:00:00+00:00"


def test_best_score_ignores_ungraded():
    assert best_score(RECORDS, "a1") == 100
    assert best_score(RECORDS, "a2") is None
    assert best_score(RECORDS, "missing") is None

"""Per-activity summaries over a learner's attempt history."""
from __future__ import annotations
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union
from .types import AttemptRecord

RecordLike = Union[AttemptRecord, Mapping[str, Any]]


def _as_record(raw: RecordLike) -> AttemptRecord:
    if isinstance(raw, AttemptRecord):
        return raw
    return AttemptRecord(
        id=str(raw.get("id", "")),
        activity_id=str(raw.get("activity_id") or raw.get("learningActivityId") or ""),
        answers=raw.get("answers"),
        score=raw.get("score"),
        completed_at=str(raw.get("completed_at") or raw.get("completedAt") or ""),
        time_spent=raw.get("time_spent", raw.get("timeSpent")),
    )


def latest_attempts(records: Iterable[RecordLike], activity_ids: Iterable[str]) -> Dict[str, Dict[str, Any]]:
    """
    Map every requested activity id to its most recent attempt and attempt count.

    Ids with no attempts are still present, with `most_recent_attempt` None and a
    count of 0. Attempts for activities that were not requested are ignored.
    """
    wanted = list(dict.fromkeys(activity_ids))
    if not wanted:
        return {}
    wanted_set = set(wanted)
    latest: Dict[str, AttemptRecord] = {}
    counts: Dict[str, int] = {}
    for raw in records:
        rec = _as_record(raw)
        if rec.activity_id not in wanted_set:
            continue
        counts[rec.activity_id] = counts.get(rec.activity_id, 0) + 1
        cur = latest.get(rec.activity_id)
        # ISO-8601 timestamps compare correctly as strings
        if cur is None or rec.completed_at > cur.completed_at:
            latest[rec.activity_id] = rec

    out: Dict[str, Dict[str, Any]] = {}
    for aid in wanted:
        rec = latest.get(aid)
        recent: Optional[Dict[str, Any]] = None
        if rec is not None:
            recent = {k: v for k, v in asdict(rec).items() if k != "activity_id"}
        out[aid] = {"most_recent_attempt": recent, "attempt_count": counts.get(aid, 0)}
    return out


def best_score(records: Iterable[RecordLike], activity_id: str) -> Optional[int]:
    scores: List[int] = []
    for raw in records:
        rec = _as_record(raw)
        if rec.activity_id == activity_id and isinstance(rec.score, int) and not isinstance(rec.score, bool):
            scores.append(rec.score)
    return max(scores) if scores else None


__all__ = ["latest_attempts", "best_score"]

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Mapping, Optional, Literal
ActivityType = Literal[
    "SHORT_ANSWER",
    "FILL_IN_BLANK",
    "SORTING_RANKING",
    "CLASSIFICATION",
    "NUMERIC_ENTRY",
    "TABLE_COMPLETION",
    "ERROR_SPOTTING",
    "DEEP_DIVE",
]
ACTIVITY_TYPES: tuple[str, ...] = (
    "SHORT_ANSWER",
    "FILL_IN_BLANK",
    "SORTING_RANKING",
    "CLASSIFICATION",
    "NUMERIC_ENTRY",
    "TABLE_COMPLETION",
    "ERROR_SPOTTING",
    "DEEP_DIVE",
)
AUTO_GRADED_TYPES: tuple[str, ...] = tuple(t for t in ACTIVITY_TYPES if t != "DEEP_DIVE")


def _pick(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in raw:
            return raw[k]
    return default


@dataclass
class Activity:
    id: str
    activity_type: ActivityType
    correct_answers: Any = None
    tolerance: Optional[float] = None
    content: Dict[str, Any] = field(default_factory=dict)
    title: Optional[str] = None
    instructions: Optional[str] = None
    module: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Activity":
        """Build from either the camelCase authoring JSON or snake_case keys."""
        content = _pick(raw, "content", default=None)
        return cls(
            id=str(_pick(raw, "id", default="") or ""),
            activity_type=str(_pick(raw, "activity_type", "activityType", default="") or "").upper(),
            correct_answers=_pick(raw, "correct_answers", "correctAnswers"),
            tolerance=_pick(raw, "tolerance"),
            content=content if isinstance(content, dict) else {},
            title=_pick(raw, "title"),
            instructions=_pick(raw, "instructions"),
            module=_pick(raw, "module", "moduleId"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AttemptGrade:
    activity_id: str
    activity_type: ActivityType
    score: Optional[int]
    is_graded: bool


@dataclass
class AttemptRecord:
    id: str; activity_id: str; answers: Any = None
    score: Optional[int] = None
    completed_at: str = ""
    time_spent: Optional[int] = None

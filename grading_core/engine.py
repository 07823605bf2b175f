"""
Dispatch an attempt to the grader for its activity type.

Grading is fail-soft: a submission that cannot be graded scores 0 instead of
raising, so one malformed attempt never blocks the rest of a batch. Every
grader is wrapped by `fail_soft`, and so is the dispatcher itself.
"""
from __future__ import annotations
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple, Union
import functools
import logging
from .types import Activity, AttemptGrade
from .graders import (
    grade_classification,
    grade_error_spotting,
    grade_fill_in_blank,
    grade_numeric_entry,
    grade_short_answer,
    grade_sorting_ranking,
    grade_table_completion,
)

log = logging.getLogger(__name__)

ActivityLike = Union[Activity, Mapping[str, Any]]


def fail_soft(fn: Callable[..., int]) -> Callable[..., int]:
    @functools.wraps(fn)
    def wrapper(*args, **kwargs) -> int:
        try:
            score = fn(*args, **kwargs)
        except Exception as exc:
            log.debug("ungradable input in %s: %r", fn.__name__, exc)
            return 0
        if not isinstance(score, int) or isinstance(score, bool):
            return 0
        return max(0, min(100, score))
    return wrapper


def _content_items(activity: Activity) -> Any:
    return (activity.content or {}).get("items")


def _sorting(activity: Activity, answers: Any) -> int:
    order = _content_items(activity)
    if order is None:
        order = activity.correct_answers
    return grade_sorting_ranking(answers, order)


def _classification(activity: Activity, answers: Any) -> int:
    key = activity.correct_answers
    if key is None:
        key = _content_items(activity)
    return grade_classification(answers, key)


def _deep_dive(activity: Activity, answers: Any) -> int:
    # reviewed by an instructor, never auto-graded
    return 0


GRADERS: Dict[str, Callable[[Activity, Any], int]] = {
    "SHORT_ANSWER": lambda a, ans: grade_short_answer(ans, a.correct_answers),
    "FILL_IN_BLANK": lambda a, ans: grade_fill_in_blank(ans, a.correct_answers),
    "SORTING_RANKING": _sorting,
    "CLASSIFICATION": _classification,
    "NUMERIC_ENTRY": lambda a, ans: grade_numeric_entry(ans, a.correct_answers, a.tolerance),
    "TABLE_COMPLETION": lambda a, ans: grade_table_completion(ans, a.correct_answers),
    "ERROR_SPOTTING": lambda a, ans: grade_error_spotting(ans, a.correct_answers),
    "DEEP_DIVE": _deep_dive,
}
GRADERS = {name: fail_soft(fn) for name, fn in GRADERS.items()}


def _as_activity(activity: ActivityLike) -> Activity:
    if isinstance(activity, Activity):
        return activity
    return Activity.from_dict(activity)


@fail_soft
def grade_activity_attempt(activity: ActivityLike, submitted_answer: Any) -> int:
    """Return a 0..100 score. DEEP_DIVE and unknown types score 0."""
    act = _as_activity(activity)
    grader = GRADERS.get(str(act.activity_type).upper())
    if grader is None:
        log.debug("no grader for activity type %r (activity %s)", act.activity_type, act.id)
        return 0
    return grader(act, submitted_answer)


def grade_attempt(activity: ActivityLike, answers: Any) -> AttemptGrade:
    try:
        act = _as_activity(activity)
    except Exception as exc:
        log.debug("unreadable activity: %r", exc)
        return AttemptGrade(activity_id="", activity_type="", score=0, is_graded=True)
    if str(act.activity_type).upper() == "DEEP_DIVE":
        return AttemptGrade(activity_id=act.id, activity_type=act.activity_type, score=None, is_graded=False)
    score = grade_activity_attempt(act, answers)
    return AttemptGrade(activity_id=act.id, activity_type=act.activity_type, score=score, is_graded=True)


def grade_batch(pairs: Iterable[Tuple[ActivityLike, Any]]) -> List[AttemptGrade]:
    """Grade (activity, answers) pairs in order; attempts are independent of each other."""
    return [grade_attempt(activity, answers) for activity, answers in pairs]


__all__ = ["GRADERS", "fail_soft", "grade_activity_attempt", "grade_attempt", "grade_batch"]

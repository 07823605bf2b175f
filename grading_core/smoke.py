from __future__ import annotations

import logging
from typing import Any, List, Optional

from .activity_bank import load_activities
from .config import LOG_LEVEL, load_config
from .engine import grade_attempt
from .types import Activity


def _configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format="[%(levelname)s] %(message)s")


def model_answer(act: Activity) -> Any:
    """The submission a learner who knows the answer key would send."""
    key = act.correct_answers
    if act.activity_type == "SHORT_ANSWER":
        return key[0] if key else ""
    if act.activity_type == "SORTING_RANKING":
        return list(act.content.get("items") or key or [])
    if act.activity_type == "CLASSIFICATION" and key is None:
        return dict(act.content.get("items") or {})
    if isinstance(key, list):
        return list(key)
    if isinstance(key, dict):
        return dict(key)
    return key


def wrong_answer(act: Activity) -> Any:
    right = model_answer(act)
    if isinstance(right, list):
        return list(reversed(right)) if len(right) > 1 else ["?"]
    if isinstance(right, dict):
        return {k: "?" for k in right}
    if isinstance(right, (int, float)):
        return right * 10 + 1000
    return "nothing"


def run(path: Optional[str] = None) -> List[str]:
    """Grade every activity with its model and a wrong answer; return failures."""
    failures: List[str] = []
    activities = load_activities(path)
    logging.info("Smoke grading %d activities", len(activities))
    for act in activities:
        good = grade_attempt(act, model_answer(act))
        bad = grade_attempt(act, wrong_answer(act))
        logging.info(
            "%s %-16s model=%s wrong=%s graded=%s",
            act.id, act.activity_type, good.score, bad.score, good.is_graded,
        )
        if not good.is_graded:
            continue
        if good.score != 100:
            failures.append(f"{act.id}: model answer scored {good.score}")
        if bad.score == 100:
            failures.append(f"{act.id}: wrong answer scored 100")
    return failures


def main() -> int:
    cfg = load_config()
    _configure_logging(cfg.get("LOG_LEVEL", LOG_LEVEL))
    failures = run(cfg.get("ACTIVITIES_PATH"))
    for msg in failures:
        logging.error(msg)
    logging.info("Smoke finished with %d failures", len(failures))
    return 1 if failures else 0


if __name__ == "__main__":
    raise SystemExit(main())

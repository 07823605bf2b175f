from __future__ import annotations
from typing import Any, Mapping
import math
from . import config
from .normalize import normalize_answer

_LISTS = (list, tuple)


def _percent(correct: int, total: int) -> int:
    # Math.round semantics: halves go up
    if total <= 0:
        return 0
    return int(math.floor(correct * 100.0 / total + 0.5))


def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def grade_short_answer(user_answer: Any, correct_answers: Any) -> int:
    if not isinstance(user_answer, str) or not user_answer:
        return 0
    if not isinstance(correct_answers, _LISTS):
        return 0
    target = normalize_answer(user_answer)
    if not target:
        return 0
    accepted = {normalize_answer(a) for a in correct_answers}
    return 100 if target in accepted else 0


def grade_fill_in_blank(user_answers: Any, correct_answers: Any) -> int:
    """Positional: a different number of blanks is a different question, so it scores 0."""
    if not isinstance(user_answers, _LISTS) or not isinstance(correct_answers, _LISTS):
        return 0
    if len(user_answers) != len(correct_answers):
        return 0
    hits = sum(
        1 for given, want in zip(user_answers, correct_answers)
        if normalize_answer(given) == normalize_answer(want)
    )
    return _percent(hits, len(correct_answers))


def grade_sorting_ranking(user_order: Any, correct_order: Any) -> int:
    # labels are fixed strings, compared as-is
    if not isinstance(user_order, _LISTS) or not isinstance(correct_order, _LISTS):
        return 0
    if not correct_order or len(user_order) != len(correct_order):
        return 0
    return 100 if all(a == b for a, b in zip(user_order, correct_order)) else 0


def grade_classification(user_map: Any, correct_map: Any) -> int:
    if not isinstance(user_map, Mapping) or not isinstance(correct_map, Mapping):
        return 0
    if len(user_map) != len(correct_map):
        return 0
    hits = sum(
        1 for key, want in correct_map.items()
        if normalize_answer(user_map.get(key)) == normalize_answer(want)
    )
    return _percent(hits, len(correct_map))


def grade_numeric_entry(user_answer: Any, correct_answer: Any, tolerance: Any = None) -> int:
    """
    tolerance None     -> exact equality
    tolerance >= 1     -> percentage band around the correct value
    tolerance < 1      -> absolute band
    A percentage band around 0 is undefined, so a correct value of 0 needs an exact answer.
    """
    if not _is_number(user_answer) or not _is_number(correct_answer):
        return 0
    if tolerance is None:
        return 100 if user_answer == correct_answer else 0
    if not _is_number(tolerance):
        return 0
    if tolerance >= config.PERCENT_TOLERANCE_FLOOR:
        if correct_answer == 0:
            return 100 if user_answer == 0 else 0
        pct = abs((user_answer - correct_answer) / correct_answer) * 100
        return 100 if pct <= tolerance else 0
    return 100 if abs(user_answer - correct_answer) <= tolerance else 0


def grade_table_completion(user_answers: Any, correct_answers: Any) -> int:
    """Cells are keyed "{row}_{col}"; an empty key grades 0 rather than a free 100."""
    if not isinstance(user_answers, Mapping) or not isinstance(correct_answers, Mapping):
        return 0
    if not correct_answers:
        return 0
    hits = 0
    for key, want in correct_answers.items():
        given = user_answers.get(key) or ""
        if normalize_answer(given) == normalize_answer(want or ""):
            hits += 1
    return _percent(hits, len(correct_answers))


def significant_words(text: Any) -> list[str]:
    return [w for w in normalize_answer(text).split() if len(w) > config.ERROR_SPOT_MIN_WORD_LEN]


def grade_error_spotting(user_answer: Any, correct_answer: Any) -> int:
    """
    Word-overlap grading for free-text error descriptions.

    similarity = (user words found among the correct words) / (correct words),
    counted per user word, so a repeated word counts each time it appears.
    """
    if not isinstance(user_answer, str) or not isinstance(correct_answer, str):
        return 0
    if not user_answer or not correct_answer:
        return 0
    want = significant_words(correct_answer)
    if not want:
        return 0
    given = significant_words(user_answer)
    similarity = sum(1 for w in given if w in want) / len(want)
    if similarity >= config.ERROR_SPOT_FULL_CREDIT:
        return 100
    if similarity >= config.ERROR_SPOT_PARTIAL_CREDIT:
        return config.ERROR_SPOT_PARTIAL_SCORE
    return 0


__all__ = [
    "grade_short_answer",
    "grade_fill_in_blank",
    "grade_sorting_ranking",
    "grade_classification",
    "grade_numeric_entry",
    "grade_table_completion",
    "grade_error_spotting",
    "significant_words",
]

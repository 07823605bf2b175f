"""
Load authored activities from JSON, or import them from the authoring CSV.

CSV layout: one activity per row, `ActivityType` required on every row, the
other columns depending on the type (`Question`, `CorrectAnswer1..3`,
`Item1..N`, `Category1..N`, `item|category` columns, `TableJSON`, ...).
Rows that cannot be turned into an activity are reported, never fatal.
"""
from __future__ import annotations
import csv, json, logging, math, importlib.resources as ir
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from . import config
from .types import Activity

log = logging.getLogger(__name__)


def load_activities(path: Optional[str | Path] = None) -> List[Activity]:
    if path is None:
        data = ir.files(__package__).joinpath("data/activities.json").read_text(encoding="utf-8")
    else:
        data = Path(path).read_text(encoding="utf-8")
    raw = json.loads(data)
    return [Activity.from_dict(r) for r in raw]


class _Row:
    def __init__(self, header: Dict[str, int], fields: List[str]):
        self.header = header
        self.fields = fields

    def get(self, name: str) -> str:
        idx = self.header.get(name)
        if idx is None or idx >= len(self.fields):
            return ""
        return self.fields[idx].strip()

    def has(self, name: str) -> bool:
        return name in self.header

    def numbered(self, prefix: str) -> List[str]:
        out: List[str] = []
        n = 1
        while self.has(f"{prefix}{n}"):
            val = self.get(f"{prefix}{n}")
            if val:
                out.append(val)
            n += 1
        return out


class RowError(ValueError):
    pass


def _short_answer(row: _Row) -> Tuple[dict, Any, Optional[float]]:
    question = row.get("Question")
    answers = [row.get(f"CorrectAnswer{i}") for i in range(1, config.SHORT_ANSWER_ALTERNATES + 1)]
    if not question or not answers[0]:
        raise RowError("missing question or answer")
    return {"question": question}, [a for a in answers if a], None


def _fill_in_blank(row: _Row) -> Tuple[dict, Any, Optional[float]]:
    text, answer = row.get("Text"), row.get("CorrectAnswer")
    if not text or not answer:
        raise RowError("missing text or answer")
    return {"text": text}, [answer], None


def _sorting(row: _Row) -> Tuple[dict, Any, Optional[float]]:
    items = row.numbered("Item")
    if len(items) < config.MIN_SORT_ITEMS:
        raise RowError(f"at least {config.MIN_SORT_ITEMS} items required for sorting")
    # authored order is the correct order
    return {"items": items, "instructions": row.get("Instructions")}, list(items), None


def _classification(row: _Row) -> Tuple[dict, Any, Optional[float]]:
    categories = row.numbered("Category")
    items: Dict[str, str] = {}
    for name in row.header:
        if "|" not in name:
            continue
        cell = row.get(name).strip('"')
        if "|" not in cell:
            continue
        item, category = (part.strip() for part in cell.split("|", 1))
        if item and category:
            items[item] = category
    if len(categories) < config.MIN_CLASSIFICATION_CATEGORIES or not items:
        raise RowError(f"at least {config.MIN_CLASSIFICATION_CATEGORIES} categories and some items required")
    content = {"categories": categories, "items": items, "instructions": row.get("Instructions")}
    return content, dict(items), None


def _numeric(row: _Row) -> Tuple[dict, Any, Optional[float]]:
    question, answer, tol = row.get("Question"), row.get("CorrectAnswer"), row.get("Tolerance")
    if not question or not answer:
        raise RowError("missing question or answer")
    try:
        value = float(answer)
    except ValueError:
        raise RowError(f"invalid numeric answer {answer!r}") from None
    if not math.isfinite(value):
        raise RowError(f"invalid numeric answer {answer!r}")
    tolerance: Optional[float] = None
    if tol:
        try:
            tolerance = float(tol)
        except ValueError:
            raise RowError(f"invalid tolerance {tol!r}") from None
        if not math.isfinite(tolerance):
            raise RowError(f"invalid tolerance {tol!r}")
    return {"question": question}, value, tolerance


def _table(row: _Row) -> Tuple[dict, Any, Optional[float]]:
    table_json, answers_json = row.get("TableJSON"), row.get("AnswersJSON")
    if not table_json or not answers_json:
        raise RowError("missing TableJSON or AnswersJSON")
    try:
        table = json.loads(table_json)
        answers = json.loads(answers_json)
    except ValueError as exc:
        raise RowError(f"invalid JSON: {exc}") from None
    return {"table": table, "instructions": row.get("Instructions")}, answers, None


def _error_spotting(row: _Row) -> Tuple[dict, Any, Optional[float]]:
    wrong, question, answer = row.get("IncorrectSolution"), row.get("Question"), row.get("CorrectAnswer")
    if not wrong or not question or not answer:
        raise RowError("missing fields")
    return {"incorrectSolution": wrong, "question": question}, answer, None


def _deep_dive(row: _Row) -> Tuple[dict, Any, Optional[float]]:
    topic = row.get("Topic")
    if not topic:
        raise RowError("missing topic")
    questions = [row.get(f"Question{i}") for i in range(1, config.DEEP_DIVE_QUESTIONS + 1)]
    questions = [q for q in questions if q]
    if not questions:
        raise RowError("at least one question required")
    return {"topic": topic, "questions": questions}, None, None


_BUILDERS = {
    "SHORT_ANSWER": _short_answer,
    "FILL_IN_BLANK": _fill_in_blank,
    "SORTING_RANKING": _sorting,
    "CLASSIFICATION": _classification,
    "NUMERIC_ENTRY": _numeric,
    "TABLE_COMPLETION": _table,
    "ERROR_SPOTTING": _error_spotting,
    "DEEP_DIVE": _deep_dive,
}


def parse_activities_csv(text: str) -> Tuple[List[Activity], List[str]]:
    """Return (activities, errors). Errors read "Line N: reason", N counting non-blank lines."""
    lines = [ln for ln in (text or "").splitlines() if ln.strip()]
    if len(lines) < 2:
        raise ValueError("CSV must contain a header and at least one data row")

    reader = csv.reader(lines, skipinitialspace=True, escapechar="\\")
    header_fields = next(reader)
    header = {name.strip(): i for i, name in enumerate(header_fields)}

    activities: List[Activity] = []
    errors: List[str] = []
    for lineno, fields in enumerate(reader, start=2):
        row = _Row(header, fields)
        kind = row.get("ActivityType").upper()
        if not kind:
            errors.append(f"Line {lineno}: missing ActivityType")
            continue
        builder = _BUILDERS.get(kind)
        if builder is None:
            errors.append(f"Line {lineno}: unknown activity type {kind}")
            continue
        try:
            content, correct, tolerance = builder(row)
        except RowError as exc:
            errors.append(f"Line {lineno}: {exc}")
            continue
        activities.append(
            Activity(
                id=f"csv-{lineno}",
                activity_type=kind,
                correct_answers=correct,
                tolerance=tolerance,
                content=content,
                title=row.get("Title") or None,
                instructions=row.get("Instructions") or None,
                module=row.get("Module") or None,
            )
        )

    log.info("csv import: %d activities, %d row errors", len(activities), len(errors))
    return activities, errors


__all__ = ["load_activities", "parse_activities_csv"]

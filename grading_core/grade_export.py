"""Helpers to export graded attempts in JSON/CSV formats."""
from __future__ import annotations

from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable, List
import csv
import io

_FIELDS: tuple[str, ...] = (
    "activity_id",
    "activity_type",
    "score",
    "is_graded",
)


def _normalize_row(row: Any) -> Dict[str, Any]:
    if is_dataclass(row) and not isinstance(row, type):
        row = asdict(row)
    row = row or {}
    out: Dict[str, Any] = {}
    for key in _FIELDS:
        val = row.get(key)
        if key == "score":
            try:
                out[key] = None if val is None else int(val)
            except (TypeError, ValueError):
                out[key] = 0
        elif key == "is_graded":
            out[key] = bool(val)
        else:
            out[key] = "" if val is None else str(val)
    return out


def to_json(grades: Iterable[Any]) -> Dict[str, Any]:
    """Return a JSON-safe payload for grade export."""

    normalized: List[Dict[str, Any]] = [_normalize_row(g) for g in grades]
    return {"results": normalized}


def to_csv(grades: Iterable[Any]) -> str:
    """Render graded attempts as CSV with a fixed header. Ungraded scores are left empty."""

    normalized = [_normalize_row(g) for g in grades]
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=_FIELDS)
    writer.writeheader()
    for row in normalized:
        writer.writerow(row)
    return buf.getvalue()


__all__ = ["to_json", "to_csv"]

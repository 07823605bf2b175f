from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Iterable

from . import config
from .activity_bank import load_activities
from .graders import significant_words
from .types import ACTIVITY_TYPES, AUTO_GRADED_TYPES, Activity

log = logging.getLogger(__name__)

_LIST_KEYED = ("SHORT_ANSWER", "FILL_IN_BLANK")
_MAP_KEYED = ("CLASSIFICATION", "TABLE_COMPLETION")


def _is_number(x: object) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)


def _blank_cells(table: object) -> set[str] | None:
    if not isinstance(table, Mapping):
        return None
    rows = table.get("rows")
    if not isinstance(rows, list):
        return None
    cells: set[str] = set()
    for r, row in enumerate(rows):
        if not isinstance(row, list):
            continue
        for c, cell in enumerate(row):
            if cell is None or cell == "":
                cells.add(f"{r}_{c}")
    return cells


def check_activity(act: Activity) -> list[str]:
    """Return the reasons this activity's answer key cannot be graded as authored."""
    kind = act.activity_type
    key = act.correct_answers
    problems: list[str] = []

    if kind not in ACTIVITY_TYPES:
        return [f"unknown activity type {kind!r}"]

    if kind in _LIST_KEYED:
        if not isinstance(key, list) or not key:
            problems.append("answer key must be a non-empty list")
        elif not all(isinstance(a, str) and a.strip() for a in key):
            problems.append("answer key has blank or non-text entries")

    elif kind == "SORTING_RANKING":
        items = act.content.get("items")
        order = items if items is not None else key
        if not isinstance(order, list) or len(order) < 2:
            problems.append("sorting needs at least 2 items")
        elif isinstance(key, list) and key != order:
            problems.append("answer key order differs from content items")

    elif kind in _MAP_KEYED:
        source = key
        if kind == "CLASSIFICATION" and source is None:
            source = act.content.get("items")
        if not isinstance(source, Mapping) or not source:
            problems.append("answer key must be a non-empty mapping")
        elif kind == "TABLE_COMPLETION":
            blanks = _blank_cells(act.content.get("table"))
            if blanks is None:
                problems.append("table content is missing headers/rows")
            else:
                stray = sorted(k for k in source if k not in blanks)
                if stray:
                    problems.append(f"answer cells not blank in table: {', '.join(stray)}")
        elif kind == "CLASSIFICATION":
            values = list(source.values())
            if not all(isinstance(v, str) for v in values):
                problems.append("answer key has non-text categories")
            cats = act.content.get("categories")
            if isinstance(cats, list) and cats:
                unknown = sorted({v for v in values if isinstance(v, str) and v not in cats})
                if unknown:
                    problems.append(f"answer key uses undeclared categories: {', '.join(unknown)}")

    elif kind == "NUMERIC_ENTRY":
        if not _is_number(key):
            problems.append("numeric answer key is not a number")
        tol = act.tolerance
        if tol is not None and (not _is_number(tol) or tol < 0):
            problems.append("tolerance must be a non-negative number")

    elif kind == "ERROR_SPOTTING":
        if not isinstance(key, str) or not key.strip():
            problems.append("answer key must be text")
        elif not significant_words(key):
            problems.append("answer key has no significant words, every attempt scores 0")

    return problems


def audit_activities(activities: Iterable[Activity]) -> dict[str, object]:
    coverage: dict[str, int] = {kind: 0 for kind in ACTIVITY_TYPES}
    warnings: list[str] = []
    total = 0

    for act in activities:
        total += 1
        coverage[act.activity_type] = coverage.get(act.activity_type, 0) + 1
        for problem in check_activity(act):
            warnings.append(f"{act.id or '<no id>'} {act.activity_type}: {problem}")

    totals = {"activities": total, "auto_graded": sum(coverage[k] for k in AUTO_GRADED_TYPES)}
    log.info("audited %d activities, %d warnings", total, len(warnings))
    return {"coverage": coverage, "warnings": warnings, "totals": totals}


def print_report(summary: dict[str, object]) -> None:
    coverage: dict[str, int] = summary["coverage"]  # type: ignore[assignment]
    warnings: list[str] = summary["warnings"]  # type: ignore[assignment]
    flagged = {k: sum(1 for msg in warnings if f" {k}: " in msg) for k in coverage}

    groups = (
        ("Auto-graded", [k for k in ACTIVITY_TYPES if k in AUTO_GRADED_TYPES]),
        ("Human review", [k for k in ACTIVITY_TYPES if k not in AUTO_GRADED_TYPES]),
        ("Unknown", sorted(k for k in coverage if k not in ACTIVITY_TYPES)),
    )
    for label, kinds in groups:
        if not kinds:
            continue
        print(f"=== {label} ({sum(coverage.get(k, 0) for k in kinds)}) ===")
        for kind in kinds:
            note = f"  ({flagged[kind]} flagged)" if flagged.get(kind) else ""
            print(f"  {kind:<18}{coverage.get(kind, 0):4d}{note}")

    if warnings:
        print("\nWarnings:")
        for msg in warnings:
            print(f" - {msg}")
    else:
        print("\nNo warnings.")


def write_summary(summary: dict[str, object], path: Path | str | None = None) -> str:
    out = Path(path or config.AUDIT_SUMMARY_PATH)
    out.parent.mkdir(parents=True, exist_ok=True)
    text = json.dumps(summary, indent=2, sort_keys=True)
    out.write_text(text + "\n", encoding="utf-8")
    print(text)
    return text


def main(argv: list[str] | None = None) -> int:
    argv = list(argv or [])
    activities = load_activities(argv[0] if argv else None)
    summary = audit_activities(activities)
    print_report(summary)
    write_summary(summary)
    return 2 if summary["warnings"] else 0


if __name__ == "__main__":
    import sys
    raise SystemExit(main(sys.argv[1:]))

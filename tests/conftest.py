from __future__ import annotations

import pytest

from grading_core.types import Activity


def build_activity_set() -> list[Activity]:
    """One deterministic activity per type, for tests and smoke runs."""

    return [
        Activity(id="sa", activity_type="SHORT_ANSWER", correct_answers=["café", "coffee house"]),
        Activity(id="fb", activity_type="FILL_IN_BLANK", correct_answers=["paris", "1990"]),
        Activity(
            id="sr",
            activity_type="SORTING_RANKING",
            correct_answers=["A", "B", "C"],
            content={"items": ["A", "B", "C"]},
        ),
        Activity(
            id="cl",
            activity_type="CLASSIFICATION",
            correct_answers={"a": "x", "b": "z"},
            content={"categories": ["x", "z"], "items": {"a": "x", "b": "z"}},
        ),
        Activity(id="ne", activity_type="NUMERIC_ENTRY", correct_answers=100, tolerance=5),
        Activity(
            id="tc",
            activity_type="TABLE_COMPLETION",
            correct_answers={"0_1": "42"},
            content={"table": {"headers": ["k", "v"], "rows": [["answer", ""]]}},
        ),
        Activity(
            id="es",
            activity_type="ERROR_SPOTTING",
            correct_answers="the interest rate should be annual not monthly",
        ),
        Activity(id="dd", activity_type="DEEP_DIVE", content={"topic": "t", "questions": ["q"]}),
    ]


@pytest.fixture
def activity_set() -> list[Activity]:
    return build_activity_set()


@pytest.fixture
def by_type(activity_set) -> dict[str, Activity]:
    return {a.activity_type: a for a in activity_set}

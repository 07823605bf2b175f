from __future__ import annotations

import json

import pytest

from grading_core.activity_bank import load_activities, parse_activities_csv
from grading_core.types import ACTIVITY_TYPES

HEADER = (
    "ActivityType,Module,Instructions,Question,CorrectAnswer,CorrectAnswer1,CorrectAnswer2,CorrectAnswer3,"
    "Text,Item1,Item2,Item3,Category1,Category2,Item|Category 1,Item|Category 2,Tolerance,"
    "TableJSON,AnswersJSON,IncorrectSolution,Topic,Question1,Question2,Question3"
)


def _row(**cols: str) -> str:
    names = [h for h in HEADER.split(",")]
    return ",".join(cols.get(n.replace("|", "_").replace(" ", "_"), "") for n in names)


def _csv(*rows: str) -> str:
    return "\n".join([HEADER, *rows]) + "\n"


def test_packaged_sample_covers_every_type():
    activities = load_activities()
    kinds = {a.activity_type for a in activities}
    assert kinds == set(ACTIVITY_TYPES)
    assert all(a.id for a in activities)


def test_load_from_path(tmp_path):
    path = tmp_path / "acts.json"
    path.write_text(json.dumps([{"id": "n1", "activityType": "NUMERIC_ENTRY", "correctAnswers": 3}]), encoding="utf-8")
    (act,) = load_activities(path)
    assert act.id == "n1" and act.correct_answers == 3 and act.tolerance is None


def test_short_answer_row_keeps_non_blank_alternates():
    text = _csv(_row(ActivityType="short_answer", Module="Module 2", Question="Capital?",
                     CorrectAnswer1="Paris", CorrectAnswer3="Paname"))
    (act,), errors = parse_activities_csv(text)
    assert errors == []
    assert act.activity_type == "SHORT_ANSWER"
    assert act.correct_answers == ["Paris", "Paname"]
    assert act.content == {"question": "Capital?"}
    assert act.module == "Module 2"
    assert act.id == "csv-2"


def test_sorting_and_classification_rows():
    text = _csv(
        _row(ActivityType="SORTING_RANKING", Item1="Seed", Item2="Series A", Item3="IPO"),
        _row(ActivityType="CLASSIFICATION", Category1="Asset", Category2="Liability",
             Item_Category_1="Cash|Asset", Item_Category_2="Loan | Liability"),
    )
    (sort, cls), errors = parse_activities_csv(text)
    assert errors == []
    assert sort.content["items"] == ["Seed", "Series A", "IPO"] == sort.correct_answers
    assert cls.correct_answers == {"Cash": "Asset", "Loan": "Liability"}
    assert cls.content["categories"] == ["Asset", "Liability"]


def test_numeric_table_error_and_deep_dive_rows():
    table = '"{""headers"": [""a"", ""b""], ""rows"": [[""1"", """"]]}"'
    answers = '"{""0_1"": ""2""}"'
    text = _csv(
        _row(ActivityType="NUMERIC_ENTRY", Question="Growth?", CorrectAnswer="25", Tolerance="2"),
        _row(ActivityType="TABLE_COMPLETION", TableJSON=table, AnswersJSON=answers),
        _row(ActivityType="ERROR_SPOTTING", Question="What is wrong?", IncorrectSolution="EV = E - D",
             CorrectAnswer="Debt must be added"),
        _row(ActivityType="DEEP_DIVE", Topic="Moats", Question2="Why?"),
    )
    (num, tbl, err, deep), errors = parse_activities_csv(text)
    assert errors == []
    assert num.correct_answers == 25.0 and num.tolerance == 2.0
    assert tbl.content["table"]["rows"] == [["1", ""]]
    assert tbl.correct_answers == {"0_1": "2"}
    assert err.correct_answers == "Debt must be added"
    assert err.content["incorrectSolution"] == "EV = E - D"
    assert deep.correct_answers is None
    assert deep.content == {"topic": "Moats", "questions": ["Why?"]}


def test_bad_rows_are_reported_not_fatal():
    text = _csv(
        _row(Question="no type"),
        _row(ActivityType="ESSAY"),
        _row(ActivityType="SHORT_ANSWER", Question="Capital?"),
        _row(ActivityType="SORTING_RANKING", Item1="only one"),
        _row(ActivityType="NUMERIC_ENTRY", Question="Q", CorrectAnswer="abc"),
        _row(ActivityType="TABLE_COMPLETION", TableJSON="{oops", AnswersJSON="{}"),
        _row(ActivityType="FILL_IN_BLANK", Text="The ___ sky", CorrectAnswer="blue"),
    )
    activities, errors = parse_activities_csv(text)
    assert [a.activity_type for a in activities] == ["FILL_IN_BLANK"]
    assert len(errors) == 6
    assert errors[0] == "Line 2: missing ActivityType"
    assert errors[1].startswith("Line 3: unknown activity type")
    assert errors[4].startswith("Line 6: invalid numeric answer")
    assert errors[5].startswith("Line 7: invalid JSON")


def test_blank_lines_do_not_shift_numbering():
    text = HEADER + "\n\n" + _row(ActivityType="ESSAY") + "\n"
    _, errors = parse_activities_csv(text)
    assert errors == ["Line 2: unknown activity type ESSAY"]


def test_header_only_is_rejected():
    with pytest.raises(ValueError):
        parse_activities_csv(HEADER + "\n")
    with pytest.raises(ValueError):
        parse_activities_csv("")


def test_non_finite_numeric_answers_are_rejected():
    text = "ActivityType,Question,CorrectAnswer,Tolerance\nNUMERIC_ENTRY,q,nan,\nNUMERIC_ENTRY,q,inf,\nNUMERIC_ENTRY,q,5,nan\n"
    activities, errors = parse_activities_csv(text)
    assert activities == []
    assert errors == [
        "Line 2: invalid numeric answer 'nan'",
        "Line 3: invalid numeric answer 'inf'",
        "Line 4: invalid tolerance 'nan'",
    ]

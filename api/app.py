from __future__ import annotations
from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
import logging, typing as t
from dataclasses import asdict

# ---- Engine imports ----
from grading_core import config
from grading_core.activity_bank import load_activities, parse_activities_csv
from grading_core.attempts import best_score, latest_attempts
from grading_core.audit_activities import audit_activities
from grading_core.engine import grade_attempt, grade_batch
from grading_core.grade_export import to_csv as grades_to_csv, to_json as grades_to_json
from grading_core.types import ACTIVITY_TYPES, Activity

log = logging.getLogger(__name__)

app = FastAPI(title="Activity Grader API")


@app.get("/")
def root():
    return {"status": "ok", "service": "activity-grader-api"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)

# ---- Schemas ----
# activity and answer payloads stay loosely typed: a malformed shape must still
# reach the engine and score 0 instead of being rejected
class GradeReq(BaseModel):
    activity: dict[str, t.Any]
    answers: t.Any = None

class BatchReq(BaseModel):
    attempts: list[GradeReq] = Field(default_factory=list)

class AttemptReq(BaseModel):
    answers: t.Any = None
    time_spent: int | None = Field(default=None, ge=0)

class ImportReq(BaseModel):
    csv: str

class AuditReq(BaseModel):
    activities: list[dict[str, t.Any]] = Field(default_factory=list)

class LatestReq(BaseModel):
    activity_ids: list[str]
    attempts: list[dict[str, t.Any]] = Field(default_factory=list)

class BestReq(BaseModel):
    activity_id: str
    attempts: list[dict[str, t.Any]] = Field(default_factory=list)

# ---- Helpers ----
_BANK: dict[str, Activity] | None = None


def _bank() -> dict[str, Activity]:
    global _BANK
    if _BANK is None:
        path = config.load_config().get("ACTIVITIES_PATH")
        _BANK = {a.id: a for a in load_activities(path)}
    return _BANK


def _public(act: Activity) -> dict[str, t.Any]:
    # learners never see the answer key, nor content that spells it out
    out = act.to_dict()
    out.pop("correct_answers", None)
    content = out["content"]
    items = content.get("items")
    if act.activity_type == "CLASSIFICATION" and isinstance(items, dict):
        content["items"] = sorted(items, key=str)
    elif act.activity_type == "SORTING_RANKING" and isinstance(items, list):
        content["items"] = sorted(items, key=str)
    return out


# ---- Health ----
@app.get("/health")
def health():
    return {
        "activity_types": list(ACTIVITY_TYPES),
        "grade_export_enabled": config.GRADE_EXPORT_ENABLED,
    }

# ---- Grading ----
@app.post("/grade")
def grade(req: GradeReq):
    return asdict(grade_attempt(req.activity, req.answers))


@app.post("/grade/batch")
def grade_many(req: BatchReq):
    results = grade_batch((a.activity, a.answers) for a in req.attempts)
    return grades_to_json(results)


@app.post("/grade/batch.csv")
def grade_many_csv(req: BatchReq):
    if not config.GRADE_EXPORT_ENABLED:
        raise HTTPException(404, "grade export disabled")
    results = grade_batch((a.activity, a.answers) for a in req.attempts)
    return Response(
        content=grades_to_csv(results),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=\"grades.csv\""},
    )

# ---- Activity bank ----
@app.get("/activities")
def list_activities():
    return {"activities": [_public(a) for a in _bank().values()]}


@app.post("/activities/{activity_id}/attempts")
def submit_attempt(activity_id: str, req: AttemptReq):
    act = _bank().get(activity_id)
    if act is None:
        raise HTTPException(404, "activity not found")
    graded = grade_attempt(act, req.answers)
    log.info("graded %s (%s): score=%s", activity_id, act.activity_type, graded.score)
    return {**asdict(graded), "answers": req.answers, "time_spent": req.time_spent}


@app.post("/activities/import")
def import_activities(req: ImportReq):
    try:
        activities, errors = parse_activities_csv(req.csv)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    return {"activities": [a.to_dict() for a in activities], "errors": errors}


@app.post("/activities/audit")
def audit(req: AuditReq):
    activities = [Activity.from_dict(raw) for raw in req.activities]
    return audit_activities(activities)

# ---- Attempt history ----
@app.post("/attempts/latest")
def attempts_latest(req: LatestReq):
    return {"attempts": latest_attempts(req.attempts, req.activity_ids)}


@app.post("/attempts/best")
def attempts_best(req: BestReq):
    return {"activity_id": req.activity_id, "best_score": best_score(req.attempts, req.activity_id)}

from __future__ import annotations
import os, json, pathlib
from typing import Callable, TypeVar

N = TypeVar("N", int, float)


def _env(name: str) -> str | None:
    raw = os.getenv(name)
    return raw.strip() if raw and raw.strip() else None


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name)
    return default if raw is None else raw.lower() in {"1", "true", "yes", "on"}


def _env_number(name: str, default: N, cast: Callable[[str], N]) -> N:
    # an unparsable override keeps the authored default
    raw = _env(name)
    try:
        return default if raw is None else cast(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = _env(name)
    if raw is None:
        return list(default)
    return [part.strip() for part in raw.split(",") if part.strip()]


# tolerance >= floor is a percentage band, below it an absolute band
PERCENT_TOLERANCE_FLOOR: float = 1.0

ERROR_SPOT_FULL_CREDIT: float = 0.8
ERROR_SPOT_PARTIAL_CREDIT: float = 0.5
ERROR_SPOT_PARTIAL_SCORE: int = 50
ERROR_SPOT_MIN_WORD_LEN: int = 3

MIN_SORT_ITEMS: int = 2
MIN_CLASSIFICATION_CATEGORIES: int = 2
SHORT_ANSWER_ALTERNATES: int = 3
DEEP_DIVE_QUESTIONS: int = 3

GRADE_EXPORT_ENABLED: bool = True
LOG_LEVEL: str = "INFO"
AUDIT_SUMMARY_PATH: str = "/tmp/activity_audit.json"

ALLOWED_ORIGINS: list[str] = [
    "http://localhost:3000",
]

# // env overrides for staging/ops; defaults match the authored activities.
ERROR_SPOT_FULL_CREDIT = _env_number("ERROR_SPOT_FULL_CREDIT", ERROR_SPOT_FULL_CREDIT, float)
ERROR_SPOT_PARTIAL_CREDIT = _env_number("ERROR_SPOT_PARTIAL_CREDIT", ERROR_SPOT_PARTIAL_CREDIT, float)
ERROR_SPOT_MIN_WORD_LEN = _env_number("ERROR_SPOT_MIN_WORD_LEN", ERROR_SPOT_MIN_WORD_LEN, int)
GRADE_EXPORT_ENABLED = _env_bool("GRADE_EXPORT_ENABLED", GRADE_EXPORT_ENABLED)
LOG_LEVEL = os.getenv("LOG_LEVEL", LOG_LEVEL).upper()
ALLOWED_ORIGINS = _env_list("ALLOWED_ORIGINS", ALLOWED_ORIGINS)
AUDIT_SUMMARY_PATH = _env("AUDIT_SUMMARY_PATH") or AUDIT_SUMMARY_PATH


def load_config() -> dict:
    cfg = {}
    p = pathlib.Path("config.json")
    if p.exists():
        try: cfg = json.loads(p.read_text(encoding="utf-8"))
        except (OSError, ValueError): cfg = {}
    e = os.environ
    if e.get("ACTIVITIES_PATH"): cfg["ACTIVITIES_PATH"] = e.get("ACTIVITIES_PATH")
    if e.get("LOG_LEVEL"): cfg["LOG_LEVEL"] = e.get("LOG_LEVEL").upper()
    return cfg

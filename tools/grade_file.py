from __future__ import annotations
import argparse, json, sys
from pathlib import Path

from grading_core.engine import grade_batch
from grading_core.grade_export import to_csv, to_json


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Grade a JSON list of {activity, answers} attempts.")
    ap.add_argument("attempts", help="path to the attempts JSON file")
    ap.add_argument("--csv", dest="csv_out", default=None, help="write results as CSV to this path")
    args = ap.parse_args(argv)

    raw = json.loads(Path(args.attempts).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        print("attempts file must hold a JSON list", file=sys.stderr)
        return 2
    pairs = [
        ((r.get("activity") or {}), r.get("answers")) if isinstance(r, dict) else ({}, None)
        for r in raw
    ]
    results = grade_batch(pairs)

    if args.csv_out:
        Path(args.csv_out).write_text(to_csv(results), encoding="utf-8")
        print(f"Wrote {len(results)} results to {args.csv_out}")
    else:
        print(json.dumps(to_json(results), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

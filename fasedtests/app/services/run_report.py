from __future__ import annotations

# Batch report builders (report.json).

import json
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..models import CaseResult


SCHEMA_VERSION = "fased-report.v1"


def init_report(*, backend: str, debug: bool, selection: str) -> dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "backend": backend,
        "debug": debug,
        "selection": selection,
        "status": "failed",
        "cases": [],
        "summary": {
            "total": 0,
            "passed": 0,
            "failed": 0,
            "skipped": 0,
            "first_failure": None,
            "first_failure_stage": None,
            "first_failure_message": None,
        },
    }


def build_case_record(result: CaseResult) -> dict[str, Any]:
    return {
        "name": result.name,
        "status": result.status,
        "stage": result.stage,
        "code": result.code,
        "message": result.message,
        "steps": [
            {"behavior": step.behavior, "kind": step.kind, "log_path": step.log_path}
            for step in result.steps
        ],
        "exit_code": result.exit_code,
    }


def update_summary(*, summary: dict[str, Any], result: CaseResult) -> None:
    summary["total"] += 1
    summary[result.status] += 1
    if result.status == "failed" and summary.get("first_failure") is None:
        summary["first_failure"] = result.name
        summary["first_failure_stage"] = result.stage
        summary["first_failure_message"] = result.message


def finalize_report(report: dict[str, Any], results: Iterable[CaseResult]) -> dict[str, Any]:
    summary = report["summary"]
    for result in results:
        update_summary(summary=summary, result=result)
        report["cases"].append(build_case_record(result))
    report["status"] = "succeeded" if summary["failed"] == 0 else "failed"
    return report


def write_report(path: Path, report: dict[str, Any]) -> None:
    # Atomic replace.
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(report, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
    os.replace(tmp, path)

"""JSON serialization for analysis, sync and validation reports."""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Union

from .errors import MalformedContent
from .models import (
    AnalysisResult,
    MissingEntry,
    OutdatedEntry,
    Recommendation,
    SyncReport,
    SyncSummary,
    ValidationIssue,
    ValidationResult,
    ValidationSummary,
)

Report = Union[AnalysisResult, SyncReport, ValidationResult]


def sync_report_to_dict(report: SyncReport) -> Dict[str, Any]:
    return {
        "timestamp": report.timestamp,
        "status": report.status,
        "auto_update": report.auto_update,
        "summary": asdict(report.summary),
        "outdated": [asdict(entry) for entry in report.outdated],
        "missing": [asdict(entry) for entry in report.missing],
        "recommendations": [asdict(item) for item in report.recommendations],
    }


def sync_report_from_dict(payload: Mapping[str, Any]) -> SyncReport:
    """Rebuild a report; the stored ``status`` must agree with the derived one."""
    try:
        report = SyncReport(
            timestamp=str(payload["timestamp"]),
            summary=SyncSummary(**payload.get("summary", {})),
            outdated=[OutdatedEntry(**entry) for entry in payload.get("outdated", [])],
            missing=[MissingEntry(**entry) for entry in payload.get("missing", [])],
            recommendations=[
                Recommendation(**item) for item in payload.get("recommendations", [])
            ],
            auto_update=bool(payload.get("auto_update", False)),
        )
    except (KeyError, TypeError) as exc:
        raise MalformedContent(f"Invalid sync report: {exc}") from exc
    status = payload.get("status")
    if status is not None and status != report.status:
        raise MalformedContent(
            f"Sync report status {status!r} disagrees with its entries ({report.status!r})"
        )
    return report


def validation_result_to_dict(result: ValidationResult) -> Dict[str, Any]:
    return {
        "valid": result.valid,
        "errors": [asdict(issue) for issue in result.errors],
        "warnings": [asdict(issue) for issue in result.warnings],
        "summary": asdict(result.summary),
    }


def validation_result_from_dict(payload: Mapping[str, Any]) -> ValidationResult:
    try:
        result = ValidationResult(
            errors=[ValidationIssue(**issue) for issue in payload.get("errors", [])],
            warnings=[ValidationIssue(**issue) for issue in payload.get("warnings", [])],
            summary=ValidationSummary(**payload.get("summary", {})),
        )
    except TypeError as exc:
        raise MalformedContent(f"Invalid validation result: {exc}") from exc
    valid = payload.get("valid")
    if valid is not None and bool(valid) != result.valid:
        raise MalformedContent("Validation result 'valid' flag disagrees with its errors")
    return result


def analysis_result_to_dict(result: AnalysisResult) -> Dict[str, Any]:
    """The bundle handed to documentation generators."""
    return {
        "depth": result.depth,
        "structure": asdict(result.structure),
        "apis": [asdict(api) for api in result.apis],
        "components": [asdict(component) for component in result.components],
        "documentation_needs": [asdict(need) for need in result.documentation_needs],
        "metadata": asdict(result.metadata),
    }


def report_to_dict(report: Report) -> Dict[str, Any]:
    if isinstance(report, SyncReport):
        return sync_report_to_dict(report)
    if isinstance(report, ValidationResult):
        return validation_result_to_dict(report)
    if isinstance(report, AnalysisResult):
        return analysis_result_to_dict(report)
    raise TypeError(f"Unsupported report type: {type(report).__name__}")


def dumps(report: Report) -> str:
    return json.dumps(report_to_dict(report), indent=2, sort_keys=True)


def write_report(path: Path, report: Report) -> Path:
    """Write ``report`` as JSON, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(report) + "\n", encoding="utf-8")
    return path


def load_sync_report(path: Path) -> SyncReport:
    return sync_report_from_dict(_load_json(path))


def load_validation_result(path: Path) -> ValidationResult:
    return validation_result_from_dict(_load_json(path))


def _load_json(path: Path) -> Dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise MalformedContent(f"{path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedContent(f"{path} must contain a JSON object")
    return data


__all__ = [
    "analysis_result_to_dict",
    "dumps",
    "load_sync_report",
    "load_validation_result",
    "report_to_dict",
    "sync_report_from_dict",
    "sync_report_to_dict",
    "validation_result_from_dict",
    "validation_result_to_dict",
    "write_report",
]

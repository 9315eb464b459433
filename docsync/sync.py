"""Drift detection between a source tree and its documentation tree."""

from __future__ import annotations

import math
import threading
from datetime import UTC, datetime
from pathlib import Path, PurePosixPath
from typing import Dict, List, Sequence

from .discovery import (
    DOC_PATTERNS,
    SOURCE_PATTERNS,
    FileDiscovery,
    load_doc_artifacts,
    load_source_artifacts,
)
from .errors import PathNotFound
from .logging import get_logger
from .mapping import MirroredPathMapper, PathMapper
from .models import (
    DocArtifact,
    MissingEntry,
    OutdatedEntry,
    Recommendation,
    SourceArtifact,
    SyncReport,
    SyncSummary,
)
from .timestamps import LastModifiedProvider, default_provider

SECONDS_PER_DAY = 86400
API_SEGMENTS = frozenset({"api"})
DRIFT_SEGMENTS = frozenset({"api", "route", "routes", "component", "components"})
_RECOMMENDATION_FILES = 5


def days_behind(source_modified: float, doc_modified: float) -> int:
    """Whole days the source is ahead of the doc (negative when the doc is newer)."""
    return math.floor((source_modified - doc_modified) / SECONDS_PER_DAY)


def staleness_priority(days: int) -> str:
    if days > 7:
        return "high"
    if days > 3:
        return "medium"
    return "low"


def _utc_timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class DriftDetector:
    """Classifies documentation pages as up to date, outdated, or missing."""

    def __init__(
        self,
        mapper: PathMapper | None = None,
        *,
        auto_update: bool = False,
    ) -> None:
        self.mapper = mapper or MirroredPathMapper()
        self.auto_update = auto_update
        self.logger = get_logger("sync")

    def detect(
        self,
        source_artifacts: Sequence[SourceArtifact],
        doc_artifacts: Sequence[DocArtifact],
    ) -> SyncReport:
        sources: Dict[str, SourceArtifact] = {a.path: a for a in source_artifacts}
        docs: Dict[str, DocArtifact] = {d.path: d for d in doc_artifacts}
        summary = SyncSummary(
            total_source_files=len(sources),
            total_doc_files=len(docs),
        )

        outdated: List[OutdatedEntry] = []
        for doc in docs.values():
            source_path = self.mapper.doc_to_source(doc.path)
            source = sources.get(source_path)
            if source is None:
                # Not every page describes exactly one source file.
                continue
            if source.last_modified is None or doc.last_modified is None:
                self.logger.debug("No timestamp for %s or %s", doc.path, source_path)
                summary.unverified += 1
                continue
            days = days_behind(source.last_modified, doc.last_modified)
            if days > 0:
                outdated.append(
                    OutdatedEntry(
                        doc_path=doc.path,
                        source_path=source_path,
                        days_behind=days,
                        priority=staleness_priority(days),
                    )
                )
            else:
                summary.up_to_date += 1

        missing: List[MissingEntry] = []
        for source in sources.values():
            segments = _directory_segments(source.path)
            if not segments & DRIFT_SEGMENTS:
                continue
            expected = self.mapper.source_to_doc(source.path)
            if expected in docs:
                continue
            missing.append(
                MissingEntry(
                    source_path=source.path,
                    expected_doc_path=expected,
                    priority="high" if segments & API_SEGMENTS else "medium",
                )
            )

        summary.outdated = len(outdated)
        summary.missing = len(missing)
        report = SyncReport(
            timestamp=_utc_timestamp(),
            summary=summary,
            outdated=outdated,
            missing=missing,
            recommendations=self._recommend(outdated, missing),
            auto_update=self.auto_update,
        )
        self.logger.info(
            "Sync status %s: %d outdated, %d missing, %d up to date",
            report.status,
            summary.outdated,
            summary.missing,
            summary.up_to_date,
        )
        return report

    def _recommend(
        self, outdated: Sequence[OutdatedEntry], missing: Sequence[MissingEntry]
    ) -> List[Recommendation]:
        recommendations: List[Recommendation] = []
        if outdated:
            recommendations.append(
                Recommendation(
                    type="update",
                    message=f"Update {len(outdated)} outdated documentation file(s)",
                    files=[entry.doc_path for entry in outdated[:_RECOMMENDATION_FILES]],
                )
            )
        if missing:
            recommendations.append(
                Recommendation(
                    type="create",
                    message=f"Create documentation for {len(missing)} undocumented file(s)",
                    files=[entry.expected_doc_path for entry in missing[:_RECOMMENDATION_FILES]],
                )
            )
        if self.auto_update and (outdated or missing):
            targets = [entry.doc_path for entry in outdated] + [
                entry.expected_doc_path for entry in missing
            ]
            recommendations.append(
                Recommendation(
                    type="regenerate",
                    message=f"Regenerate {len(targets)} documentation file(s)",
                    files=targets,
                )
            )
        return recommendations


def _directory_segments(path: str) -> frozenset[str]:
    return frozenset(part.lower() for part in PurePosixPath(path).parts[:-1])


def sync_trees(
    source_root: str | Path,
    docs_root: str | Path,
    *,
    mapper: PathMapper | None = None,
    provider: LastModifiedProvider | None = None,
    source_include: Sequence[str] | None = None,
    exclude: Sequence[str] | None = None,
    auto_update: bool = False,
    cancel: threading.Event | None = None,
    max_workers: int = 4,
) -> SyncReport:
    """Discover both trees, load artifacts and run drift detection.

    Raises :class:`PathNotFound` before doing any work when either root is
    missing, so a configuration error never looks like a clean report.
    """
    source_path = Path(source_root).expanduser()
    docs_path = Path(docs_root).expanduser()
    if not source_path.is_dir():
        raise PathNotFound(source_root, "Source path")
    if not docs_path.is_dir():
        raise PathNotFound(docs_root, "Docs path")

    provider = provider or default_provider()
    sources = FileDiscovery(source_include or SOURCE_PATTERNS, exclude, cancel=cancel).discover(source_path)
    docs = FileDiscovery(DOC_PATTERNS, exclude, cancel=cancel).discover(docs_path)

    source_artifacts = load_source_artifacts(
        sources.root, sources.paths, provider, max_workers=max_workers
    )
    doc_artifacts = load_doc_artifacts(docs.root, docs.paths, provider, max_workers=max_workers)
    report = DriftDetector(mapper, auto_update=auto_update).detect(source_artifacts, doc_artifacts)
    report.summary.skipped_directories = len(sources.skipped) + len(docs.skipped)
    return report


__all__ = [
    "DriftDetector",
    "days_behind",
    "staleness_priority",
    "sync_trees",
]

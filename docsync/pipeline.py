"""Pipeline facade for analyze/sync/validate runs."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Optional, Sequence

from .analyzers import StructuralAnalyzer, discover_extractors
from .config import DocSyncConfig
from .discovery import (
    DOC_PATTERNS,
    SOURCE_PATTERNS,
    FileDiscovery,
    load_doc_artifacts,
    load_source_artifacts,
)
from .errors import PathNotFound
from .logging import get_logger
from .mapping import MirroredPathMapper
from .models import AnalysisResult, SyncReport, ValidationResult
from .sync import sync_trees
from .timestamps import CachedProvider, LastModifiedProvider, default_provider
from .validators import ValidationOptions, validate_tree

ANALYSIS_PATTERNS = SOURCE_PATTERNS + DOC_PATTERNS
_DOC_SUFFIXES = (".md", ".mdx")


@dataclass
class PipelineOutcome:
    """Sync and validation results kept apart so wrappers pick their own exit policy."""

    sync: SyncReport
    validation: ValidationResult

    @property
    def synced(self) -> bool:
        return self.sync.synced

    @property
    def valid(self) -> bool:
        return self.validation.valid

    @property
    def success(self) -> bool:
        return self.synced and self.valid


class Pipeline:
    """Runs the independent docsync passes. Every run builds fresh results."""

    def __init__(
        self,
        provider: LastModifiedProvider | None = None,
        *,
        cancel: threading.Event | None = None,
        max_workers: int = 4,
    ) -> None:
        self._provider = provider
        self._cancel = cancel
        self.max_workers = max_workers
        self.logger = get_logger("pipeline")

    def _timestamps(self) -> LastModifiedProvider:
        # A cache per run: no stale instants leak between runs.
        return CachedProvider(self._provider or default_provider())

    def run_analysis(
        self,
        path: str | Path,
        *,
        include: Optional[Sequence[str]] = None,
        exclude: Optional[Sequence[str]] = None,
        depth: str = "standard",
        extractors: Optional[Sequence[str]] = None,
    ) -> AnalysisResult:
        root = Path(path).expanduser().resolve()
        if not root.is_dir():
            raise PathNotFound(path, "Project path")
        self.logger.info("Starting analysis of %s", root)

        discovered = FileDiscovery(include or ANALYSIS_PATTERNS, exclude, cancel=self._cancel).discover(root)
        source_paths: List[str] = []
        doc_paths: List[str] = []
        for rel_path in discovered.paths:
            if PurePosixPath(rel_path).suffix.lower() in _DOC_SUFFIXES:
                doc_paths.append(rel_path)
            else:
                source_paths.append(rel_path)
        self.logger.debug("Discovered %d source and %d doc files", len(source_paths), len(doc_paths))

        provider = self._timestamps()
        sources = load_source_artifacts(root, source_paths, provider, max_workers=self.max_workers)
        docs = load_doc_artifacts(root, doc_paths, provider, max_workers=self.max_workers)

        analyzer = StructuralAnalyzer(
            discover_extractors(extractors) if extractors else None, cancel=self._cancel
        )
        return analyzer.analyze(root, sources, docs, depth=depth)

    def run_sync(
        self,
        docs_path: str | Path,
        source_path: str | Path,
        *,
        auto_update: bool = False,
        source_extension: str = ".ts",
        include: Optional[Sequence[str]] = None,
        exclude: Optional[Sequence[str]] = None,
    ) -> SyncReport:
        self.logger.info("Starting sync of %s against %s", docs_path, source_path)
        return sync_trees(
            source_path,
            docs_path,
            mapper=MirroredPathMapper(source_extension=source_extension),
            provider=self._timestamps(),
            source_include=include,
            exclude=exclude,
            auto_update=auto_update,
            cancel=self._cancel,
            max_workers=self.max_workers,
        )

    def run_validation(
        self,
        docs_path: str | Path,
        options: ValidationOptions | None = None,
        *,
        exclude: Optional[Sequence[str]] = None,
    ) -> ValidationResult:
        options = options or ValidationOptions(max_workers=self.max_workers)
        self.logger.info("Starting validation of %s", docs_path)
        return validate_tree(docs_path, options, exclude=exclude)

    def run_check(self, config: DocSyncConfig) -> PipelineOutcome:
        """Run sync and validation with settings from ``config``."""
        report = self.run_sync(
            config.docs,
            config.source,
            auto_update=config.sync.auto_update,
            source_extension=config.sync.source_extension,
            include=config.include or None,
            exclude=config.exclude,
        )
        result = self.run_validation(
            config.docs,
            validation_options(config, max_workers=self.max_workers),
            exclude=config.exclude,
        )
        return PipelineOutcome(sync=report, validation=result)


def validation_options(config: DocSyncConfig, *, max_workers: int = 4) -> ValidationOptions:
    return ValidationOptions(
        strict=config.validation.strict,
        check_links=config.validation.check_links,
        check_code_examples=config.validation.check_code_examples,
        max_workers=max_workers,
    )


__all__ = ["ANALYSIS_PATTERNS", "Pipeline", "PipelineOutcome", "validation_options"]

"""Runs every document check over a documentation tree."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence

from .base import DocumentCheck, ValidationOptions, prepare_context
from .code_blocks import CodeBlockCheck
from .content import ContentCheck
from .frontmatter import FrontmatterCheck
from .links import LinkCheck
from ..discovery import DOC_PATTERNS, FileDiscovery, load_doc_artifacts
from ..errors import PathNotFound
from ..logging import get_logger
from ..models import DocArtifact, ValidationIssue, ValidationResult, ValidationSummary
from ..timestamps import FilesystemProvider


class DocumentValidator:
    """Validates documentation artifacts. Checks never short-circuit each other."""

    def __init__(
        self,
        options: ValidationOptions | None = None,
        checks: Optional[Sequence[DocumentCheck]] = None,
    ) -> None:
        self.options = options or ValidationOptions()
        self._check_overrides = list(checks) if checks is not None else None
        self.logger = get_logger("validator")

    def checks(self) -> List[DocumentCheck]:
        if self._check_overrides is not None:
            return list(self._check_overrides)
        selected: List[DocumentCheck] = [FrontmatterCheck()]
        if self.options.check_links:
            selected.append(LinkCheck())
        if self.options.check_code_examples:
            selected.append(CodeBlockCheck())
        selected.append(ContentCheck())
        return selected

    def validate(self, doc_artifacts: Sequence[DocArtifact], docs_root: str | Path) -> ValidationResult:
        root = Path(docs_root)
        checks = self.checks()
        self.logger.info("Validating %d documentation files under %s", len(doc_artifacts), root)

        def _run(artifact: DocArtifact) -> List[ValidationIssue]:
            context = prepare_context(artifact, root, self.options)
            issues: List[ValidationIssue] = []
            for check in checks:
                issues.extend(check.check(context))
            return issues

        if self.options.max_workers > 1 and len(doc_artifacts) > 1:
            with ThreadPoolExecutor(
                max_workers=self.options.max_workers, thread_name_prefix="docsync-validate"
            ) as pool:
                per_file = list(pool.map(_run, doc_artifacts))
        else:
            per_file = [_run(artifact) for artifact in doc_artifacts]

        errors: List[ValidationIssue] = []
        warnings: List[ValidationIssue] = []
        files_with_errors = 0
        for issues in per_file:
            file_errors = [issue for issue in issues if issue.severity == "error"]
            errors.extend(file_errors)
            warnings.extend(issue for issue in issues if issue.severity != "error")
            if file_errors:
                files_with_errors += 1

        result = ValidationResult(
            errors=errors,
            warnings=warnings,
            summary=ValidationSummary(
                total_files=len(doc_artifacts),
                files_with_errors=files_with_errors,
                total_errors=len(errors),
                total_warnings=len(warnings),
            ),
        )
        self.logger.info(
            "Validation %s: %d errors, %d warnings",
            "passed" if result.valid else "failed",
            len(errors),
            len(warnings),
        )
        return result


def validate_tree(
    docs_root: str | Path,
    options: ValidationOptions | None = None,
    *,
    exclude: Sequence[str] | None = None,
) -> ValidationResult:
    """Discover, load and validate every Markdown/MDX file under ``docs_root``."""
    root = Path(docs_root).expanduser()
    if not root.is_dir():
        raise PathNotFound(docs_root, "Docs path")
    options = options or ValidationOptions()
    discovered = FileDiscovery(DOC_PATTERNS, exclude).discover(root)
    artifacts = load_doc_artifacts(
        discovered.root, discovered.paths, FilesystemProvider(), max_workers=options.max_workers
    )
    result = DocumentValidator(options).validate(artifacts, discovered.root)
    result.summary.skipped_directories = len(discovered.skipped)
    return result


__all__ = ["DocumentValidator", "validate_tree"]

"""Core data models shared across docsync components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

PRIORITIES = ("high", "medium", "low")
DEPTHS = ("quick", "standard", "comprehensive")


@dataclass(frozen=True)
class SourceArtifact:
    """A discovered source file, relative to the source root."""

    path: str
    extension: str
    language: Optional[str] = None
    last_modified: Optional[float] = None
    timestamp_source: Optional[str] = None


@dataclass(frozen=True)
class DocArtifact:
    """A discovered documentation file, relative to the docs root.

    ``raw_content`` is ``None`` when the file could not be read as text, in
    which case ``read_error`` explains why.
    """

    path: str
    last_modified: Optional[float] = None
    frontmatter: Dict[str, str] = field(default_factory=dict)
    raw_content: Optional[str] = None
    timestamp_source: Optional[str] = None
    read_error: Optional[str] = None


@dataclass
class ModuleSummary:
    """File counts and languages for a top-level directory."""

    name: str
    files: int
    languages: List[str] = field(default_factory=list)


@dataclass
class ProjectStructure:
    """Aggregate view of the source tree for one analysis run."""

    root: str
    files: List[SourceArtifact]
    languages: List[str] = field(default_factory=list)
    frameworks: List[str] = field(default_factory=list)
    modules: List[ModuleSummary] = field(default_factory=list)


@dataclass
class ProjectMetadata:
    """Package-level metadata pulled from dependency manifests."""

    name: str
    version: Optional[str] = None
    description: Optional[str] = None
    repository: Optional[str] = None
    author: Optional[str] = None


@dataclass
class APIDefinition:
    """Heuristically identified API surface. Low confidence by construction."""

    name: str
    kind: str
    source_file: str
    signature: Optional[str] = None
    description: Optional[str] = None


@dataclass
class ComponentDefinition:
    """Heuristically identified UI component."""

    name: str
    kind: str
    source_file: str
    signature: Optional[str] = None
    description: Optional[str] = None


@dataclass
class DocumentationNeed:
    """A gap between the source inventory and the documentation tree."""

    kind: str
    target_file: str
    subject_name: str
    priority: str
    suggestion: str


@dataclass
class AnalysisResult:
    """Bundle consumed by documentation generators."""

    structure: ProjectStructure
    apis: List[APIDefinition]
    components: List[ComponentDefinition]
    documentation_needs: List[DocumentationNeed]
    metadata: ProjectMetadata
    depth: str = "standard"


@dataclass
class OutdatedEntry:
    """A documentation page older than the source file it describes."""

    doc_path: str
    source_path: str
    days_behind: int
    priority: str


@dataclass
class MissingEntry:
    """An API-like source file with no documentation page."""

    source_path: str
    expected_doc_path: str
    priority: str


@dataclass
class SyncSummary:
    total_source_files: int = 0
    total_doc_files: int = 0
    up_to_date: int = 0
    outdated: int = 0
    missing: int = 0
    unverified: int = 0
    skipped_directories: int = 0


@dataclass
class Recommendation:
    type: str
    message: str
    files: List[str] = field(default_factory=list)


@dataclass
class SyncReport:
    """Result of one drift detection run. ``status`` is derived."""

    timestamp: str
    summary: SyncSummary
    outdated: List[OutdatedEntry] = field(default_factory=list)
    missing: List[MissingEntry] = field(default_factory=list)
    recommendations: List[Recommendation] = field(default_factory=list)
    auto_update: bool = False

    @property
    def status(self) -> str:
        if self.missing:
            return "incomplete"
        if self.outdated:
            return "outdated"
        return "synced"

    @property
    def synced(self) -> bool:
        return self.status == "synced"


@dataclass
class ValidationIssue:
    """Represents a single validation finding for a documentation file."""

    file: str
    kind: str
    message: str
    severity: str
    line: Optional[int] = None


@dataclass
class ValidationSummary:
    total_files: int = 0
    files_with_errors: int = 0
    total_errors: int = 0
    total_warnings: int = 0
    skipped_directories: int = 0


@dataclass
class ValidationResult:
    """Aggregated validation outcome. ``valid`` ignores warnings."""

    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)
    summary: ValidationSummary = field(default_factory=ValidationSummary)

    @property
    def valid(self) -> bool:
        return not self.errors

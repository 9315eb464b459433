"""Structural analysis: language inventory, heuristic APIs, documentation needs."""

from __future__ import annotations

import threading
from collections import defaultdict
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .base import ArtifactExtractor, Definition
from .extractors import ApiPathExtractor, ComponentPathExtractor
from .language import collect_languages
from .manifests import detect_frameworks, load_metadata
from ..errors import OperationCancelled, ParseHeuristicFailure
from ..logging import get_logger
from ..models import (
    DEPTHS,
    AnalysisResult,
    APIDefinition,
    ComponentDefinition,
    DocArtifact,
    DocumentationNeed,
    ModuleSummary,
    ProjectStructure,
    SourceArtifact,
)

DEPTH_LIMITS: Dict[str, Optional[int]] = {
    "quick": 10,
    "standard": 100,
    "comprehensive": None,
}


class StructuralAnalyzer:
    """Builds the project model handed to documentation generators.

    Extraction is filename/path based and deliberately approximate: entries are
    a provisional inventory, not a verified symbol table.
    """

    def __init__(
        self,
        extractors: Optional[Iterable[ArtifactExtractor]] = None,
        *,
        cancel: threading.Event | None = None,
    ) -> None:
        if extractors is None:
            extractors = [ApiPathExtractor(), ComponentPathExtractor()]
        self.extractors = list(extractors)
        self._cancel = cancel
        self.logger = get_logger("analyzer")

    def analyze(
        self,
        root: str | Path,
        source_artifacts: Sequence[SourceArtifact],
        doc_artifacts: Sequence[DocArtifact] = (),
        depth: str = "standard",
    ) -> AnalysisResult:
        if depth not in DEPTHS:
            raise ValueError(f"Unknown analysis depth: {depth!r}")
        root_path = Path(root)
        self.logger.info(
            "Analyzing %d source files under %s (depth=%s)", len(source_artifacts), root_path, depth
        )

        structure = ProjectStructure(
            root=str(root_path),
            files=list(source_artifacts),
            languages=collect_languages(a.language for a in source_artifacts),
            frameworks=detect_frameworks(root_path),
            modules=_summarise_modules(source_artifacts),
        )

        apis: List[APIDefinition] = []
        components: List[ComponentDefinition] = []
        limit = DEPTH_LIMITS[depth]
        for extractor in self.extractors:
            for definition in self._run_extractor(extractor, root_path, source_artifacts, limit):
                if isinstance(definition, ComponentDefinition):
                    components.append(definition)
                else:
                    apis.append(definition)

        known = {artifact.path for artifact in source_artifacts}
        apis = [self._describe(api, doc_artifacts) for api in apis if api.source_file in known]
        components = [
            self._describe(component, doc_artifacts)
            for component in components
            if component.source_file in known
        ]

        needs = self._documentation_needs(source_artifacts, doc_artifacts, apis, components)
        self.logger.info(
            "Found %d APIs, %d components, %d documentation needs",
            len(apis),
            len(components),
            len(needs),
        )
        return AnalysisResult(
            structure=structure,
            apis=apis,
            components=components,
            documentation_needs=needs,
            metadata=load_metadata(root_path),
            depth=depth,
        )

    def _run_extractor(
        self,
        extractor: ArtifactExtractor,
        root: Path,
        artifacts: Sequence[SourceArtifact],
        limit: Optional[int],
    ) -> List[Definition]:
        results: List[Definition] = []
        considered = 0
        for artifact in artifacts:
            if limit is not None and considered >= limit:
                self.logger.debug("Extractor %s stopped at cap of %d files", extractor.name, limit)
                break
            if self._cancel is not None and self._cancel.is_set():
                raise OperationCancelled("Analysis cancelled")
            if not extractor.matches(artifact):
                continue
            considered += 1
            try:
                definition = extractor.extract(root, artifact)
            except ParseHeuristicFailure as exc:
                self.logger.debug("Skipping %s: %s", artifact.path, exc)
                continue
            if definition is not None:
                results.append(definition)
        return results

    @staticmethod
    def _describe(definition: Definition, docs: Sequence[DocArtifact]) -> Definition:
        doc = _find_doc(definition.name, docs)
        if doc is not None:
            definition.description = doc.frontmatter.get("description") or None
        return definition

    def _documentation_needs(
        self,
        sources: Sequence[SourceArtifact],
        docs: Sequence[DocArtifact],
        apis: Sequence[APIDefinition],
        components: Sequence[ComponentDefinition],
    ) -> List[DocumentationNeed]:
        needs: List[DocumentationNeed] = []

        all_paths = [a.path for a in sources] + [d.path for d in docs]
        if not any(PurePosixPath(path).name.lower().startswith("readme") for path in all_paths):
            needs.append(
                DocumentationNeed(
                    kind="missing",
                    target_file="README.md",
                    subject_name="Project README",
                    priority="high",
                    suggestion="Create a project overview README",
                )
            )

        for label, items in (("API", apis), ("component", components)):
            for item in items:
                if item.description:
                    continue
                doc = _find_doc(item.name, docs)
                needs.append(
                    DocumentationNeed(
                        kind="missing",
                        target_file=doc.path if doc is not None else item.source_file,
                        subject_name=item.name,
                        priority="medium",
                        suggestion=(
                            f"Add {label} documentation for {item.name}"
                            if doc is None
                            else f"Add a description to the {label} page for {item.name}"
                        ),
                    )
                )
        return needs


def _find_doc(name: str, docs: Sequence[DocArtifact]) -> Optional[DocArtifact]:
    wanted = name.lower()
    for doc in docs:
        pure = PurePosixPath(doc.path)
        stem = pure.stem.lower()
        if stem == "index" and pure.parent.name:
            stem = pure.parent.name.lower()
        if stem == wanted:
            return doc
    return None


def _summarise_modules(artifacts: Sequence[SourceArtifact]) -> List[ModuleSummary]:
    counts: Dict[str, int] = defaultdict(int)
    languages: Dict[str, Set[str]] = defaultdict(set)
    for artifact in artifacts:
        parts = PurePosixPath(artifact.path).parts
        top = parts[0] if len(parts) > 1 else "."
        counts[top] += 1
        if artifact.language:
            languages[top].add(artifact.language)
    return [
        ModuleSummary(name=name, files=counts[name], languages=sorted(languages[name]))
        for name in sorted(counts)
    ]


__all__ = ["DEPTH_LIMITS", "StructuralAnalyzer"]

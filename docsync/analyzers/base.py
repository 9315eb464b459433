"""Base classes for artifact extractor plugins."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

from ..models import APIDefinition, ComponentDefinition, SourceArtifact

Definition = Union[APIDefinition, ComponentDefinition]


class ArtifactExtractor(ABC):
    """Contract for heuristics that turn source files into API/component entries.

    ``category`` is ``"api"`` or ``"component"`` and decides which inventory
    the analyzer files results under.
    """

    name: str = "extractor"
    category: str = "api"

    @abstractmethod
    def matches(self, artifact: SourceArtifact) -> bool:
        """Return True when this extractor should inspect the artifact."""

    @abstractmethod
    def extract(self, root: Path, artifact: SourceArtifact) -> Optional[Definition]:
        """Build an entry for the artifact, or raise ParseHeuristicFailure to skip it."""

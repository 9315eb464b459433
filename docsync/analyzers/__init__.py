"""Structural analysis and the artifact extractor registry.

Third-party extractors register under the ``docsync.extractors`` entry point
group. Built-in names win over plugins, and plugins are only imported when
selected.
"""

from __future__ import annotations

from functools import partial
from importlib import metadata
from typing import Callable, Dict, List, Sequence

from .base import ArtifactExtractor
from .extractors import ApiPathExtractor, ComponentPathExtractor
from .structure import DEPTH_LIMITS, StructuralAnalyzer
from ..logging import get_logger

ENTRY_POINT_GROUP = "docsync.extractors"
CATEGORIES = ("api", "component")

ExtractorFactory = Callable[[], ArtifactExtractor]

_BUILTINS: Dict[str, ExtractorFactory] = {
    "api": ApiPathExtractor,
    "component": ComponentPathExtractor,
}

_LOGGER = get_logger("analyzer")


def available_extractors() -> Dict[str, ExtractorFactory]:
    """Map lower-cased extractor names to factories, built-ins first."""
    registry = dict(_BUILTINS)
    for entry in metadata.entry_points().select(group=ENTRY_POINT_GROUP):
        key = entry.name.lower()
        if key in registry:
            _LOGGER.warning("Ignoring extractor plugin %r: name already registered", entry.name)
            continue
        registry[key] = partial(_load_plugin, entry)
    return registry


def discover_extractors(enabled: Sequence[str] | None = None) -> List[ArtifactExtractor]:
    """Instantiate registered extractors, limited to ``enabled`` names when given.

    Raises ValueError for names nothing registers and TypeError when a plugin
    does not produce a usable extractor.
    """
    registry = available_extractors()
    if enabled is None:
        selected = list(registry)
    else:
        wanted = {name.lower() for name in enabled}
        unknown = wanted.difference(registry)
        if unknown:
            raise ValueError(f"Unknown extractors requested: {', '.join(sorted(unknown))}")
        selected = [name for name in registry if name in wanted]
    return [registry[name]() for name in selected]


def _load_plugin(entry: metadata.EntryPoint) -> ArtifactExtractor:
    try:
        target = entry.load()
    except Exception as exc:
        raise RuntimeError(f"Failed to load extractor plugin '{entry.name}': {exc}") from exc

    instance = target() if callable(target) and not isinstance(target, ArtifactExtractor) else target
    if not isinstance(instance, ArtifactExtractor):
        raise TypeError(f"Extractor plugin '{entry.name}' did not produce an ArtifactExtractor")
    if instance.category not in CATEGORIES:
        raise TypeError(
            f"Extractor plugin '{entry.name}' has category {instance.category!r}; "
            f"expected one of {', '.join(CATEGORIES)}"
        )
    return instance


__all__ = [
    "ApiPathExtractor",
    "ArtifactExtractor",
    "ComponentPathExtractor",
    "DEPTH_LIMITS",
    "ENTRY_POINT_GROUP",
    "StructuralAnalyzer",
    "available_extractors",
    "discover_extractors",
]

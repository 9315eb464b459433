"""Configuration loading for docsync (.docsync.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError
from .models import DEPTHS

CONFIG_FILENAME = ".docsync.yml"


@dataclass
class AnalysisConfig:
    """Structural analysis settings."""

    depth: str = "standard"
    extractors: List[str] = field(default_factory=list)


@dataclass
class ValidationConfig:
    """Validator flags."""

    strict: bool = False
    check_links: bool = True
    check_code_examples: bool = True


@dataclass
class SyncConfig:
    """Drift detection settings."""

    auto_update: bool = False
    source_extension: str = ".ts"


@dataclass
class DocSyncConfig:
    """Represents the settings defined in .docsync.yml."""

    root: Path
    source: Path
    docs: Path
    include: List[str] = field(default_factory=list)
    exclude: List[str] = field(default_factory=list)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    sync: SyncConfig = field(default_factory=SyncConfig)


def load_config(config_path: Path) -> DocSyncConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return DocSyncConfig(root=root, source=root / "src", docs=root / "docs")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    source = _as_str(data.get("source")) or "src"
    docs = _as_str(data.get("docs")) or "docs"

    analysis = AnalysisConfig()
    analysis_data = _as_dict(data.get("analysis"))
    if analysis_data:
        depth = _as_str(analysis_data.get("depth"))
        if depth is not None:
            if depth not in DEPTHS:
                raise ConfigError(
                    f"analysis.depth must be one of {', '.join(DEPTHS)}, got {depth!r}"
                )
            analysis.depth = depth
        analysis.extractors = _as_str_list(analysis_data.get("extractors"))

    validation = ValidationConfig()
    validation_data = _as_dict(data.get("validation"))
    if validation_data:
        validation.strict = _as_bool(validation_data.get("strict"), validation.strict)
        validation.check_links = _as_bool(
            validation_data.get("check_links"), validation.check_links
        )
        validation.check_code_examples = _as_bool(
            validation_data.get("check_code_examples"), validation.check_code_examples
        )

    sync = SyncConfig()
    sync_data = _as_dict(data.get("sync"))
    if sync_data:
        sync.auto_update = _as_bool(sync_data.get("auto_update"), sync.auto_update)
        extension = _as_str(sync_data.get("source_extension"))
        if extension:
            sync.source_extension = extension if extension.startswith(".") else f".{extension}"

    return DocSyncConfig(
        root=root,
        source=root / source,
        docs=root / docs,
        include=_as_str_list(data.get("include")),
        exclude=_as_str_list(data.get("exclude")),
        analysis=analysis,
        validation=validation,
        sync=sync,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return default


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []

"""Documentation drift detection and validation."""

from .errors import (
    ConfigError,
    DocSyncError,
    MalformedContent,
    OperationCancelled,
    ParseHeuristicFailure,
    PathNotFound,
    PermissionDenied,
)
from .pipeline import Pipeline, PipelineOutcome

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DocSyncError",
    "MalformedContent",
    "OperationCancelled",
    "ParseHeuristicFailure",
    "PathNotFound",
    "PermissionDenied",
    "Pipeline",
    "PipelineOutcome",
    "__version__",
]

"""Validation package for documentation trees."""

from .base import (
    DocumentCheck,
    DocumentContext,
    FencedBlock,
    ValidationOptions,
    prepare_context,
    scan_fences,
)
from .code_blocks import CodeBlockCheck
from .content import ContentCheck
from .document import DocumentValidator, validate_tree
from .frontmatter import FrontmatterCheck
from .links import LinkCheck

__all__ = [
    "CodeBlockCheck",
    "ContentCheck",
    "DocumentCheck",
    "DocumentContext",
    "DocumentValidator",
    "FencedBlock",
    "FrontmatterCheck",
    "LinkCheck",
    "ValidationOptions",
    "prepare_context",
    "scan_fences",
    "validate_tree",
]

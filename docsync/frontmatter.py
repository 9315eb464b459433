"""YAML frontmatter parsing for Markdown/MDX documents."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict

import yaml

from .errors import MalformedContent

_DELIMITER = "---"
_CLOSERS = {"---", "..."}


@dataclass
class ParsedDocument:
    """Frontmatter mapping plus the body that follows it."""

    data: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    body_offset: int = 0


def parse_document(text: str) -> ParsedDocument:
    """Split ``text`` into frontmatter and body.

    Documents without a leading ``---`` line have empty frontmatter. Raises
    :class:`MalformedContent` for unterminated blocks, YAML syntax errors, or
    frontmatter that is not a mapping. ``body_offset`` is the number of lines
    consumed by the frontmatter block.
    """
    text = text.lstrip("\ufeff")
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != _DELIMITER:
        return ParsedDocument(data={}, body=text, body_offset=0)

    for index in range(1, len(lines)):
        if lines[index].strip() in _CLOSERS:
            block = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            return ParsedDocument(
                data=_load_mapping(block), body=body, body_offset=index + 1
            )

    raise MalformedContent("Frontmatter block is not terminated")


def stringify_frontmatter(data: Dict[str, Any]) -> Dict[str, str]:
    """Flatten parsed YAML values into the string map stored on artifacts."""
    result: Dict[str, str] = {}
    for key, value in data.items():
        if value is None:
            result[str(key)] = ""
        elif isinstance(value, (list, dict)):
            result[str(key)] = json.dumps(value, sort_keys=True, default=str)
        else:
            result[str(key)] = str(value)
    return result


def _load_mapping(block: str) -> Dict[str, Any]:
    if not block.strip():
        return {}
    try:
        loaded = yaml.safe_load(block)
    except yaml.YAMLError as exc:
        raise MalformedContent(f"Invalid frontmatter: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise MalformedContent("Frontmatter must be a key/value mapping")
    return loaded


__all__ = ["ParsedDocument", "parse_document", "stringify_frontmatter"]

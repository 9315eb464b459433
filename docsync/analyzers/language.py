"""Static extension to language table."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Iterable, List, Optional

LANGUAGE_BY_SUFFIX = {
    ".py": "Python",
    ".pyi": "Python",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".mjs": "JavaScript",
    ".cjs": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".vue": "Vue",
    ".svelte": "Svelte",
    ".java": "Java",
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".go": "Go",
    ".rs": "Rust",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".c": "C",
    ".h": "C",
    ".cpp": "C++",
    ".hpp": "C++",
    ".cc": "C++",
    ".swift": "Swift",
    ".scala": "Scala",
    ".sh": "Shell",
}


def detect_language(path: str) -> Optional[str]:
    """Return the language for ``path`` by extension, or None when unknown."""
    return LANGUAGE_BY_SUFFIX.get(PurePosixPath(path).suffix.lower())


def collect_languages(languages: Iterable[Optional[str]]) -> List[str]:
    """Sorted set of the non-null languages."""
    return sorted({language for language in languages if language})


__all__ = ["LANGUAGE_BY_SUFFIX", "collect_languages", "detect_language"]

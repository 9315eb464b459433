"""Dependency manifest readers and framework heuristics."""

from __future__ import annotations

import json
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, Iterable, List, Set

from ..models import ProjectMetadata

_NODE_FRAMEWORKS = {
    "react": "React",
    "next": "Next.js",
    "vue": "Vue",
    "nuxt": "Nuxt",
    "svelte": "Svelte",
    "@angular/core": "Angular",
    "express": "Express",
    "fastify": "Fastify",
    "@nestjs/core": "NestJS",
    "fastapi": "FastAPI",
}

_PYTHON_FRAMEWORKS = {
    "fastapi": "FastAPI",
    "django": "Django",
    "flask": "Flask",
    "starlette": "Starlette",
}

_REQUIREMENT_SPLIT = re.compile(r"[<>=!~;\[\s]")


# Node.js helpers


def load_package_json(root: Path) -> Dict[str, Any]:
    """Return the parsed package.json contents or an empty dict."""
    package_json = root / "package.json"
    if not package_json.is_file():
        return {}
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_node_dependencies(root: Path) -> List[str]:
    """Runtime and dev dependency names from package.json."""
    data = load_package_json(root)
    names: Set[str] = set()
    for key in ("dependencies", "devDependencies", "peerDependencies"):
        deps = data.get(key)
        if isinstance(deps, dict):
            names.update(str(name) for name in deps)
    return sorted(names)


# Python helpers


def load_python_dependencies(root: Path) -> List[str]:
    """Collect Python dependencies from requirements.txt and pyproject.toml."""
    deps: Set[str] = set()

    requirements = root / "requirements.txt"
    if requirements.is_file():
        deps.update(_parse_requirements(requirements))

    pyproject = _load_pyproject(root)
    project = pyproject.get("project")
    if isinstance(project, dict):
        for dep in project.get("dependencies", []) or []:
            if isinstance(dep, str):
                deps.add(_requirement_name(dep))
    poetry = pyproject.get("tool", {}).get("poetry", {}) if isinstance(pyproject.get("tool"), dict) else {}
    if isinstance(poetry, dict) and isinstance(poetry.get("dependencies"), dict):
        deps.update(name for name in poetry["dependencies"] if name.lower() != "python")

    deps.discard("")
    return sorted(deps)


def _parse_requirements(path: Path) -> List[str]:
    packages: List[str] = []
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return packages
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", "-")):
            continue
        name = _requirement_name(stripped)
        if name:
            packages.append(name)
    return packages


def _requirement_name(requirement: str) -> str:
    return _REQUIREMENT_SPLIT.split(requirement.strip(), 1)[0].strip()


def _load_pyproject(root: Path) -> Dict[str, Any]:
    pyproject = root / "pyproject.toml"
    if not pyproject.is_file():
        return {}
    try:
        return tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return {}


# Framework heuristics


def detect_frameworks(root: Path) -> List[str]:
    """Match manifest dependency names against the static framework table."""
    frameworks: Set[str] = set()
    frameworks.update(_match(load_node_dependencies(root), _NODE_FRAMEWORKS))
    frameworks.update(_match(load_python_dependencies(root), _PYTHON_FRAMEWORKS))
    return sorted(frameworks)


def _match(dependencies: Iterable[str], table: Dict[str, str]) -> Set[str]:
    lowered = {dep.lower() for dep in dependencies}
    return {label for key, label in table.items() if key in lowered}


# Project metadata


def load_metadata(root: Path) -> ProjectMetadata:
    """Project name, version and friends from package.json, then pyproject.toml."""
    metadata = ProjectMetadata(name=root.name or "project")

    package = load_package_json(root)
    if package:
        metadata.name = _text(package.get("name")) or metadata.name
        metadata.version = _text(package.get("version"))
        metadata.description = _text(package.get("description"))
        repository = package.get("repository")
        if isinstance(repository, dict):
            repository = repository.get("url")
        metadata.repository = _text(repository)
        author = package.get("author")
        if isinstance(author, dict):
            author = author.get("name")
        metadata.author = _text(author)
        return metadata

    project = _load_pyproject(root).get("project")
    if isinstance(project, dict):
        metadata.name = _text(project.get("name")) or metadata.name
        metadata.version = _text(project.get("version"))
        metadata.description = _text(project.get("description"))
        authors = project.get("authors")
        if isinstance(authors, list) and authors and isinstance(authors[0], dict):
            metadata.author = _text(authors[0].get("name"))
        urls = project.get("urls")
        if isinstance(urls, dict):
            metadata.repository = _text(urls.get("Repository") or urls.get("repository"))
    return metadata


def _text(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


__all__ = [
    "detect_frameworks",
    "load_metadata",
    "load_node_dependencies",
    "load_package_json",
    "load_python_dependencies",
]

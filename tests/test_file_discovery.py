"""Tests for docsync.discovery."""

from __future__ import annotations

import logging
import threading

import pytest

from docsync.discovery import (
    DOC_PATTERNS,
    FileDiscovery,
    glob_matches,
    load_doc_artifacts,
    load_source_artifacts,
)
from docsync.errors import OperationCancelled, PathNotFound, PermissionDenied
from docsync.timestamps import FilesystemProvider, Found, LastModifiedProvider, Unavailable
from tests._fixtures.tree_builder import BASE_EPOCH, TreeBuilder


class _NoTimestamps(LastModifiedProvider):
    def last_modified(self, path):  # type: ignore[no-untyped-def]
        return Unavailable("disabled")


@pytest.mark.parametrize(
    ("path", "pattern", "expected"),
    [
        ("api/users.ts", "**/*.ts", True),
        ("users.ts", "**/*.ts", True),
        ("api/users.tsx", "**/*.ts", False),
        ("node_modules/x/index.js", "**/node_modules/**", True),
        ("pkg/node_modules/x.js", "**/node_modules/**", True),
        ("node_modules/", "**/node_modules/**", True),
        ("legacy", "legacy/**", True),
        ("legacy/old.ts", "legacy/**", True),
        ("legacyish/old.ts", "legacy/**", False),
        ("vendor/app.min.js", "**/*.min.js", True),
    ],
)
def test_glob_matches(path: str, pattern: str, expected: bool) -> None:
    assert glob_matches(path, pattern) is expected


def test_discover_applies_default_excludes(tree: TreeBuilder) -> None:
    tree.write(
        {
            "src/app.ts": "export const app = 1;\n",
            "node_modules/lib/index.js": "module.exports = {};\n",
            "dist/bundle.js": "",
            "src/vendor.min.js": "",
            ".git/hooks/pre-commit.py": "",
        }
    )

    result = FileDiscovery().discover(tree.path())

    assert result.paths == ["src/app.ts"]
    assert result.root == str(tree.path().resolve())


def test_discover_orders_by_include_pattern(tree: TreeBuilder) -> None:
    tree.write({"b.md": "# b\n", "a.mdx": "# a\n", "guide/c.md": "# c\n"})

    result = FileDiscovery(DOC_PATTERNS).discover(tree.path())

    assert result.paths == ["b.md", "guide/c.md", "a.mdx"]


def test_discover_honours_custom_excludes(tree: TreeBuilder) -> None:
    tree.write({"src/api/users.ts": "", "src/legacy/old.ts": ""})

    result = FileDiscovery(["**/*.ts"], ["src/legacy/**"]).discover(tree.path())

    assert result.paths == ["src/api/users.ts"]


def test_discover_missing_root_raises(tmp_path) -> None:
    with pytest.raises(PathNotFound) as excinfo:
        FileDiscovery().discover(tmp_path / "nope")
    assert "Root directory not found" in str(excinfo.value)


def test_discover_empty_root_returns_nothing(tmp_path) -> None:
    assert FileDiscovery().discover(tmp_path).paths == []


def test_discover_stops_when_cancelled(tree: TreeBuilder) -> None:
    tree.write({"a.ts": "", "b.ts": ""})
    cancel = threading.Event()
    cancel.set()

    with pytest.raises(OperationCancelled):
        FileDiscovery(cancel=cancel).discover(tree.path())


def test_discover_is_deterministic(tree: TreeBuilder) -> None:
    tree.write({"z/a.ts": "", "a/z.ts": "", "m.py": ""})
    discovery = FileDiscovery()

    assert discovery.discover(tree.path()).paths == discovery.discover(tree.path()).paths


def test_load_source_artifacts_records_language_and_mtime(tree: TreeBuilder) -> None:
    tree.write({"api/users.ts": "export function list() {}\n", "notes.txt": ""})
    tree.touch_day("api/users.ts", 2)

    artifacts = load_source_artifacts(
        tree.path(), ["api/users.ts", "notes.txt"], FilesystemProvider(), max_workers=2
    )

    assert [a.path for a in artifacts] == ["api/users.ts", "notes.txt"]
    users, notes = artifacts
    assert users.extension == ".ts"
    assert users.language == "TypeScript"
    assert users.last_modified == pytest.approx(BASE_EPOCH + 2 * 86400)
    assert users.timestamp_source == "filesystem"
    assert notes.language is None


def test_load_source_artifacts_leaves_timestamp_unset_when_unavailable(tree: TreeBuilder) -> None:
    tree.write({"app.py": ""})

    (artifact,) = load_source_artifacts(tree.path(), ["app.py"], _NoTimestamps())

    assert artifact.last_modified is None
    assert artifact.timestamp_source is None


def test_load_doc_artifacts_parses_frontmatter(tree: TreeBuilder) -> None:
    tree.write(
        {
            "guide.mdx": """
            ---
            title: Guide
            tags: [a, b]
            draft:
            ---
            # Guide
            """
        }
    )

    (doc,) = load_doc_artifacts(tree.path(), ["guide.mdx"], FilesystemProvider())

    assert doc.frontmatter == {"title": "Guide", "tags": '["a", "b"]', "draft": ""}
    assert doc.raw_content is not None and doc.raw_content.startswith("---")
    assert doc.read_error is None


def test_load_doc_artifacts_keeps_malformed_frontmatter_content(tree: TreeBuilder) -> None:
    tree.write({"broken.md": "---\ntitle: [unterminated\n---\nbody\n"})

    (doc,) = load_doc_artifacts(tree.path(), ["broken.md"], FilesystemProvider())

    assert doc.frontmatter == {}
    assert doc.raw_content is not None
    assert doc.read_error is None


def test_load_doc_artifacts_marks_undecodable_files(tree: TreeBuilder) -> None:
    tree.write_bytes("latin1.md", "caf\xe9\n".encode("latin-1"))

    (doc,) = load_doc_artifacts(tree.path(), ["latin1.md"], FilesystemProvider())

    assert doc.raw_content is None
    assert doc.read_error is not None
    assert doc.frontmatter == {}


def test_found_is_portable_only_for_git() -> None:
    assert Found(1.0, "git").portable is True
    assert Found(1.0, "filesystem").portable is False


def test_unreadable_subdirectory_is_skipped_with_warning(
    tree: TreeBuilder,
    deny_listing,
    caplog: pytest.LogCaptureFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    tree.write({"ok.ts": "", "api/hidden.ts": "", "lib/util.ts": ""})
    deny_listing(tree.path("api"))
    monkeypatch.setattr(logging.getLogger("docsync"), "propagate", True)

    with caplog.at_level(logging.WARNING, logger="docsync"):
        result = FileDiscovery().discover(tree.path())

    assert result.paths == ["ok.ts", "lib/util.ts"]
    assert [denied.path for denied in result.skipped] == ["api"]
    assert isinstance(result.skipped[0], PermissionDenied)
    assert "Skipping unreadable directory" in caplog.text


def test_unreadable_root_aborts_discovery(tree: TreeBuilder, deny_listing) -> None:
    tree.write({"api/orders.ts": ""})
    deny_listing(tree.path())

    with pytest.raises(PermissionDenied) as excinfo:
        FileDiscovery().discover(tree.path())

    assert excinfo.value.path == str(tree.path().resolve())

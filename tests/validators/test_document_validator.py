"""Tests for tree-level documentation validation."""

from __future__ import annotations

import pytest

from docsync.errors import PathNotFound, PermissionDenied
from docsync.validators import DocumentValidator, ValidationOptions, validate_tree
from tests._fixtures.tree_builder import TreeBuilder


def _write_docs(tree: TreeBuilder) -> None:
    tree.write(
        {
            "docs/index.mdx": """
            ---
            title: Home
            description: Start here
            ---
            Read the [guide](./guide).
            """,
            "docs/guide.mdx": """
            ---
            title: Guide
            ---
            ```
            npm install
            ```
            [broken](./missing)
            """,
            "docs/bad.md": "---\ntitle: [oops\n---\n[also broken](./nowhere)\n",
        }
    )


def test_validate_tree_aggregates_issues(tree: TreeBuilder) -> None:
    _write_docs(tree)

    result = validate_tree(tree.path("docs"))

    assert result.valid is False
    assert result.summary.total_files == 3
    assert result.summary.files_with_errors == 2
    assert result.summary.total_errors == len(result.errors) == 3
    assert result.summary.total_warnings == len(result.warnings) == 2
    kinds = sorted(issue.kind for issue in result.errors)
    assert kinds == ["broken_link", "broken_link", "invalid_frontmatter"]
    warnings = sorted(issue.kind for issue in result.warnings)
    assert warnings == ["missing_code_language", "missing_frontmatter"]


def test_disabling_checks_drops_their_issues(tree: TreeBuilder) -> None:
    _write_docs(tree)

    result = validate_tree(
        tree.path("docs"), ValidationOptions(check_links=False, check_code_examples=False)
    )

    assert [issue.kind for issue in result.errors] == ["invalid_frontmatter"]
    assert [issue.kind for issue in result.warnings] == ["missing_frontmatter"]


def test_strict_mode_promotes_missing_description(tree: TreeBuilder) -> None:
    tree.write({"docs/page.mdx": "---\ntitle: Page\n---\nBody\n"})

    lenient = validate_tree(tree.path("docs"))
    strict = validate_tree(tree.path("docs"), ValidationOptions(strict=True))

    assert lenient.valid is True
    assert strict.valid is False
    assert strict.summary.files_with_errors == 1


def test_warnings_never_fail_validation(tree: TreeBuilder) -> None:
    tree.write({"docs/page.mdx": "---\ntitle: Page\n---\n![](x.png)\n```\n\n```\n"})

    result = validate_tree(tree.path("docs"))

    assert result.valid is True
    assert result.summary.total_warnings == len(result.warnings) > 0


def test_empty_docs_tree_is_valid(tree: TreeBuilder) -> None:
    tree.path("docs").mkdir()

    result = validate_tree(tree.path("docs"))

    assert result.valid is True
    assert result.summary.total_files == 0


def test_missing_docs_root_raises(tree: TreeBuilder) -> None:
    with pytest.raises(PathNotFound):
        validate_tree(tree.path("docs"))


def test_validator_checks_follow_options() -> None:
    names = [check.name for check in DocumentValidator(ValidationOptions(check_links=False)).checks()]

    assert names == ["frontmatter", "code_blocks", "content"]


def test_unreadable_docs_root_is_not_reported_valid(tree: TreeBuilder, deny_listing) -> None:
    tree.write({"docs/bad.mdx": "no frontmatter\n"})
    deny_listing(tree.path("docs"))

    with pytest.raises(PermissionDenied):
        validate_tree(tree.path("docs"))


def test_skipped_directories_are_counted(tree: TreeBuilder, deny_listing) -> None:
    _write_docs(tree)
    tree.write({"docs/internal/notes.mdx": "no frontmatter\n"})
    deny_listing(tree.path("docs/internal"))

    result = validate_tree(tree.path("docs"))

    assert result.summary.total_files == 3
    assert result.summary.skipped_directories == 1

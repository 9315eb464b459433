"""Tests for the pipeline facade."""

from __future__ import annotations

import pytest

from docsync.config import load_config
from docsync.errors import PathNotFound
from docsync.pipeline import Pipeline
from docsync.timestamps import FilesystemProvider
from docsync.validators import ValidationOptions
from tests._fixtures.tree_builder import TreeBuilder


def _pipeline() -> Pipeline:
    return Pipeline(FilesystemProvider(), max_workers=2)


def test_run_analysis_splits_sources_and_docs(tree: TreeBuilder) -> None:
    tree.write(
        {
            "src/components/Button.tsx": "export function Button() {}\n",
            "docs/Button.mdx": "---\ntitle: Button\ndescription: A button\n---\n",
            "README.md": "# Project\n",
        }
    )

    result = _pipeline().run_analysis(tree.path())

    assert [artifact.path for artifact in result.structure.files] == ["src/components/Button.tsx"]
    (component,) = result.components
    assert component.description == "A button"
    assert result.documentation_needs == []


def test_run_analysis_missing_path(tree: TreeBuilder) -> None:
    with pytest.raises(PathNotFound):
        _pipeline().run_analysis(tree.path("missing"))


def test_run_sync_uses_source_extension(tree: TreeBuilder) -> None:
    tree.write({"src/api/users.py": "def list_users():\n    pass\n", "docs/api/users.mdx": "---\ntitle: U\n---\n"})
    tree.touch_day("src/api/users.py", 12)
    tree.touch_day("docs/api/users.mdx", 1)

    report = _pipeline().run_sync(tree.path("docs"), tree.path("src"), source_extension=".py")

    (entry,) = report.outdated
    assert entry.days_behind == 11
    assert entry.priority == "high"
    assert report.missing == []


def test_run_validation_with_options(tree: TreeBuilder) -> None:
    tree.write({"docs/page.mdx": "---\ntitle: Page\n---\n[x](./nope)\n"})

    default = _pipeline().run_validation(tree.path("docs"))
    no_links = _pipeline().run_validation(tree.path("docs"), ValidationOptions(check_links=False))

    assert default.valid is False
    assert no_links.valid is True


def test_run_check_reports_both_outcomes(tree: TreeBuilder) -> None:
    tree.write(
        {
            ".docsync.yml": "validation:\n  strict: true\n",
            "src/api/orders.ts": "export const orders = [];\n",
            "docs/intro.mdx": "---\ntitle: Intro\n---\n",
        }
    )

    outcome = _pipeline().run_check(load_config(tree.path()))

    assert outcome.synced is False
    assert outcome.sync.status == "incomplete"
    assert outcome.valid is False
    assert outcome.success is False


def test_runs_share_no_state(tree: TreeBuilder) -> None:
    tree.write({"src/lib/a.ts": "", "docs/lib/a.mdx": "---\ntitle: A\n---\n"})
    tree.touch_day("src/lib/a.ts", 1)
    tree.touch_day("docs/lib/a.mdx", 1)
    pipeline = _pipeline()

    first = pipeline.run_sync(tree.path("docs"), tree.path("src"))
    tree.touch_day("src/lib/a.ts", 6)
    second = pipeline.run_sync(tree.path("docs"), tree.path("src"))

    assert first.status == "synced"
    assert second.status == "outdated"
    assert second.outdated[0].days_behind == 5

"""Tests for internal link resolution."""

from __future__ import annotations

import pytest

from docsync.discovery import load_doc_artifacts
from docsync.timestamps import FilesystemProvider
from docsync.validators import LinkCheck, ValidationOptions, prepare_context
from docsync.validators.links import is_external
from tests._fixtures.tree_builder import TreeBuilder

_FRONTMATTER = "---\ntitle: Page\ndescription: d\n---\n"


def _check(tree: TreeBuilder, rel_path: str):  # type: ignore[no-untyped-def]
    (artifact,) = load_doc_artifacts(tree.path(), [rel_path], FilesystemProvider())
    context = prepare_context(artifact, tree.path(), ValidationOptions())
    return LinkCheck().check(context)


@pytest.fixture
def docs(tree: TreeBuilder) -> TreeBuilder:
    tree.write(
        {
            "guide/setup.mdx": _FRONTMATTER,
            "guide/faq.md": _FRONTMATTER,
            "api/index.mdx": _FRONTMATTER,
            "img/logo.png": "",
        }
    )
    return tree


def test_resolvable_links_pass(docs: TreeBuilder) -> None:
    docs.write(
        {
            "guide/intro.mdx": _FRONTMATTER
            + "\n".join(
                [
                    "See [setup](./setup) and [faq](faq.md#top).",
                    "Reference: [API](/api) and [logo](../img/logo.png).",
                    "Query [setup](setup?tab=1) and [titled](<setup> \"Setup page\").",
                    "",
                ]
            )
        }
    )

    assert _check(docs, "guide/intro.mdx") == []


def test_broken_links_reported_with_line(docs: TreeBuilder) -> None:
    docs.write({"guide/intro.mdx": _FRONTMATTER + "Intro\n\n[missing](./nowhere) and [gone](/api/gone)\n"})

    issues = _check(docs, "guide/intro.mdx")

    assert [(issue.kind, issue.severity, issue.line) for issue in issues] == [
        ("broken_link", "error", 7),
        ("broken_link", "error", 7),
    ]
    assert "./nowhere" in issues[0].message


def test_external_and_anchor_links_are_skipped(docs: TreeBuilder) -> None:
    docs.write(
        {
            "page.mdx": _FRONTMATTER
            + "[site](https://example.com/x) [mail](mailto:a@b.c) [cdn](//cdn.example.com) [top](#top)\n"
        }
    )

    assert _check(docs, "page.mdx") == []


def test_links_in_code_are_ignored(docs: TreeBuilder) -> None:
    docs.write(
        {
            "page.mdx": _FRONTMATTER
            + "Use `[x](./nope)` inline.\n\n```md\n[broken](./nope)\n```\n"
        }
    )

    assert _check(docs, "page.mdx") == []


def test_links_in_frontmatter_are_ignored(docs: TreeBuilder) -> None:
    docs.write({"page.mdx": "---\ntitle: '[x](./nope)'\n---\nBody\n"})

    assert _check(docs, "page.mdx") == []


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("https://x.org", True),
        ("mailto:a@b.c", True),
        ("//cdn.example.com", True),
        ("./setup", False),
        ("/api", False),
    ],
)
def test_is_external(target: str, expected: bool) -> None:
    assert is_external(target) is expected


def test_creating_target_page_clears_broken_link(docs: TreeBuilder) -> None:
    docs.write({"page.mdx": _FRONTMATTER + "[text](./missing-page)\n"})

    (issue,) = _check(docs, "page.mdx")
    assert issue.kind == "broken_link"

    docs.write({"missing-page.mdx": _FRONTMATTER})
    assert _check(docs, "page.mdx") == []


def test_links_leaving_docs_root_are_broken(tree: TreeBuilder) -> None:
    tree.write(
        {
            "outside.md": _FRONTMATTER,
            "docs/guide/page.mdx": _FRONTMATTER + "[up](../../outside.md) [root](/../outside)\n",
        }
    )
    docs_root = tree.path("docs")
    (artifact,) = load_doc_artifacts(docs_root, ["guide/page.mdx"], FilesystemProvider())

    issues = LinkCheck().check(prepare_context(artifact, docs_root, ValidationOptions()))

    assert [issue.kind for issue in issues] == ["broken_link", "broken_link"]

import pytest

from conftest import names

from catmd.core import HeaderAction
from catmd.core.errors import NoDocumentsError, StructuralError
from catmd.core.traversal import (
    FileTraversal,
    determine_scope_dir,
    find_markdown_files,
    validate_root_file,
)


def traverse(root, scope=None, events=None):
    return FileTraversal(root, scope or root.parent, events=events).traverse()


def test_depth_first_document_order(write_docs):
    base = write_docs({
        "index.md": "# Index\n\n[A](a.md) and [B](b.md)\n",
        "a.md": "# A\n\n[C](sub/c.md)\n",
        "sub/c.md": "# C\n\n[D](d.md)\n",
        "sub/d.md": "# D\n",
        "b.md": "# B\n",
    })
    context = traverse(base / "index.md")
    assert names(context.order) == ["index.md", "a.md", "c.md", "d.md", "b.md"]


def test_siblings_keep_document_order(write_docs):
    base = write_docs({
        "index.md": "[3](three.md) [1](one.md) [2](two.md)\n",
        "one.md": "one\n",
        "two.md": "two\n",
        "three.md": "three\n",
    })
    context = traverse(base / "index.md")
    assert names(context.order) == ["index.md", "three.md", "one.md", "two.md"]


def test_cycle_visits_each_document_once(write_docs):
    base = write_docs({
        "a.md": "# A\n\n[B](b.md)\n",
        "b.md": "# B\n\n[back](a.md)\n",
    })
    context = traverse(base / "a.md")
    assert names(context.order) == ["a.md", "b.md"]


def test_repeated_references_included_once(write_docs):
    base = write_docs({
        "index.md": "[b](b.md) [b again](./b.md#x) [c](c.md)\n",
        "b.md": "[c](c.md)\n",
        "c.md": "[index](index.md)\n",
    })
    context = traverse(base / "index.md")
    assert names(context.order) == ["index.md", "b.md", "c.md"]
    assert len(context.order) == len(set(context.order))


def test_missing_target_is_not_fatal(write_docs, warnings):
    base = write_docs({"a.md": "# A\n\n[m](missing.md)\n"})
    context = traverse(base / "a.md", events=warnings)

    assert names(context.order) == ["a.md"]
    assert any("missing.md" in message for message in warnings.messages)


def test_directory_target_is_not_followed(write_docs):
    base = write_docs({"a.md": "[dir](sub)\n", "sub/x.md": "x\n"})
    context = traverse(base / "a.md")
    assert names(context.order) == ["a.md"]


def test_footnote_links_are_followed(write_docs):
    base = write_docs({
        "a.md": "# A\n\nText[^1].\n\n[^1]: See [b](b.md).\n",
        "b.md": "# B\n",
    })
    context = traverse(base / "a.md")
    assert names(context.order) == ["a.md", "b.md"]


def test_links_outside_scope_are_not_followed(write_docs):
    base = write_docs({
        "docs/index.md": "[out](../outside.md) [abs](/etc/hosts)\n",
        "outside.md": "# Outside\n",
    })
    context = traverse(base / "docs" / "index.md")
    assert names(context.order) == ["index.md"]


def test_explicit_scope_widens_boundary(write_docs):
    base = write_docs({
        "docs/index.md": "[out](../outside.md)\n",
        "outside.md": "# Outside\n",
    })
    context = traverse(base / "docs" / "index.md", scope=base)
    assert names(context.order) == ["index.md", "outside.md"]


def test_empty_link_warns_and_continues(write_docs, warnings):
    base = write_docs({"a.md": "[empty]() [b](b.md)\n", "b.md": "b\n"})
    context = traverse(base / "a.md", events=warnings)

    assert names(context.order) == ["a.md", "b.md"]
    assert any("Empty link" in message for message in warnings.messages)


def test_undecodable_document_is_skipped(write_docs, warnings):
    base = write_docs({
        "a.md": "[bad](bad.md) [good](good.md)\n",
        "bad.md": b"\xff\xfe not utf-8 \x80",
        "good.md": "# Good\n",
    })
    context = traverse(base / "a.md", events=warnings)

    assert names(context.order) == ["a.md", "good.md"]
    assert (base / "bad.md").resolve() not in context.visited
    assert (base / "bad.md").resolve() in context.seen
    assert any("bad.md" in message for message in warnings.messages)


def test_unreadable_root_means_no_documents(write_docs):
    base = write_docs({"a.md": b"\xff\xfe\x80"})
    with pytest.raises(NoDocumentsError):
        traverse(base / "a.md")


def test_header_outcome_recorded(write_docs):
    base = write_docs({
        "a.md": "# A\n\n[b](b.md) [c](c.md)\n",
        "b.md": "## Sub\n\n# B\n",
        "c.md": "Just text\n",
    })
    context = traverse(base / "a.md")
    actions = {p.name: a for p, a in context.header_actions.items()}

    assert actions == {
        "a.md": HeaderAction.KEEP,
        "b.md": HeaderAction.SYNTHESIZE_AND_DEMOTE,
        "c.md": HeaderAction.SYNTHESIZE,
    }
    assert context.leading_anchors[(base / "a.md").resolve()] == "a"


def test_validate_root_file(write_docs):
    base = write_docs({"index.md": "# I\n", "notes.txt": "x\n", "book.MARKDOWN": "# B\n", "dir/x.md": ""})

    assert validate_root_file(base / "index.md") == (base / "index.md").resolve()
    assert validate_root_file(base / "book.MARKDOWN").name == "book.MARKDOWN"
    with pytest.raises(StructuralError, match="does not exist"):
        validate_root_file(base / "missing.md")
    with pytest.raises(StructuralError, match="directory"):
        validate_root_file(base / "dir")
    with pytest.raises(StructuralError, match="not a markdown file"):
        validate_root_file(base / "notes.txt")


def test_determine_scope_dir(write_docs):
    base = write_docs({"docs/index.md": "# I\n", "file.txt": "x"})

    assert determine_scope_dir(base / "docs" / "index.md") == (base / "docs").resolve()
    assert determine_scope_dir(base / "docs" / "index.md", base) == base.resolve()
    with pytest.raises(StructuralError, match="does not exist"):
        determine_scope_dir(base / "docs" / "index.md", base / "nope")
    with pytest.raises(StructuralError, match="not a directory"):
        determine_scope_dir(base / "docs" / "index.md", base / "file.txt")


def test_find_markdown_files(write_docs):
    base = write_docs({
        "index.md": "",
        "b/two.markdown": "",
        "a/one.md": "",
        "a/skip.txt": "",
    })
    found = find_markdown_files(base)
    assert [p.relative_to(base.resolve()).as_posix() for p in found] == [
        "a/one.md",
        "b/two.markdown",
        "index.md",
    ]

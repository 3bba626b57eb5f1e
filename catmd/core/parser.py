"""
Markdown Parser
===============

Responsible for turning Markdown text into a marko element tree, reading
headers, links and footnotes out of it, and rendering a tree back to Markdown.

All structural work happens on the element tree. Text is only produced by the
marko ``MarkdownRenderer``.
"""

import re
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from marko import Markdown, block, inline
from marko.ext.footnote import FootnoteDef, FootnoteRef
from marko.md_renderer import MarkdownRenderer

from catmd.core import FootnoteDefinition, Header, Link, LinkKind
from catmd.core.errors import DocumentParseError, LinkResolutionError
from catmd.core import links as link_rules

HEADING_TYPES = (block.Heading, block.SetextHeading)


def _balanced_parens(text: str) -> bool:
    depth = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def format_destination(dest: str) -> str:
    """Write a link destination so that it parses back to ``dest``.

    Destinations with whitespace, angle brackets or unbalanced parentheses
    are only valid in the ``<...>`` form.
    """
    if dest and (re.search(r"[\s<>]", dest) or not _balanced_parens(dest)):
        return "<" + dest.replace("<", "\\<").replace(">", "\\>") + ">"
    return dest


def _format_title(title: Optional[str]) -> str:
    if not title:
        return ""
    return ' "{}"'.format(title.replace('"', '\\"'))


class CatmdRenderer(MarkdownRenderer):
    """Markdown renderer that also knows the footnote elements."""

    def render_setext_heading(self, element: block.SetextHeading) -> str:
        return self.render_heading(element)

    def render_link(self, element: inline.Link) -> str:
        dest = format_destination(element.dest)
        if dest == element.dest:
            return super().render_link(element)
        return f"[{self.render_children(element)}]({dest}{_format_title(element.title)})"

    def render_image(self, element: inline.Image) -> str:
        dest = format_destination(element.dest)
        if dest == element.dest:
            return super().render_image(element)
        return f"![{self.render_children(element)}]({dest}{_format_title(element.title)})"

    def render_link_ref_def(self, element: block.LinkRefDef) -> str:
        original = element.dest
        element.dest = format_destination(original)
        try:
            return super().render_link_ref_def(element)
        finally:
            element.dest = original

    def render_footnote_ref(self, element: FootnoteRef) -> str:
        return f"[^{element.label}]"

    def render_footnote_def(self, element: FootnoteDef) -> str:
        return f"[^{element.label}]: " + self.render_children(element).lstrip()


def make_text(value: str) -> inline.RawText:
    """Create a plain text element without going through the inline parser."""
    text = inline.RawText.__new__(inline.RawText)
    text.children = value
    return text


def without_final_period(content: List[Any]) -> List[Any]:
    """Drop one trailing period so a closing parenthesis can end the text."""
    if content and isinstance(content[-1], inline.RawText):
        last = content[-1]
        if last.children.endswith(".") and not last.children.endswith(".."):
            trimmed = last.children[:-1]
            return content[:-1] + ([make_text(trimmed)] if trimmed else [])
    return content


def iter_elements(element: Any) -> Iterator[Any]:
    """Yield every element below ``element`` in document order."""
    children = getattr(element, "children", None)
    if isinstance(children, list):
        for child in children:
            yield child
            yield from iter_elements(child)


def _collect_text(node: Any, parts: List[str], notes: Optional[Dict[str, str]]) -> None:
    if isinstance(node, inline.LineBreak):
        parts.append(" ")
        return
    if isinstance(node, FootnoteRef):
        if notes and node.label in notes:
            parts.append(f" ({notes[node.label]})")
        return
    children = getattr(node, "children", None)
    if isinstance(children, str):
        parts.append(children)
    elif isinstance(children, list):
        for child in children:
            _collect_text(child, parts, notes)


def element_text(element: Any, notes: Optional[Dict[str, str]] = None) -> str:
    """Extract the plain text of an element, ignoring markup.

    ``notes`` maps footnote labels to their text; references found in it are
    read as `` (text)``, the way they read once inlined. Other references
    are ignored.
    """
    parts: List[str] = []
    _collect_text(element, parts, notes)
    return "".join(parts).strip()


def footnote_text(footnote: FootnoteDefinition) -> str:
    """Plain text a footnote contributes once it is inlined."""
    parts: List[str] = []
    for node in without_final_period(footnote.content):
        _collect_text(node, parts, None)
    return "".join(parts).strip()


def heading_anchor(text: str) -> str:
    """Generate the GitHub style anchor for a heading text.

    ASCII letters and digits are kept (lowercased), whitespace, ``-`` and
    ``_`` each become ``-`` and everything else is dropped.
    """
    ascii_text = text.strip().encode("ascii", "ignore").decode("ascii").lower()
    anchor = re.sub(r"[^a-z0-9\s_-]", "", ascii_text)
    anchor = re.sub(r"[\s_-]", "-", anchor)
    return anchor or "heading"


class AnchorRegistry:
    """Hands out unique anchors within one document (``x``, ``x-1``, ``x-2``)."""

    def __init__(self):
        self._used: Dict[str, bool] = {}

    def unique(self, anchor: str) -> str:
        if anchor not in self._used:
            self._used[anchor] = True
            return anchor
        counter = 1
        while f"{anchor}-{counter}" in self._used:
            counter += 1
        result = f"{anchor}-{counter}"
        self._used[result] = True
        return result


class MarkdownParser:
    """Parses and renders Markdown with footnote support."""

    def __init__(self):
        self._markdown = Markdown(extensions=["footnote"])

    def parse(self, text: str) -> Any:
        """Parse Markdown text into a marko document."""
        try:
            return self._markdown.parse(text)
        except Exception as e:
            raise DocumentParseError(f"Invalid Markdown: {e}") from e

    def render(self, tree: Any) -> str:
        """Render a document tree back to Markdown."""
        renderer = CatmdRenderer()
        renderer.root_node = tree
        with renderer as r:
            return r.render(tree)

    def render_fragment(self, elements: Iterable[Any]) -> str:
        """Render block elements that do not belong to a document of their own."""
        scratch = self.parse("")
        scratch.children = list(elements)
        return self.render(scratch)

    def extract_headers(
        self,
        tree: Any,
        footnotes: Optional[List[FootnoteDefinition]] = None
    ) -> List[Header]:
        """Return every heading in document order with a unique anchor.

        When ``footnotes`` are given, references inside a heading count with
        their inlined text, so anchors match the headings as they are written
        out.
        """
        notes = {footnote.label: footnote_text(footnote) for footnote in footnotes or []}
        registry = AnchorRegistry()
        headers = []
        for element in iter_elements(tree):
            if isinstance(element, HEADING_TYPES):
                text = element_text(element, notes)
                headers.append(Header(
                    level=element.level,
                    text=text,
                    anchor=registry.unique(heading_anchor(text)),
                ))
        return headers

    def extract_links(
        self,
        tree: Any,
        current_path: Optional[Path] = None,
        scope: Optional[Path] = None
    ) -> List[Link]:
        """Return links and footnote references in document order.

        Links are classified only when both ``current_path`` and ``scope``
        are given. Links that cannot be resolved are reported as external.
        """
        found = []
        for element in iter_elements(tree):
            if isinstance(element, inline.Link):
                internal = False
                if current_path is not None and scope is not None:
                    try:
                        kind = link_rules.classify(element.dest, current_path, scope)
                        internal = kind is LinkKind.INTERNAL
                    except LinkResolutionError:
                        internal = False
                found.append(Link(
                    destination=element.dest,
                    text=element_text(element),
                    internal=internal,
                ))
            elif isinstance(element, FootnoteRef):
                found.append(Link(destination=element.label, text="", footnote=True))
        return found

    def extract_footnotes(self, tree: Any) -> List[FootnoteDefinition]:
        """Return footnote definitions with detached, freshly parsed content."""
        return [
            FootnoteDefinition(label=element.label, content=self._portable_content(element))
            for element in iter_elements(tree)
            if isinstance(element, FootnoteDef)
        ]

    def _portable_content(self, definition: FootnoteDef) -> List[Any]:
        """Re-parse a footnote definition into inline elements of its own."""
        markdown = self.render_fragment(definition.children).strip()
        if not markdown:
            return []

        fresh = self.parse(markdown)
        content: List[Any] = []
        for child in fresh.children:
            if isinstance(child, block.BlankLine):
                continue
            if content:
                content.append(make_text(" "))
            if isinstance(child, block.Paragraph):
                for element in child.children:
                    # Soft breaks would end the surrounding line
                    if isinstance(element, inline.LineBreak) and element.soft:
                        content.append(make_text(" "))
                    else:
                        content.append(element)
            else:
                content.append(make_text(self.render_fragment([child]).strip()))
        return content

"""
Footnote Inliner
================

Replaces every footnote reference with the footnote's content in parentheses
and removes the definitions, so no footnote syntax survives in the output.
"""

import copy
from typing import Any, Dict, List

from marko.ext.footnote import FootnoteDef, FootnoteRef

from catmd.core import Document
from catmd.core.parser import make_text, without_final_period


class FootnoteInliner:
    """Inlines footnotes of a parsed document in place."""

    def __init__(self, document: Document):
        self.document = document
        self.contents: Dict[str, List[Any]] = {
            footnote.label: without_final_period(footnote.content)
            for footnote in document.footnotes
        }
        self.inlined = 0

    def inline(self) -> Document:
        """Inline all references and delete all definitions.

        Running it again on the same document changes nothing.
        """
        self._rewrite(self.document.tree)
        return self.document

    def _rewrite(self, element: Any) -> None:
        children = getattr(element, "children", None)
        if not isinstance(children, list):
            return

        rewritten = []
        for child in children:
            if isinstance(child, FootnoteDef):
                continue
            if isinstance(child, FootnoteRef):
                rewritten.extend(self._replacement(child))
                continue
            self._rewrite(child)
            rewritten.append(child)
        element.children = rewritten

    def _replacement(self, reference: FootnoteRef) -> List[Any]:
        content = self.contents.get(reference.label)
        if content is None:
            return [make_text(f"[^{reference.label}]")]
        self.inlined += 1
        # Every reference gets its own copy of the content
        return [make_text(" (")] + copy.deepcopy(content) + [make_text(")")]


def inline_footnotes(document: Document) -> Document:
    """Inline the footnotes of ``document``. See :class:`FootnoteInliner`."""
    return FootnoteInliner(document).inline()

"""
Anchor Resolver
===============

Rewrites links between included documents into anchors inside the
concatenated output.
"""

from pathlib import Path

from marko import block, inline

from catmd.core import Document, HeaderAction, LinkKind, TraversalContext
from catmd.core.errors import LinkResolutionError
from catmd.core.links import classify, resolve_link, section_link, split_fragment
from catmd.core.parser import iter_elements


def target_anchor(target: Path, context: TraversalContext) -> str:
    """Anchor of the section a document becomes in the output.

    A document that kept its own leading level-1 header is addressed by that
    header's anchor, any other document by its synthetic filename header.
    """
    action = context.header_actions.get(target)
    anchor = context.leading_anchors.get(target)
    if action is HeaderAction.KEEP and anchor:
        return "#" + anchor
    return section_link(target)


class LinkRewriter:
    """Points internal links of one document at sections of the output."""

    def __init__(self, context: TraversalContext):
        self.context = context

    def new_destination(self, destination: str, current_path: Path) -> str:
        """Return the rewritten destination, or the original one unchanged."""
        try:
            if classify(destination, current_path, self.context.scope) is not LinkKind.INTERNAL:
                return destination
            target = resolve_link(current_path, destination)
        except LinkResolutionError:
            return destination

        if target not in self.context.visited:
            return destination

        _, fragment = split_fragment(destination)
        return target_anchor(target, self.context) + fragment

    def rewrite(self, document: Document) -> int:
        """Rewrite the links of ``document`` in place.

        Link reference definitions are rewritten as well, so reference style
        links keep their form and no definition is left pointing at a file.

        Returns:
            Number of links that were rewritten
        """
        definitions = getattr(document.tree, "link_ref_defs", None) or {}
        for label, (dest, title) in list(definitions.items()):
            definitions[label] = (self.new_destination(dest, document.path), title)

        rewritten = 0
        for element in iter_elements(document.tree):
            if isinstance(element, block.LinkRefDef):
                element.dest = self.new_destination(element.dest, document.path)
            elif isinstance(element, inline.Link):
                destination = self.new_destination(element.dest, document.path)
                if destination != element.dest:
                    element.dest = destination
                    rewritten += 1
        return rewritten


def rewrite_links(document: Document, context: TraversalContext) -> int:
    return LinkRewriter(context).rewrite(document)

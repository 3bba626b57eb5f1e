"""
Core catmd Components
=====================

This module contains the core processing components:
- parser: Markdown parsing and rendering (marko)
- links: Link classification and resolution
- traversal: Depth-first document discovery
- headers: Header normalization rules
- footnotes: Footnote inlining
- anchors: Internal link rewriting
- formatter: Output assembly
- processor: Main orchestrator for the pipeline
- models: Data models (Document, Header, Link, etc.)
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Set


class LinkKind(Enum):
    """Classification of a link destination."""
    INTERNAL = "internal"
    EXTERNAL = "external"


class HeaderAction(Enum):
    """Outcome of the header rules for one document."""
    KEEP = "keep-as-is"
    SYNTHESIZE = "synthesize-and-keep-levels"
    SYNTHESIZE_AND_DEMOTE = "synthesize-and-demote-all"

    @property
    def needs_synthetic_header(self) -> bool:
        return self is not HeaderAction.KEEP

    @property
    def demotes(self) -> bool:
        return self is HeaderAction.SYNTHESIZE_AND_DEMOTE


@dataclass
class Header:
    """A heading found in a document."""
    level: int
    text: str
    anchor: str


@dataclass
class Link:
    """A link or footnote reference found in a document."""
    destination: str
    text: str
    internal: bool = False
    footnote: bool = False


@dataclass
class FootnoteDefinition:
    """A footnote definition with its content as detached inline elements."""
    label: str
    content: List[Any] = field(default_factory=list)


@dataclass
class Document:
    """A parsed markdown file taking part in the concatenation."""
    path: Path
    source: str
    tree: Any
    headers: List[Header] = field(default_factory=list)
    links: List[Link] = field(default_factory=list)
    footnotes: List[FootnoteDefinition] = field(default_factory=list)
    header_action: Optional[HeaderAction] = None


@dataclass
class TraversalContext:
    """State shared by the pipeline components for one run.

    ``seen`` holds every path the traversal has attempted, ``visited`` only
    the documents that were read and parsed successfully. ``order`` lists the
    included documents in discovery order and is never re-sorted.
    """
    root: Path
    scope: Path
    seen: Set[Path] = field(default_factory=set)
    visited: Set[Path] = field(default_factory=set)
    order: List[Path] = field(default_factory=list)
    documents: Dict[Path, Document] = field(default_factory=dict)
    header_actions: Dict[Path, HeaderAction] = field(default_factory=dict)
    leading_anchors: Dict[Path, str] = field(default_factory=dict)

    def include(self, document: Document) -> None:
        """Record a successfully parsed document in traversal order."""
        self.visited.add(document.path)
        self.order.append(document.path)
        self.documents[document.path] = document
        if document.header_action is not None:
            self.header_actions[document.path] = document.header_action
        if document.headers:
            self.leading_anchors[document.path] = document.headers[0].anchor

    def release(self, path: Path) -> Optional[Document]:
        """Hand over a parsed document, forgetting its tree."""
        return self.documents.pop(path, None)

"""
Document Traversal
==================

Discovers the documents to concatenate by following internal links
depth-first from the root document.

A stack drives the walk. The links of a document are pushed in reverse order
so that popping yields them in document order, while the first link is still
followed all the way down before its siblings. Each path is attempted at most
once, which makes cycles and repeated references harmless.
"""

from pathlib import Path
from typing import List, Optional, Union

from catmd.core import Document, LinkKind, TraversalContext
from catmd.core.errors import (
    DocumentParseError,
    LinkResolutionError,
    NoDocumentsError,
    StructuralError,
)
from catmd.core.headers import decide
from catmd.core.links import classify, resolve_link
from catmd.core.parser import MarkdownParser
from catmd.events import EventDispatcher

MARKDOWN_EXTENSIONS = (".md", ".markdown")

PathLike = Union[str, Path]


def is_markdown_file(path: PathLike) -> bool:
    return Path(path).suffix.lower() in MARKDOWN_EXTENSIONS


def validate_root_file(root: PathLike) -> Path:
    """Check that the root document exists and is a Markdown file.

    Returns:
        The canonical absolute path of the root document

    Raises:
        StructuralError: If the root is missing, a directory, or not Markdown
    """
    path = Path(root)
    if not path.exists():
        raise StructuralError(f"Root file {str(root)!r} does not exist")
    if path.is_dir():
        raise StructuralError(f"Root file {str(root)!r} is a directory, not a file")
    if not path.is_file():
        raise StructuralError(f"Root file {str(root)!r} is not a regular file")
    if not is_markdown_file(path):
        raise StructuralError(f"Root file {str(root)!r} is not a markdown file")
    return path.resolve()


def determine_scope_dir(root: PathLike, explicit_scope: Optional[PathLike] = None) -> Path:
    """Return the scope directory: the explicit one, or the root's directory.

    Raises:
        StructuralError: If the explicit scope is missing or not a directory
    """
    if explicit_scope:
        scope = Path(explicit_scope).resolve()
        if not scope.exists():
            raise StructuralError(f"Scope directory {str(scope)!r} does not exist")
        if not scope.is_dir():
            raise StructuralError(f"Scope path {str(scope)!r} is not a directory")
        return scope

    root_path = Path(root).resolve()
    if not root_path.exists():
        raise StructuralError(f"Root file {str(root_path)!r} does not exist")
    return root_path.parent


def find_markdown_files(scope: PathLike) -> List[Path]:
    """List every Markdown file below ``scope``, sorted by path."""
    return sorted(
        p.resolve() for p in Path(scope).rglob("*")
        if p.is_file() and is_markdown_file(p)
    )


class FileTraversal:
    """Depth-first walk over the documents reachable from the root."""

    def __init__(
        self,
        root: PathLike,
        scope: PathLike,
        parser: MarkdownParser = None,
        events: EventDispatcher = None
    ):
        """
        Initialize the traversal.

        Args:
            root: Root document to start from
            scope: Directory containing every file eligible for inclusion
            parser: Optional parser instance (defaults to MarkdownParser)
            events: Optional event dispatcher for status and warnings
        """
        self.context = TraversalContext(root=Path(root).resolve(), scope=Path(scope).resolve())
        self.parser = parser or MarkdownParser()
        self.events = events or EventDispatcher()
        self._stack: List[Path] = [self.context.root]

    def traverse(self) -> TraversalContext:
        """Walk the document graph and return the filled-in context.

        Raises:
            NoDocumentsError: If not even the root document could be included
        """
        context = self.context
        while self._stack:
            path = self._stack.pop()
            if path in context.seen:
                continue
            context.seen.add(path)

            document = self._try_load(path)
            if document is None:
                continue
            context.include(document)
            self.events.dispatch_status(f"Included {path}")

            for target in reversed(self.linked_files(document)):
                if target not in context.seen:
                    self._stack.append(target)

        if not context.order:
            raise NoDocumentsError("No files found to process")
        return context

    def load_document(self, path: Path) -> Document:
        """Read and parse a document and decide its header action.

        Raises:
            OSError: If the file cannot be read
            DocumentParseError: If the file is not valid UTF-8 Markdown
        """
        try:
            source = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise DocumentParseError(f"Cannot decode {path}: {e}") from e

        tree = self.parser.parse(source)
        footnotes = self.parser.extract_footnotes(tree)
        headers = self.parser.extract_headers(tree, footnotes)
        return Document(
            path=path,
            source=source,
            tree=tree,
            headers=headers,
            links=self.parser.extract_links(tree),
            footnotes=footnotes,
            header_action=decide(headers),
        )

    def linked_files(self, document: Document) -> List[Path]:
        """Classify the links of a document and return existing internal targets.

        Targets are returned in document order. Links to files that do not
        exist are dropped and stay as written in the output.
        """
        targets = []
        for link in document.links:
            if link.footnote:
                continue
            try:
                kind = classify(link.destination, document.path, self.context.scope)
            except LinkResolutionError as e:
                self.events.dispatch_warning(f"{document.path}: {e}")
                continue

            link.internal = kind is LinkKind.INTERNAL
            if not link.internal:
                continue

            target = resolve_link(document.path, link.destination)
            if target.is_file():
                targets.append(target)
            else:
                self.events.dispatch_warning(
                    f"{document.path}: link target {link.destination!r} not found"
                )
        return targets

    def _try_load(self, path: Path) -> Optional[Document]:
        try:
            return self.load_document(path)
        except DocumentParseError as e:
            self.events.dispatch_warning(f"Skipping {path}: {e}")
        except OSError as e:
            self.events.dispatch_warning(f"Skipping {path}: cannot read file: {e}")
        return None

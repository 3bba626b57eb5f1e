"""
catmd Processor
===============

Main processor that orchestrates traversal, transformation and output with
dependency injection.
"""

import io
from pathlib import Path
from typing import List, Optional, TextIO

from catmd.core import Document, TraversalContext
from catmd.core.anchors import LinkRewriter
from catmd.core.footnotes import FootnoteInliner
from catmd.core.formatter import OutputAssembler
from catmd.core.headers import demote, synthetic_header
from catmd.core.parser import MarkdownParser
from catmd.core.traversal import FileTraversal, determine_scope_dir, validate_root_file
from catmd.events import EventDispatcher


class CatmdProcessor:
    """Main processor that turns a root document into one concatenated document."""

    def __init__(
        self,
        root,
        scope=None,
        parser: MarkdownParser = None,
        assembler: OutputAssembler = None,
        events: EventDispatcher = None
    ):
        """
        Initialize the processor. The root and scope are validated right away.

        Args:
            root: Root Markdown file
            scope: Optional scope directory (defaults to the root's directory)
            parser: Optional custom parser instance (defaults to MarkdownParser)
            assembler: Optional output assembler (defaults to OutputAssembler)
            events: Optional event dispatcher for status and warnings

        Raises:
            StructuralError: If the root file or scope directory is unusable
        """
        self.root = validate_root_file(root)
        self.scope = determine_scope_dir(self.root, scope)
        self.parser = parser or MarkdownParser()
        self.assembler = assembler or OutputAssembler()
        self.events = events or EventDispatcher()
        self.traversal = FileTraversal(self.root, self.scope, self.parser, self.events)
        self.context: Optional[TraversalContext] = None

    def traverse(self):
        """Discover the documents to concatenate."""
        self.events.dispatch_processing_started(data={"root": self.root, "scope": self.scope})
        self.context = self.traversal.traverse()
        return self

    @property
    def order(self) -> List[Path]:
        """Documents in output order."""
        if self.context is None:
            raise ValueError("No documents traversed. Call traverse() first.")
        return list(self.context.order)

    def transform(self, document: Document) -> str:
        """Transform one document and render it to Markdown.

        Header demotion runs first, then footnote inlining, then link
        rewriting, so links inside inlined footnotes are rewritten too.
        """
        action = document.header_action
        if action is not None and action.demotes:
            demote(document.tree)
        FootnoteInliner(document).inline()
        LinkRewriter(self.context).rewrite(document)

        body = self.parser.render(document.tree)
        if action is None or not action.needs_synthetic_header:
            return body

        header = self.parser.render(self.parser.parse(synthetic_header(document.path)))
        return header.strip() + "\n\n" + body.lstrip("\n")

    def process_file(self, path: Path) -> str:
        """Transform the document at ``path`` and return its Markdown."""
        document = self.context.release(path) if self.context else None
        if document is None:
            # Already written once; its tree was transformed, so start over
            document = self.traversal.load_document(path)
        return self.transform(document)

    def write(self, sink: TextIO) -> int:
        """Stream every document to ``sink`` in traversal order.

        Returns:
            Number of documents written
        """
        self.assembler.reset()
        for path in self.order:
            self.assembler.write(sink, self.process_file(path))
            self.events.dispatch_document_written(str(path))
        self.events.dispatch_processing_completed(data={"documents": self.order})
        return len(self.order)

    def format(self) -> str:
        """Return the whole concatenated document as a string."""
        buffer = io.StringIO()
        self.write(buffer)
        return buffer.getvalue()

    def save(self, output_path: Path) -> Path:
        """Write the concatenated document to a file."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as f:
            self.write(f)
        return output_path

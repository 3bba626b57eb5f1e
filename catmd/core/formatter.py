"""
Output Assembler
================

Responsible for writing rendered documents to the output, in traversal order,
with a separator between them.
"""

from typing import TextIO

DEFAULT_SEPARATOR = "\n"


class OutputAssembler:
    """Concatenates rendered documents into one Markdown output."""

    def __init__(self, separator: str = DEFAULT_SEPARATOR):
        self.separator = separator
        self.written = 0

    def reset(self) -> None:
        """Start a new output."""
        self.written = 0

    @staticmethod
    def normalize(text: str) -> str:
        """Make a document end with exactly one newline."""
        return text.rstrip() + "\n"

    def write(self, sink: TextIO, text: str) -> None:
        """Append one document to ``sink``, preceded by the separator if needed."""
        if self.written:
            sink.write(self.separator)
        sink.write(self.normalize(text))
        self.written += 1


"""
catmd
=====

Concatenates a tree of linked Markdown documents into a single document.

Starting from a root file, catmd follows relative links depth-first, gives
every document exactly one top-level heading, rewrites links between the
included documents into in-page anchors and inlines footnotes.

This package follows a clean architecture with:
- core/ - Parser, traversal, transformation and output components
- config/ - Configuration management
- cli/ - Command-line interface
"""

__version__ = "1.0.0"

"""
catmd Errors
============

Exception hierarchy. Every error derives from ``ValueError`` so callers can
treat all of them as bad input.
"""


class CatmdError(ValueError):
    """Base class for catmd errors."""


class StructuralError(CatmdError):
    """The root document or scope directory cannot be used."""


class LinkResolutionError(CatmdError):
    """A link destination cannot be turned into a file path."""


class DocumentParseError(CatmdError):
    """A document could not be decoded or parsed."""


class NoDocumentsError(CatmdError):
    """Traversal finished without including a single document."""

"""
Header Rules
============

Every document must open the concatenated output with exactly one level-1
header. The rules below decide, per document, whether its own headers already
do that or whether a synthetic ``# <filename>`` header is needed.

- 0 level-1 headers: add a synthetic header, leave existing levels alone.
- 1 level-1 header that is the first header: keep the document as it is.
- 1 level-1 header that is not the first header: add a synthetic header and
  demote every header by one level.
- Several level-1 headers: add a synthetic header and demote every header.

Demotion is applied to the whole document or not at all and stops at level 6.
"""

from pathlib import Path
from typing import Any, List

from catmd.core import Header, HeaderAction
from catmd.core.parser import HEADING_TYPES, iter_elements

MAX_LEVEL = 6


def decide(headers: List[Header]) -> HeaderAction:
    """Pick the header action for a document from its ordered headers."""
    top_level = [h for h in headers if h.level == 1]

    if not top_level:
        return HeaderAction.SYNTHESIZE
    if len(top_level) > 1:
        return HeaderAction.SYNTHESIZE_AND_DEMOTE
    if headers[0].level == 1:
        return HeaderAction.KEEP
    return HeaderAction.SYNTHESIZE_AND_DEMOTE


def demote(tree: Any) -> int:
    """Increment the level of every heading in ``tree``, capped at 6.

    Returns:
        Number of headings whose level changed
    """
    changed = 0
    for element in iter_elements(tree):
        if isinstance(element, HEADING_TYPES) and element.level < MAX_LEVEL:
            element.level += 1
            changed += 1
    return changed


def synthetic_header(path: Path) -> str:
    """Markdown for the synthetic level-1 header of a document."""
    return f"# {Path(path).name}"

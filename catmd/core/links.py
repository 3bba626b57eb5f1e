"""
Link Classifier
===============

Decides whether a link destination points at a file inside the scope
directory (internal) or anywhere else (external).
"""

import os
import re
from pathlib import Path
from typing import Tuple
from urllib.parse import unquote

from catmd.core import LinkKind
from catmd.core.errors import LinkResolutionError

SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")


def split_fragment(destination: str) -> Tuple[str, str]:
    """Split ``path#fragment`` into ``("path", "#fragment")``.

    The fragment keeps its leading ``#`` and is empty when there is none.
    """
    path, sep, fragment = destination.partition("#")
    return path, sep + fragment


def is_scheme_qualified(destination: str) -> bool:
    return bool(SCHEME_RE.match(destination))


def is_within_scope(path: Path, scope: Path) -> bool:
    """Check whether ``path`` is ``scope`` itself or nested below it."""
    return path == scope or scope in path.parents


def resolve_link(current_path: Path, destination: str) -> Path:
    """Resolve a relative link against the directory of ``current_path``.

    The fragment is stripped and percent escapes are decoded before the
    path is made absolute.

    Raises:
        LinkResolutionError: If nothing is left after removing the fragment,
            or the path cannot be made absolute.
    """
    path_part, _ = split_fragment(destination)
    path_part = unquote(path_part)
    if not path_part:
        raise LinkResolutionError(f"Empty link after fragment removal: {destination!r}")

    target = Path(path_part)
    if not target.is_absolute():
        target = Path(current_path).parent / target
    try:
        return target.resolve()
    except (OSError, RuntimeError) as e:
        raise LinkResolutionError(f"Cannot resolve {destination!r}: {e}") from e


def classify(destination: str, current_path: Path, scope: Path) -> LinkKind:
    """Classify a link destination found in ``current_path``.

    Rules, in order:
    1. Scheme-qualified links (``http:``, ``mailto:``, ...) are external.
    2. Fragment-only links (``#section``) are external.
    3. Absolute filesystem paths are external.
    4. Everything else is resolved relative to the current document and is
       internal only if it stays inside ``scope``.

    Raises:
        LinkResolutionError: For destinations that are empty once the
            fragment is removed.
    """
    if is_scheme_qualified(destination):
        return LinkKind.EXTERNAL
    if destination.startswith("#"):
        return LinkKind.EXTERNAL
    if os.path.isabs(destination):
        return LinkKind.EXTERNAL

    resolved = resolve_link(current_path, destination)
    if is_within_scope(resolved, Path(scope).resolve()):
        return LinkKind.INTERNAL
    return LinkKind.EXTERNAL


def section_link(path: Path) -> str:
    """Anchor derived from a file name: ``dir/file.md`` becomes ``#file.md``."""
    return "#" + Path(path).name

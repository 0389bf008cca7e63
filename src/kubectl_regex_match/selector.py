"""Name-based selection of listed resources."""

from __future__ import annotations

import re
from typing import Optional

from .errors import InvalidPattern
from .scope import ResourceRef, ScopedAccessor


def compile_pattern(text: Optional[str]) -> re.Pattern:
    """
    Compile the operator's pattern; None or "" matches every name.

    Raises:
        InvalidPattern: the pattern is not a valid regular expression.
    """
    text = text or ""
    try:
        return re.compile(text)
    except re.error as exc:
        raise InvalidPattern(text, exc) from exc


def select(accessor: ScopedAccessor, pattern: re.Pattern) -> list[ResourceRef]:
    """
    Resources visible through accessor whose name matches pattern.

    The pattern is searched (not anchored) against the name only. Listing
    order is kept; listing errors propagate.
    """
    return [ref for ref in accessor.list() if pattern.search(ref.name)]

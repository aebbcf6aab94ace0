"""
Stateless pagination over the final page text.

Every call recomputes its view from (text, start_index, max_length); the
caller resumes by passing the reported next start_index.
"""

from __future__ import annotations

import math

from ..core.types import PaginatedView


def paginate(text: str, start_index: int, max_length: int) -> PaginatedView:
    """Return the slice of text starting at start_index.

    Examples:
        >>> paginate("0123456789", 0, 4).text.splitlines()[0]
        '0123'
        >>> paginate("0123456789", 10, 4).exhausted
        True
    """
    total = len(text)
    if start_index >= total:
        return PaginatedView(content="", total_length=total, start_index=start_index, exhausted=True)

    chunk = text[start_index:start_index + max_length]
    if not chunk:
        return PaginatedView(content="", total_length=total, start_index=start_index, exhausted=True)

    shown = start_index + len(chunk)
    truncated = len(chunk) == max_length and shown < total
    return PaginatedView(
        content=chunk,
        total_length=total,
        start_index=start_index,
        next_index=shown if truncated else None,
        percent_shown=percent(shown, total),
    )


def percent(part: int, total: int) -> int:
    """Percentage rounded to the nearest integer, halves rounded up."""
    return math.floor(part / total * 100 + 0.5)

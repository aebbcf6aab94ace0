"""
Core data types for the fetch pipeline.

This module defines the data structures passed between pipeline stages:
- FetchRequest: Validated tool arguments for a single fetch call
- ContentKind: Classification of a fetched payload
- SimplifiedArticle / SimplificationFailure: Output of HTML simplification
- PaginatedView: A bounded slice of the final text plus progress notices
"""

from __future__ import annotations

from dataclasses import dataclass
import enum
import json
import re
from typing import Any, Mapping

import httpx


MAX_LENGTH_LIMIT = 1_000_000
TIMEOUT_LIMIT_MS = 60_000
RETRIES_LIMIT = 5

# httpx percent-quotes unsafe host characters, so "%" marks an invalid host
_HOST_RE = re.compile(r"[\w\-.:\[\]]+")

NO_MORE_CONTENT = "No more content available."
SIMPLIFY_FAILED = "Page failed to be simplified from HTML"


def notice(message: str) -> str:
    """Wrap a system notice so it stands apart from fetched content."""
    return f"<e>{message}</e>"


class RequestValidationError(ValueError):
    """Raised when tool arguments violate the fetch parameter constraints.

    Attributes:
        errors: One {"field", "message"} dict per violated constraint
    """

    def __init__(self, errors: list[dict[str, str]]):
        self.errors = errors
        super().__init__(f"Invalid input: {json.dumps(errors)}")


@dataclass(frozen=True)
class FetchRequest:
    """Arguments of a single fetch call.

    Constraints are checked on construction, so an instance that exists is
    always valid.

    Attributes:
        url: Absolute URL to fetch
        max_length: Maximum number of characters to return
        start_index: Character offset to start returning output from
        raw: Return the page as-is instead of simplifying HTML
        timeout: Per-attempt timeout in milliseconds
        retries: Number of retries after the first failed attempt
    """

    url: str
    max_length: int = 5000
    start_index: int = 0
    raw: bool = False
    timeout: int = 10_000
    retries: int = 2

    def __post_init__(self) -> None:
        errors = _validate(self)
        if errors:
            raise RequestValidationError(errors)

    @classmethod
    def from_arguments(cls, arguments: Mapping[str, Any] | None) -> "FetchRequest":
        """Build a request from a raw tool-argument mapping.

        Unknown keys are ignored. A missing url is reported together with
        any other violated constraint.
        """
        arguments = dict(arguments or {})
        known = {name: arguments[name] for name in _FIELDS if name in arguments}
        known.setdefault("url", None)
        return cls(**known)


_FIELDS = ("url", "max_length", "start_index", "raw", "timeout", "retries")


def _validate(request: FetchRequest) -> list[dict[str, str]]:
    errors: list[dict[str, str]] = []

    def fail(name: str, message: str) -> None:
        errors.append({"field": name, "message": message})

    if request.url is None:
        fail("url", "Required")
    elif not isinstance(request.url, str) or not _is_url(request.url):
        fail("url", "Invalid URL format")

    for name, low, high, inclusive_low, inclusive_high in (
        ("max_length", 0, MAX_LENGTH_LIMIT, False, False),
        ("start_index", 0, None, True, False),
        ("timeout", 0, TIMEOUT_LIMIT_MS, False, True),
        ("retries", 0, RETRIES_LIMIT, True, True),
    ):
        value = getattr(request, name)
        if isinstance(value, bool) or not isinstance(value, int):
            fail(name, "Expected integer")
            continue
        if value < low or (value == low and not inclusive_low):
            op = ">=" if inclusive_low else ">"
            fail(name, f"Number must be {op} {low}")
        elif high is not None and (value > high or (value == high and not inclusive_high)):
            op = "<=" if inclusive_high else "<"
            fail(name, f"Number must be {op} {high}")

    if not isinstance(request.raw, bool):
        fail("raw", "Expected boolean")

    return errors


def _is_url(value: str) -> bool:
    try:
        parsed = httpx.URL(value)
    except (httpx.InvalidURL, TypeError, ValueError):
        return False
    host = parsed.host
    return bool(parsed.scheme) and bool(host) and _HOST_RE.fullmatch(host) is not None


class ContentKind(enum.Enum):
    BINARY = "binary"
    HTML = "html"
    TEXT = "text"


@dataclass
class SimplifiedArticle:
    """Readable article extracted from an HTML page.

    Attributes:
        title: Article title, never empty
        site_name: Publishing site name, or empty string
        body_markdown: Article body rendered as markdown
    """

    title: str
    site_name: str
    body_markdown: str

    @property
    def text(self) -> str:
        heading = f"# {self.title}"
        if self.site_name:
            heading += f" | {self.site_name}"
        return f"{heading}\n\n{self.body_markdown}"


@dataclass
class SimplificationFailure:
    message: str = SIMPLIFY_FAILED

    @property
    def text(self) -> str:
        return notice(self.message)


@dataclass
class PaginatedView:
    """One page of the final text.

    Attributes:
        content: The slice of text, or the exhaustion sentinel
        total_length: Length of the full text
        start_index: Offset the slice starts at
        next_index: Offset to resume from, or None when nothing was cut off
        percent_shown: Share of the text covered up to the end of the slice
        exhausted: True when start_index is past the end of the text
    """

    content: str
    total_length: int
    start_index: int
    next_index: int | None = None
    percent_shown: int | None = None
    exhausted: bool = False

    @property
    def text(self) -> str:
        if self.exhausted:
            return notice(NO_MORE_CONTENT)
        if self.next_index is not None:
            return self.content + "\n\n" + notice(
                f"Content truncated ({self.percent_shown}% shown). "
                f"Call the fetch tool with start_index={self.next_index} to get more content."
            )
        if self.start_index > 0:
            return self.content + "\n\n" + notice(
                f"Showing content from index {self.start_index} ({self.percent_shown}% of total)."
            )
        return self.content

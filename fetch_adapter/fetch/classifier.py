"""
Payload classification for fetched content.

Decides whether a response body should be refused as binary, simplified
as HTML, or passed through as plain text.
"""

from __future__ import annotations

from ..core.types import ContentKind, notice


BINARY_TYPE_MARKERS = ("image/", "audio/", "video/", "application/", "font/")
HTML_SNIFF_CHARS = 100


def classify(body: str, content_type: str) -> ContentKind:
    """Classify a response from its body and Content-Type header.

    Untyped responses are assumed to be HTML.

    Examples:
        >>> classify("%PDF-1.7", "application/pdf")
        <ContentKind.BINARY: 'binary'>
        >>> classify("<!DOCTYPE html><html>", "text/plain")
        <ContentKind.HTML: 'html'>
    """
    if is_binary(content_type):
        return ContentKind.BINARY
    if is_html(body, content_type):
        return ContentKind.HTML
    return ContentKind.TEXT


def is_binary(content_type: str) -> bool:
    return bool(content_type) and any(marker in content_type for marker in BINARY_TYPE_MARKERS)


def is_html(body: str, content_type: str) -> bool:
    return (
        "<html" in body[:HTML_SNIFF_CHARS].lower()
        or "text/html" in content_type.lower()
        or not content_type
    )


def binary_refusal(content_type: str) -> str:
    return notice(
        f"This URL contains binary content ({content_type}) which cannot be displayed as text. "
        "Use raw=true to get the binary data."
    )

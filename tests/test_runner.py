"""Tests for the fetch pipeline and its response envelope."""

from __future__ import annotations

import asyncio

import pytest

from fetch_adapter import runner
from fetch_adapter.config import FetchConfig
from fetch_adapter.core.types import FetchRequest, RequestValidationError
from fetch_adapter.fetch.fetcher import FetchResult


URL = "https://example.com/page"


def _fake_fetch(monkeypatch, result: FetchResult) -> list[dict]:
    calls: list[dict] = []

    async def fake_fetch(url, user_agent, **kwargs):
        calls.append({"url": url, "user_agent": user_agent, **kwargs})
        return result

    monkeypatch.setattr(runner, "fetch_url", fake_fetch)
    return calls


def _ok(text: str, content_type: str) -> FetchResult:
    return FetchResult(url=URL, status_code=200, text=text, error=None, content_type=content_type)


def _run(**kwargs) -> str:
    return asyncio.run(runner.call_fetch(FetchRequest(url=URL, **kwargs), FetchConfig()))


def test_plain_text_is_paginated_inside_envelope(monkeypatch):
    _fake_fetch(monkeypatch, _ok("0123456789", "text/plain"))

    text = _run(max_length=4)

    assert text == (
        "Content-Type: text/plain\n"
        "Content size: 10 characters\n"
        f"Contents of {URL}:\n\n"
        "0123\n\n<e>Content truncated (40% shown). "
        "Call the fetch tool with start_index=4 to get more content.</e>"
    )


def test_continuation_call(monkeypatch):
    _fake_fetch(monkeypatch, _ok("0123456789", "text/plain"))

    text = _run(max_length=4, start_index=8)

    assert text.endswith("89\n\n<e>Showing content from index 8 (100% of total).</e>")


def test_start_index_past_end(monkeypatch):
    _fake_fetch(monkeypatch, _ok("0123456789", "text/plain"))

    text = _run(start_index=10)

    assert text.endswith(f"Contents of {URL}:\n\n<e>No more content available.</e>")
    assert "Content size: 10 characters" in text


def test_request_settings_are_passed_to_fetcher(monkeypatch):
    calls = _fake_fetch(monkeypatch, _ok("hello", "text/plain"))

    asyncio.run(
        runner.call_fetch(
            FetchRequest(url=URL, timeout=2500, retries=4),
            FetchConfig(user_agent="agent/2.0", retry_delay_seconds=0.5),
        )
    )

    assert calls == [
        {
            "url": URL,
            "user_agent": "agent/2.0",
            "timeout_ms": 2500,
            "retries": 4,
            "retry_delay": 0.5,
            "trust_env": True,
            "follow_redirects": True,
        }
    ]


def test_binary_content_is_refused(monkeypatch):
    _fake_fetch(monkeypatch, _ok("\x89PNG...", "image/png"))

    def boom(html):
        raise AssertionError("extraction must not run on binary content")

    monkeypatch.setattr(runner, "extract_content", boom)

    assert _run() == (
        "<e>This URL contains binary content (image/png) which cannot be displayed as text. "
        "Use raw=true to get the binary data.</e>"
    )


def test_binary_content_in_raw_mode_is_returned(monkeypatch):
    _fake_fetch(monkeypatch, _ok("%PDF-1.7", "application/pdf"))

    text = _run(raw=True)

    assert text.startswith("Content-Type: application/pdf\nContent size: 8 characters\n")
    assert text.endswith("%PDF-1.7")


def test_html_is_simplified(monkeypatch):
    _fake_fetch(monkeypatch, _ok("<html><body>page</body></html>", "text/html"))
    monkeypatch.setattr(runner, "extract_content", lambda html: "# Title\n\nBody")

    text = _run()

    assert text == (
        "Content-Type: text/html\n"
        "Content size: 13 characters\n"
        f"Contents of {URL}:\n\n"
        "# Title\n\nBody"
    )


def test_raw_mode_skips_simplification(monkeypatch):
    html = "<html><body><p>page</p></body></html>"
    _fake_fetch(monkeypatch, _ok(html, "text/html"))

    text = _run(raw=True)

    assert text.endswith(html)
    assert f"Content size: {len(html)} characters" in text


def test_simplification_failure_is_paginated(monkeypatch):
    _fake_fetch(monkeypatch, _ok("<html><body></body></html>", "text/html"))

    text = _run(max_length=10)

    failure = "<e>Page failed to be simplified from HTML</e>"
    assert f"Content size: {len(failure)} characters" in text
    assert f"Contents of {URL}:\n\n{failure[:10]}\n\n<e>Content truncated" in text


def test_fetch_failure_is_reported_as_text(monkeypatch):
    _fake_fetch(
        monkeypatch,
        FetchResult(url=URL, status_code=404, text=None, error="HTTP error! status: 404", attempts=1),
    )

    text = _run()

    assert text == (
        "Content-Type: text/plain\n"
        "Content size: 64 characters\n"
        f"Contents of {URL}:\n\n"
        "<e>Failed to fetch: HTTP error! status: 404 after 1 attempts</e>"
    )


def test_empty_page(monkeypatch):
    _fake_fetch(monkeypatch, _ok("", "text/html"))

    assert _run() == "Failed to get page text"


def test_run_fetch_validates_before_fetching(monkeypatch):
    calls = _fake_fetch(monkeypatch, _ok("hello", "text/plain"))

    with pytest.raises(RequestValidationError):
        asyncio.run(runner.run_fetch({"url": "nope", "max_length": 0}))

    assert calls == []


def test_run_fetch_applies_defaults(monkeypatch):
    _fake_fetch(monkeypatch, _ok("x" * 6000, "text/plain"))

    text = asyncio.run(runner.run_fetch({"url": URL}))

    assert "start_index=5000" in text
    assert "(83% shown)" in text


def test_run_fetch_rejects_host_with_space_before_fetching(monkeypatch):
    calls = _fake_fetch(monkeypatch, _ok("hello", "text/plain"))

    with pytest.raises(RequestValidationError, match="Invalid URL format"):
        asyncio.run(runner.run_fetch({"url": "https://exa mple.com/"}))

    assert calls == []

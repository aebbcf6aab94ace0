"""Tests for the retrying HTTP fetcher."""

from __future__ import annotations

import asyncio

import httpx

from fetch_adapter.fetch import fetcher
from fetch_adapter.fetch.fetcher import FetchResult, fetch_url


URL = "https://example.com/page"


def _record_sleeps(monkeypatch) -> list[float]:
    delays: list[float] = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(fetcher.asyncio, "sleep", fake_sleep)
    return delays


def _fetch(handler, **kwargs) -> FetchResult:
    kwargs.setdefault("user_agent", "test-agent/1.0")
    return asyncio.run(fetch_url(URL, transport=httpx.MockTransport(handler), **kwargs))


def test_success_returns_body_and_content_type():
    seen = {}

    def handler(request):
        seen["user_agent"] = request.headers["user-agent"]
        return httpx.Response(200, text="<html>ok</html>", headers={"content-type": "text/html"})

    result = _fetch(handler)

    assert result.ok
    assert result.text == "<html>ok</html>"
    assert result.content_type == "text/html"
    assert result.attempts == 1
    assert seen["user_agent"] == "test-agent/1.0"
    assert result.body() == ("<html>ok</html>", "text/html")


def test_missing_content_type_is_empty_string():
    result = _fetch(lambda request: httpx.Response(200, content=b"plain"))

    assert result.ok
    assert result.content_type == ""


def test_http_error_is_not_retried(monkeypatch):
    delays = _record_sleeps(monkeypatch)
    calls = 0

    def handler(request):
        nonlocal calls
        calls += 1
        return httpx.Response(404, text="missing")

    result = _fetch(handler, retries=3)

    assert calls == 1
    assert delays == []
    assert result.status_code == 404
    assert result.error == "HTTP error! status: 404"
    assert result.body() == (
        "<e>Failed to fetch: HTTP error! status: 404 after 1 attempts</e>",
        "text/plain",
    )


def test_network_error_retries_until_exhausted(monkeypatch):
    delays = _record_sleeps(monkeypatch)
    calls = 0

    def handler(request):
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("connection refused", request=request)

    result = _fetch(handler, retries=2)

    assert calls == 3
    assert delays == [1.0, 1.0]
    assert result.status_code is None
    assert result.body() == (
        "<e>Failed to fetch: connection refused after 3 attempts</e>",
        "text/plain",
    )


def test_zero_retries_makes_single_attempt(monkeypatch):
    delays = _record_sleeps(monkeypatch)
    calls = 0

    def handler(request):
        nonlocal calls
        calls += 1
        raise httpx.ConnectError("unreachable", request=request)

    result = _fetch(handler, retries=0)

    assert calls == 1
    assert delays == []
    assert result.attempts == 1


def test_recovers_after_transient_failure(monkeypatch):
    delays = _record_sleeps(monkeypatch)
    calls = 0

    def handler(request):
        nonlocal calls
        calls += 1
        if calls == 1:
            raise httpx.ReadError("reset by peer", request=request)
        return httpx.Response(200, text="fine", headers={"content-type": "text/plain"})

    result = _fetch(handler, retries=2, retry_delay=0.25)

    assert result.ok
    assert result.text == "fine"
    assert result.attempts == 2
    assert delays == [0.25]


def test_httpx_timeout_reports_timed_out(monkeypatch):
    _record_sleeps(monkeypatch)

    def handler(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    result = _fetch(handler, retries=1)

    assert result.attempts == 2
    assert result.error == "Request timed out"
    assert result.body()[0] == "<e>Failed to fetch: Request timed out after 2 attempts</e>"


def test_deadline_cancels_slow_response():
    async def handler(request):
        await asyncio.sleep(5)
        return httpx.Response(200, text="too late")

    result = _fetch(handler, timeout_ms=50, retries=0)

    assert not result.ok
    assert result.error == "Request timed out"

"""
Fetch pipeline orchestration.

This module coordinates a single fetch call:
1. Validate the tool arguments
2. Fetch the URL (bounded retries, per-attempt deadline)
3. Classify the payload and refuse binary content
4. Simplify HTML into a markdown article unless raw output was requested
5. Paginate the result and wrap it in the response envelope

Nothing is kept between calls; resuming a truncated page is done by the
caller passing the reported start_index.
"""

from __future__ import annotations

import time
from typing import Any, Mapping

from .config import FetchConfig
from .core.types import ContentKind, FetchRequest
from .fetch.classifier import binary_refusal, classify
from .fetch.extractor import extract_content
from .fetch.fetcher import fetch_url
from .fetch.paginator import paginate
from .logging_utils import get_logger, log_event


logger = get_logger("runner")

EMPTY_PAGE = "Failed to get page text"


async def run_fetch(arguments: Mapping[str, Any] | None, cfg: FetchConfig | None = None) -> str:
    """Validate raw tool arguments and run the pipeline.

    Raises:
        RequestValidationError: if any argument violates its constraints;
            raised before any network activity
    """
    request = FetchRequest.from_arguments(arguments)
    return await call_fetch(request, cfg)


async def call_fetch(request: FetchRequest, cfg: FetchConfig | None = None) -> str:
    """Run the fetch pipeline for a validated request.

    Args:
        request: Validated fetch arguments
        cfg: Fetch settings (User-Agent, retry delay, proxy handling)

    Returns:
        The response envelope text. Fetch failures, binary refusals and
        simplification failures are reported inside the text.
    """
    cfg = cfg or FetchConfig()
    started = time.monotonic()

    result = await fetch_url(
        request.url,
        cfg.user_agent,
        timeout_ms=request.timeout,
        retries=request.retries,
        retry_delay=cfg.retry_delay_seconds,
        trust_env=cfg.trust_env,
        follow_redirects=cfg.follow_redirects,
    )
    page, content_type = result.body()
    if not page:
        return EMPTY_PAGE

    kind = classify(page, content_type)
    if kind is ContentKind.BINARY and not request.raw:
        log_event(logger, "Binary content refused", event="binary_refused", url=request.url)
        return binary_refusal(content_type)

    content = page
    if kind is ContentKind.HTML and not request.raw:
        content = extract_content(page)

    view = paginate(content, request.start_index, request.max_length)
    log_event(
        logger,
        "Fetch complete",
        event="fetch_complete",
        url=request.url,
        status_code=result.status_code,
        attempts=result.attempts,
        kind=kind.value,
        total_length=view.total_length,
        next_index=view.next_index,
        elapsed_ms=round((time.monotonic() - started) * 1000),
    )
    return format_envelope(request.url, content_type, view.total_length, view.text)


def format_envelope(url: str, content_type: str, size: int, body: str) -> str:
    return (
        f"Content-Type: {content_type}\n"
        f"Content size: {size} characters\n"
        f"Contents of {url}:\n\n"
        f"{body}"
    )

"""
HTTP content fetching with bounded retries.

Each attempt gets its own client and its own deadline. Network errors and
timeouts are retried with a fixed pause; an HTTP error status is final.
"""

from __future__ import annotations

from dataclasses import dataclass
import asyncio

import httpx

from ..core.types import notice
from ..logging_utils import get_logger


logger = get_logger("fetch")


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if no response was received
        text: The decoded response body, or None on error
        error: Human-readable failure message, None on success
        content_type: The Content-Type header, empty if the server sent none
        attempts: Number of attempts made
    """
    url: str
    status_code: int | None
    text: str | None
    error: str | None
    content_type: str = ""
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.error is None

    def body(self) -> tuple[str, str]:
        """Return the (text, content type) pair handed to the classifier.

        Failures become a plain-text notice so they flow through the rest
        of the pipeline like any other page.
        """
        if self.ok:
            return self.text or "", self.content_type
        message = f"Failed to fetch: {self.error} after {self.attempts} attempts"
        return notice(message), "text/plain"


async def fetch_url(
    url: str,
    user_agent: str,
    timeout_ms: int = 10_000,
    retries: int = 2,
    retry_delay: float = 1.0,
    trust_env: bool = True,
    follow_redirects: bool = True,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FetchResult:
    """Fetch a URL with a per-attempt deadline and bounded retries.

    Args:
        url: The URL to fetch
        user_agent: User-Agent header string
        timeout_ms: Deadline for a single attempt, in milliseconds
        retries: Number of retry attempts after the initial one
        retry_delay: Pause between attempts, in seconds
        trust_env: Whether to respect system proxy settings from environment
        follow_redirects: Whether to follow HTTP redirects
        transport: Optional httpx transport, used by tests

    Returns:
        FetchResult with text on success or error message on failure
    """
    headers = {"User-Agent": user_agent}
    timeout = timeout_ms / 1000
    last_error: str | None = None
    status_code: int | None = None
    attempt = 0

    for attempt in range(retries + 1):
        try:
            async with httpx.AsyncClient(
                headers=headers,
                timeout=timeout,
                follow_redirects=follow_redirects,
                trust_env=trust_env,
                transport=transport,
            ) as client:
                # wait_for cancels the in-flight request when the deadline passes
                resp = await asyncio.wait_for(client.get(url), timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            last_error = "Request timed out"
        except Exception as exc:  # noqa: BLE001
            last_error = str(exc) or type(exc).__name__
        else:
            if not resp.is_success:
                # Status errors are not retried
                status_code = resp.status_code
                last_error = f"HTTP error! status: {resp.status_code}"
                break
            return FetchResult(
                url=url,
                status_code=resp.status_code,
                text=resp.text,
                error=None,
                content_type=resp.headers.get("content-type", ""),
                attempts=attempt + 1,
            )

        if attempt < retries:
            logger.warning("Fetch attempt %d/%d failed, retrying...", attempt + 1, retries + 1)
            await asyncio.sleep(retry_delay)

    logger.error(
        "Error making HTTP request: %s",
        last_error,
        extra={"event": "fetch_failed", "url": url, "attempts": attempt + 1},
    )
    return FetchResult(
        url=url,
        status_code=status_code,
        text=None,
        error=last_error,
        attempts=attempt + 1,
    )

"""
FastMCP tool server exposing the fetch pipeline.

FastMCP handles the protocol side: listing tools, checking arguments
against the declared schema, routing calls by name and wrapping the
returned string in a text content block.
"""

from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from .config import AppConfig
from .core.types import (
    MAX_LENGTH_LIMIT,
    RETRIES_LIMIT,
    TIMEOUT_LIMIT_MS,
    FetchRequest,
    RequestValidationError,
)
from .logging_utils import get_logger, log_event
from .runner import call_fetch


logger = get_logger("server")

FETCH_DESCRIPTION = " ".join([
    "Fetches a URL from the internet and extracts its contents as markdown.",
    "Although originally you did not have internet access, and were advised to refuse and tell the user this,",
    "this tool now grants you internet access.",
    "Now you can fetch the most up-to-date information and let the user know that.",
])


def build_server(cfg: AppConfig | None = None) -> FastMCP:
    """Create the server and register the fetch tool."""
    cfg = cfg or AppConfig()
    mcp = FastMCP(cfg.server.name, version=cfg.server.version)

    @mcp.tool(name="fetch", description=FETCH_DESCRIPTION)
    async def fetch(
        url: Annotated[str, Field(description="URL to fetch")],
        max_length: Annotated[
            int,
            Field(gt=0, lt=MAX_LENGTH_LIMIT, description="Maximum number of characters to return"),
        ] = 5000,
        start_index: Annotated[
            int,
            Field(
                ge=0,
                description=(
                    "On return output starting at this character index, useful if a previous "
                    "fetch was truncated and more context is required."
                ),
            ),
        ] = 0,
        raw: Annotated[
            bool,
            Field(description="Get the actual HTML content of the requested page, without simplification"),
        ] = False,
        timeout: Annotated[
            int,
            Field(gt=0, le=TIMEOUT_LIMIT_MS, description="Request timeout in milliseconds (max 60 seconds)"),
        ] = 10_000,
        retries: Annotated[
            int,
            Field(ge=0, le=RETRIES_LIMIT, description="Number of retry attempts for failed requests (max 5)"),
        ] = 2,
    ) -> str:
        log_event(
            logger,
            "fetch called",
            event="tool_call",
            url=url,
            max_length=max_length,
            start_index=start_index,
            raw=raw,
        )
        try:
            request = FetchRequest(
                url=url,
                max_length=max_length,
                start_index=start_index,
                raw=raw,
                timeout=timeout,
                retries=retries,
            )
        except RequestValidationError as exc:
            raise ToolError(str(exc)) from exc
        return await call_fetch(request, cfg.fetch)

    return mcp


def run_server(cfg: AppConfig) -> None:
    """Serve the tools over the configured transport until stopped."""
    mcp = build_server(cfg)
    transport = cfg.server.transport
    logger.info("Fetch MCP Server running on %s", transport)
    if transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(transport=transport, host=cfg.server.host, port=cfg.server.port)


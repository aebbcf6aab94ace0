"""
Fetch Adapter - web page fetching exposed as an MCP tool.

This package fetches a URL with bounded retries, simplifies HTML pages
into markdown articles, and returns the text in pages addressed by a
character offset.

Main entry point is the CLI via the `fetch-adapter` command.

Example:
    $ fetch-adapter serve
    $ fetch-adapter fetch https://example.com --max-length 2000
"""

__all__ = ["__version__", "FetchRequest", "RequestValidationError", "call_fetch", "run_fetch"]
__version__ = "1.0.0"

from .core.types import FetchRequest, RequestValidationError
from .runner import call_fetch, run_fetch

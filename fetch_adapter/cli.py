"""
Command-line interface for the fetch adapter.

Uses Typer to provide two commands:
- serve: run the tool server (stdio by default)
- fetch: run the fetch pipeline once and print the response text

Supports loading .env files for configuration overrides.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console

from .config import CONFIG_ENV_VAR, AppConfig, load_config
from .core.types import FetchRequest, RequestValidationError
from .logging_utils import setup_logging
from .runner import call_fetch
from .server import run_server

app = typer.Typer(add_completion=False)
err_console = Console(stderr=True)


def _load(config: Path | None, log_level: str | None) -> AppConfig:
    # Load environment variables from .env if available
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if log_level:
        cfg.logging.level = log_level
    return cfg


@app.command()
def serve(
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, envvar=CONFIG_ENV_VAR, help="YAML config file."
    ),
    transport: str | None = typer.Option(
        None, "--transport", "-t", help="Transport: stdio, http, or sse."
    ),
    host: str | None = typer.Option(None, "--host", help="Bind host for network transports."),
    port: int | None = typer.Option(None, "--port", help="Bind port for network transports."),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Run the fetch tool server.

    Args:
        config: Optional path to YAML config file
        transport: Override the configured transport
        host: Override the bind host
        port: Override the bind port
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    cfg = _load(config, log_level)
    if transport:
        cfg.server.transport = transport
    if host:
        cfg.server.host = host
    if port is not None:
        cfg.server.port = port

    setup_logging(cfg.logging)
    run_server(cfg)


@app.command()
def fetch(
    url: str = typer.Argument(..., help="URL to fetch."),
    max_length: int = typer.Option(5000, "--max-length", help="Maximum characters to return."),
    start_index: int = typer.Option(0, "--start-index", help="Character offset to start from."),
    raw: bool = typer.Option(False, "--raw/--simplify", help="Return the page without simplification."),
    timeout: int = typer.Option(10_000, "--timeout", help="Request timeout in milliseconds."),
    retries: int = typer.Option(2, "--retries", help="Retry attempts for failed requests."),
    config: Path | None = typer.Option(
        None, "--config", "-c", exists=True, envvar=CONFIG_ENV_VAR, help="YAML config file."
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
):
    """Fetch a URL once and print the result the tool would return."""
    cfg = _load(config, log_level)
    setup_logging(cfg.logging)

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
        for error in exc.errors:
            err_console.print(f"{error['field']}: {error['message']}", markup=False)
        raise typer.Exit(code=2)

    text = asyncio.run(call_fetch(request, cfg.fetch))
    typer.echo(text)


if __name__ == "__main__":
    app()

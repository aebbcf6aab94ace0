"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- FetchConfig: HTTP fetching settings
- ServerConfig: Tool server identity and transport
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import os
from typing import Any

import yaml


CONFIG_ENV_VAR = "FETCH_ADAPTER_CONFIG"


@dataclass
class FetchConfig:
    """Configuration for HTTP content fetching.

    Per-call timeout and retry counts come from the tool arguments; these
    settings cover what stays fixed for the lifetime of the server.

    Attributes:
        user_agent: HTTP User-Agent header string
        retry_delay_seconds: Fixed pause between retry attempts
        trust_env: Whether to respect system proxy settings
        follow_redirects: Whether to follow HTTP redirects
    """

    user_agent: str = "fetch-app/1.0"
    retry_delay_seconds: float = 1.0
    trust_env: bool = True
    follow_redirects: bool = True


@dataclass
class ServerConfig:
    """Configuration for the tool server.

    Attributes:
        name: Server name announced to clients
        version: Server version announced to clients
        transport: "stdio", "http" or "sse"
        host: Bind host for network transports
        port: Bind port for network transports
    """

    name: str = "fetch-mcp-server"
    version: str = "1.0.0"
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Console output always goes to stderr so it never mixes with the
    stdio transport.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        directory: Directory for the log file
        filename: Name of the log file
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    directory: str = "logs"
    filename: str = "fetch.jsonl"


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(path: str | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    Falls back to the file named by FETCH_ADAPTER_CONFIG when no path is
    given, and to built-in defaults when neither is set.
    """
    path = path or os.getenv(CONFIG_ENV_VAR)
    if not path:
        return AppConfig()

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return _merge_config(AppConfig(), raw)


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict) and isinstance(data[key], dict):
            data[key].update({k: v for k, v in value.items() if k in data[key]})
    return _fromdict(data)


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(
        fetch=FetchConfig(**data["fetch"]),
        server=ServerConfig(**data["server"]),
        logging=LoggingConfig(**data["logging"]),
    )

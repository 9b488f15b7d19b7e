"""Configuration loading for the MCP boilerplate server.

Copyright (C) 2024 MCP Boilerplate

This program is free software: you can redistribute it and/or modify
it under the terms of the GNU General Public License as published by
the Free Software Foundation, either version 3 of the License, or
(at your option) any later version.

This program is distributed in the hope that it will be useful,
but WITHOUT ANY WARRANTY; without even the implied warranty of
MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
GNU General Public License for more details.

You should have received a copy of the GNU General Public License
along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from dotenv import load_dotenv

DEFAULT_PORT = 3001
DEFAULT_LOG_LEVEL = "info"
DEFAULT_ENVIRONMENT = "development"

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")
LOG_LEVEL_ALIASES = {
    "trace": "debug",
    "warn": "warning",
    "fatal": "critical",
}


class TransportMode(str, Enum):
    """Transport carrying MCP messages for the lifetime of the process."""

    STDIO = "stdio"
    HTTP = "http"


@dataclass(frozen=True)
class ConfigWarning:
    """A rejected configuration value that was replaced by its default."""

    key: str
    value: str
    message: str


@dataclass(frozen=True)
class Settings:
    """Immutable server settings, built once at startup and passed around."""

    transport: TransportMode = TransportMode.STDIO
    port: int = DEFAULT_PORT
    log_level: str = DEFAULT_LOG_LEVEL
    greeting_prefix: str = ""
    environment: str = DEFAULT_ENVIRONMENT
    warnings: Tuple[ConfigWarning, ...] = ()

    @property
    def json_logs(self) -> bool:
        """Whether logs should be rendered as JSON lines."""
        return self.environment == "production"

    def summary(self) -> dict:
        """Return the loggable view of the settings."""
        return {
            "transport": self.transport.value,
            "port": self.port,
            "log_level": self.log_level,
            "greeting_prefix": self.greeting_prefix,
            "environment": self.environment,
        }


def load_env_file(path: Optional[Path] = None) -> bool:
    """Load a ``.env`` file into the process environment.

    Variables already present in the environment are not overridden.

    Args:
        path: File to load. Defaults to ``.env`` in the working directory.

    Returns:
        True if a file was found and loaded.
    """
    if path is None:
        path = Path.cwd() / ".env"
    return load_dotenv(dotenv_path=path, override=False)


def _parse_transport(raw: Optional[str], warnings: List[ConfigWarning]) -> TransportMode:
    if not raw:
        return TransportMode.STDIO
    value = raw.strip().lower()
    try:
        return TransportMode(value)
    except ValueError:
        warnings.append(
            ConfigWarning(
                key="MCP_TRANSPORT",
                value=raw,
                message=f'Invalid MCP_TRANSPORT: "{raw}". Defaulting to "stdio".',
            )
        )
        return TransportMode.STDIO


def _parse_port(raw: Optional[str], warnings: List[ConfigWarning]) -> int:
    if not raw:
        return DEFAULT_PORT
    try:
        port = int(raw.strip())
    except ValueError:
        port = None
    if port is None or not 1 <= port <= 65535:
        warnings.append(
            ConfigWarning(
                key="MCP_PORT",
                value=raw,
                message=f"Invalid MCP_PORT. Using default port {DEFAULT_PORT}.",
            )
        )
        return DEFAULT_PORT
    return port


def _parse_log_level(raw: Optional[str], warnings: List[ConfigWarning]) -> str:
    if not raw:
        return DEFAULT_LOG_LEVEL
    value = raw.strip().lower()
    value = LOG_LEVEL_ALIASES.get(value, value)
    if value not in LOG_LEVELS:
        warnings.append(
            ConfigWarning(
                key="LOG_LEVEL",
                value=raw,
                message=f'Invalid LOG_LEVEL: "{raw}". Defaulting to "{DEFAULT_LOG_LEVEL}".',
            )
        )
        return DEFAULT_LOG_LEVEL
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build settings from environment variables.

    Malformed values never raise. Each one falls back to its default and is
    recorded as a :class:`ConfigWarning` on the returned settings so it can be
    logged once logging is configured.

    Args:
        environ: Source of variables. Defaults to ``os.environ``.

    Returns:
        The validated settings.
    """
    if environ is None:
        environ = os.environ

    warnings: List[ConfigWarning] = []
    transport = _parse_transport(environ.get("MCP_TRANSPORT"), warnings)
    port = _parse_port(environ.get("MCP_PORT"), warnings)
    log_level = _parse_log_level(environ.get("LOG_LEVEL"), warnings)

    return Settings(
        transport=transport,
        port=port,
        log_level=log_level,
        greeting_prefix=environ.get("CUSTOM_GREETING_PREFIX") or "",
        environment=(environ.get("ENVIRONMENT") or DEFAULT_ENVIRONMENT).strip().lower(),
        warnings=tuple(warnings),
    )


def report_settings(settings: Settings, logger: Any) -> None:
    """Log configuration warnings followed by the loaded settings."""
    for warning in settings.warnings:
        logger.warning(warning.message, key=warning.key, value=warning.value)
    logger.info("Configuration loaded", **settings.summary())

"""Structured logging for the MCP boilerplate server.

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

All output goes to stderr. In stdio mode stdout carries MCP framing and a
single stray log line there would corrupt the protocol stream.
"""

import logging
import sys
from typing import List, Optional, TextIO

import structlog


def configure_logging(
    log_level: str = "info",
    *,
    json_logs: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structlog and the stdlib root logger.

    Call once at process start, before the MCP server is constructed, so the
    SDK's own loggers share the same handler.

    Args:
        log_level: Minimum level name (debug, info, warning, error, critical).
        json_logs: Render JSON lines instead of the colored console format.
        stream: Output stream. Defaults to ``sys.stderr``.
    """
    if stream is None:
        stream = sys.stderr

    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=level,
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound logger for *name*."""
    return structlog.get_logger(name)

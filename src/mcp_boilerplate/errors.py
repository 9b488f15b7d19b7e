"""Error variants raised by the MCP boilerplate server.

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

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Closed set of error kinds. Callers dispatch on this, not on the class."""

    CONFIG_WARNING = "config_warning"
    TOOL_EXECUTION = "tool_execution"
    RESOURCE_OR_PROMPT = "resource_or_prompt"
    SESSION_LOOKUP = "session_lookup"
    TRANSPORT_FATAL = "transport_fatal"


class AppError(Exception):
    """Base error carrying a kind, an optional cause and structured context."""

    kind: ErrorKind = ErrorKind.TRANSPORT_FATAL

    def __init__(
        self,
        message: str,
        cause: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context: Dict[str, Any] = dict(context or {})
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> Dict[str, Any]:
        """Return a log-friendly representation."""
        result: Dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
            "context": self.context,
        }
        if self.cause is not None:
            result["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return result


class ToolExecutionError(AppError):
    """A named tool failed while executing."""

    kind = ErrorKind.TOOL_EXECUTION

    def __init__(
        self,
        tool_name: str,
        message: str,
        cause: Optional[BaseException] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            f'Error executing tool "{tool_name}": {message}',
            cause=cause,
            context={**(context or {}), "toolName": tool_name},
        )
        self.tool_name = tool_name


class ResourceOrPromptError(AppError):
    """A resource read or prompt render failed."""

    kind = ErrorKind.RESOURCE_OR_PROMPT


class SessionLookupError(AppError):
    """No live session exists for the requested id."""

    kind = ErrorKind.SESSION_LOOKUP

    def __init__(self, session_id: Optional[str]):
        super().__init__(
            "No transport found for sessionId",
            context={"sessionId": session_id},
        )
        self.session_id = session_id


class TransportFatalError(AppError):
    """A connection-level failure. Ends the affected session only."""

    kind = ErrorKind.TRANSPORT_FATAL


def http_status(error: AppError) -> int:
    """Map an error to the HTTP status returned to the client."""
    kind = error.kind
    if kind is ErrorKind.SESSION_LOOKUP:
        return 400
    if kind in (
        ErrorKind.CONFIG_WARNING,
        ErrorKind.TOOL_EXECUTION,
        ErrorKind.RESOURCE_OR_PROMPT,
        ErrorKind.TRANSPORT_FATAL,
    ):
        return 500
    raise ValueError(f"Unhandled error kind: {kind!r}")

"""Main MCP server entry point.

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

import argparse
import signal
import sys
from dataclasses import replace
from typing import Annotated, Any, Dict, List, Optional, Sequence

import anyio
import uvicorn
from mcp.server.fastmcp import FastMCP
from mcp.types import TextContent
from pydantic import Field

from . import __version__
from .config import Settings, TransportMode, load_env_file, load_settings, report_settings
from .errors import ResourceOrPromptError
from .http_app import MESSAGE_PATH, SESSION_QUERY_PARAM, SSE_PATH, SseSessionManager, create_http_app
from .log import configure_logging, get_logger
from .tools import AddInput, GreetInput, add_tool, greet_tool

logger = get_logger(__name__)

SERVER_NAME = "MCP Boilerplate Server"
HTTP_HOST = "0.0.0.0"
WELCOME_URI = "system://welcome"
WELCOME_TEXT = "Welcome to the MCP Boilerplate Server!"


def welcome_message(uri: str = WELCOME_URI) -> str:
    """Static welcome text served at ``system://welcome``."""
    logger.info("Providing static resource", uri=uri)
    return WELCOME_TEXT


def summarize_topic(topic: str) -> List[Dict[str, Any]]:
    """Prompt template asking for a brief summary of *topic*.

    Raises:
        ResourceOrPromptError: If the topic is empty.
    """
    logger.info("Generating summarize prompt", topic=topic)
    if not topic or not topic.strip():
        error = ResourceOrPromptError(
            "Topic must not be empty.", context={"prompt": "summarize-topic", "topic": topic}
        )
        logger.error("Error generating summarize prompt", error=error.to_dict())
        raise error
    return [
        {
            "role": "user",
            "content": {
                "type": "text",
                "text": f"Please provide a brief summary of the following topic: {topic}",
            },
        }
    ]


def build_server(settings: Settings) -> FastMCP:
    """Create the FastMCP server and register its tools, resource and prompt."""
    mcp = FastMCP(SERVER_NAME, log_level=settings.log_level.upper())

    greet_fields = GreetInput.model_fields
    add_fields = AddInput.model_fields

    # Register tools
    @mcp.tool(name="greet", description="Greet someone by name.", structured_output=False)
    def greet(
        name: Annotated[str, Field(description=greet_fields["name"].description)],
        greeting: Annotated[str, Field(description=greet_fields["greeting"].description)] = "Hello",
    ) -> List[TextContent]:
        return greet_tool(GreetInput(name=name, greeting=greeting), settings)

    @mcp.tool(name="add", description="Add two numbers.", structured_output=False)
    def add(
        a: Annotated[float, Field(description=add_fields["a"].description)],
        b: Annotated[float, Field(description=add_fields["b"].description)],
    ) -> List[TextContent]:
        return add_tool(AddInput(a=a, b=b))

    # Register resources
    @mcp.resource(
        WELCOME_URI,
        name="welcome-message",
        description="Provides a static welcome message.",
        mime_type="text/plain",
    )
    def welcome() -> str:
        return welcome_message(WELCOME_URI)

    # Register prompts
    @mcp.prompt(name="summarize-topic", description="Ask for a brief summary of a topic.")
    def summarize(topic: str) -> List[Dict[str, Any]]:
        return summarize_topic(topic)

    return mcp


async def serve_http(mcp: FastMCP, settings: Settings) -> None:
    """Serve the SSE transport with uvicorn until shutdown."""
    logger.info("Setting up HTTP/SSE server...", port=settings.port)
    manager = SseSessionManager(mcp._mcp_server)
    app = create_http_app(manager)
    config = uvicorn.Config(
        app,
        host=HTTP_HOST,
        port=settings.port,
        log_level=settings.log_level,
        log_config=None,
    )
    logger.info("MCP Server (HTTP/SSE) listening", port=settings.port)
    logger.debug(f" -> SSE connections: http://localhost:{settings.port}{SSE_PATH}")
    logger.debug(
        f" -> Message posts: http://localhost:{settings.port}{MESSAGE_PATH}?{SESSION_QUERY_PARAM}=<sessionId>"
    )
    await uvicorn.Server(config).serve()


async def start_server(mcp: FastMCP, settings: Settings) -> None:
    """Run the server on the configured transport."""
    logger.info("Starting MCP server...", transport=settings.transport.value)

    if settings.transport is TransportMode.STDIO:
        # stdio carries a single implicit session for the whole process
        logger.info("Connecting via stdio...")
        await mcp.run_stdio_async()
    elif settings.transport is TransportMode.HTTP:
        await serve_http(mcp, settings)
    else:
        logger.error("Unsupported transport type", transport=str(settings.transport))
        sys.exit(1)


def _shutdown(signum: int, frame: Any) -> None:
    logger.info("Shutting down MCP server...", signal=signal.Signals(signum).name)
    sys.exit(0)


def install_signal_handlers() -> None:
    """Exit cleanly on SIGINT and SIGTERM."""
    signal.signal(signal.SIGINT, _shutdown)
    signal.signal(signal.SIGTERM, _shutdown)


def _log_uncaught_exception(exc_type, exc_value, exc_traceback) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="mcp-boilerplate", description=f"{SERVER_NAME} {__version__}")
    parser.add_argument(
        "--stdio",
        action="store_true",
        help="Serve over stdio regardless of MCP_TRANSPORT.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point for running the server."""
    args = parse_args(argv)

    load_env_file()
    settings = load_settings()
    if args.stdio:
        settings = replace(settings, transport=TransportMode.STDIO)

    configure_logging(settings.log_level, json_logs=settings.json_logs)
    report_settings(settings, logger)
    sys.excepthook = _log_uncaught_exception
    install_signal_handlers()

    mcp = build_server(settings)
    try:
        anyio.run(start_server, mcp, settings)
    except Exception:
        logger.exception("Failed to start MCP server")
        sys.exit(1)


if __name__ == "__main__":
    main()

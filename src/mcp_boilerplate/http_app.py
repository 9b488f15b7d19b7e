"""HTTP + SSE transport for the MCP boilerplate server.

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

Routes:
- GET  /sse                          long-lived event stream, one session each
- POST /messages/?session_id=<id>    client-to-server messages for a session
"""

from typing import Any, Callable, Optional

from mcp.server.sse import SseServerTransport
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Mount, Route
from starlette.types import Message, Receive, Scope, Send

from .errors import SessionLookupError, TransportFatalError, http_status
from .log import get_logger
from .sessions import SessionTable

logger = get_logger(__name__)

SSE_PATH = "/sse"
MESSAGE_PATH = "/messages/"
SESSION_QUERY_PARAM = "session_id"


def _transport_session_id(transport: SseServerTransport) -> str:
    """Return the id the transport announced to its client.

    Each connection gets its own transport, which holds exactly one stream
    writer keyed by the UUID sent in the ``endpoint`` event.
    """
    session_uuid = next(iter(transport._read_stream_writers))
    return session_uuid.hex


class SseSessionManager:
    """Routes SSE connections and posted messages through a session table.

    Args:
        server: Low-level MCP server run once per connected session.
        transport_factory: Builds a fresh transport for each connection.
    """

    def __init__(
        self,
        server: Any,
        transport_factory: Optional[Callable[[], SseServerTransport]] = None,
    ):
        self._server = server
        self._transport_factory = transport_factory or (lambda: SseServerTransport(MESSAGE_PATH))
        self.sessions: SessionTable[SseServerTransport] = SessionTable()

    async def handle_sse(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Serve one SSE connection until the client goes away."""
        logger.info("Client connected via SSE")
        transport = self._transport_factory()
        async with transport.connect_sse(scope, receive, send) as (read_stream, write_stream):
            session_id = _transport_session_id(transport)
            self.sessions.open(session_id, transport)
            logger.info("Server connected to SSE client", session_id=session_id, active_sessions=len(self.sessions))
            try:
                await self._server.run(
                    read_stream,
                    write_stream,
                    self._server.create_initialization_options(),
                )
            except Exception as e:
                error = TransportFatalError(
                    "Error running MCP server on SSE transport",
                    cause=e,
                    context={"sessionId": session_id},
                )
                logger.error(error.message, error=error.to_dict(), exc_info=e)
            finally:
                self.sessions.close(session_id)
                logger.info(
                    "Client disconnected (SSE session closed)",
                    session_id=session_id,
                    active_sessions=len(self.sessions),
                )

    async def handle_post_message(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Forward a posted message to the transport of its session."""
        request = Request(scope, receive)
        session_id = request.query_params.get(SESSION_QUERY_PARAM)
        try:
            transport = self.sessions.get(session_id)
        except SessionLookupError as e:
            logger.warning("No active transport found for POST message", session_id=session_id)
            response = Response(e.message, status_code=http_status(e))
            await response(scope, receive, send)
            return

        logger.debug("Received POST message", session_id=session_id)
        response_started = False

        async def send_tracking(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await transport.handle_post_message(scope, receive, send_tracking)
        except Exception:
            logger.error("Error handling POST message", session_id=session_id, exc_info=True)
            if not response_started:
                response = Response("Error processing message", status_code=500)
                await response(scope, receive, send)
            return
        logger.debug("Successfully processed POST message", session_id=session_id)


def create_http_app(manager: SseSessionManager) -> Starlette:
    """Build the Starlette application serving the SSE transport."""

    async def handle_sse_request(request: Request) -> Response:
        await manager.handle_sse(request.scope, request.receive, request._send)
        # The stream already completed the response; this only satisfies Starlette.
        return Response()

    routes = [
        Route(SSE_PATH, endpoint=handle_sse_request, methods=["GET"]),
        Mount(MESSAGE_PATH, app=manager.handle_post_message),
    ]
    return Starlette(routes=routes)

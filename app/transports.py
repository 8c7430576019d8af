"""
ASGI adapters that bind one MCP session to one client connection.

- SseTransportAdapter: long-lived `GET /sse` stream plus `POST /message/`
  for client-to-server messages. One session per stream.
- StatelessHttpAdapter: `POST /mcp` Streamable HTTP. One session per
  request, no session id is issued.

The protocol work itself is done by the `mcp` SDK transports.
"""

from __future__ import annotations

from typing import Any, Dict

from mcp.server.sse import SseServerTransport
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.types import Receive, Scope, Send

from observability import build_log_context, log_event
from server import open_session


def _describe(scope: Scope) -> Dict[str, Any]:
    headers = {k.decode("latin-1"): v.decode("latin-1") for k, v in scope.get("headers") or []}
    client = scope.get("client")
    return {
        "method": scope.get("method"),
        "path": scope.get("path"),
        "query": (scope.get("query_string") or b"").decode("latin-1"),
        "user_agent": headers.get("user-agent"),
        "ip": client[0] if client else None,
    }


class SseTransportAdapter:
    def __init__(self, message_path: str = "/message/") -> None:
        self.message_path = message_path
        self.transport = SseServerTransport(message_path)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        ctx = build_log_context(transport="sse")
        log_event("sse_connection", ctx=ctx, data=_describe(scope))

        async with open_session("sse") as session:
            lowlevel = session.server._mcp_server
            read_stream, write_stream = await session.bind(self.transport.connect_sse(scope, receive, send))
            await lowlevel.run(read_stream, write_stream, lowlevel.create_initialization_options())

        log_event("sse_connection_closed", ctx=ctx)

    async def handle_message(self, scope: Scope, receive: Receive, send: Send) -> None:
        log_event("sse_message", data=_describe(scope))
        await self.transport.handle_post_message(scope, receive, send)


class StatelessHttpAdapter:
    def __init__(self, json_response: bool = False) -> None:
        self.json_response = json_response

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        ctx = build_log_context(transport="streamable-http")
        log_event("mcp_request", ctx=ctx, data=_describe(scope))

        async with open_session("streamable-http") as session:
            # A manager can only run once, so each request gets its own.
            manager = StreamableHTTPSessionManager(
                app=session.server._mcp_server,
                event_store=None,
                json_response=self.json_response,
                stateless=True,
            )
            await session.bind(manager.run())
            await manager.handle_request(scope, receive, send)

        log_event("mcp_connection_closed", ctx=ctx)

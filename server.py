"""
FreeCoinPrice canonical entrypoint.

This is the single source of truth for:
- MCP server name
- session construction (one fresh server per connection / request)

The HTTP transports in `api_server.py` open sessions through `open_session`.
Running this module directly serves a single session over stdio.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncContextManager, AsyncIterator, Optional, TypeVar

from fastmcp import FastMCP

from app.core.config import settings
from app.core.container import global_container
from coingecko_client import CoinGeckoClient
from observability import build_log_context, configure_logging, log_event

T = TypeVar("T")


def create_server(client: Optional[CoinGeckoClient] = None) -> FastMCP:
    mcp = FastMCP(settings.PROJECT_NAME, version=settings.VERSION)
    global_container.registry.register_all(mcp, client or global_container.coingecko)
    return mcp


@dataclass
class Session:
    """
    One MCP server plus the transport bindings attached to it with `bind()`.
    Leaving the session (or `aclose()`) exits the bindings, last bound first
    released, then drops the server.
    """

    session_id: str
    transport: str
    server: Optional[FastMCP]
    _bindings: AsyncExitStack = field(default_factory=AsyncExitStack, repr=False)

    @property
    def closed(self) -> bool:
        return self.server is None

    async def bind(self, cm: AsyncContextManager[T]) -> T:
        if self.closed:
            raise RuntimeError(f"session {self.session_id} is closed")
        return await self._bindings.enter_async_context(cm)

    async def __aenter__(self) -> "Session":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        try:
            return await self._bindings.__aexit__(exc_type, exc, tb)
        finally:
            self.server = None

    async def aclose(self) -> None:
        await self.__aexit__(None, None, None)


@asynccontextmanager
async def open_session(transport: str, client: Optional[CoinGeckoClient] = None) -> AsyncIterator[Session]:
    """
    Scoped session: the server is built on entry; on exit every transport
    binding is released and the server dropped, whether the exchange
    completed or the client went away.
    """
    session = Session(session_id=uuid.uuid4().hex, transport=transport, server=create_server(client))
    ctx = build_log_context(transport=transport, session_id=session.session_id)
    log_event("session_opened", ctx=ctx)
    try:
        async with session:
            yield session
    finally:
        log_event("session_closed", ctx=ctx)


def main() -> None:
    configure_logging(settings.LOG_LEVEL)
    for w in settings.config_warnings():
        log_event("config_warning", data={"warning": str(w)}, level=logging.WARNING)
    create_server().run()


if __name__ == "__main__":
    main()

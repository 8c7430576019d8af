import asyncio
import json
import socket
import threading
import time
from unittest.mock import patch

import pytest
import uvicorn
from mcp import ClientSession
from mcp.client.sse import sse_client

from api_server import create_app
from app.core.container import global_container


def _free_port():
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


def _wait_for(predicate, timeout=10.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return False


@pytest.fixture
def http_server(ok_client):
    port = _free_port()
    server = uvicorn.Server(uvicorn.Config(create_app(), host="127.0.0.1", port=port, log_level="warning"))
    with patch.object(global_container, "coingecko", ok_client):
        thread = threading.Thread(target=server.run, daemon=True)
        thread.start()
        assert _wait_for(lambda: server.started), "uvicorn did not start"
        yield f"http://127.0.0.1:{port}"
        server.should_exit = True
        thread.join(timeout=10)


def test_sse_connection_gets_its_own_session(http_server, ok_client):
    async def go():
        async with sse_client(f"{http_server}/sse") as (read_stream, write_stream):
            async with ClientSession(read_stream, write_stream) as session:
                await session.initialize()
                tools = await session.list_tools()
                result = await session.call_tool("getCoinPrice", {"ids": "bitcoin"})
                return [t.name for t in tools.tools], result

    with patch("server.log_event") as log:
        names, result = asyncio.run(go())

        def events():
            return [c.args[0] for c in log.call_args_list]

        assert _wait_for(lambda: "session_closed" in events())

    assert sorted(names) == sorted(global_container.registry.names())
    assert len(names) == 6
    assert not result.isError
    assert result.content[0].text == json.dumps(ok_client.body, separators=(",", ":"))
    assert events().count("session_opened") == 1
    assert events().count("session_closed") == 1

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Type

from pydantic import BaseModel

from coingecko_client import CoinGeckoClient
from observability import build_log_context, log_event


@dataclass(frozen=True)
class UpstreamRequest:
    path: str
    params: Dict[str, Optional[str]] = field(default_factory=dict)


def _json_text(data: Any) -> str:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def _json_err(message: str) -> str:
    return json.dumps({"error": message}, separators=(",", ":"), ensure_ascii=False)


async def relay(
    client: CoinGeckoClient,
    request: UpstreamRequest,
    *,
    tool: str,
    error_message: str,
    render: Optional[Callable[[Any], str]] = None,
) -> str:
    """
    Call upstream once and turn the outcome into the text payload of a tool result.

    Upstream failures never escape: they become `{"error": error_message}`.
    """
    ctx = build_log_context(tool=tool)
    log_event("tool_call", ctx=ctx, data={"path": request.path, "params": request.params})

    # requests is blocking; keep the event loop free for other sessions.
    res = await asyncio.to_thread(client.fetch, request.path, request.params)

    if not res.ok:
        text = _json_err(error_message)
        log_event(
            "tool_error_response",
            ctx=ctx,
            data={"code": res.error.code, "upstream_error": res.error.message, "result": text},
            level=logging.WARNING,
        )
        return text

    text = render(res.data) if render else _json_text(res.data)
    log_event("tool_response", ctx=ctx, data={"bytes": len(text)})
    return text


@dataclass(frozen=True)
class ToolSpec:
    """
    One MCP tool: a name, a description, a typed parameter model and the
    mapping from validated parameters to a single upstream GET.
    """

    name: str
    description: str
    params_model: Type[BaseModel]
    build_request: Callable[[Any], UpstreamRequest]
    error_message: str
    render: Optional[Callable[[Any], str]] = None

    def parameters_schema(self) -> Dict[str, Any]:
        return self.params_model.model_json_schema()

    def validate(self, arguments: Optional[Mapping[str, Any]]) -> BaseModel:
        """Raises pydantic.ValidationError; nothing is sent upstream in that case."""
        return self.params_model.model_validate(dict(arguments or {}))

    async def handle(self, params: BaseModel, client: CoinGeckoClient) -> str:
        return await relay(
            client,
            self.build_request(params),
            tool=self.name,
            error_message=self.error_message,
            render=self.render,
        )

    async def invoke(self, arguments: Optional[Mapping[str, Any]], client: CoinGeckoClient) -> str:
        return await self.handle(self.validate(arguments), client)

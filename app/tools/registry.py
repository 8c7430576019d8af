from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.tools import Tool
from fastmcp.tools.tool import ToolResult
from mcp.types import TextContent
from pydantic import PrivateAttr, ValidationError

from app.tools.base import ToolSpec
from coingecko_client import CoinGeckoClient


def _format_validation_error(name: str, e: ValidationError) -> str:
    problems = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "<arguments>"
        problems.append(f"{loc}: {err.get('msg')}")
    return f"Invalid arguments for {name}: " + "; ".join(problems)


class RelayTool(Tool):
    """
    FastMCP binding of a ToolSpec. The spec and client are shared by
    reference; the tool object itself belongs to one server session.
    """

    _spec: ToolSpec = PrivateAttr()
    _client: CoinGeckoClient = PrivateAttr()

    @classmethod
    def from_spec(cls, spec: ToolSpec, client: CoinGeckoClient) -> "RelayTool":
        tool = cls(name=spec.name, description=spec.description, parameters=spec.parameters_schema())
        tool._spec = spec
        tool._client = client
        return tool

    @property
    def spec(self) -> ToolSpec:
        return self._spec

    async def run(self, arguments: Dict[str, Any]) -> ToolResult:
        try:
            params = self._spec.validate(arguments)
        except ValidationError as e:
            raise ToolError(_format_validation_error(self._spec.name, e)) from e
        text = await self._spec.handle(params, self._client)
        return ToolResult(content=[TextContent(type="text", text=text)])


class ToolRegistry:
    """
    Immutable, ordered set of ToolSpecs. Names must be unique.
    """

    def __init__(self, specs: Iterable[ToolSpec]):
        specs = tuple(specs)
        seen = set()
        for spec in specs:
            if spec.name in seen:
                raise ValueError(f"Duplicate tool name: {spec.name}")
            seen.add(spec.name)
        self._specs: Tuple[ToolSpec, ...] = specs

    def __iter__(self):
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def names(self) -> List[str]:
        return [s.name for s in self._specs]

    def get(self, name: str) -> ToolSpec:
        for spec in self._specs:
            if spec.name == name:
                return spec
        raise KeyError(name)

    def register_all(self, server: FastMCP, client: CoinGeckoClient) -> FastMCP:
        # Tools are keyed by name, so registering twice replaces rather than duplicates.
        for spec in self._specs:
            server.add_tool(RelayTool.from_spec(spec, client))
        return server

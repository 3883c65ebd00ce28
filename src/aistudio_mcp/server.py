"""MCP binding: exposes the registry as tools and routes calls to the pipeline."""
from __future__ import annotations

from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from aistudio_mcp import __version__
from aistudio_mcp.errors import AIStudioMCPError
from aistudio_mcp.pipeline import ToolPipeline
from aistudio_mcp.registry import ToolDefinition

SERVER_NAME = "Oxylabs AI Studio MCP"


class ToolCallFailed(AIStudioMCPError):
    """Raised inside the call handler so the host receives ``isError=True``.

    The message is the serialized error envelope.
    """


def tool_for(definition: ToolDefinition) -> types.Tool:
    return types.Tool(
        name=definition.name,
        description=definition.description.strip(),
        inputSchema=definition.input_schema(),
    )


def build_server(pipeline: ToolPipeline) -> Server:
    # Low-level Server rather than FastMCP: tools are generated from the registry at
    # runtime and their inputSchema comes from ArgumentSpec, not from function signatures.
    server: Server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [tool_for(d) for d in pipeline.registry.definitions()]

    # Arguments are validated by the pipeline's normalizer, not against inputSchema.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[types.TextContent]:
        envelope = await pipeline.invoke(name, arguments or {})
        if envelope.is_error:
            raise ToolCallFailed(envelope.text)
        return [types.TextContent(type="text", text=envelope.text)]

    return server


async def serve_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())

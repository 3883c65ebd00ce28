from __future__ import annotations

import logging
import sys

import anyio

from aistudio_mcp.client import AIStudioClient
from aistudio_mcp.config import get_settings
from aistudio_mcp.errors import ConfigurationError
from aistudio_mcp.pipeline import ToolPipeline
from aistudio_mcp.server import build_server, serve_stdio
from aistudio_mcp.tools.catalog import build_registry

logger = logging.getLogger("aistudio_mcp")


def configure_logging(level: str) -> None:
    # stdout carries the MCP protocol; logs go to stderr.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


async def run() -> None:
    settings = get_settings()
    registry = build_registry()
    client = AIStudioClient.from_settings(settings)
    server = build_server(ToolPipeline(registry, client))
    logger.info("Starting %d tools against %s", len(registry.definitions()), settings.OXYLABS_AI_STUDIO_API_URL)
    await serve_stdio(server)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    try:
        settings.require_api_key()
    except ConfigurationError as e:
        logger.error("%s", e)
        raise SystemExit(1) from e
    anyio.run(run)


if __name__ == "__main__":
    main()

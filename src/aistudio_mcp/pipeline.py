"""Invocation pipeline: normalize -> decide -> shape -> call -> envelope."""
from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from aistudio_mcp.errors import UnknownToolError, ValidationError
from aistudio_mcp.registry import ToolRegistry
from aistudio_mcp.tools.catalog import GENERATE_SCHEMA
from aistudio_mcp.tools.params_utils import normalize
from aistudio_mcp.tools.payloads import shape
from aistudio_mcp.tools.selection import Operation, decide
from aistudio_mcp.utils import ResultEnvelope, wrap_failure, wrap_raw, wrap_success

logger = logging.getLogger("aistudio_mcp.pipeline")


class BackendClient(Protocol):
    async def execute(self, operation: Operation, app: str, payload: dict[str, Any]) -> Any: ...


def _raw_context(arguments: Any) -> dict[str, Any]:
    """Best-effort URL/query context taken from arguments that failed validation."""
    if not isinstance(arguments, Mapping):
        return {}
    return {k: arguments[k] for k in ("url", "query", "app_name") if isinstance(arguments.get(k), str)}


class ToolPipeline:
    """Runs one tool invocation end to end.

    Holds no per-invocation state, so a single instance serves concurrent
    calls. Classified failures come back as error envelopes; cancellation is
    left to propagate.
    """

    def __init__(self, registry: ToolRegistry, client: BackendClient) -> None:
        self.registry = registry
        self.client = client

    async def invoke(self, tool_name: str, arguments: Any) -> ResultEnvelope:
        try:
            definition = self.registry.lookup(tool_name)
            normalized = normalize(definition, arguments)
            selection = decide(definition.name, normalized)
            payload = shape(selection)
        except (UnknownToolError, ValidationError) as e:
            return wrap_failure(tool_name, _raw_context(arguments), e)

        logger.info(
            "Calling %s (%s) for %s",
            selection.operation.value,
            selection.app,
            next(iter(selection.context.values()), "-"),
        )

        try:
            response = await self.client.execute(selection.operation, selection.app, payload)
            if definition.name == GENERATE_SCHEMA:
                return wrap_raw(definition.name, response)
            return wrap_success(definition.name, response)
        except Exception as e:  # backend and unexpected errors both end up in the envelope
            return wrap_failure(definition.name, selection.context, e)

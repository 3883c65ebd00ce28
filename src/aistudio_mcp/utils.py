"""Result and error envelopes returned for every tool invocation."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from aistudio_mcp.errors import (
    AIStudioMCPError,
    BackendError,
    InvalidToolArgumentError,
    UnknownToolError,
    ValidationError,
)

logger = logging.getLogger("aistudio_mcp")


# ---------------------------------------------------------------------------
# Structured response helpers (LLM-friendly)
# ---------------------------------------------------------------------------

def error_response(
    *,
    tool: str,
    input: dict[str, Any],
    error_type: str,
    message: str,
    details: Any | None = None,
    code: str = "E0000",
) -> dict[str, Any]:
    """Return a standardized error dict with machine-readable code."""
    return {
        "ok": False,
        "tool": tool,
        "input": input,
        "error": {"type": error_type, "code": code, "message": message, "details": details},
    }


def dump_json(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ResultEnvelope:
    ok: bool
    tool: str
    # UTF-8 text document handed back to the host
    text: str
    content: Any = None
    error: dict[str, Any] | None = None

    @property
    def is_error(self) -> bool:
        return not self.ok


def wrap_success(tool: str, backend_response: Any) -> ResultEnvelope:
    """Wrap the backend's ``data`` field as ``{"content": data}``."""
    if isinstance(backend_response, Mapping):
        if "data" not in backend_response:
            raise BackendError("AI Studio response carries no data field", payload=dict(backend_response))
        data = backend_response["data"]
    elif hasattr(backend_response, "data"):
        data = backend_response.data
    else:
        raise BackendError(f"Unexpected AI Studio response type: {type(backend_response).__name__}")
    return ResultEnvelope(ok=True, tool=tool, text=dump_json({"content": data}), content=data)


def wrap_raw(tool: str, backend_response: Any) -> ResultEnvelope:
    """Return the backend response as-is (schema generation)."""
    return ResultEnvelope(ok=True, tool=tool, text=dump_json(backend_response), content=backend_response)


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

_ACTIONS = {
    "ai_scraper": "scraping",
    "ai_crawler": "crawling",
    "browser_agent": "running browser agent on",
    "ai_search": "searching for",
    "generate_schema": "generating schema for",
}


def describe_context(context: Mapping[str, Any]) -> str:
    for key in ("url", "query", "app_name"):
        value = context.get(key)
        if value:
            return str(value)
    return ""


def _classify(error: BaseException) -> tuple[str, str, Any]:
    if isinstance(error, InvalidToolArgumentError):
        return "invalid_argument", "E4003", {"field": error.field, "reason": error.reason}
    if isinstance(error, ValidationError):
        return "validation_error", "E4001", {"field": error.field, "reason": error.reason}
    if isinstance(error, UnknownToolError):
        return "unknown_tool", "E4004", {"tool": error.tool_name}
    if isinstance(error, BackendError):
        details = {"status_code": error.status_code, "payload": error.payload}
        if error.timed_out:
            return "upstream_timeout", "E2105", details
        return "backend_error", "E2001", details
    return "unexpected_error", "E9000", None


def failure_message(operation_name: str, context: Mapping[str, Any], error: BaseException) -> str:
    action = _ACTIONS.get(operation_name)
    target = describe_context(context)
    if action is None:
        prefix = f"Error in {operation_name}"
    elif target:
        prefix = f"Error {action} {target}"
    else:
        prefix = f"Error {action}"
    return f"{prefix}: {error}"


def wrap_failure(operation_name: str, context: Mapping[str, Any], error: BaseException) -> ResultEnvelope:
    """Build the failure envelope for ``error`` and log it for operators."""
    error_type, code, details = _classify(error)
    message = failure_message(operation_name, context, error)

    if isinstance(error, ValidationError):
        logger.warning("Rejected %s call: %s", operation_name, error)
    elif isinstance(error, AIStudioMCPError):
        logger.error("%s failed for %s: %s", operation_name, describe_context(context) or "-", error)
    else:
        logger.error("Unexpected error in %s: %s", operation_name, error, exc_info=error)

    body = error_response(
        tool=operation_name,
        input=dict(context),
        error_type=error_type,
        code=code,
        message=message,
        details=details,
    )
    return ResultEnvelope(ok=False, tool=operation_name, text=dump_json(body), error=body["error"])

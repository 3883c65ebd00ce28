"""Error taxonomy for the AI Studio MCP server."""
from __future__ import annotations

from typing import Any


class AIStudioMCPError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(AIStudioMCPError):
    """Missing or invalid startup configuration (fatal)."""


class DuplicateToolError(AIStudioMCPError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Tool {tool_name!r} is already registered")
        self.tool_name = tool_name


class UnknownToolError(AIStudioMCPError):
    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool {tool_name!r}")
        self.tool_name = tool_name


class ValidationError(AIStudioMCPError):
    """An argument is missing, has the wrong type, or breaks a constraint."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"Invalid argument '{field}': {reason}")
        self.field = field
        self.reason = reason


class InvalidToolArgumentError(ValidationError):
    """An enumerated sub-case (e.g. generate_schema's app_name) is not recognised."""


class BackendError(AIStudioMCPError):
    """Any failure reported by, or while talking to, the AI Studio API."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        payload: Any | None = None,
        timed_out: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload
        self.timed_out = timed_out

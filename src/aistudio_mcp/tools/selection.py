"""Choosing the backend operation for a normalized invocation."""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from aistudio_mcp.errors import UnknownToolError
from aistudio_mcp.tools.catalog import (
    AI_CRAWLER,
    AI_SCRAPER,
    AI_SEARCH,
    BROWSER_AGENT,
    GENERATE_SCHEMA,
    JSON,
)
from aistudio_mcp.tools.params_utils import NormalizedArguments


class Operation(str, enum.Enum):
    SCRAPE = "scrape"
    SCRAPE_AUTO_SCHEMA = "scrape_with_auto_schema"
    CRAWL = "crawl"
    CRAWL_AUTO_SCHEMA = "crawl_with_auto_schema"
    BROWSE = "browse"
    BROWSE_AUTO_SCHEMA = "browse_with_auto_schema"
    SEARCH = "search"
    GENERATE_SCHEMA = "generate_schema"

    @property
    def derives_schema(self) -> bool:
        return self in _DERIVED


_DERIVED = frozenset({Operation.SCRAPE_AUTO_SCHEMA, Operation.CRAWL_AUTO_SCHEMA, Operation.BROWSE_AUTO_SCHEMA})

# tool -> (explicit variant, derived-schema variant)
_EXTRACTION_VARIANTS = {
    AI_SCRAPER: (Operation.SCRAPE, Operation.SCRAPE_AUTO_SCHEMA),
    AI_CRAWLER: (Operation.CRAWL, Operation.CRAWL_AUTO_SCHEMA),
    BROWSER_AGENT: (Operation.BROWSE, Operation.BROWSE_AUTO_SCHEMA),
}


@dataclass(frozen=True)
class BackendOperationSelection:
    operation: Operation
    # AI Studio application the call is addressed to
    app: str
    arguments: NormalizedArguments

    @property
    def context(self) -> dict[str, Any]:
        """Identifiers reported alongside a failure."""
        if self.operation is Operation.SEARCH:
            return {"query": self.arguments.get("query")}
        if self.operation is Operation.GENERATE_SCHEMA:
            return {"app_name": self.app}
        return {"url": self.arguments.get("url")}


def wants_derived_schema(output_format: str | None, schema: Any) -> bool:
    """True when structured output is requested but no schema was supplied."""
    return output_format == JSON and schema is None


def decide(tool_name: str, arguments: NormalizedArguments) -> BackendOperationSelection:
    if tool_name in _EXTRACTION_VARIANTS:
        explicit, derived = _EXTRACTION_VARIANTS[tool_name]
        if wants_derived_schema(arguments.get("output_format"), arguments.get("schema")):
            return BackendOperationSelection(derived, tool_name, arguments)
        return BackendOperationSelection(explicit, tool_name, arguments)

    if tool_name == AI_SEARCH:
        return BackendOperationSelection(Operation.SEARCH, AI_SEARCH, arguments)

    if tool_name == GENERATE_SCHEMA:
        return BackendOperationSelection(Operation.GENERATE_SCHEMA, arguments["app_name"], arguments)

    raise UnknownToolError(tool_name)

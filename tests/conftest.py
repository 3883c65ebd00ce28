from __future__ import annotations

from typing import Any

import pytest

from aistudio_mcp.tools.catalog import build_registry
from aistudio_mcp.tools.selection import Operation


class FakeClient:
    """Records every backend call and replays a canned response."""

    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = {"data": "ok"} if response is None else response
        self.error = error
        self.calls: list[tuple[Operation, str, dict[str, Any]]] = []

    async def execute(self, operation: Operation, app: str, payload: dict[str, Any]) -> Any:
        self.calls.append((operation, app, payload))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(scope="session")
def registry():
    return build_registry()


@pytest.fixture
def fake_client() -> FakeClient:
    return FakeClient()

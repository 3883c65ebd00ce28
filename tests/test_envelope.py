from __future__ import annotations

import json
import logging

import pytest

from aistudio_mcp.errors import BackendError, InvalidToolArgumentError, UnknownToolError, ValidationError
from aistudio_mcp.utils import wrap_failure, wrap_raw, wrap_success


@pytest.mark.parametrize(
    "data",
    [
        "# Example Domain\n\nThis domain is for use in examples.",
        {"products": [{"name": "Mug", "price": 9.5}]},
        [{"url": "https://example.com", "content": "..."}],
        "/9j/4AAQSkZJRgABAQ==",
    ],
)
def test_wrap_success_keeps_content_unchanged(data) -> None:
    envelope = wrap_success("ai_scraper", {"data": data, "run_id": "abc"})
    assert envelope.ok
    assert envelope.content == data
    assert json.loads(envelope.text) == {"content": data}


def test_wrap_success_is_utf8_text() -> None:
    envelope = wrap_success("ai_scraper", {"data": "Čia — ąžuolas"})
    assert "Čia — ąžuolas" in envelope.text


def test_wrap_success_requires_data_field() -> None:
    with pytest.raises(BackendError):
        wrap_success("ai_scraper", {"status": "completed"})


def test_wrap_raw_returns_schema_response() -> None:
    response = {"openapi_schema": {"type": "object"}}
    envelope = wrap_raw("generate_schema", response)
    assert json.loads(envelope.text) == response


def test_backend_failure_names_operation_and_url(caplog) -> None:
    error = BackendError("AI Studio returned HTTP 502 for /scrape", status_code=502, payload={"detail": "bad gateway"})
    with caplog.at_level(logging.ERROR, logger="aistudio_mcp"):
        envelope = wrap_failure("ai_scraper", {"url": "https://example.com"}, error)

    assert envelope.is_error
    body = json.loads(envelope.text)
    assert body["ok"] is False
    assert body["tool"] == "ai_scraper"
    assert body["input"] == {"url": "https://example.com"}
    assert body["error"]["type"] == "backend_error"
    assert body["error"]["code"] == "E2001"
    assert body["error"]["message"].startswith("Error scraping https://example.com:")
    assert "HTTP 502" in body["error"]["message"]
    assert body["error"]["details"] == {"status_code": 502, "payload": {"detail": "bad gateway"}}
    assert "HTTP 502" in caplog.text


def test_search_failure_names_query() -> None:
    envelope = wrap_failure("ai_search", {"query": "rust ownership model"}, BackendError("boom"))
    assert envelope.error["message"] == "Error searching for rust ownership model: boom"


def test_timeout_is_a_backend_failure() -> None:
    error = BackendError("crawl timed out after 240 seconds", timed_out=True)
    envelope = wrap_failure("ai_crawler", {"url": "https://example.com"}, error)
    assert envelope.error["type"] == "upstream_timeout"
    assert "Error crawling https://example.com" in envelope.error["message"]


def test_validation_failure_names_field() -> None:
    envelope = wrap_failure("ai_scraper", {"url": "not-a-url"}, ValidationError("url", "not a valid URL"))
    assert envelope.error["type"] == "validation_error"
    assert envelope.error["details"]["field"] == "url"
    assert "'url'" in envelope.error["message"]


def test_invalid_argument_and_unknown_tool_codes() -> None:
    envelope = wrap_failure("generate_schema", {}, InvalidToolArgumentError("app_name", "'x' is not one of ..."))
    assert (envelope.error["type"], envelope.error["code"]) == ("invalid_argument", "E4003")

    envelope = wrap_failure("ai_translate", {}, UnknownToolError("ai_translate"))
    assert (envelope.error["type"], envelope.error["code"]) == ("unknown_tool", "E4004")
    assert "ai_translate" in envelope.error["message"]


def test_unexpected_error_is_reported() -> None:
    envelope = wrap_failure("browser_agent", {"url": "https://example.com"}, RuntimeError("kaput"))
    assert envelope.error["type"] == "unexpected_error"
    assert envelope.error["message"] == "Error running browser agent on https://example.com: kaput"

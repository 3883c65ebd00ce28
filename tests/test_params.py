from __future__ import annotations

import pytest

from aistudio_mcp.errors import InvalidToolArgumentError, ValidationError
from aistudio_mcp.tools.params_utils import coerce_params, normalize

REQUIRED = {
    "generate_schema": {"user_prompt": "product names and prices", "app_name": "ai_scraper"},
    "ai_scraper": {"url": "https://example.com"},
    "ai_crawler": {"url": "https://example.com", "crawl_prompt": "find all blog posts"},
    "browser_agent": {"url": "https://example.com", "browse_prompt": "open pricing", "output_format": "markdown"},
    "ai_search": {"query": "rust ownership model"},
}


@pytest.mark.parametrize(
    "tool,field",
    [(tool, field) for tool, args in REQUIRED.items() for field in args],
)
def test_missing_required_field_is_named(registry, tool: str, field: str) -> None:
    args = dict(REQUIRED[tool])
    del args[field]
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup(tool), args)
    assert exc.value.field == field


@pytest.mark.parametrize("tool", ["ai_scraper", "ai_crawler", "browser_agent"])
def test_output_format_outside_enum(registry, tool: str) -> None:
    args = {**REQUIRED[tool], "output_format": "pdf"}
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup(tool), args)
    assert exc.value.field == "output_format"
    assert not isinstance(exc.value, InvalidToolArgumentError)


def test_scrape_defaults(registry) -> None:
    normalized = normalize(registry.lookup("ai_scraper"), REQUIRED["ai_scraper"])
    assert normalized.tool == "ai_scraper"
    assert normalized.values == {
        "url": "https://example.com",
        "output_format": "markdown",
        "schema": None,
        "render_javascript": False,
    }


def test_search_defaults(registry) -> None:
    normalized = normalize(registry.lookup("ai_search"), {"query": "rust ownership model"})
    assert normalized["limit"] == 10
    assert normalized["render_javascript"] is False
    assert normalized["return_content"] is True


def test_crawl_limit_is_left_unbounded(registry) -> None:
    normalized = normalize(registry.lookup("ai_crawler"), REQUIRED["ai_crawler"])
    assert "return_sources_limit" not in normalized


def test_search_limit_upper_bound(registry) -> None:
    normalize(registry.lookup("ai_search"), {"query": "q", "limit": 50})
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup("ai_search"), {"query": "q", "limit": 51})
    assert exc.value.field == "limit"


@pytest.mark.parametrize("value", ["10", True, [5]])
def test_limit_must_be_a_number(registry, value) -> None:
    with pytest.raises(ValidationError):
        normalize(registry.lookup("ai_search"), {"query": "q", "limit": value})


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_limit_must_be_finite(registry, value) -> None:
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup("ai_search"), {"query": "q", "limit": value})
    assert exc.value.field == "limit"


def test_nan_limit_in_json_string(registry) -> None:
    # json.loads accepts the non-standard NaN literal
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup("ai_search"), '{"query": "q", "limit": NaN}')
    assert exc.value.field == "limit"


def test_booleans_are_not_coerced(registry) -> None:
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup("ai_scraper"), {"url": "https://example.com", "render_javascript": "true"})
    assert exc.value.field == "render_javascript"


@pytest.mark.parametrize("url", ["not-a-url", "example.com", "ftp://example.com/file", ""])
def test_url_must_be_well_formed(registry, url: str) -> None:
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup("ai_scraper"), {"url": url, "output_format": "markdown"})
    assert exc.value.field == "url"


@pytest.mark.parametrize("url", ["  https://example.com  ", "https://example.com\n", "\thttps://example.com"])
def test_url_with_surrounding_whitespace_is_rejected(registry, url: str) -> None:
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup("ai_scraper"), {"url": url})
    assert exc.value.field == "url"


def test_url_is_kept_verbatim(registry) -> None:
    normalized = normalize(registry.lookup("ai_scraper"), {"url": "https://example.com"})
    assert normalized["url"] == "https://example.com"


def test_blank_required_string(registry) -> None:
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup("ai_search"), {"query": "   "})
    assert exc.value.field == "query"


def test_schema_must_be_an_object(registry) -> None:
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup("ai_scraper"), {"url": "https://example.com", "schema": ["price"]})
    assert exc.value.field == "schema"


def test_explicit_null_schema_is_accepted(registry) -> None:
    normalized = normalize(
        registry.lookup("ai_scraper"), {"url": "https://example.com", "output_format": "json", "schema": None}
    )
    assert normalized["schema"] is None


@pytest.mark.parametrize(
    "tool,legacy,canonical",
    [
        ("ai_scraper", "parse_prompt", "user_prompt"),
        ("ai_crawler", "user_prompt", "crawl_prompt"),
        ("browser_agent", "user_prompt", "browse_prompt"),
    ],
)
def test_legacy_field_names_are_rejected(registry, tool: str, legacy: str, canonical: str) -> None:
    args = {**REQUIRED[tool], legacy: "extract the title"}
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup(tool), args)
    assert exc.value.field == legacy
    assert canonical in exc.value.reason


def test_unexpected_field_is_rejected(registry) -> None:
    with pytest.raises(ValidationError) as exc:
        normalize(registry.lookup("ai_search"), {"query": "q", "engine": "google"})
    assert exc.value.field == "engine"


def test_unknown_app_name(registry) -> None:
    with pytest.raises(InvalidToolArgumentError) as exc:
        normalize(registry.lookup("generate_schema"), {"user_prompt": "prices", "app_name": "unknown_app"})
    assert exc.value.field == "app_name"


def test_app_name_aliases(registry) -> None:
    normalized = normalize(registry.lookup("generate_schema"), {"user_prompt": "prices", "app_name": "crawl"})
    assert normalized["app_name"] == "ai_crawler"


def test_null_optional_scalar_falls_back_to_default(registry) -> None:
    normalized = normalize(registry.lookup("ai_search"), {"query": "q", "limit": None})
    assert normalized["limit"] == 10


def test_arguments_as_json_string(registry) -> None:
    normalized = normalize(registry.lookup("ai_search"), '{"query": "q", "limit": 3}')
    assert normalized["limit"] == 3


def test_coerce_params_rejects_non_objects() -> None:
    assert coerce_params(None) == {}
    with pytest.raises(ValidationError):
        coerce_params("[1, 2]")
    with pytest.raises(ValidationError):
        coerce_params("{not json")
    with pytest.raises(ValidationError):
        coerce_params(42)

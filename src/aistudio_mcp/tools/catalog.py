"""Declarations of the tools exposed to the agent host."""
from __future__ import annotations

from aistudio_mcp.registry import ArgumentSpec, ArgumentType, ToolRegistry

GENERATE_SCHEMA = "generate_schema"
AI_SCRAPER = "ai_scraper"
AI_CRAWLER = "ai_crawler"
BROWSER_AGENT = "browser_agent"
AI_SEARCH = "ai_search"

EXTRACTION_APPS = (AI_CRAWLER, AI_SCRAPER, BROWSER_AGENT)

JSON = "json"
MARKDOWN = "markdown"
HTML = "html"
SCREENSHOT = "screenshot"

SEARCH_LIMIT_MAX = 50

_SCHEMA_HELP = "OpenAPI schema for the extracted data. Only used when output_format is json."
_RENDER_HELP = (
    "Render the page with JavaScript. Much slower; only use it for websites that need "
    "JavaScript to render, or when a plain request gave unsatisfactory results."
)


GENERATE_SCHEMA_DESCRIPTION = "Generates a JSON schema in OpenAPI format from the provided prompt."

AI_SCRAPER_DESCRIPTION = """
Scrape the contents of a web page and return the data in the specified format.
A schema is only used when output_format is json; if none is given, one is derived from user_prompt.
'render_javascript' is used to render javascript heavy websites.

Parameters:
  - url: The URL to scrape.
  - output_format: json or markdown. Markdown returns the full text of the page.
  - user_prompt: What to extract from the page. Required when output_format is json and no schema is given; a schema is derived from it.
  - schema: OpenAPI schema to apply. Only used when output_format is json.
  - render_javascript: Render the page with JavaScript. Try without it first.
"""

AI_CRAWLER_DESCRIPTION = """
Crawl a website from a starting URL and return data in the specified format.
A schema is only used when output_format is json; if none is given, one is derived from the prompt.
'return_sources_limit' limits the number of pages returned, e.g. 1 when a single source is expected.

Parameters:
  - url: The URL from which crawling starts.
  - crawl_prompt: What information to look for across the domain.
  - parse_prompt: What to extract from each page; a schema is derived from it when output_format is json and no schema is given. Defaults to crawl_prompt.
  - output_format: json or markdown. Markdown returns the full text of the pages.
  - schema: OpenAPI schema to apply. Only used when output_format is json.
  - render_javascript: Render pages with JavaScript. Try without it first.
  - return_sources_limit: Maximum number of sources to return.
"""

BROWSER_AGENT_DESCRIPTION = """
Run the browser agent and return the data in the specified format.
Useful when the task needs navigating a website and performing actions:
following links, filling forms, scrolling and so on.

Parameters:
  - url: The URL the browser agent starts from.
  - browse_prompt: What the browser agent should achieve.
  - parse_prompt: What to extract at the end; a schema is derived from it when output_format is json and no schema is given. Defaults to browse_prompt.
  - output_format: json, markdown, html or screenshot (base64 encoded jpeg). Required.
  - schema: OpenAPI schema to apply. Only used when output_format is json.
"""

AI_SEARCH_DESCRIPTION = """
Search the web for the provided query.
If 'return_content' is true, markdown content of every result is included, so the results
do not need to be scraped separately; prefer a lower 'limit' in that case.

Parameters:
  - query: The query to search for.
  - limit: Maximum number of results (default 10, at most 50).
  - render_javascript: Render result pages with JavaScript. Only when asked to.
  - return_content: Return markdown content of each result (default true).
"""


def _url(help_text: str) -> ArgumentSpec:
    return ArgumentSpec("url", ArgumentType.STRING, required=True, url=True, description=help_text)


def _schema() -> ArgumentSpec:
    return ArgumentSpec("schema", ArgumentType.NULLABLE_OBJECT, description=_SCHEMA_HELP)


def _render_javascript() -> ArgumentSpec:
    return ArgumentSpec("render_javascript", ArgumentType.BOOLEAN, default=False, description=_RENDER_HELP)


def build_registry() -> ToolRegistry:
    """Register every tool and return the frozen registry."""
    registry = ToolRegistry()

    registry.register(
        GENERATE_SCHEMA,
        [
            ArgumentSpec(
                "user_prompt",
                ArgumentType.STRING,
                required=True,
                description="Natural-language description of the data to extract.",
            ),
            ArgumentSpec(
                "app_name",
                ArgumentType.ENUM,
                required=True,
                choices=EXTRACTION_APPS,
                choice_aliases=(("crawl", AI_CRAWLER), ("scrape", AI_SCRAPER)),
                selects_operation=True,
                description="Extraction tool the schema is generated for.",
            ),
        ],
        GENERATE_SCHEMA_DESCRIPTION,
    )

    registry.register(
        AI_SCRAPER,
        [
            _url("The URL to scrape."),
            ArgumentSpec(
                "output_format",
                ArgumentType.ENUM,
                choices=(JSON, MARKDOWN),
                default=MARKDOWN,
                description="Output format.",
            ),
            ArgumentSpec("user_prompt", ArgumentType.STRING, description="What to extract from the page."),
            _schema(),
            _render_javascript(),
        ],
        AI_SCRAPER_DESCRIPTION,
        aliases=("scrape",),
        legacy_fields={"parse_prompt": "user_prompt"},
    )

    registry.register(
        AI_CRAWLER,
        [
            _url("The URL from which crawling starts."),
            ArgumentSpec(
                "crawl_prompt",
                ArgumentType.STRING,
                required=True,
                description="What information to look for across the domain.",
            ),
            ArgumentSpec("parse_prompt", ArgumentType.STRING, description="What to extract from each page."),
            ArgumentSpec(
                "output_format",
                ArgumentType.ENUM,
                choices=(JSON, MARKDOWN),
                default=MARKDOWN,
                description="Output format.",
            ),
            _schema(),
            _render_javascript(),
            ArgumentSpec(
                "return_sources_limit",
                ArgumentType.NUMBER,
                description="Maximum number of sources to return.",
            ),
        ],
        AI_CRAWLER_DESCRIPTION,
        aliases=("crawl",),
        legacy_fields={"user_prompt": "crawl_prompt"},
    )

    registry.register(
        BROWSER_AGENT,
        [
            _url("The URL the browser agent starts from."),
            ArgumentSpec(
                "browse_prompt",
                ArgumentType.STRING,
                required=True,
                description="What the browser agent should achieve.",
            ),
            ArgumentSpec("parse_prompt", ArgumentType.STRING, description="What to extract at the end."),
            ArgumentSpec(
                "output_format",
                ArgumentType.ENUM,
                required=True,
                choices=(JSON, MARKDOWN, HTML, SCREENSHOT),
                description="Output format. Screenshot is a base64 encoded jpeg image.",
            ),
            _schema(),
        ],
        BROWSER_AGENT_DESCRIPTION,
        legacy_fields={"user_prompt": "browse_prompt"},
    )

    registry.register(
        AI_SEARCH,
        [
            ArgumentSpec("query", ArgumentType.STRING, required=True, description="The query to search for."),
            ArgumentSpec(
                "limit",
                ArgumentType.NUMBER,
                default=10,
                max_value=SEARCH_LIMIT_MAX,
                description="Maximum number of results to return.",
            ),
            _render_javascript(),
            ArgumentSpec(
                "return_content",
                ArgumentType.BOOLEAN,
                default=True,
                description="Return markdown content of each search result.",
            ),
        ],
        AI_SEARCH_DESCRIPTION,
    )

    return registry.freeze()

"""Async backend client built on the Oxylabs AI Studio SDK.

Each AI Studio application is an SDK object (``AiScraper``, ``AiCrawler``,
``BrowserAgent``, ``AiSearch``) that submits a run, polls it and returns a job
model carrying ``data``. This module adds what the tool server needs on top:
one overall timeout per operation, the auto-schema variants (generate a schema
from a prompt, then run with it), and a single :class:`BackendError` for every
way a call can fail.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import anyio
import httpx
from oxylabs_ai_studio.apps.ai_crawler import AiCrawler
from oxylabs_ai_studio.apps.ai_scraper import AiScraper
from oxylabs_ai_studio.apps.ai_search import AiSearch
from oxylabs_ai_studio.apps.browser_agent import BrowserAgent
from pydantic import BaseModel

from aistudio_mcp.config import DEFAULT_API_URL, Settings
from aistudio_mcp.errors import AIStudioMCPError, BackendError, ValidationError
from aistudio_mcp.tools.catalog import AI_CRAWLER, AI_SCRAPER, AI_SEARCH, BROWSER_AGENT, EXTRACTION_APPS
from aistudio_mcp.tools.payloads import SCHEMA_PROMPT
from aistudio_mcp.tools.selection import Operation

logger = logging.getLogger("aistudio_mcp.client")

# app name -> (SDK class, coroutine method that runs it)
SDK_APPS: dict[str, tuple[type, str]] = {
    AI_SCRAPER: (AiScraper, "scrape_async"),
    AI_CRAWLER: (AiCrawler, "crawl_async"),
    BROWSER_AGENT: (BrowserAgent, "run_async"),
    AI_SEARCH: (AiSearch, "search_async"),
}


def _error_payload(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _as_dict(job: Any) -> Any:
    if isinstance(job, BaseModel):
        return job.model_dump(mode="json")
    return job


class AIStudioClient:
    """Thin async wrapper around the AI Studio SDK applications."""

    def __init__(
        self,
        api_key: str,
        api_url: str = DEFAULT_API_URL,
        *,
        timeout: float = 240.0,
        apps: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._timeout = timeout
        if apps is None:
            apps = {name: cls(api_key=api_key) for name, (cls, _) in SDK_APPS.items()}
            for app in apps.values():
                app.base_url = api_url.rstrip("/")
        # SDK apps open and close one httpx client per call, so nothing is held open here
        self._apps = dict(apps)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "AIStudioClient":
        return cls(
            settings.require_api_key(),
            settings.OXYLABS_AI_STUDIO_API_URL,
            timeout=settings.AISTUDIO_REQUEST_TIMEOUT,
            **kwargs,
        )

    def _app(self, name: str) -> Any:
        try:
            return self._apps[name]
        except KeyError:
            raise BackendError(f"{name} is not an AI Studio application") from None

    # ------------------------------------------------------------------
    # SDK plumbing
    # ------------------------------------------------------------------

    async def _bounded(self, label: str, coro_fn: Any, *args: Any) -> Any:
        """Run one operation under the overall timeout, translating SDK failures."""
        try:
            with anyio.fail_after(self._timeout):
                return await coro_fn(*args)
        except AIStudioMCPError:
            raise
        except TimeoutError as e:
            # anyio's deadline and the SDK's own polling limit both end here
            raise BackendError(f"{label} timed out after {self._timeout:g} seconds", timed_out=True) from e
        except httpx.HTTPStatusError as e:
            raise BackendError(
                f"AI Studio returned HTTP {e.response.status_code} for {e.request.url.path}",
                status_code=e.response.status_code,
                payload=_error_payload(e.response),
            ) from e
        except httpx.TransportError as e:
            raise BackendError(f"Network error during {label}: {e}") from e
        except Exception as e:  # the SDK raises bare Exception/ValueError for rejected runs
            raise BackendError(f"{label} failed: {e}") from e

    async def _run(self, app: str, payload: dict[str, Any]) -> Any:
        _, method = SDK_APPS[app]
        logger.debug("Submitting %s run", app)
        job = _as_dict(await getattr(self._app(app), method)(**payload))
        if isinstance(job, Mapping) and job.get("data") is None and job.get("message"):
            raise BackendError(f"{app} run {job.get('run_id', '?')} failed: {job['message']}", payload=dict(job))
        logger.debug("%s run finished", app)
        return job

    async def _derive_schema(self, app: str, prompt: Optional[str]) -> dict[str, Any]:
        if not prompt:
            raise ValidationError(SCHEMA_PROMPT, f"{app} needs a prompt to derive a schema")
        schema = await self._app(app).generate_schema_async(prompt)
        if not schema:
            raise BackendError(f"{app} schema generation returned no schema", payload=schema)
        return schema

    async def _run_with_auto_schema(self, app: str, payload: dict[str, Any]) -> Any:
        arguments = dict(payload)
        schema = await self._derive_schema(app, arguments.pop(SCHEMA_PROMPT, None))
        return await self._run(app, {**arguments, "schema": schema})

    async def _generate_schema(self, app: str, user_prompt: str) -> dict[str, Any]:
        if app not in EXTRACTION_APPS:
            raise BackendError(f"{app} does not support schema generation")
        return {"openapi_schema": await self._app(app).generate_schema_async(user_prompt)}

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def scrape(self, payload: dict[str, Any]) -> Any:
        return await self._bounded("scrape", self._run, AI_SCRAPER, payload)

    async def scrape_with_auto_schema(self, payload: dict[str, Any]) -> Any:
        return await self._bounded("scrape", self._run_with_auto_schema, AI_SCRAPER, payload)

    async def crawl(self, payload: dict[str, Any]) -> Any:
        return await self._bounded("crawl", self._run, AI_CRAWLER, payload)

    async def crawl_with_auto_schema(self, payload: dict[str, Any]) -> Any:
        return await self._bounded("crawl", self._run_with_auto_schema, AI_CRAWLER, payload)

    async def browse(self, payload: dict[str, Any]) -> Any:
        return await self._bounded("browser agent", self._run, BROWSER_AGENT, payload)

    async def browse_with_auto_schema(self, payload: dict[str, Any]) -> Any:
        return await self._bounded("browser agent", self._run_with_auto_schema, BROWSER_AGENT, payload)

    async def search(self, payload: dict[str, Any]) -> Any:
        return await self._bounded("search", self._run, AI_SEARCH, payload)

    async def generate_schema(self, app_name: str, payload: dict[str, Any]) -> Any:
        return await self._bounded("schema generation", self._generate_schema, app_name, payload["user_prompt"])

    async def execute(self, operation: Operation, app: str, payload: dict[str, Any]) -> Any:
        """Dispatch a shaped payload to the method serving ``operation``."""
        if operation is Operation.GENERATE_SCHEMA:
            return await self.generate_schema(app, payload)
        method = getattr(self, operation.value)
        return await method(payload)

"""Mapping normalized arguments onto AI Studio SDK call arguments.

Every field is either copied from the normalized arguments (possibly under the
SDK's own keyword name) or left out. Keys are emitted in a fixed order so equal
selections serialize to identical bytes.

Derived-schema variants carry one extra key, ``SCHEMA_PROMPT``: the prompt the
client sends to schema generation before the run. It is not passed to the run
itself.
"""
from __future__ import annotations

from typing import Any, Callable, Dict

from aistudio_mcp.errors import ValidationError
from aistudio_mcp.tools.params_utils import NormalizedArguments
from aistudio_mcp.tools.selection import BackendOperationSelection, Operation

BackendPayload = Dict[str, Any]

SCHEMA_PROMPT = "parse_prompt"


def _build(arguments: NormalizedArguments, fields: tuple[tuple[str, str], ...]) -> BackendPayload:
    """Copy ``(payload_name, argument_name)`` pairs, skipping absent values."""
    payload: BackendPayload = {}
    for target, source in fields:
        value = arguments.get(source)
        if value is not None:
            payload[target] = value
    return payload


def _schema_fields(arguments: NormalizedArguments, derived: bool, *prompt_fields: str) -> BackendPayload:
    """``schema`` for explicit variants, the schema prompt for derived ones."""
    if not derived:
        return _build(arguments, (("schema", "schema"),))
    for name in prompt_fields:
        prompt = arguments.get(name)
        if prompt:
            return {SCHEMA_PROMPT: prompt}
    raise ValidationError(
        prompt_fields[0],
        f"is required when output_format is 'json' and no schema is given ({arguments.tool})",
    )


def _scrape(arguments: NormalizedArguments, derived: bool) -> BackendPayload:
    payload = _build(arguments, (("url", "url"), ("output_format", "output_format")))
    payload.update(_schema_fields(arguments, derived, "user_prompt"))
    payload.update(_build(arguments, (("render_javascript", "render_javascript"),)))
    return payload


def _crawl(arguments: NormalizedArguments, derived: bool) -> BackendPayload:
    payload = _build(
        arguments,
        (("url", "url"), ("user_prompt", "crawl_prompt"), ("output_format", "output_format")),
    )
    payload.update(_schema_fields(arguments, derived, "parse_prompt", "crawl_prompt"))
    payload.update(
        _build(
            arguments,
            (("render_javascript", "render_javascript"), ("return_sources_limit", "return_sources_limit")),
        )
    )
    return payload


def _browse(arguments: NormalizedArguments, derived: bool) -> BackendPayload:
    payload = _build(
        arguments,
        (("url", "url"), ("user_prompt", "browse_prompt"), ("output_format", "output_format")),
    )
    payload.update(_schema_fields(arguments, derived, "parse_prompt", "browse_prompt"))
    return payload


def _search(arguments: NormalizedArguments, derived: bool) -> BackendPayload:
    return _build(
        arguments,
        (
            ("query", "query"),
            ("limit", "limit"),
            ("render_javascript", "render_javascript"),
            ("return_content", "return_content"),
        ),
    )


def _generate_schema(arguments: NormalizedArguments, derived: bool) -> BackendPayload:
    return _build(arguments, (("user_prompt", "user_prompt"),))


_SHAPERS: dict[Operation, Callable[[NormalizedArguments, bool], BackendPayload]] = {
    Operation.SCRAPE: _scrape,
    Operation.SCRAPE_AUTO_SCHEMA: _scrape,
    Operation.CRAWL: _crawl,
    Operation.CRAWL_AUTO_SCHEMA: _crawl,
    Operation.BROWSE: _browse,
    Operation.BROWSE_AUTO_SCHEMA: _browse,
    Operation.SEARCH: _search,
    Operation.GENERATE_SCHEMA: _generate_schema,
}


def shape(selection: BackendOperationSelection) -> BackendPayload:
    """Build the SDK call arguments for ``selection``.

    Raises:
        ValidationError: a derived-schema variant has no prompt to derive from.
    """
    operation = selection.operation
    return _SHAPERS[operation](selection.arguments, operation.derives_schema)

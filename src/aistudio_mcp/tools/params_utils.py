"""Argument normalization for AI Studio tools.

``normalize`` is a pure function of the caller's raw arguments and the tool's
declared :class:`~aistudio_mcp.registry.ToolDefinition`: it rejects malformed
input with :class:`~aistudio_mcp.errors.ValidationError`, resolves enum
aliases and fills in declared defaults.
"""
from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping

from pydantic import AnyHttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from aistudio_mcp.errors import InvalidToolArgumentError, ValidationError
from aistudio_mcp.registry import ArgumentSpec, ArgumentType, ToolDefinition

logger = logging.getLogger("aistudio_mcp.params")

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)


@dataclass(frozen=True)
class NormalizedArguments:
    """Arguments of one invocation after validation and defaulting."""

    tool: str
    values: Dict[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def __getitem__(self, name: str) -> Any:
        return self.values[name]

    def __contains__(self, name: object) -> bool:
        return name in self.values


def coerce_params(params: Any) -> Dict[str, Any]:
    """
    Turn the raw ``arguments`` of a tool call into a dictionary.

    Some hosts send the arguments object as a JSON string; that is accepted as
    long as it decodes to an object.

    Raises:
        ValidationError: If params cannot be read as a dictionary.
    """
    if params is None:
        return {}

    if isinstance(params, Mapping):
        return dict(params)

    if isinstance(params, str):
        try:
            parsed = json.loads(params)
        except json.JSONDecodeError as e:
            raise ValidationError(
                "arguments",
                f"invalid JSON ({e}); arguments should be an object, e.g. {{\"url\": \"https://example.com\"}}",
            ) from e
        if not isinstance(parsed, dict):
            raise ValidationError("arguments", "decoded JSON is not an object")
        return parsed

    raise ValidationError("arguments", f"must be an object, not {type(params).__name__}")


def _check_value(spec: ArgumentSpec, value: Any) -> Any:
    kind = spec.type

    if kind is ArgumentType.STRING:
        if not isinstance(value, str):
            raise ValidationError(spec.name, f"expected a string, got {type(value).__name__}")
        if spec.required and not value.strip():
            raise ValidationError(spec.name, "must not be empty")
        if spec.url:
            # URLs are forwarded verbatim
            if value != value.strip():
                raise ValidationError(spec.name, f"{value!r} has leading or trailing whitespace")
            try:
                _URL_ADAPTER.validate_python(value)
            except PydanticValidationError:
                raise ValidationError(spec.name, f"{value!r} is not a valid http(s) URL") from None
        return value

    if kind is ArgumentType.ENUM:
        if not isinstance(value, str):
            raise ValidationError(spec.name, f"expected one of {list(spec.choices)}, got {type(value).__name__}")
        value = spec.aliases.get(value, value)
        if value not in spec.choices:
            error_cls = InvalidToolArgumentError if spec.selects_operation else ValidationError
            raise error_cls(spec.name, f"{value!r} is not one of {list(spec.choices)}")
        return value

    if kind is ArgumentType.BOOLEAN:
        if not isinstance(value, bool):
            raise ValidationError(spec.name, f"expected a boolean, got {type(value).__name__}")
        return value

    if kind is ArgumentType.NUMBER:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(spec.name, f"expected a number, got {type(value).__name__}")
        if not math.isfinite(value):
            raise ValidationError(spec.name, f"must be a finite number, got {value!r}")
        if spec.max_value is not None and value > spec.max_value:
            raise ValidationError(spec.name, f"must be less than or equal to {spec.max_value:g}")
        return value

    if kind is ArgumentType.NULLABLE_OBJECT and value is None:
        return None
    if not isinstance(value, dict):
        raise ValidationError(spec.name, f"expected an object, got {type(value).__name__}")
    return value


def normalize(definition: ToolDefinition, raw_arguments: Any) -> NormalizedArguments:
    """Validate ``raw_arguments`` against ``definition`` and apply defaults."""
    params = coerce_params(raw_arguments)

    legacy = definition.legacy_map
    for name in params:
        if name in legacy:
            raise ValidationError(name, f"'{name}' is no longer accepted by {definition.name}; use '{legacy[name]}'")
        if definition.argument(name) is None:
            raise ValidationError(name, f"unexpected argument for {definition.name}")

    values: Dict[str, Any] = {}
    for spec in definition.arguments:
        present = spec.name in params
        value = params.get(spec.name)

        # A null for an optional scalar means "not supplied".
        if present and value is None and spec.type is not ArgumentType.NULLABLE_OBJECT and not spec.required:
            present = False

        if not present:
            if spec.required:
                raise ValidationError(spec.name, "required argument is missing")
            if spec.default is not None or spec.type is ArgumentType.NULLABLE_OBJECT:
                values[spec.name] = spec.default
            continue

        if value is None and spec.required:
            raise ValidationError(spec.name, "required argument is missing")
        values[spec.name] = _check_value(spec, value)

    logger.debug("Normalized %s arguments: %s", definition.name, sorted(values))
    return NormalizedArguments(tool=definition.name, values=values)

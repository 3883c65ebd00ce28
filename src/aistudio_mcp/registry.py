"""Tool schema registry.

Every tool exposed by the server is declared once, at startup, as a
:class:`ToolDefinition` holding an ordered set of :class:`ArgumentSpec`
entries. The registry is frozen after registration; lookups are read-only
and safe to share between concurrent invocations.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from aistudio_mcp.errors import DuplicateToolError, UnknownToolError


class ArgumentType(str, enum.Enum):
    STRING = "string"
    ENUM = "enum"
    BOOLEAN = "boolean"
    NUMBER = "number"
    OBJECT = "object"
    NULLABLE_OBJECT = "nullable_object"


@dataclass(frozen=True)
class ArgumentSpec:
    """Declared shape of a single tool argument.

    Args:
        name: Argument name as seen by the caller.
        type: Semantic type of the value.
        required: Whether the caller must supply it.
        default: Value used when an optional argument is absent. ``None``
            means "no default" except for nullable objects, where it is the
            declared default.
        description: Human readable help shown to the agent host.
        choices: Accepted values for ``ArgumentType.ENUM``.
        choice_aliases: Extra spellings accepted for an enum, mapped onto
            one of ``choices``.
        max_value: Inclusive upper bound for numbers.
        url: String must be an absolute http(s) URL.
        selects_operation: The enum picks a backend sub-operation; values
            outside ``choices`` raise InvalidToolArgumentError.
    """

    name: str
    type: ArgumentType
    required: bool = False
    default: Any = None
    description: str = ""
    choices: tuple[str, ...] = ()
    choice_aliases: tuple[tuple[str, str], ...] = ()
    max_value: float | None = None
    url: bool = False
    selects_operation: bool = False

    def __post_init__(self) -> None:
        if self.type is ArgumentType.ENUM and not self.choices:
            raise ValueError(f"Enum argument {self.name!r} declares no choices")
        if self.required and self.default is not None:
            raise ValueError(f"Required argument {self.name!r} cannot carry a default")
        for alias, target in self.choice_aliases:
            if target not in self.choices:
                raise ValueError(f"Alias {alias!r} of {self.name!r} points at unknown choice {target!r}")
        if self.default is not None and not self._default_is_valid():
            raise ValueError(f"Default {self.default!r} does not satisfy argument {self.name!r}")

    def _default_is_valid(self) -> bool:
        value = self.default
        if self.type is ArgumentType.STRING:
            return isinstance(value, str)
        if self.type is ArgumentType.ENUM:
            return value in self.choices
        if self.type is ArgumentType.BOOLEAN:
            return isinstance(value, bool)
        if self.type is ArgumentType.NUMBER:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return False
            return self.max_value is None or value <= self.max_value
        return isinstance(value, dict)

    @property
    def aliases(self) -> dict[str, str]:
        return dict(self.choice_aliases)

    def json_schema(self) -> dict[str, Any]:
        """Render this argument as a JSON Schema property."""
        schema: dict[str, Any]
        if self.type is ArgumentType.STRING:
            schema = {"type": "string"}
            if self.url:
                schema["format"] = "uri"
        elif self.type is ArgumentType.ENUM:
            schema = {"type": "string", "enum": list(self.choices)}
        elif self.type is ArgumentType.BOOLEAN:
            schema = {"type": "boolean"}
        elif self.type is ArgumentType.NUMBER:
            schema = {"type": "number"}
            if self.max_value is not None:
                schema["maximum"] = self.max_value
        elif self.type is ArgumentType.OBJECT:
            schema = {"type": "object", "additionalProperties": True}
        else:
            schema = {"type": ["object", "null"], "additionalProperties": True}

        if self.description:
            schema["description"] = self.description
        if self.default is not None or self.type is ArgumentType.NULLABLE_OBJECT:
            schema["default"] = self.default
        return schema


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    arguments: tuple[ArgumentSpec, ...]
    # legacy argument name -> canonical argument name
    legacy_fields: tuple[tuple[str, str], ...] = ()
    aliases: tuple[str, ...] = ()

    def argument(self, name: str) -> ArgumentSpec | None:
        for spec in self.arguments:
            if spec.name == name:
                return spec
        return None

    @property
    def legacy_map(self) -> dict[str, str]:
        return dict(self.legacy_fields)

    def input_schema(self) -> dict[str, Any]:
        """JSON Schema object describing the accepted arguments."""
        return {
            "type": "object",
            "properties": {spec.name: spec.json_schema() for spec in self.arguments},
            "required": [spec.name for spec in self.arguments if spec.required],
            "additionalProperties": False,
        }


class ToolRegistry:
    """Process-wide catalogue of tool definitions."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self._aliases: dict[str, str] = {}
        self._frozen = False

    def register(
        self,
        tool_name: str,
        argument_specs: Iterable[ArgumentSpec],
        description: str,
        *,
        aliases: Iterable[str] = (),
        legacy_fields: Mapping[str, str] | None = None,
    ) -> ToolDefinition:
        if self._frozen:
            raise RuntimeError("Tool registry is frozen; tools can only be registered at startup")

        alias_names = tuple(aliases)
        for name in (tool_name, *alias_names):
            if name in self._tools or name in self._aliases:
                raise DuplicateToolError(name)

        specs = tuple(argument_specs)
        seen: set[str] = set()
        for spec in specs:
            if spec.name in seen:
                raise ValueError(f"Tool {tool_name!r} declares argument {spec.name!r} twice")
            seen.add(spec.name)

        legacy = tuple((legacy_fields or {}).items())
        for old, new in legacy:
            if old in seen or new not in seen:
                raise ValueError(f"Tool {tool_name!r} has an inconsistent legacy field {old!r} -> {new!r}")

        definition = ToolDefinition(
            name=tool_name,
            description=description,
            arguments=specs,
            legacy_fields=legacy,
            aliases=alias_names,
        )
        self._tools[tool_name] = definition
        for alias in alias_names:
            self._aliases[alias] = tool_name
        return definition

    def freeze(self) -> "ToolRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def lookup(self, tool_name: str) -> ToolDefinition:
        canonical = self._aliases.get(tool_name, tool_name)
        try:
            return self._tools[canonical]
        except KeyError:
            raise UnknownToolError(tool_name) from None

    def definitions(self) -> list[ToolDefinition]:
        """Registered tools in registration order (aliases excluded)."""
        return list(self._tools.values())

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self._tools or tool_name in self._aliases

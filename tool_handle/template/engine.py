"""Template engine contract and the default JSON template engine.

The runtime only depends on the contract: a TemplateEngine compiles a
template against a context into a Transformer, and a Transformer maps an
input value to an output value. Either step may return an awaitable.

The default engine understands JSON-compatible templates:

    "https://api.example.com/items/{id}"    string interpolation
    {"$ref": "body.name"}                     raw value at a path ("$" also works)
    {"$uri": "/users/{name}/repos"}           interpolation with percent-encoding
    {"$literal": {"$ref": "x"}}               value passed through untouched
    {"$encode": "json", "$value": {...}}      encoded Payload ("$" path also works)

Mappings and lists are transformed element-wise; other scalars pass through.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from tool_handle.infra.errors import TemplateError
from tool_handle.template.encoding import Encoder, Payload

if TYPE_CHECKING:
    from tool_handle.context import ToolContext

# Placeholders must start like a path; other braced text (e.g. JSON) is literal.
_PLACEHOLDER = re.compile(
    r"""\{\{\s*([A-Za-z_$][^{}]*?)\s*\}\}|\{([A-Za-z_$][\w.\[\]'"$-]*)\}"""
)
_PATH_TOKEN = re.compile(r"""\[(\d+)\]|\[(['"])(.*?)\2\]|([^.\[\]]+)""")

Node = Callable[[Any], Any]


class Transformer(ABC):
    """Compiled template: maps an input value to an output value."""

    @abstractmethod
    def transform(self, data: Any) -> Any | Awaitable[Any]:
        ...


class TemplateEngine(ABC):
    """Compiles templates into transformers."""

    @abstractmethod
    def parse_template(
        self, template: Any, context: ToolContext | None = None
    ) -> Transformer | Awaitable[Transformer]:
        ...


def parse_path(path: str) -> tuple[str | int, ...]:
    """Split a path like `body.items[0]['x-id']` into its segments.

    A leading `$` (JSONPath-style root) is ignored.
    """
    path = path.strip()
    if path == "$":
        return ()
    if path.startswith("$."):
        path = path[2:]
    segments: list[str | int] = []
    for index, _quote, quoted, name in _PATH_TOKEN.findall(path):
        if index:
            segments.append(int(index))
        elif quoted or _quote:
            segments.append(quoted)
        else:
            segments.append(name)
    return tuple(segments)


def resolve_path(data: Any, segments: Sequence[str | int]) -> Any:
    """Look up segments in data. Missing values resolve to None."""
    current = data
    for segment in segments:
        if current is None:
            return None
        if isinstance(segment, int):
            if isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
                current = current[segment] if -len(current) <= segment < len(current) else None
            elif isinstance(current, Mapping):
                current = current.get(segment, current.get(str(segment)))
            else:
                return None
        elif isinstance(current, Mapping):
            current = current.get(segment)
        elif segment.isdigit():
            current = resolve_path(current, (int(segment),))
        else:
            return None
    return current


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


class CompiledTemplate(Transformer):
    """Transformer produced by DefaultTemplateEngine."""

    def __init__(self, node: Node) -> None:
        self._node = node

    def transform(self, data: Any) -> Any:
        return self._node(data)


class DefaultTemplateEngine(TemplateEngine):
    """Compiles JSON-compatible templates. Stateless and safe to share."""

    def parse_template(self, template: Any, context: ToolContext | None = None) -> CompiledTemplate:
        encoders = context.encoders if context is not None else None
        return CompiledTemplate(self._compile(template, encoders, "#"))

    def _compile(self, template: Any, encoders: Mapping[str, Encoder] | None, pointer: str) -> Node:
        if isinstance(template, str):
            return self._compile_string(template, encode=False)
        if isinstance(template, Mapping):
            if any(isinstance(key, str) and key.startswith("$") for key in template):
                return self._compile_directive(template, encoders, pointer)
            children = {
                key: self._compile(value, encoders, f"{pointer}/{key}")
                for key, value in template.items()
            }
            return lambda data: {key: node(data) for key, node in children.items()}
        if isinstance(template, (list, tuple)):
            items = [
                self._compile(value, encoders, f"{pointer}/{index}")
                for index, value in enumerate(template)
            ]
            return lambda data: [node(data) for node in items]
        return lambda data: template

    def _compile_string(self, template: str, *, encode: bool) -> Node:
        placeholders = list(_PLACEHOLDER.finditer(template))
        if not placeholders:
            return lambda data: template

        parts: list[str | tuple[str | int, ...]] = []
        position = 0
        for match in placeholders:
            parts.append(template[position:match.start()])
            parts.append(parse_path(match.group(1) or match.group(2)))
            position = match.end()
        parts.append(template[position:])

        def render(data: Any) -> str:
            rendered: list[str] = []
            for part in parts:
                if isinstance(part, str):
                    rendered.append(part)
                    continue
                text = _stringify(resolve_path(data, part))
                rendered.append(quote(text, safe="") if encode else text)
            return "".join(rendered)

        return render

    def _compile_directive(
        self,
        template: Mapping[str, Any],
        encoders: Mapping[str, Encoder] | None,
        pointer: str,
    ) -> Node:
        keys = set(template)

        if keys == {"$literal"}:
            literal = template["$literal"]
            return lambda data: literal

        if keys == {"$ref"} or keys == {"$"}:
            path = template.get("$ref", template.get("$"))
            if not isinstance(path, str):
                raise TemplateError(f"Reference path must be a string: {path!r}", location=pointer)
            segments = parse_path(path)
            return lambda data: resolve_path(data, segments)

        if keys == {"$uri"}:
            uri = template["$uri"]
            if not isinstance(uri, str):
                raise TemplateError(f"URI template must be a string: {uri!r}", location=pointer)
            return self._compile_string(uri, encode=True)

        if "$encode" in keys:
            return self._compile_encode(template, encoders, pointer)

        raise TemplateError(
            f"Unknown template directive: {sorted(keys)!r}", location=pointer
        )

    def _compile_encode(
        self,
        template: Mapping[str, Any],
        encoders: Mapping[str, Encoder] | None,
        pointer: str,
    ) -> Node:
        name = template["$encode"]
        encoder = encoders.get(name) if encoders is not None and isinstance(name, str) else None
        if encoder is None:
            raise TemplateError(f"Unknown encoder: {name!r}", location=pointer)

        if "$value" in template:
            value_node = self._compile(template["$value"], encoders, f"{pointer}/$value")
        elif "$" in template:
            value_node = self._compile({"$": template["$"]}, encoders, f"{pointer}/$")
        else:
            raise TemplateError("$encode requires $value or $", location=pointer)

        options = {
            key[1:]: value
            for key, value in template.items()
            if key not in {"$encode", "$value", "$"}
        }

        def encode(data: Any) -> Payload:
            return encoder.encode(value_node(data), options)

        return encode


default_template_engine = DefaultTemplateEngine()

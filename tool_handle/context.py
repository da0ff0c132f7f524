"""ToolContext: process-scoped configuration shared by all invocations.

Built once at startup by create_tool_context() / init_tool_context(), then
read-only. Every composition step returns a new context; no input is
mutated, so layers can build on a shared base context freely.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any

from tool_handle.content import BUILTIN_CONTENT_DECODERS, ContentDecoder
from tool_handle.registry import Registry, RegistryUpdate, merge_registry
from tool_handle.security import SecurityScheme
from tool_handle.template.encoding import BUILTIN_ENCODERS, Encoder
from tool_handle.template.engine import TemplateEngine, default_template_engine

if TYPE_CHECKING:
    from tool_handle.credential import CredentialResolver
    from tool_handle.handler import ToolHandler


def _builtin_content_decoders() -> Registry[ContentDecoder]:
    return Registry(BUILTIN_CONTENT_DECODERS, frozen=True)


def _builtin_encoders() -> Registry[Encoder]:
    return Registry(BUILTIN_ENCODERS, frozen=True)


@dataclass(frozen=True)
class ToolContext:
    """Runtime context for tool handle execution.

    template_engine / encoders: templating configuration used to compile
    request and response templates.
    content_decoders: media type key -> decoder, see tool_handle.content.
    tool_handlers: handler name -> handler, see execute_tool_handle().
    security_schemes: scheme name -> scheme.
    credential_resolver: called once per invocation; never cached.
    """

    template_engine: TemplateEngine = default_template_engine
    encoders: Registry[Encoder] | None = field(default_factory=_builtin_encoders)
    content_decoders: Registry[ContentDecoder] | None = field(
        default_factory=_builtin_content_decoders
    )
    tool_handlers: Registry[ToolHandler] | None = None
    security_schemes: Registry[SecurityScheme] | None = None
    credential_resolver: CredentialResolver | None = None


@dataclass(frozen=True)
class ToolContextOptions:
    """Options for building a ToolContext. None means "leave as is"."""

    template_engine: TemplateEngine | None = None
    encoders: RegistryUpdate[Encoder] | None = None
    content_decoders: RegistryUpdate[ContentDecoder] | None = None
    tool_handlers: RegistryUpdate[ToolHandler] | None = None
    security_schemes: RegistryUpdate[SecurityScheme] | None = None
    credential_resolver: CredentialResolver | None = None


def context_fields(context: ToolContext) -> dict[str, Any]:
    """Shallow field dict of a context, for lifting it into a subclass."""
    return {f.name: getattr(context, f.name) for f in fields(context)}


def compose_tool_fields(
    base: ToolContext | None, options: ToolContextOptions | None
) -> dict[str, Any]:
    """Merge options over base and return the resulting ToolContext fields."""
    current = context_fields(base) if base is not None else context_fields(ToolContext())
    if options is None:
        return current

    current["encoders"] = merge_registry(current["encoders"], options.encoders, lambda e: e.name)
    current["content_decoders"] = merge_registry(
        current["content_decoders"], options.content_decoders, lambda d: d.content_type
    )
    current["tool_handlers"] = merge_registry(
        current["tool_handlers"], options.tool_handlers, lambda h: h.name
    )
    current["security_schemes"] = merge_registry(
        current["security_schemes"], options.security_schemes, lambda s: s.name
    )
    if options.template_engine is not None:
        current["template_engine"] = options.template_engine
    if options.credential_resolver is not None:
        current["credential_resolver"] = options.credential_resolver
    return current


def init_tool_context(
    base: ToolContext | None = None, options: ToolContextOptions | None = None
) -> ToolContext:
    """Return a new ToolContext: base (or defaults) with options applied.

    Registry options given as a list register each record under its own
    name (content_type for decoders), later records winning. Registry options
    given as a mapping are shallow-merged over the existing registry.
    A base of a ToolContext subclass keeps its class and extra fields.
    """
    context_class = type(base) if base is not None else ToolContext
    return context_class(**compose_tool_fields(base, options))


def create_tool_context(options: ToolContextOptions | None = None, **kwargs: Any) -> ToolContext:
    """Create a new shared context for tool handle execution.

    Keyword arguments are shorthand for ToolContextOptions fields.
    """
    if kwargs:
        options = ToolContextOptions(**kwargs) if options is None else replace(options, **kwargs)
    return init_tool_context(None, options)


def coerce_tool_context(value: ToolContext | ToolContextOptions | None = None) -> ToolContext:
    """Return value itself if it is already a context, else build one from it."""
    if isinstance(value, ToolContext):
        return value
    return init_tool_context(None, value)

"""Tool handles: immutable descriptors of externally invocable operations.

Handles are authored as JSON-compatible configuration, parsed into pydantic
models, and executed by the handler registered under their `handler` name.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tool_handle.infra.errors import UnknownHandlerError
from tool_handle.security import SecurityObject, parse_security_object

if TYPE_CHECKING:
    from tool_handle.context import ToolContext
    from tool_handle.handler import ToolHandler

logger = structlog.get_logger()


class ToolHandle(BaseModel):
    """A tool handle. Handler-specific fields are kept as extra fields."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: str
    description: str | None = None
    parameters: dict[str, Any] | None = None  # JSON Schema, validated upstream
    security: SecurityObject | None = None
    handler: str = Field(validation_alias=AliasChoices("handler", "protocol"))

    @field_validator("security", mode="before")
    @classmethod
    def _parse_security(cls, v: Any) -> SecurityObject | None:
        return parse_security_object(v)


def _handler_name(data: ToolHandle | Mapping[str, Any]) -> Any:
    if isinstance(data, ToolHandle):
        return data.handler
    return data.get("handler", data.get("protocol"))


def lookup_handler(context: ToolContext, name: Any) -> ToolHandler | None:
    """Return the handler registered under name, or None."""
    handlers = context.tool_handlers
    if handlers is None or not isinstance(name, str):
        return None
    return handlers.get(name)


def _coerce_handle(handler: ToolHandler, handle: ToolHandle | Mapping[str, Any]) -> ToolHandle:
    if isinstance(handle, handler.handle_model):
        return handle
    if isinstance(handle, ToolHandle):
        handle = handle.model_dump(by_alias=False)
    return handler.handle_model.model_validate(handle)


def parse_tool_handle(
    data: Mapping[str, Any], context: ToolContext | None = None
) -> ToolHandle:
    """Parse handle configuration into the model of its declared handler.

    Falls back to ToolHandle when the handler is not registered in context.
    Raises pydantic.ValidationError on malformed configuration.
    """
    handler = lookup_handler(context, _handler_name(data)) if context is not None else None
    if handler is None:
        return ToolHandle.model_validate(data)
    return _coerce_handle(handler, data)


def load_tool_handles(
    path: str | Path, context: ToolContext | None = None
) -> list[ToolHandle]:
    """Load handles from a JSON file holding one handle object or a list of them."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    entries = raw if isinstance(raw, list) else [raw]
    handles = [parse_tool_handle(entry, context) for entry in entries]
    logger.info("tool_handles_loaded", path=str(path), count=len(handles))
    return handles


async def execute_tool_handle(
    context: ToolContext,
    handle: ToolHandle | Mapping[str, Any],
    args: Any,
) -> Any:
    """Execute a tool handle with the handler registered for it.

    Raises UnknownHandlerError if no handler is registered under the handle's
    declared handler name. Handler results and failures propagate unchanged.
    """
    name = _handler_name(handle)
    handler = lookup_handler(context, name)
    if handler is None:
        raise UnknownHandlerError(name)

    handle = _coerce_handle(handler, handle)
    logger.debug("tool_handle_dispatched", tool_name=handle.name, handler=handler.name)
    return await handler.execute(context, handle, args)

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, TypedDict, Union

from tool_handle.context import (
    ToolContext,
    ToolContextOptions,
    compose_tool_fields,
    context_fields,
)

if TYPE_CHECKING:
    from tool_handle.http.handle import HttpHandle
    from tool_handle.http.message import HttpRequest


class FetchOptions(TypedDict, total=False):
    """Extra transport options resolved per request."""

    timeout: float | None
    follow_redirects: bool
    extensions: dict[str, Any]


FetchOptionsProvider = Callable[
    ["HttpRequest", "HttpHandle"],
    Union[FetchOptions, None, Awaitable[Union[FetchOptions, None]]],
]


@dataclass(frozen=True)
class HttpContext(ToolContext):
    """Context for HTTP handle execution.

    fetch_options: static transport options, or a callable invoked with
    (request, handle) for every request.
    """

    fetch_options: FetchOptions | FetchOptionsProvider | None = None


@dataclass(frozen=True)
class HttpContextOptions(ToolContextOptions):
    fetch_options: FetchOptions | FetchOptionsProvider | None = None


def init_http_context(
    base: ToolContext | None = None, options: ToolContextOptions | None = None
) -> HttpContext:
    """Return a new HttpContext: base (or defaults) with options applied.

    A plain ToolContext base is lifted into an HttpContext.
    """
    current = compose_tool_fields(base, options)
    if base is not None and not isinstance(base, HttpContext):
        current = {**current, "fetch_options": None}
    fetch_options = getattr(options, "fetch_options", None)
    if fetch_options is not None:
        current["fetch_options"] = fetch_options
    return HttpContext(**current)


def create_http_context(options: ToolContextOptions | None = None, **kwargs: Any) -> HttpContext:
    """Create a new shared context for HTTP handle execution.

    Keyword arguments are shorthand for HttpContextOptions fields.
    """
    if kwargs:
        if options is None:
            options = HttpContextOptions(**kwargs)
        elif isinstance(options, HttpContextOptions):
            options = replace(options, **kwargs)
        else:
            options = HttpContextOptions(**{**context_fields(options), **kwargs})
    return init_http_context(None, options)

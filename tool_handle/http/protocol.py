"""HTTP protocol handler.

Pipeline, strictly in order:
request template -> credentials -> fetch options -> transport -> decode -> response template.
Errors before the transport step mean nothing was sent.
"""

from __future__ import annotations

import inspect
from typing import Any

import structlog

from tool_handle.context import ToolContext
from tool_handle.credential import resolve_credential
from tool_handle.handler import ToolHandler
from tool_handle.http.context import FetchOptions
from tool_handle.http.credential import apply_credentials
from tool_handle.http.handle import HttpHandle
from tool_handle.http.message import HttpRequest
from tool_handle.http.request import transform_http_request
from tool_handle.http.response import transform_http_response
from tool_handle.http.transport import HttpxTransport, Transport

logger = structlog.get_logger()


def _redact_url(url: str) -> str:
    """URL without its query string, which may carry credentials."""
    return url.split("#", 1)[0].split("?", 1)[0]


async def resolve_fetch_options(
    context: ToolContext, request: HttpRequest, handle: HttpHandle
) -> FetchOptions | None:
    """Resolve the context's fetch options for one request.

    A callable is invoked with (request, handle) and may be async; a static
    value is used directly.
    """
    fetch_options = getattr(context, "fetch_options", None)
    if fetch_options is None:
        return None
    if callable(fetch_options):
        options = fetch_options(request, handle)
        if inspect.isawaitable(options):
            options = await options
        return options
    return fetch_options


class HttpProtocolHandler(ToolHandler):
    """Executes HttpHandles over a Transport (httpx by default)."""

    handle_model = HttpHandle

    def __init__(self, transport: Transport | None = None) -> None:
        self._transport = transport or HttpxTransport()

    @property
    def name(self) -> str:
        return "http"

    @property
    def transport(self) -> Transport:
        return self._transport

    async def execute(self, context: ToolContext, handle: HttpHandle, args: Any) -> Any:
        # 1. Request construction
        request = await transform_http_request(
            context, handle.request.as_template(), args, location=f"{handle.name}#/request"
        )

        # 2. Credential resolution
        credentials = await resolve_credential(handle, context)
        request = apply_credentials(request, credentials)

        # 3. Fetch options
        options = await resolve_fetch_options(context, request, handle)

        # 4. Transport
        logger.info(
            "http_request_sent",
            tool_name=handle.name,
            method=request.method,
            url=_redact_url(request.url),
        )
        response = await self._transport.send(request, options)
        logger.info(
            "http_response_received",
            tool_name=handle.name,
            status=response.status,
            content_type=response.headers.get("content-type"),
        )

        # 5-6. Decode and render
        return await transform_http_response(context, handle.responses, response)


http_protocol_handler = HttpProtocolHandler()

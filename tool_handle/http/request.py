from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any

import httpx

from tool_handle.context import ToolContext
from tool_handle.http.message import HttpRequest
from tool_handle.infra.errors import (
    InvalidHeaderError,
    InvalidHeadersError,
    InvalidMethodError,
    InvalidRequestTemplateError,
    InvalidUrlError,
)
from tool_handle.template.encoding import Payload


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def render_template(context: ToolContext, template: Any, data: Any) -> Any:
    """Compile template with the context's engine and transform data through it."""
    transformer = await _resolve(context.template_engine.parse_template(template, context))
    return await _resolve(transformer.transform(data))


async def transform_http_request(
    context: ToolContext,
    template: Any,
    args: Any,
    *,
    location: str | None = None,
) -> HttpRequest:
    """Transform a request template and invocation arguments into an HttpRequest.

    Raises a RequestTemplateError subclass if the transformed request form is
    malformed. Nothing is sent.
    """
    request_form = await render_template(context, template, args)
    if not isinstance(request_form, Mapping):
        raise InvalidRequestTemplateError(request_form, location=location)

    method = request_form.get("method")
    if method is None:
        method = "GET"
    elif not isinstance(method, str):
        raise InvalidMethodError(method, location=location)

    url = request_form.get("url")
    if not isinstance(url, str):
        raise InvalidUrlError(url, location=location)

    headers = httpx.Headers()
    templated_headers = request_form.get("headers")
    if isinstance(templated_headers, Mapping):
        for name, value in templated_headers.items():
            if not isinstance(value, str):
                raise InvalidHeaderError(name, value, location=location)
            headers[name] = value
    elif templated_headers is not None:
        raise InvalidHeadersError(templated_headers, location=location)

    body = request_form.get("body")
    if isinstance(body, Payload):
        # Payload headers win over templated headers of the same name.
        for name, value in body.headers.items():
            headers[name] = value
        body = body.value

    return HttpRequest(method=method, url=url, headers=headers, body=body)

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from tool_handle.content import decode_content
from tool_handle.context import ToolContext
from tool_handle.http.message import HttpResponse
from tool_handle.http.request import render_template

logger = structlog.get_logger()


def response_template_keys(status: int) -> tuple[str, str, str]:
    """Keys tried for a status, most specific first: "404", "4xx", "default"."""
    code = str(status)
    return code, f"{code[0]}xx", "default"


def select_response_template(
    templates: Mapping[str, Any] | None, status: int
) -> tuple[str, Any] | None:
    """Return (key, template) of the first defined template for status, or None."""
    if not templates:
        return None
    for key in response_template_keys(status):
        template = templates.get(key)
        if template is not None:
            return key, template
    return None


async def transform_http_response(
    context: ToolContext,
    templates: Mapping[str, Any] | None,
    response: HttpResponse,
) -> Any:
    """Decode the response body and render it with the matching template.

    Without a matching template the decoded body is returned as is.
    """
    body = await decode_content(response.body, response.headers.get("content-type"), context)

    selected = select_response_template(templates, response.status)
    if selected is None:
        return body

    key, template = selected
    logger.debug("response_template_selected", status=response.status, template_key=key)
    return await render_template(
        context,
        template,
        {
            "status": response.status,
            "statusText": response.status_text,
            "headers": dict(response.headers.items()),
            "body": body,
        },
    )

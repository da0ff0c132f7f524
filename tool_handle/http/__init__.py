"""HTTP handler: executes tool handles as HTTP requests."""

from tool_handle.http.context import (
    FetchOptions,
    HttpContext,
    HttpContextOptions,
    create_http_context,
    init_http_context,
)
from tool_handle.http.credential import apply_credentials, apply_http_credentials
from tool_handle.http.handle import HttpHandle, HttpRequestTemplate
from tool_handle.http.message import HttpRequest, HttpResponse
from tool_handle.http.protocol import HttpProtocolHandler, http_protocol_handler
from tool_handle.http.request import transform_http_request
from tool_handle.http.response import select_response_template, transform_http_response
from tool_handle.http.security import HttpSecurityObject, http_security_scheme
from tool_handle.http.transport import HttpxTransport, Transport

__all__ = [
    "FetchOptions",
    "HttpContext",
    "HttpContextOptions",
    "HttpHandle",
    "HttpProtocolHandler",
    "HttpRequest",
    "HttpRequestTemplate",
    "HttpResponse",
    "HttpSecurityObject",
    "HttpxTransport",
    "Transport",
    "apply_credentials",
    "apply_http_credentials",
    "create_http_context",
    "http_protocol_handler",
    "http_security_scheme",
    "init_http_context",
    "select_response_template",
    "transform_http_request",
    "transform_http_response",
]

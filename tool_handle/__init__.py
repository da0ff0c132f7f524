"""tool-handle: declarative tool handles executed by pluggable protocol handlers."""

from tool_handle.content import (
    BUILTIN_CONTENT_DECODERS,
    ContentDecoder,
    content_decoder,
    decode_content,
)
from tool_handle.context import (
    ToolContext,
    ToolContextOptions,
    coerce_tool_context,
    create_tool_context,
    init_tool_context,
)
from tool_handle.credential import (
    CredentialObject,
    CredentialResolver,
    HttpCredentialObject,
)
from tool_handle.handle import (
    ToolHandle,
    execute_tool_handle,
    load_tool_handles,
    parse_tool_handle,
)
from tool_handle.handler import ToolHandler
from tool_handle.infra.errors import (
    InvalidCookieNameError,
    InvalidHeaderError,
    InvalidHeadersError,
    InvalidMethodError,
    InvalidRequestTemplateError,
    InvalidUrlError,
    RequestTemplateError,
    TemplateError,
    ToolError,
    ToolHandleError,
    UnknownHandlerError,
)
from tool_handle.registry import Registry
from tool_handle.security import HttpSecurityObject, SecurityObject, SecurityScheme
from tool_handle.template.encoding import Encoder, Payload

__all__ = [
    "BUILTIN_CONTENT_DECODERS",
    "ContentDecoder",
    "CredentialObject",
    "CredentialResolver",
    "Encoder",
    "HttpCredentialObject",
    "HttpSecurityObject",
    "InvalidCookieNameError",
    "InvalidHeaderError",
    "InvalidHeadersError",
    "InvalidMethodError",
    "InvalidRequestTemplateError",
    "InvalidUrlError",
    "Payload",
    "Registry",
    "RequestTemplateError",
    "SecurityObject",
    "SecurityScheme",
    "TemplateError",
    "ToolContext",
    "ToolContextOptions",
    "ToolError",
    "ToolHandle",
    "ToolHandleError",
    "ToolHandler",
    "UnknownHandlerError",
    "coerce_tool_context",
    "content_decoder",
    "create_tool_context",
    "decode_content",
    "execute_tool_handle",
    "init_tool_context",
    "load_tool_handles",
    "parse_tool_handle",
]

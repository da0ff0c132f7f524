"""Credential objects and credential resolution.

A credential resolver is supplied by the embedding application and called
once per invocation. Its result is never cached on the handle or context.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any, Literal, Union

import structlog
from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from tool_handle.context import ToolContext
    from tool_handle.handle import ToolHandle

logger = structlog.get_logger()


class CredentialObject(BaseModel):
    """Per-invocation secret material for a security scheme.

    Scheme-specific fields of unknown schemes are kept as extra fields.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    scheme: str


class HttpCredentialObject(CredentialObject):
    """Credentials for the "http" security scheme."""

    scheme: Literal["http"] = "http"
    headers: dict[str, str] | None = None  # set on the request
    query: dict[str, str] | None = None  # appended to the request URL
    cookies: dict[str, str] | None = None  # appended to the Cookie header


ResolvedCredential = Union[CredentialObject, Mapping[str, Any], None]

CredentialResolver = Callable[
    ["ToolHandle", "ToolContext"],
    Union[ResolvedCredential, Awaitable[ResolvedCredential]],
]


def coerce_credential(value: ResolvedCredential) -> CredentialObject | None:
    """Turn a resolver result into the credential model for its scheme.

    A scheme of "http" yields HttpCredentialObject, whatever the input type;
    any other scheme yields a generic CredentialObject. Results without a
    string scheme carry no usable credentials and yield None.
    """
    if value is None or isinstance(value, HttpCredentialObject):
        return value
    if isinstance(value, CredentialObject):
        if value.scheme != "http":
            return value
        return HttpCredentialObject.model_validate(value.model_dump())

    scheme = value.get("scheme")
    if not isinstance(scheme, str):
        logger.debug("credential_scheme_missing", scheme=scheme)
        return None
    if scheme == "http":
        return HttpCredentialObject.model_validate(dict(value))
    return CredentialObject.model_validate(dict(value))


async def resolve_credential(handle: ToolHandle, context: ToolContext) -> CredentialObject | None:
    """Invoke the context's credential resolver, if any.

    Resolver errors propagate unchanged.
    """
    resolver = context.credential_resolver
    if resolver is None:
        return None
    result = resolver(handle, context)
    if inspect.isawaitable(result):
        result = await result
    return coerce_credential(result)

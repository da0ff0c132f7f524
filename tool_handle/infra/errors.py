"""Custom exception hierarchy for tool-handle.

All library exceptions inherit from ToolHandleError, which carries an error
code and, where known, the source location of the offending template.
"""

from __future__ import annotations

import json
from typing import Any


def _describe(value: Any) -> str:
    """Render an offending value for an error message."""
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)


class ToolHandleError(Exception):
    """Base exception for all tool-handle errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "INTERNAL_ERROR",
        location: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.location = location

    def __str__(self) -> str:
        if self.location is None:
            return self.message
        return f"{self.message} (at {self.location})"


class TemplateError(ToolHandleError):
    """Malformed template rejected by the template engine."""

    def __init__(self, message: str, *, location: str | None = None) -> None:
        super().__init__(message, code="TEMPLATE_ERROR", location=location)


class ToolError(ToolHandleError):
    """Errors during tool handle execution."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "TOOL_ERROR",
        location: str | None = None,
    ) -> None:
        super().__init__(message, code=code, location=location)


class UnknownHandlerError(ToolError):
    """No handler is registered under the handle's declared handler name."""

    def __init__(self, handler_name: str) -> None:
        super().__init__(
            f"Unknown tool handler: {_describe(handler_name)}",
            code="UNKNOWN_HANDLER",
        )
        self.handler_name = handler_name


class RequestTemplateError(ToolError):
    """The transformed request template is not a valid request form.

    Always raised before any network effect.
    """

    def __init__(
        self,
        message: str,
        value: Any,
        *,
        code: str,
        location: str | None = None,
    ) -> None:
        super().__init__(message, code=code, location=location)
        self.value = value


class InvalidRequestTemplateError(RequestTemplateError):
    def __init__(self, value: Any, *, location: str | None = None) -> None:
        super().__init__(
            f"Invalid request template: {_describe(value)}",
            value,
            code="INVALID_REQUEST_TEMPLATE",
            location=location,
        )


class InvalidMethodError(RequestTemplateError):
    def __init__(self, value: Any, *, location: str | None = None) -> None:
        super().__init__(
            f"Invalid request method: {_describe(value)}",
            value,
            code="INVALID_METHOD",
            location=location,
        )


class InvalidUrlError(RequestTemplateError):
    def __init__(self, value: Any, *, location: str | None = None) -> None:
        super().__init__(
            f"Invalid request URL: {_describe(value)}",
            value,
            code="INVALID_URL",
            location=location,
        )


class InvalidHeadersError(RequestTemplateError):
    def __init__(self, value: Any, *, location: str | None = None) -> None:
        super().__init__(
            f"Invalid request headers: {_describe(value)}",
            value,
            code="INVALID_HEADERS",
            location=location,
        )


class InvalidHeaderError(RequestTemplateError):
    def __init__(
        self, header_name: str, value: Any, *, location: str | None = None
    ) -> None:
        super().__init__(
            f"Invalid request header {_describe(header_name)}: {_describe(value)}",
            value,
            code="INVALID_HEADER",
            location=location,
        )
        self.header_name = header_name


class InvalidCookieNameError(ToolError):
    """Credential cookie name is not an RFC 6265 token."""

    def __init__(self, cookie_name: str) -> None:
        super().__init__(
            f"Invalid cookie name: {_describe(cookie_name)}",
            code="INVALID_COOKIE_NAME",
        )
        self.cookie_name = cookie_name

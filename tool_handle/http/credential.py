from __future__ import annotations

import dataclasses
import re
from urllib.parse import quote

import httpx
import structlog

from tool_handle.credential import CredentialObject, HttpCredentialObject
from tool_handle.http.message import HttpRequest
from tool_handle.infra.errors import InvalidCookieNameError

logger = structlog.get_logger()

# RFC 6265 token: visible ASCII except whitespace, double quote, comma,
# semicolon and backslash.
_COOKIE_NAME = re.compile(r"[\x21\x23-\x2B\x2D-\x3A\x3C-\x5B\x5D-\x7E]+")

# Characters left unescaped in cookie values (the URI component unreserved set).
_COOKIE_VALUE_SAFE = "-_.!~*'()"


def apply_http_credentials(request: HttpRequest, credentials: HttpCredentialObject) -> HttpRequest:
    """Return a copy of request with HTTP credentials applied.

    Headers are set, query parameters appended, cookies appended to the
    Cookie header. Raises InvalidCookieNameError for a non-token cookie name.
    """
    url = httpx.URL(request.url)
    headers = httpx.Headers(request.headers)

    if credentials.headers:
        for name, value in credentials.headers.items():
            headers[name] = value

    if credentials.query:
        for name, value in credentials.query.items():
            url = url.copy_add_param(name, value)

    if credentials.cookies:
        cookies = headers.get("cookie", "")
        for name, value in credentials.cookies.items():
            if not _COOKIE_NAME.fullmatch(name):
                raise InvalidCookieNameError(name)
            if cookies:
                cookies += "; "
            cookies += f"{name}={quote(value, safe=_COOKIE_VALUE_SAFE)}"
        if cookies:
            headers["cookie"] = cookies

    return dataclasses.replace(request, url=str(url), headers=headers)


def apply_credentials(request: HttpRequest, credentials: CredentialObject | None) -> HttpRequest:
    """Apply credentials of a scheme the HTTP handler understands.

    Credentials of any other scheme leave the request unchanged.
    """
    if credentials is None:
        return request
    if isinstance(credentials, HttpCredentialObject):
        return apply_http_credentials(request, credentials)
    logger.debug("credential_scheme_not_applied", scheme=credentials.scheme)
    return request

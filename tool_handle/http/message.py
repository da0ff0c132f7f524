"""Request/response boundary types exchanged with the transport."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import httpx

from tool_handle.content import ByteStream


@dataclass(frozen=True)
class HttpRequest:
    """A materialized HTTP request. Never mutated; credentials produce a copy."""

    method: str
    url: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: Any = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, httpx.Headers):
            object.__setattr__(self, "headers", httpx.Headers(self.headers))


@dataclass
class HttpResponse:
    """A transport response. headers are case-insensitive."""

    status: int
    status_text: str = ""
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    body: ByteStream | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, httpx.Headers):
            self.headers = httpx.Headers(self.headers)

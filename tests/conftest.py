"""Shared pytest fixtures for tool-handle tests.

Provides a recording fake transport so the HTTP pipeline can be exercised
without network access, plus helpers for building chunked byte streams.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable, Iterator
from typing import Any

import pytest
import structlog

from tool_handle.http.context import FetchOptions, HttpContext, create_http_context
from tool_handle.http.message import HttpRequest, HttpResponse
from tool_handle.http.protocol import HttpProtocolHandler
from tool_handle.http.security import http_security_scheme
from tool_handle.http.transport import Transport


async def _chunked(chunks: tuple[bytes, ...]) -> AsyncIterator[bytes]:
    for chunk in chunks:
        yield chunk


class RecordingTransport(Transport):
    """Transport double: records every send and replies with a canned response."""

    def __init__(self) -> None:
        self.requests: list[HttpRequest] = []
        self.options: list[FetchOptions | None] = []
        self.response = HttpResponse(status=200, status_text="OK")

    def reply(
        self,
        status: int = 200,
        *,
        body: bytes | None = None,
        content_type: str | None = None,
        status_text: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        all_headers = dict(headers or {})
        if content_type is not None:
            all_headers["Content-Type"] = content_type
        self.response = HttpResponse(
            status=status,
            status_text=status_text,
            headers=all_headers,
            body=_chunked((body,)) if body is not None else None,
        )

    def reply_json(self, status: int, payload: Any, **kwargs: Any) -> None:
        self.reply(
            status,
            body=json.dumps(payload).encode("utf-8"),
            content_type="application/json",
            **kwargs,
        )

    async def send(self, request: HttpRequest, options: FetchOptions | None = None) -> HttpResponse:
        self.requests.append(request)
        self.options.append(options)
        return self.response

    @property
    def last_request(self) -> HttpRequest:
        assert self.requests, "transport was never called"
        return self.requests[-1]


@pytest.fixture()
def chunked() -> Callable[..., AsyncIterator[bytes]]:
    """Build an async byte stream from the given chunks, yielded in order."""

    def _make(*chunks: bytes) -> AsyncIterator[bytes]:
        return _chunked(chunks)

    return _make


@pytest.fixture()
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture()
def http_handler(transport: RecordingTransport) -> HttpProtocolHandler:
    return HttpProtocolHandler(transport)


@pytest.fixture()
def http_context(http_handler: HttpProtocolHandler) -> HttpContext:
    return create_http_context(
        tool_handlers=[http_handler],
        security_schemes=[http_security_scheme],
    )


@pytest.fixture()
def log_capture() -> Iterator[structlog.testing.LogCapture]:
    """Capture structlog events emitted during the test."""
    cap = structlog.testing.LogCapture()
    structlog.configure(processors=[cap], wrapper_class=structlog.BoundLogger)
    try:
        yield cap
    finally:
        structlog.reset_defaults()

"""Transport contract and the default httpx transport.

The runtime only calls Transport.send(request, options). Response bodies are
exposed as async byte streams; draining the stream releases the connection.
A stream abandoned half-read is the caller's to close (HttpxResponseStream.aclose).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Mapping
from typing import Any

import httpx
import structlog

from tool_handle.config.settings import HttpSettings
from tool_handle.http.context import FetchOptions
from tool_handle.http.message import HttpRequest, HttpResponse

logger = structlog.get_logger()

_SEND_OPTIONS = {"follow_redirects"}
_REQUEST_OPTIONS = {"timeout", "extensions"}
_NO_BODY_STATUSES = {204, 304}


class Transport(ABC):
    """Sends an HttpRequest and returns the HttpResponse."""

    @abstractmethod
    async def send(self, request: HttpRequest, options: FetchOptions | None = None) -> HttpResponse:
        ...


class HttpxResponseStream:
    """Async byte stream over a streamed httpx response.

    Closes the response (and the owned client, if any) once drained.
    """

    def __init__(
        self,
        response: httpx.Response,
        *,
        chunk_size: int,
        owned_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._response = response
        self._chunk_size = chunk_size
        self._owned_client = owned_client

    async def __aiter__(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self._response.aiter_bytes(self._chunk_size):
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        await self._response.aclose()
        if self._owned_client is not None:
            await self._owned_client.aclose()
            self._owned_client = None


def _request_content(body: Any) -> dict[str, Any]:
    """Map a request body onto httpx.Request keyword arguments."""
    if body is None:
        return {}
    if isinstance(body, Mapping):
        return {"data": dict(body)}
    if isinstance(body, (bytes, bytearray, str, AsyncIterable, Iterable)):
        return {"content": body}
    return {"content": str(body)}


class HttpxTransport(Transport):
    """Transport backed by httpx.AsyncClient.

    With no client given, a client is created per request from HttpSettings
    and closed together with the response.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        settings: HttpSettings | None = None,
    ) -> None:
        self._client = client
        self._settings = settings or HttpSettings()

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._settings.timeout_s,
            follow_redirects=self._settings.follow_redirects,
            headers={"User-Agent": self._settings.user_agent},
        )

    async def send(self, request: HttpRequest, options: FetchOptions | None = None) -> HttpResponse:
        options = dict(options or {})
        unknown = set(options) - _SEND_OPTIONS - _REQUEST_OPTIONS
        if unknown:
            logger.warning("fetch_options_ignored", options=sorted(unknown))

        owned_client = self._new_client() if self._client is None else None
        client = self._client or owned_client
        try:
            httpx_request = client.build_request(
                request.method,
                request.url,
                headers=request.headers,
                **_request_content(request.body),
                **{k: v for k, v in options.items() if k in _REQUEST_OPTIONS},
            )
            response = await client.send(
                httpx_request,
                stream=True,
                **{k: v for k, v in options.items() if k in _SEND_OPTIONS},
            )
        except BaseException:
            if owned_client is not None:
                await owned_client.aclose()
            raise

        if request.method.upper() == "HEAD" or response.status_code in _NO_BODY_STATUSES:
            await response.aclose()
            if owned_client is not None:
                await owned_client.aclose()
            body: HttpxResponseStream | None = None
        else:
            body = HttpxResponseStream(
                response,
                chunk_size=self._settings.read_chunk_size,
                owned_client=owned_client,
            )

        return HttpResponse(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=response.headers,
            body=body,
        )

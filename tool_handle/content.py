"""Content decoders and the media type resolution cascade.

Given an observed content type `{type}/{subtype}[+{syntax}][;params]`, the
following keys are looked up in `context.content_decoders`, first hit wins:

    1. {type}/{subtype}[+{syntax}]    (params dropped)
    2. {type}/{subtype}
    3. {type}/{syntax}                (only with a +syntax suffix)
    4. {type}/*
    5. ""  then  */*                  (universal wildcard)

Streams that no decoder claims are returned as raw bytes.
"""

from __future__ import annotations

import codecs
import json
import re
from collections.abc import AsyncIterable, AsyncIterator, Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from tool_handle.context import ToolContext

ByteStream = Union[AsyncIterable[bytes], Iterable[bytes]]

_MEDIA_TYPE = re.compile(r"^([^/]+)/([^+;]+)(?:\+([^;]+))?(?:;.*)?$")

WILDCARD_KEYS = ("", "*/*")


@dataclass(frozen=True)
class ContentDecoder:
    """Decodes a byte stream of one media type into a value."""

    content_type: str
    decode: Callable[[ByteStream, ToolContext | None], Awaitable[Any]]

    async def decode_content(self, stream: ByteStream, context: ToolContext | None = None) -> Any:
        return await self.decode(stream, context)


async def iter_chunks(stream: ByteStream) -> AsyncIterator[bytes]:
    """Yield the chunks of a byte stream in order, one await per chunk."""
    if isinstance(stream, (bytes, bytearray, memoryview)):
        yield bytes(stream)
        return
    if isinstance(stream, AsyncIterable):
        async for chunk in stream:
            yield bytes(chunk)
        return
    for chunk in stream:
        yield bytes(chunk)


async def read_bytes(stream: ByteStream, context: ToolContext | None = None) -> bytes:
    """Drain the stream into one contiguous buffer."""
    chunks: list[bytes] = []
    async for chunk in iter_chunks(stream):
        chunks.append(chunk)
    return b"".join(chunks)


async def read_text(stream: ByteStream, context: ToolContext | None = None) -> str:
    """Drain the stream through an incremental UTF-8 decoder.

    Multi-byte sequences may span chunk boundaries; invalid input is replaced
    with U+FFFD and a leading byte order mark is dropped.
    """
    decoder = codecs.getincrementaldecoder("utf-8-sig")(errors="replace")
    parts: list[str] = []
    async for chunk in iter_chunks(stream):
        parts.append(decoder.decode(chunk))
    parts.append(decoder.decode(b"", final=True))  # flush
    return "".join(parts)


async def read_json(stream: ByteStream, context: ToolContext | None = None) -> Any:
    return json.loads(await read_text(stream, context))


any_decoder = ContentDecoder(content_type="*/*", decode=read_bytes)
application_octet_stream_decoder = ContentDecoder(
    content_type="application/octet-stream", decode=read_bytes
)
application_json_decoder = ContentDecoder(content_type="application/json", decode=read_json)
text_plain_decoder = ContentDecoder(content_type="text/plain", decode=read_text)
text_decoder = ContentDecoder(content_type="text/*", decode=read_text)

BUILTIN_CONTENT_DECODERS: Mapping[str, ContentDecoder] = {
    decoder.content_type: decoder
    for decoder in (
        any_decoder,
        application_octet_stream_decoder,
        application_json_decoder,
        text_plain_decoder,
        text_decoder,
    )
}


def media_type_keys(content_type: str | None) -> list[str]:
    """Return the registry keys tried for content_type, most specific first.

    Empty if content_type is absent or unparsable. The universal wildcard is
    not included.
    """
    if not content_type:
        return []
    match = _MEDIA_TYPE.match(content_type.strip().lower())
    if match is None:
        return []
    type_, subtype, syntax = (part.strip() if part else part for part in match.groups())
    keys = [f"{type_}/{subtype}+{syntax}" if syntax else f"{type_}/{subtype}"]
    if syntax:
        keys.append(f"{type_}/{subtype}")
        keys.append(f"{type_}/{syntax}")
    keys.append(f"{type_}/*")
    return keys


def _wildcard_decoder(decoders: Mapping[str, ContentDecoder] | None) -> ContentDecoder | None:
    if decoders is None:
        return None
    for key in WILDCARD_KEYS:
        decoder = decoders.get(key)
        if decoder is not None:
            return decoder
    return None


def content_decoder(content_type: str | None, context: ToolContext) -> ContentDecoder | None:
    """Return the decoder for content_type in context, or None.

    Returns None when content_type is absent or unparsable.
    """
    keys = media_type_keys(content_type)
    if not keys:
        return None
    decoders = context.content_decoders
    if decoders is None:
        return None
    for key in keys:
        decoder = decoders.get(key)
        if decoder is not None:
            return decoder
    return _wildcard_decoder(decoders)


async def decode_content(
    stream: ByteStream | None,
    content_type: str | None,
    context: ToolContext,
) -> Any:
    """Decode stream with the decoder selected for content_type.

    An absent stream is returned unchanged without invoking any decoder.
    """
    if stream is None:
        return None
    decoder = (
        content_decoder(content_type, context)
        or _wildcard_decoder(context.content_decoders)
        or any_decoder
    )
    return await decoder.decode_content(stream, context)

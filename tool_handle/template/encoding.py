"""Encoders and the content payloads they produce.

A Payload is an encoded body together with the headers that describe it.
The HTTP handler merges payload headers into the request and sends the
payload value as the request body.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlencode

from tool_handle.infra.errors import TemplateError


@dataclass(frozen=True)
class Payload:
    """An encoded value and its associated headers."""

    value: bytes | str | None
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Encoder:
    """Named encoder: (value, options) -> Payload.

    options holds the remaining `$`-prefixed keys of the `$encode` directive
    with the prefix stripped, e.g. {"indent": 2}.
    """

    name: str
    encode: Callable[[Any, Mapping[str, Any]], Payload]


def _encode_json(value: Any, options: Mapping[str, Any]) -> Payload:
    text = json.dumps(value, indent=options.get("indent"), ensure_ascii=False)
    return Payload(text.encode("utf-8"), {"Content-Type": "application/json"})


def _encode_text(value: Any, options: Mapping[str, Any]) -> Payload:
    text = "" if value is None else str(value)
    return Payload(text.encode("utf-8"), {"Content-Type": "text/plain; charset=utf-8"})


def _encode_form(value: Any, options: Mapping[str, Any]) -> Payload:
    if not isinstance(value, Mapping):
        raise TemplateError(f"form encoding requires a mapping (got {type(value).__name__})")
    body = urlencode(
        [(k, v) for k, v in value.items() if v is not None],
        doseq=True,
    )
    return Payload(body.encode("ascii"), {"Content-Type": "application/x-www-form-urlencoded"})


json_encoder = Encoder(name="json", encode=_encode_json)
text_encoder = Encoder(name="text", encode=_encode_text)
form_encoder = Encoder(name="form", encode=_encode_form)

BUILTIN_ENCODERS: Mapping[str, Encoder] = {
    json_encoder.name: json_encoder,
    text_encoder.name: text_encoder,
    form_encoder.name: form_encoder,
}

"""Tests for response template selection and rendering."""

from __future__ import annotations

import pytest

from tool_handle.context import create_tool_context
from tool_handle.http.message import HttpResponse
from tool_handle.http.response import (
    response_template_keys,
    select_response_template,
    transform_http_response,
)

_TEMPLATES = {"404": "A", "4xx": "B", "default": "C"}


class TestSelectResponseTemplate:
    def test_keys_most_specific_first(self) -> None:
        assert response_template_keys(404) == ("404", "4xx", "default")

    @pytest.mark.parametrize(
        ("status", "expected"),
        [(404, ("404", "A")), (403, ("4xx", "B")), (500, ("default", "C")), (200, ("default", "C"))],
    )
    def test_fallback_order(self, status: int, expected: tuple[str, str]) -> None:
        assert select_response_template(_TEMPLATES, status) == expected

    def test_no_templates(self) -> None:
        assert select_response_template(None, 200) is None
        assert select_response_template({}, 200) is None

    def test_no_match(self) -> None:
        assert select_response_template({"2xx": "ok"}, 500) is None

    def test_null_entry_skipped(self) -> None:
        assert select_response_template({"404": None, "4xx": "B"}, 404) == ("4xx", "B")


class TestTransformHttpResponse:
    @pytest.mark.asyncio
    async def test_renders_selected_template(self, chunked) -> None:
        response = HttpResponse(
            status=200,
            status_text="OK",
            headers={"Content-Type": "application/json"},
            body=chunked(b'{"name": "x"}'),
        )
        result = await transform_http_response(
            create_tool_context(), {"2xx": {"$ref": "body.name"}}, response
        )
        assert result == "x"

    @pytest.mark.asyncio
    async def test_record_fields(self, chunked) -> None:
        response = HttpResponse(
            status=404,
            status_text="Not Found",
            headers={"Content-Type": "text/plain", "X-Trace": "t1"},
            body=chunked(b"gone"),
        )
        template = {
            "error": "{{status}} {{statusText}}",
            "trace": {"$ref": "headers['x-trace']"},
            "detail": {"$ref": "body"},
        }
        result = await transform_http_response(create_tool_context(), {"4xx": template}, response)
        assert result == {"error": "404 Not Found", "trace": "t1", "detail": "gone"}

    @pytest.mark.asyncio
    async def test_without_templates_returns_body(self, chunked) -> None:
        response = HttpResponse(
            status=200, headers={"Content-Type": "application/json"}, body=chunked(b"[1]")
        )
        assert await transform_http_response(create_tool_context(), {}, response) == [1]
        response = HttpResponse(status=200, headers={"Content-Type": "text/plain"}, body=chunked(b"hi"))
        assert await transform_http_response(create_tool_context(), None, response) == "hi"

    @pytest.mark.asyncio
    async def test_absent_body(self) -> None:
        response = HttpResponse(status=204, status_text="No Content")
        result = await transform_http_response(
            create_tool_context(), {"204": {"ok": {"$ref": "body"}, "status": {"$": "status"}}}, response
        )
        assert result == {"ok": None, "status": 204}

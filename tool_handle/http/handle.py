from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from tool_handle.handle import ToolHandle


class HttpRequestTemplate(BaseModel):
    """Templates for the parts of an HTTP request.

    Each field is an opaque template evaluated against the invocation
    arguments. url is required at evaluation time, not at parse time.
    Unknown keys are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    method: Any = None
    url: Any = None
    headers: Any = None
    body: Any = None

    def as_template(self) -> dict[str, Any]:
        """The request template as authored (unset fields omitted)."""
        return self.model_dump(exclude_unset=True)


class HttpHandle(ToolHandle):
    """A tool handle executed by the "http" handler."""

    handler: str = Field("http", validation_alias=AliasChoices("handler", "protocol"))
    request: HttpRequestTemplate
    responses: dict[str, Any] | None = Field(
        None, validation_alias=AliasChoices("responses", "response")
    )

    @field_validator("responses", mode="before")
    @classmethod
    def _normalize_status_keys(cls, v: Any) -> Any:
        if isinstance(v, Mapping):
            return {str(key): template for key, template in v.items()}
        return v

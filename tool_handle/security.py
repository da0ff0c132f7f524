from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict


@dataclass(frozen=True)
class SecurityScheme:
    """A named authentication mechanism. Registered under its name."""

    name: str


class SecurityObject(BaseModel):
    """Security configuration declared by a tool handle.

    Scheme-specific fields of unknown schemes are kept as extra fields.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    scheme: str


class HttpSecurityObject(SecurityObject):
    """Configures the "http" security scheme for a handle."""

    scheme: Literal["http"] = "http"
    method: str  # authentication method, e.g. "bearer"
    secret: str  # name of the credential to use


def parse_security_object(value: Any) -> SecurityObject | None:
    """Parse a handle's `security` field into the model for its scheme."""
    if value is None or isinstance(value, SecurityObject):
        return value
    if isinstance(value, dict) and value.get("scheme") == "http":
        return HttpSecurityObject.model_validate(value)
    return SecurityObject.model_validate(value)

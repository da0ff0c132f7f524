from __future__ import annotations

from tool_handle.security import HttpSecurityObject, SecurityScheme

http_security_scheme = SecurityScheme(name="http")

__all__ = ["HttpSecurityObject", "http_security_scheme"]

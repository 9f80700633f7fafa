"""HTTP middleware emitting Content-Security-Policy headers."""

from cspkit.middleware.security_headers import SecurityHeaders

__all__ = ["SecurityHeaders"]

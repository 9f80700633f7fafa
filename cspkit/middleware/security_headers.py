"""Starlette middleware attaching a rendered policy to every response."""

from __future__ import annotations

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from cspkit.config.loader import get_settings
from cspkit.config.presets import load_preset
from cspkit.parser import CspParser
from cspkit.policy import ContentSecurityPolicy

logger = structlog.get_logger()


class SecurityHeaders(BaseHTTPMiddleware):
    """Inject a Content-Security-Policy header into every response.

    - ``policy`` may be a ContentSecurityPolicy, a raw header string, or None
      for the configured preset (``CSP_PRESET``)
    - ``override`` is a header value merged on top of the base policy
    - Responses that already carry the header are left untouched

    The policy is validated and rendered once, at construction; an invalid
    policy fails application startup instead of individual requests.
    """

    def __init__(
        self,
        app: ASGIApp,
        policy: ContentSecurityPolicy | str | None = None,
        override: str | None = None,
        report_only: bool | None = None,
    ) -> None:
        super().__init__(app)
        settings = get_settings()
        if policy is None:
            policy = load_preset()
        elif isinstance(policy, str):
            policy = CspParser(settings.mode).parse(policy)

        # Work on a copy so the caller's policy is never mutated
        merged = ContentSecurityPolicy(policy.mode)
        merged.merge(policy)
        if override:
            merged.merge(CspParser(policy.mode).parse(override))
        merged.report_only = policy.report_only if report_only is None else report_only

        self._header_name = merged.header_name()
        self._header_value = merged.header_value()
        logger.info("csp_middleware_registered", header=self._header_name, directives=len(merged))

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        if self._header_value and self._header_name not in response.headers:
            response.headers[self._header_name] = self._header_value
        return response

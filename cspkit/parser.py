"""Parser for raw Content-Security-Policy header strings."""

from __future__ import annotations

import re

import structlog

from cspkit.models import Mode, coerce_mode
from cspkit.policy import ContentSecurityPolicy

logger = structlog.get_logger()

_HEADER_RE = re.compile(r"^content-security-policy(-report-only)?\s*:(.*)", re.IGNORECASE | re.DOTALL)


class CspParser:
    """Turn header text into a ContentSecurityPolicy.

    The parser only tokenizes; every directive and value is validated by
    ``ContentSecurityPolicy.add_to_directive``. The first invalid item
    aborts parsing.
    """

    def __init__(self, mode: Mode | str = Mode.STRICT) -> None:
        self.mode = coerce_mode(mode)

    def parse(self, csp_string: str) -> ContentSecurityPolicy:
        policy = ContentSecurityPolicy(self.mode)
        csp_string = csp_string.strip()

        # Full header or header value only
        match = _HEADER_RE.match(csp_string)
        if match:
            policy.report_only = bool(match.group(1))
            csp_string = match.group(2).strip()

        for item in csp_string.split(";"):
            parts = item.split()
            if not parts:
                continue
            directive, values = parts[0], parts[1:]
            if not values:
                policy.add_to_directive(directive, None)
                continue
            for value in values:
                policy.add_to_directive(directive, value)

        logger.debug(
            "csp_parsed",
            mode=self.mode.value,
            report_only=policy.report_only,
            directives=len(policy),
        )
        return policy

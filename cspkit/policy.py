"""Content-Security-Policy document: validation, storage and serialization."""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from cspkit import grammar, registry
from cspkit.errors import InvalidDirective, InvalidSourceListItem
from cspkit.models import Mode, OutputMode, ParseOptions, coerce_mode, coerce_output_mode

logger = structlog.get_logger()

HEADER_NAME = "Content-Security-Policy"
HEADER_NAME_REPORT_ONLY = "Content-Security-Policy-Report-Only"


class ContentSecurityPolicy:
    """Mutable CSP document.

    Holds a mapping of directive -> unique values plus the validation mode,
    the report-only flag and the output mode. Every value goes through
    ``add_to_directive``, which is the only place grammar rules are applied.

    Values keep their insertion order within a directive; directives are
    always rendered in registry order.
    """

    def __init__(self, mode: Mode | str = Mode.STRICT) -> None:
        self._mode = coerce_mode(mode)
        self._directives: dict[str, dict[str, None]] = {}
        self._report_only = False
        self._output_mode = OutputMode.FULL_HEADER

    @classmethod
    def from_string(
        cls, csp_string: str, options: Mapping[str, Any] | ParseOptions | None = None,
    ) -> ContentSecurityPolicy:
        """Parse a raw header (or header value) into a policy document.

        Recognized options: ``mode`` (``"strict"`` or ``"loose"``, default strict).
        """
        from cspkit.parser import CspParser

        opts = ParseOptions.from_mapping(options)
        return CspParser(opts.mode).parse(csp_string)

    # ── Mutation ─────────────────────────────────────────────────────────

    def add_to_directive(self, directive: str, value: str | None) -> None:
        """Add ``value`` to ``directive`` after validating it.

        Raises InvalidDirective for unknown directives regardless of mode.
        Raises InvalidSourceListItem for disallowed quoted tokens in strict
        mode, and for unknown sandbox tokens in every mode.
        """
        directive = registry.normalize_directive(directive)
        if not registry.is_directive(directive):
            raise InvalidDirective(directive)

        if directive == registry.SANDBOX:
            self._add_to_sandbox(value)
        else:
            self._add_to_basic_directive(directive, value)

    def _add_to_sandbox(self, value: str | None) -> None:
        values = self._directives.setdefault(registry.SANDBOX, {})
        if value is None:
            return
        # Not mode-gated: loose mode still rejects unknown sandbox tokens
        if not registry.is_sandbox_token(value):
            raise InvalidSourceListItem(value, registry.SANDBOX)
        values[value] = None

    def _add_to_basic_directive(self, directive: str, value: str | None) -> None:
        if value is None:
            self._directives.setdefault(directive, {})
            return

        if grammar.is_quoted(value) and not grammar.is_allowed(directive, value):
            if self._mode is Mode.STRICT:
                raise InvalidSourceListItem(value, directive, grammar.describe_allowlist(directive))
            logger.debug("csp_source_dropped", directive=directive, value=value)
            return

        self._directives.setdefault(directive, {})[value] = None

    def merge(self, other: ContentSecurityPolicy) -> None:
        """Add every directive and value of ``other`` into this policy.

        Values are validated against this policy's mode. The merge is applied
        to a staging copy first, so a failure leaves this policy unchanged.
        """
        staging = ContentSecurityPolicy(self._mode)
        staging._directives = {d: dict(values) for d, values in self._directives.items()}
        for directive, values in other._directives.items():
            if not values:
                staging.add_to_directive(directive, None)
            for value in values:
                staging.add_to_directive(directive, value)
        self._directives = staging._directives

    # ── Accessors ────────────────────────────────────────────────────────

    def get_directive(self, directive: str) -> list[str] | None:
        """Return the values of ``directive``, or None if it was never added."""
        values = self._directives.get(registry.normalize_directive(directive))
        if values is None:
            return None
        return list(values)

    def get_directives(self) -> dict[str, list[str]]:
        return {directive: list(values) for directive, values in self._directives.items()}

    @property
    def mode(self) -> Mode:
        return self._mode

    @mode.setter
    def mode(self, mode: Mode | str) -> None:
        # Affects only values added from now on
        self._mode = coerce_mode(mode)

    @property
    def output_mode(self) -> OutputMode:
        return self._output_mode

    @output_mode.setter
    def output_mode(self, output_mode: OutputMode | str) -> None:
        self._output_mode = coerce_output_mode(output_mode)

    @property
    def report_only(self) -> bool:
        return self._report_only

    @report_only.setter
    def report_only(self, report_only: bool) -> None:
        self._report_only = bool(report_only)

    # ── Serialization ────────────────────────────────────────────────────

    def header_name(self) -> str:
        return HEADER_NAME_REPORT_ONLY if self._report_only else HEADER_NAME

    def header_value(self) -> str:
        """Render the directive segments in canonical registry order."""
        segments = []
        for directive in registry.DIRECTIVES:
            values = self._directives.get(directive)
            if values is None:
                continue
            segments.append(" ".join([directive, *values]).strip() + ";")
        return " ".join(segments).strip()

    def __str__(self) -> str:
        value = self.header_value()
        if self._output_mode is OutputMode.FULL_HEADER:
            return f"{self.header_name()}: {value}".strip()
        return value

    def __repr__(self) -> str:
        return (
            f"<ContentSecurityPolicy mode={self._mode.value} "
            f"report_only={self._report_only} {self.header_value()!r}>"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentSecurityPolicy):
            return NotImplemented
        return {d: set(v) for d, v in self._directives.items()} == {
            d: set(v) for d, v in other._directives.items()
        }

    __hash__ = None  # type: ignore[assignment]

    def __len__(self) -> int:
        return len(self._directives)

    def __contains__(self, directive: object) -> bool:
        if not isinstance(directive, str):
            return False
        return registry.normalize_directive(directive) in self._directives

"""Grammar catalog for quoted source list items.

Each directive family maps to the tuple of patterns a quoted token
(``'self'``, ``'nonce-...'``, ...) must fully match, case-insensitively,
to be accepted. Unquoted source expressions are never checked here.
"""

from __future__ import annotations

import re
import types

from cspkit import registry

# base64-value = 1*( ALPHA / DIGIT / "+" / "/" )*2( "=" )
PAT_BASE64 = r"[A-Za-z0-9+/]+={0,2}"

PAT_SOURCE_NONE = r"'none'"
PAT_SOURCE_SELF = r"'self'"
PAT_SOURCE_UNSAFE_EVAL = r"'unsafe-eval'"
PAT_SOURCE_UNSAFE_INLINE = r"'unsafe-inline'"
PAT_SOURCE_UNSAFE_HASHES = r"'unsafe-hashes'"
PAT_SOURCE_STRICT_DYNAMIC = r"'strict-dynamic'"
PAT_SOURCE_NONCE = rf"'nonce-{PAT_BASE64}'"
PAT_SOURCE_SHA = rf"'sha(?:256|384|512)-{PAT_BASE64}'"
PAT_PLUGIN_TYPE = r"[-\w.]+/[-\w.+]+"

_BASELINE: tuple[str, ...] = (PAT_SOURCE_NONE, PAT_SOURCE_SELF)

SCRIPT_PATTERNS: tuple[str, ...] = _BASELINE + (
    PAT_SOURCE_UNSAFE_EVAL,
    PAT_SOURCE_UNSAFE_INLINE,
    PAT_SOURCE_SHA,
    PAT_SOURCE_NONCE,
    PAT_SOURCE_STRICT_DYNAMIC,
    PAT_SOURCE_UNSAFE_HASHES,
)

WORKER_PATTERNS: tuple[str, ...] = _BASELINE + (
    PAT_SOURCE_UNSAFE_EVAL,
    PAT_SOURCE_UNSAFE_INLINE,
    PAT_SOURCE_SHA,
    PAT_SOURCE_NONCE,
    PAT_SOURCE_UNSAFE_HASHES,
)

STYLE_PATTERNS: tuple[str, ...] = _BASELINE + (
    PAT_SOURCE_UNSAFE_INLINE,
    PAT_SOURCE_SHA,
    PAT_SOURCE_NONCE,
)

FETCH_PATTERNS: tuple[str, ...] = _BASELINE

REPORT_PATTERNS: tuple[str, ...] = ()

PLUGIN_TYPES_PATTERNS: tuple[str, ...] = (PAT_SOURCE_NONE, PAT_PLUGIN_TYPE)

# Directive family membership. Directives not listed here use FETCH_PATTERNS.
# Sandbox has its own token vocabulary and never reaches this table.
FAMILIES: types.MappingProxyType = types.MappingProxyType({
    registry.SCRIPT_SRC: SCRIPT_PATTERNS,
    registry.SCRIPT_SRC_ATTR: SCRIPT_PATTERNS,
    registry.SCRIPT_SRC_ELEM: SCRIPT_PATTERNS,
    registry.BASE_URI: SCRIPT_PATTERNS,
    registry.CHILD_SRC: SCRIPT_PATTERNS,
    registry.FORM_ACTION: SCRIPT_PATTERNS,
    registry.NAVIGATE_TO: SCRIPT_PATTERNS,
    registry.WORKER_SRC: WORKER_PATTERNS,
    registry.MANIFEST_SRC: WORKER_PATTERNS,
    registry.PREFETCH_SRC: WORKER_PATTERNS,
    registry.STYLE_SRC: STYLE_PATTERNS,
    registry.STYLE_SRC_ATTR: STYLE_PATTERNS,
    registry.STYLE_SRC_ELEM: STYLE_PATTERNS,
    registry.REPORT_URI: REPORT_PATTERNS,
    registry.REPORT_TO: REPORT_PATTERNS,
    registry.PLUGIN_TYPES: PLUGIN_TYPES_PATTERNS,
})

_QUOTED_RE = re.compile(r"^'.*'$", re.DOTALL)


def _compile(patterns: tuple[str, ...]) -> re.Pattern | None:
    if not patterns:
        return None
    return re.compile("(?:" + "|".join(patterns) + ")", re.IGNORECASE)


# Compiled once per directive; None means no quoted token is ever legal.
_ALLOWLIST_RE: types.MappingProxyType = types.MappingProxyType({
    directive: _compile(FAMILIES.get(directive, FETCH_PATTERNS))
    for directive in registry.DIRECTIVES
    if directive != registry.SANDBOX
})


def is_quoted(value: str) -> bool:
    """Return True if ``value`` is shaped like a quoted keyword token."""
    return bool(_QUOTED_RE.match(value))


def allowlist_for(directive: str) -> tuple[str, ...]:
    """Return the quoted-token patterns legal for ``directive``."""
    return FAMILIES.get(directive, FETCH_PATTERNS)


def allowlist_regex(directive: str) -> re.Pattern | None:
    return _ALLOWLIST_RE.get(directive)


def describe_allowlist(directive: str) -> str:
    """Human-readable pattern string used in error messages."""
    return "/^(" + "|".join(allowlist_for(directive)) + ")$/i"


def is_allowed(directive: str, value: str) -> bool:
    """Full-match ``value`` against the allowlist of ``directive``."""
    pattern = allowlist_regex(directive)
    if pattern is None:
        return False
    return pattern.fullmatch(value) is not None

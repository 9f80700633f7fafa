"""Directive and sandbox token registries.

The declaration order of ``DIRECTIVES`` is the canonical serialization
order of a policy.
"""

from __future__ import annotations

BASE_URI = "base-uri"
CONNECT_SRC = "connect-src"
CHILD_SRC = "child-src"
DEFAULT_SRC = "default-src"
FONT_SRC = "font-src"
FORM_ACTION = "form-action"
FRAME_ANCESTORS = "frame-ancestors"
FRAME_SRC = "frame-src"
IMG_SRC = "img-src"
MANIFEST_SRC = "manifest-src"
MEDIA_SRC = "media-src"
NAVIGATE_TO = "navigate-to"
OBJECT_SRC = "object-src"
PLUGIN_TYPES = "plugin-types"
PREFETCH_SRC = "prefetch-src"
REPORT_TO = "report-to"
REPORT_URI = "report-uri"
SANDBOX = "sandbox"
SCRIPT_SRC = "script-src"
SCRIPT_SRC_ATTR = "script-src-attr"
SCRIPT_SRC_ELEM = "script-src-elem"
STYLE_SRC = "style-src"
STYLE_SRC_ATTR = "style-src-attr"
STYLE_SRC_ELEM = "style-src-elem"
UPGRADE_INSECURE_REQUESTS = "upgrade-insecure-requests"
WORKER_SRC = "worker-src"

DIRECTIVES: tuple[str, ...] = (
    BASE_URI,
    CONNECT_SRC,
    CHILD_SRC,
    DEFAULT_SRC,
    FONT_SRC,
    FORM_ACTION,
    FRAME_ANCESTORS,
    FRAME_SRC,
    IMG_SRC,
    MANIFEST_SRC,
    MEDIA_SRC,
    NAVIGATE_TO,
    OBJECT_SRC,
    PLUGIN_TYPES,
    PREFETCH_SRC,
    REPORT_TO,
    REPORT_URI,
    SANDBOX,
    SCRIPT_SRC,
    SCRIPT_SRC_ATTR,
    SCRIPT_SRC_ELEM,
    STYLE_SRC,
    STYLE_SRC_ATTR,
    STYLE_SRC_ELEM,
    UPGRADE_INSECURE_REQUESTS,
    WORKER_SRC,
)

_DIRECTIVE_SET = frozenset(DIRECTIVES)

# Tokens accepted as values of the sandbox directive
SANDBOX_TOKENS: frozenset[str] = frozenset({
    "allow-forms",
    "allow-modals",
    "allow-orientation-lock",
    "allow-pointer-lock",
    "allow-popups",
    "allow-popups-to-escape-sandbox",
    "allow-presentation",
    "allow-same-origin",
    "allow-scripts",
    "allow-top-navigation",
})


def normalize_directive(name: str) -> str:
    return name.strip().lower()


def is_directive(name: str) -> bool:
    """Return True if ``name`` (already normalized) is a registered directive."""
    return name in _DIRECTIVE_SET


def is_sandbox_token(value: str) -> bool:
    return value in SANDBOX_TOKENS

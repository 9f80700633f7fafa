"""Named policy presets loaded from YAML."""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml

from cspkit.config.loader import get_settings
from cspkit.errors import InvalidArgument
from cspkit.models import Mode
from cspkit.parser import CspParser
from cspkit.policy import ContentSecurityPolicy

logger = structlog.get_logger()

# Cache loaded presets
_presets: dict[str, str] | None = None


def _load_presets() -> dict[str, str]:
    """Load preset policy strings from YAML, caching after first load."""
    global _presets
    if _presets is not None:
        return _presets
    path = Path(get_settings().presets_file)
    if not path.exists():
        logger.error("csp_presets_not_found", path=str(path))
        _presets = {}
        return _presets
    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise InvalidArgument(f"Presets file {path} must contain a mapping")
    _presets = {str(name): str(value) for name, value in raw.items()}
    logger.debug("csp_presets_loaded", path=str(path), presets=sorted(_presets))
    return _presets


def reset_presets_cache() -> None:
    """Reset the presets cache (for testing)."""
    global _presets
    _presets = None


def preset_names() -> list[str]:
    return sorted(_load_presets())


def load_preset(
    name: str | None = None,
    mode: Mode | str | None = None,
    report_only: bool | None = None,
) -> ContentSecurityPolicy:
    """Parse preset ``name`` into a policy.

    ``name``, ``mode`` and ``report_only`` fall back to the configured
    ``CSP_PRESET``, ``CSP_MODE`` and ``CSP_REPORT_ONLY``.
    """
    settings = get_settings()
    name = name or settings.preset
    presets = _load_presets()
    if name not in presets:
        raise InvalidArgument(f"Unknown CSP preset: {name!r}")

    policy = CspParser(settings.mode if mode is None else mode).parse(presets[name])
    policy.report_only = settings.report_only if report_only is None else report_only
    logger.info("csp_preset_loaded", preset=name, directives=len(policy))
    return policy

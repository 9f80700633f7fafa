"""Shared test fixtures."""

from __future__ import annotations

import logging
import os

import pytest
import structlog


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Run every test against default settings and a fresh presets cache."""
    for key in list(os.environ):
        if key.startswith("CSP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("CSP_LOG_JSON", "false")

    import cspkit.config.loader as loader
    from cspkit.config.presets import reset_presets_cache

    loader._settings = None
    reset_presets_cache()
    yield
    loader._settings = None
    reset_presets_cache()


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers bound to a previous test's captured streams."""
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()

# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import domlocator  # noqa: F401
except ImportError:
    raise ImportError("domlocator is not installed. Run: pip install -e '.[dev]'") from None

import pytest


@pytest.fixture(autouse=True)
def _block_real_browser(request, monkeypatch):
    """Safety net: prevent real browser launches in unit tests.

    Tests that exercise BrowserSession patch
    ``domlocator.browser_session.async_playwright`` themselves; that patch
    takes priority over this fixture.  Tests that forget get a clear error
    instead of silently trying to launch Chromium.
    """

    def _no_real_playwright():
        raise RuntimeError(
            "Test tried to start a real Playwright instance. Patch 'domlocator.browser_session.async_playwright'."
        )

    monkeypatch.setattr("domlocator.browser_session.async_playwright", _no_real_playwright)


@pytest.fixture
def env_settings():
    """Settings built from an empty environment (all defaults, no API key)."""
    from domlocator.config import load_settings

    return load_settings({})

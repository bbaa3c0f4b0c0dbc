# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Playwright browser session management for locator resolution.

Manages the Chromium lifecycle, navigation, body capture, and locator
queries against the live page. Implements the verifier's LocatorTarget.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from contextlib import suppress
from dataclasses import dataclass

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError

from .errors import BrowserError, LocatorError

logger = logging.getLogger(__name__)

DEFAULT_VIEWPORT = {"width": 1280, "height": 800}
DEFAULT_LOCALE = "en-US"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

_BODY_HTML_JS = "() => document.body ? document.body.outerHTML : ''"


@dataclass
class BrowserConfig:
    """Browser launch configuration."""

    headless: bool = True
    locale: str = DEFAULT_LOCALE
    viewport_width: int = DEFAULT_VIEWPORT["width"]
    viewport_height: int = DEFAULT_VIEWPORT["height"]
    user_agent: str = DEFAULT_USER_AGENT
    timeout_ms: int = 30000
    wait_until: str = "domcontentloaded"
    settle_ms: int = 2000  # fixed wait for late DOM updates after navigation


# ── Chromium auto-install ─────────────────────────────────────────

_chromium_install_attempted = False
_AUTO_INSTALL_TIMEOUT = 300  # seconds, Chromium ~140MB download


async def _auto_install_chromium() -> bool:
    """Run ``playwright install chromium`` once per process.

    Returns True if install succeeded, False otherwise.
    stdout/stderr are captured so the CLI's stdout stays clean.
    """
    global _chromium_install_attempted  # noqa: PLW0603
    if _chromium_install_attempted:
        return False
    _chromium_install_attempted = True

    logger.info("Chromium not found, running 'playwright install chromium' …")
    try:
        proc = await asyncio.create_subprocess_exec(
            sys.executable,
            "-m",
            "playwright",
            "install",
            "chromium",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        _stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=_AUTO_INSTALL_TIMEOUT)
        if proc.returncode == 0:
            logger.info("Chromium installed successfully")
            return True
        logger.warning(
            "playwright install chromium failed (rc=%d): %s",
            proc.returncode,
            stderr.decode(errors="replace")[:500],
        )
        return False
    except TimeoutError:
        logger.warning("Chromium install timed out after %ds", _AUTO_INSTALL_TIMEOUT)
        return False
    except Exception:
        logger.warning("Chromium auto-install failed", exc_info=True)
        return False


def chromium_launch_args(config: BrowserConfig) -> list[str]:
    """Return Chromium launch arguments."""
    return [
        "--disable-blink-features=AutomationControlled",
        f"--lang={config.locale}",
        "--disable-extensions",
        "--disable-dev-shm-usage",
        "--disable-sync",
        "--no-first-run",
        "--disable-breakpad",
        "--noerrdialogs",
    ]


class BrowserSession:
    """A single Chromium page used to capture the DOM and check locators."""

    def __init__(self, config: BrowserConfig | None = None):
        self.config = config or BrowserConfig()
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @property
    def page(self) -> Page:
        if self._page is None:
            raise RuntimeError("Browser session not started. Use async with or call start().")
        return self._page

    async def _launch_browser(self) -> None:
        """Launch Chromium, auto-installing on first 'executable not found' error."""
        args = chromium_launch_args(self.config)
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.config.headless,
                args=args,
            )
        except Exception as exc:
            if "executable doesn't exist" in str(exc).lower():
                if await _auto_install_chromium():
                    self._browser = await self._playwright.chromium.launch(
                        headless=self.config.headless,
                        args=args,
                    )
                else:
                    raise BrowserError(
                        "Chromium is not installed and auto-install failed. Please run: playwright install chromium"
                    ) from exc
            else:
                raise BrowserError(f"Chromium launch failed: {exc}") from exc

    async def start(self) -> None:
        """Launch browser and create the page."""
        self._playwright = await async_playwright().start()
        await self._launch_browser()
        self._context = await self._browser.new_context(
            viewport={
                "width": self.config.viewport_width,
                "height": self.config.viewport_height,
            },
            locale=self.config.locale,
            user_agent=self.config.user_agent,
            accept_downloads=False,
        )
        self._page = await self._context.new_page()
        logger.info("Browser session started (headless=%s)", self.config.headless)

    async def stop(self) -> None:
        """Close browser and clean up. Safe to call on a crashed or half-started browser."""
        if self._context:
            with suppress(Exception):
                await self._context.close()
            self._context = None
        self._page = None

        if self._browser:
            with suppress(Exception):
                await self._browser.close()
            self._browser = None
        if self._playwright:
            with suppress(Exception):
                await self._playwright.stop()
            self._playwright = None

        logger.info("Browser session stopped")

    async def __aenter__(self) -> BrowserSession:
        try:
            await self.start()
        except BaseException:
            await self.stop()
            raise
        return self

    async def __aexit__(self, *args) -> None:
        await self.stop()

    async def navigate(self, url: str) -> int | None:
        """Open *url*, then wait ``settle_ms`` for client-side rendering.

        Returns:
            HTTP status of the main document, or None when unavailable.
        """
        try:
            response = await self.page.goto(url, wait_until=self.config.wait_until, timeout=self.config.timeout_ms)
        except PlaywrightError as exc:
            raise BrowserError(f"Navigation to {url} failed: {exc}") from exc

        if self.config.settle_ms > 0:
            await self.page.wait_for_timeout(self.config.settle_ms)

        status = response.status if response else None
        logger.info("Navigated to %s (status=%s)", url, status)
        return status

    async def get_body_html(self) -> str:
        """Return the outer markup of the live ``<body>`` ("" when absent)."""
        try:
            return await self.page.evaluate(_BODY_HTML_JS)
        except PlaywrightError as exc:
            raise BrowserError(f"Could not read page body: {exc}") from exc

    async def count_matches(self, locator: str) -> int:
        """Count elements matching *locator* on the live page.

        Raises:
            LocatorError: Playwright rejected the locator (e.g. invalid selector syntax).
        """
        try:
            return await self.page.locator(locator).count()
        except PlaywrightError as exc:
            raise LocatorError(f'Locator "{locator}" could not be evaluated: {exc}', locator=locator) from exc

    async def highlight_first(self, locator: str, hold_ms: int = 0) -> None:
        """Highlight the first match of *locator*, then keep it visible for *hold_ms*."""
        try:
            await self.page.locator(locator).first.highlight()
        except PlaywrightError as exc:
            raise LocatorError(f'Locator "{locator}" could not be highlighted: {exc}', locator=locator) from exc
        if hold_ms > 0:
            await self.page.wait_for_timeout(hold_ms)

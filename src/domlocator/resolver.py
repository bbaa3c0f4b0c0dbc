# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Locator resolution pipeline.

Strictly sequential, one browser session per call:

  navigate(url)
    → capture live <body> markup
    → parse + reduce (on a clone) + serialize + truncate
    → inference(markup, description) → selector
    → verify selector on the live page (count + highlight)

The session is torn down on success and on failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from typing import Protocol

from . import LocatorResolution
from .browser_session import BrowserConfig, BrowserSession
from .config import Settings
from .inference import LocatorInference
from .pipeline_timer import PipelineTimer
from .reduction.pipeline import simplify_dom
from .reduction.tree import parse_body
from .verifier import verify_locator

logger = logging.getLogger(__name__)


class PageSession(Protocol):
    """What the resolver needs from a browser session."""

    async def navigate(self, url: str) -> int | None: ...

    async def get_body_html(self) -> str: ...

    async def count_matches(self, locator: str) -> int: ...

    async def highlight_first(self, locator: str, hold_ms: int = 0) -> None: ...


SessionFactory = Callable[[BrowserConfig], AbstractAsyncContextManager[PageSession]]


async def resolve_locator(
    url: str,
    description: str,
    *,
    settings: Settings,
    inference: LocatorInference,
    session_factory: SessionFactory = BrowserSession,
) -> LocatorResolution:
    """Resolve *description* to a CSS selector on the page at *url*.

    Args:
        url: Page to open.
        description: Natural-language description of the target element.
        settings: Process-wide settings (reduction limits, browser, highlight).
        inference: Selector inference service.
        session_factory: Builds the browser session from ``settings.browser``.

    Returns:
        LocatorResolution. A selector with zero matches is still returned
        (``match_count == 0``).

    Raises:
        BrowserError, InferenceError, LocatorError: propagated after the
            browser session has been closed.
    """
    timer = PipelineTimer()
    try:
        async with session_factory(settings.browser) as session:
            timer.stage("navigation")
            logger.info("Opening %s", url)
            await session.navigate(url)

            timer.stage("reduction")
            body_html = await session.get_body_html()
            reduced = simplify_dom(parse_body(body_html), settings.reduction)
            logger.info(
                "Reduced body from %d to %d chars%s",
                len(body_html),
                len(reduced.markup),
                " (truncated)" if reduced.stats.truncated else "",
            )

            timer.stage("inference")
            locator = await inference.infer(reduced.markup, description)

            timer.stage("verification")
            verification = await verify_locator(session, locator, hold_ms=settings.highlight_ms)
    except Exception:
        logger.warning("Locator resolution failed: %s", timer.failure_report())
        raise
    timer.finalize()
    logger.info(
        "Resolved %r (%d matches) in %.1f ms", verification.locator, verification.match_count, timer.total_ms()
    )

    return LocatorResolution(
        url=url,
        description=description,
        locator=verification.locator,
        match_count=verification.match_count,
        highlighted=verification.highlighted,
        markup_chars=len(reduced.markup),
        truncated=reduced.stats.truncated,
        stage_ms=timer.elapsed_per_stage(),
    )

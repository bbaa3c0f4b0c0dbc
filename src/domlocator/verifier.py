# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Locator verification against the live page.

The verifier runs on the original page, never on the reduced clone: a
selector inferred from reduced markup must still match the real DOM.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

from .errors import LocatorError

logger = logging.getLogger(__name__)


class LocatorTarget(Protocol):
    """Live tree that can answer locator queries.

    ``count_matches`` raises LocatorError for a malformed locator.
    """

    async def count_matches(self, locator: str) -> int: ...

    async def highlight_first(self, locator: str, hold_ms: int = 0) -> None: ...


@dataclass(frozen=True, slots=True)
class VerificationResult:
    """Outcome of checking a locator on the live page."""

    locator: str
    match_count: int
    highlighted: bool

    @property
    def found(self) -> bool:
        return self.match_count > 0


async def verify_locator(target: LocatorTarget, locator: str, *, hold_ms: int = 0) -> VerificationResult:
    """Count *locator* matches on *target* and highlight the first one.

    Zero matches is a warning, not an error: nothing is highlighted and the
    locator is still returned to the caller unchanged.

    Raises:
        LocatorError: the locator is blank or cannot be evaluated.
    """
    if not locator or not locator.strip():
        raise LocatorError("Empty locator", locator=locator)

    count = await target.count_matches(locator)
    if count == 0:
        logger.warning('Locator "%s" matched no elements on the page', locator)
        return VerificationResult(locator=locator, match_count=0, highlighted=False)

    logger.info('Locator "%s" matched %d element(s), highlighting the first', locator, count)
    await target.highlight_first(locator, hold_ms=hold_ms)
    return VerificationResult(locator=locator, match_count=count, highlighted=True)

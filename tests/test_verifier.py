# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for verifier.py: match counting, zero-match warning, highlighting."""

from __future__ import annotations

import logging
from unittest.mock import AsyncMock

import pytest

from domlocator.errors import LocatorError
from domlocator.verifier import VerificationResult, verify_locator


def _target(count=1, count_error=None):
    target = AsyncMock()
    target.count_matches = AsyncMock(return_value=count, side_effect=count_error)
    target.highlight_first = AsyncMock()
    return target


class TestVerifyLocator:
    @pytest.mark.asyncio
    async def test_single_match_highlighted(self):
        target = _target(count=1)
        result = await verify_locator(target, "#kw", hold_ms=3000)

        assert result == VerificationResult(locator="#kw", match_count=1, highlighted=True)
        assert result.found
        target.highlight_first.assert_awaited_once_with("#kw", hold_ms=3000)

    @pytest.mark.asyncio
    async def test_multiple_matches_highlight_once(self):
        target = _target(count=7)
        result = await verify_locator(target, ".item")

        assert result.match_count == 7
        target.highlight_first.assert_awaited_once_with(".item", hold_ms=0)

    @pytest.mark.asyncio
    async def test_zero_matches_warns_without_highlight(self, caplog):
        target = _target(count=0)
        with caplog.at_level(logging.WARNING, logger="domlocator.verifier"):
            result = await verify_locator(target, "#missing")

        assert result.match_count == 0
        assert result.highlighted is False
        assert not result.found
        assert result.locator == "#missing"
        target.highlight_first.assert_not_awaited()
        assert any("#missing" in r.getMessage() for r in caplog.records)

    @pytest.mark.asyncio
    async def test_locator_passed_through_unchanged(self):
        target = _target(count=2)
        result = await verify_locator(target, "form#form > input[name='wd']")
        assert result.locator == "form#form > input[name='wd']"
        target.count_matches.assert_awaited_once_with("form#form > input[name='wd']")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("locator", ["", "   ", "\n"])
    async def test_blank_locator_rejected(self, locator):
        target = _target()
        with pytest.raises(LocatorError, match="Empty locator"):
            await verify_locator(target, locator)
        target.count_matches.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_malformed_locator_propagates(self):
        target = _target(count_error=LocatorError("bad selector", locator="div[["))
        with pytest.raises(LocatorError):
            await verify_locator(target, "div[[")
        target.highlight_first.assert_not_awaited()

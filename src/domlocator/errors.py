# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""domlocator exception hierarchy.

All domlocator-specific errors inherit from DomLocatorError, allowing callers
to catch the base class for any failure or specific subclasses for targeted
handling.  The reduction core raises none of these: malformed trees are
reduced away, oversized markup is truncated.
"""

from __future__ import annotations


class DomLocatorError(Exception):
    """Base exception for all domlocator errors."""


class BrowserError(DomLocatorError):
    """Browser session launch, navigation, or page evaluation failure."""


class ConfigurationError(DomLocatorError):
    """Missing or unusable runtime configuration (e.g. no API key)."""


class InferenceError(DomLocatorError):
    """The locator inference service failed or returned no usable answer."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class LocatorError(DomLocatorError):
    """A locator could not be evaluated against the live page (malformed syntax)."""

    def __init__(self, message: str, *, locator: str = "") -> None:
        super().__init__(message)
        self.locator = locator

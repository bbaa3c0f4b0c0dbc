# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Process-wide settings, read once from the environment.

``load_settings()`` is called at startup and the resulting frozen Settings
object is passed explicitly to the pipeline; nothing reads the environment
after that.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from contextlib import suppress
from dataclasses import dataclass, field, replace

from .browser_session import BrowserConfig
from .reduction import DEFAULT_MAX_CHARS, ReductionConfig

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o"

_TRUE_VALUES = ("1", "true", "yes")
_FALSE_VALUES = ("0", "false", "no")


@dataclass(frozen=True)
class InferenceSettings:
    """Connection settings for the OpenAI-compatible inference service."""

    api_key: str = field(default="", repr=False)
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    temperature: float = 0.0
    timeout_s: float = 60.0


@dataclass(frozen=True)
class Settings:
    """Everything the resolver pipeline needs for one run."""

    inference: InferenceSettings = field(default_factory=InferenceSettings)
    reduction: ReductionConfig = field(default_factory=ReductionConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)
    highlight_ms: int = 3000


def _env_str(environ: Mapping[str, str], name: str) -> str:
    return environ.get(name, "").strip()


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = _env_str(environ, name).lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return default


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = _env_str(environ, name)
    if value:
        with suppress(ValueError):
            parsed = int(value)
            if parsed >= 0:
                return parsed
    return default


def _env_float(environ: Mapping[str, str], name: str, default: float) -> float:
    value = _env_str(environ, name)
    if value:
        with suppress(ValueError):
            parsed = float(value)
            if parsed > 0:
                return parsed
    return default


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from environment variables.

    Unset, blank, negative or unparsable values fall back to the defaults.

    Args:
        environ: Mapping to read instead of ``os.environ`` (tests).
    """
    env = os.environ if environ is None else environ

    inference = InferenceSettings(
        api_key=_env_str(env, "OPENAI_API_KEY"),
        base_url=(_env_str(env, "OPENAI_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
        model=_env_str(env, "DOMLOCATOR_MODEL") or DEFAULT_MODEL,
        timeout_s=_env_float(env, "DOMLOCATOR_TIMEOUT_S", InferenceSettings.timeout_s),
    )
    reduction = ReductionConfig(max_chars=_env_int(env, "DOMLOCATOR_MAX_CHARS", DEFAULT_MAX_CHARS))
    browser = BrowserConfig(
        headless=_env_bool(env, "DOMLOCATOR_HEADLESS", True),
        settle_ms=_env_int(env, "DOMLOCATOR_SETTLE_MS", BrowserConfig.settle_ms),
    )
    return Settings(
        inference=inference,
        reduction=reduction,
        browser=browser,
        highlight_ms=_env_int(env, "DOMLOCATOR_HIGHLIGHT_MS", Settings.highlight_ms),
    )


def with_overrides(
    settings: Settings,
    *,
    headless: bool | None = None,
    max_chars: int | None = None,
    highlight_ms: int | None = None,
    drop_empty_elements: bool | None = None,
) -> Settings:
    """Return a copy of *settings* with CLI overrides applied (None = keep)."""
    if headless is not None:
        settings = replace(settings, browser=replace(settings.browser, headless=headless))
    if max_chars is not None:
        settings = replace(settings, reduction=replace(settings.reduction, max_chars=max_chars))
    if drop_empty_elements is not None:
        settings = replace(
            settings,
            reduction=replace(settings.reduction, drop_empty_elements=drop_empty_elements),
        )
    if highlight_ms is not None:
        settings = replace(settings, highlight_ms=highlight_ms)
    return settings

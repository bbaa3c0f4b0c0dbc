# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Log setup for the ``domlocator`` CLI.

Everything goes to stderr so that stdout carries only the locator (or the
reduced markup). Records from the stdlib ``logging`` module and from
structlog loggers share one processor chain. ``--log-json`` switches the
renderer to one JSON object per line with tracebacks as structured dicts.

Leaf module: no domlocator imports.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")


def _processors(json_output: bool) -> list:
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.UnicodeDecoder(),
    ]
    # ConsoleRenderer formats exc_info itself
    if json_output:
        processors.append(structlog.processors.dict_tracebacks)
    return processors


def configure(*, json_output: bool = False, level: str = "INFO", stream: TextIO | None = None) -> None:
    """Install a single stderr handler and route structlog through it.

    Args:
        json_output: JSON lines instead of the colored console format.
        level: Root logger level name; unknown names fall back to INFO.
        stream: Output stream, stderr when omitted.
    """
    stream = stream or sys.stderr
    shared = _processors(json_output)

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=shared,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(root.level, logging.WARNING))

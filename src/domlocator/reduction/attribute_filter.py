# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Attribute allow-list filtering.

Names are compared exactly. HTML attribute names are conventionally lower
case and lxml's HTML parser lower-cases them, but an element built or
modified programmatically can carry ``ID`` or ``Class``; those are stripped
rather than normalized.
"""

from __future__ import annotations

import logging
from collections.abc import Collection

import lxml.html

from domlocator.reduction import ALLOWED_ATTRIBUTES

logger = logging.getLogger(__name__)


def filter_attributes(
    root: lxml.html.HtmlElement,
    allowed: Collection[str] = ALLOWED_ATTRIBUTES,
) -> int:
    """Strip attributes not in *allowed* from *root* and every descendant element.

    Returns:
        Number of attributes removed.
    """
    allowed = set(allowed)
    stripped = 0
    for el in root.iter():
        if not isinstance(el.tag, str):
            continue
        for name in list(el.attrib):
            if name not in allowed:
                del el.attrib[name]
                stripped += 1

    logger.debug("Attribute filter: %d attributes stripped", stripped)
    return stripped

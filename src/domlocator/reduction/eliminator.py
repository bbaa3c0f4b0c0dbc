# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Subtree elimination: drop excluded elements with everything beneath them."""

from __future__ import annotations

import logging
from collections.abc import Collection

import lxml.html

from domlocator.reduction import EXCLUDED_TAGS
from domlocator.reduction.tree import drop_node, tag_name

logger = logging.getLogger(__name__)


def eliminate_subtrees(
    root: lxml.html.HtmlElement,
    excluded: Collection[str] = EXCLUDED_TAGS,
) -> int:
    """Remove every descendant of *root* whose tag is in *excluded*.

    The root itself is the container and is not tested. A removed subtree is
    never walked. Text following a removed element is kept.

    Returns:
        Number of subtrees removed.
    """
    excluded = {t.lower() for t in excluded}
    removed = 0
    stack = [root]
    while stack:
        parent = stack.pop()
        for child in list(parent):
            if not isinstance(child.tag, str):
                continue
            if tag_name(child) in excluded:
                drop_node(child)
                removed += 1
            else:
                stack.append(child)

    logger.debug("Subtree eliminator: %d subtrees removed", removed)
    return removed

# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Structural pruning: depth-first removal of stray nodes.

Per element, over a captured list of its children:
  1. whitespace-only text slots (``text`` / child ``tail``) are cleared
  2. comments, processing instructions and entities are dropped (tail kept)
  3. element children are pruned recursively
  4. with ``drop_empty_elements``, an element left with no children, no text
     and no attributes is dropped after its own children were pruned; void
     elements (``br``, ``img``, ``input``, ...) are kept as separators

``drop_node`` never merges whitespace-only text, so the result does not
depend on whether elimination or pruning removed a node first.

Run after the attribute filter: emptiness is judged on the surviving
attributes.
"""

from __future__ import annotations

import logging

import lxml.html
from lxml.html.defs import empty_tags

from domlocator.reduction import NodeKind
from domlocator.reduction.tree import drop_node, node_kind, tag_name

logger = logging.getLogger(__name__)


def _is_blank(text: str | None) -> bool:
    return text is not None and not text.strip()


def _is_empty(el: lxml.html.HtmlElement) -> bool:
    if tag_name(el) in empty_tags:
        return False
    return len(el) == 0 and not el.text and not el.attrib


def _prune_element(el: lxml.html.HtmlElement, drop_empty_elements: bool) -> int:
    pruned = 0

    if _is_blank(el.text):
        el.text = None
        pruned += 1

    # Snapshot: children are removed while walking
    children = list(el)
    for child in children:
        if _is_blank(child.tail):
            child.tail = None
            pruned += 1

    for child in children:
        kind = node_kind(child)
        if kind is NodeKind.OTHER:
            drop_node(child)
            pruned += 1
        elif kind is NodeKind.ELEMENT:
            pruned += _prune_element(child, drop_empty_elements)
            if drop_empty_elements and _is_empty(child):
                drop_node(child)
                pruned += 1

    return pruned


def prune_structure(root: lxml.html.HtmlElement, drop_empty_elements: bool = True) -> int:
    """Prune *root*'s subtree in place. The root itself is never dropped.

    Returns:
        Number of nodes (text slots, other-kind nodes, empty elements) removed.
    """
    pruned = _prune_element(root, drop_empty_elements)
    logger.debug("Structural pruner: %d nodes removed", pruned)
    return pruned

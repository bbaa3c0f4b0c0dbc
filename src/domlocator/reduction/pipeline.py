# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Reduction pipeline orchestration.

Flow:
  live body (lxml tree)
    → clone (the source tree is never touched)
    → subtree eliminator (script, style, svg, ...)
    → attribute filter (allow-list)
    → structural pruner (comments, blank text, empty elements)
    → inner-markup serialization
    → raw prefix truncation
    → ReductionResult
"""

from __future__ import annotations

import logging

import lxml.html

from domlocator.reduction import ReductionConfig, ReductionResult, ReductionStats
from domlocator.reduction.attribute_filter import filter_attributes
from domlocator.reduction.eliminator import eliminate_subtrees
from domlocator.reduction.pruner import prune_structure
from domlocator.reduction.serializer import serialize_children, truncate
from domlocator.reduction.tree import clone_tree

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = ReductionConfig()


def _reduce_in_place(
    root: lxml.html.HtmlElement,
    config: ReductionConfig,
    stats: ReductionStats,
) -> None:
    stats.removed_subtrees += eliminate_subtrees(root, config.excluded_tags)
    stats.stripped_attributes += filter_attributes(root, config.allowed_attributes)
    stats.pruned_nodes += prune_structure(root, drop_empty_elements=config.drop_empty_elements)


def reduce_tree(
    root: lxml.html.HtmlElement,
    config: ReductionConfig | None = None,
    stats: ReductionStats | None = None,
) -> lxml.html.HtmlElement:
    """Return a reduced clone of *root*. *root* is left unchanged.

    Reducing an already reduced tree yields an identical tree.
    """
    config = config or _DEFAULT_CONFIG
    clone = clone_tree(root)
    _reduce_in_place(clone, config, stats if stats is not None else ReductionStats())
    return clone


def simplify_dom(
    root: lxml.html.HtmlElement,
    config: ReductionConfig | None = None,
) -> ReductionResult:
    """Reduce *root* and render it as markup capped at ``config.max_chars``.

    Args:
        root: Live body element (or any container element).
        config: Exclusion set, allow-list and limits (defaults if omitted).

    Returns:
        ReductionResult with the (possibly truncated) markup and counters.
    """
    config = config or _DEFAULT_CONFIG
    stats = ReductionStats()

    reduced = reduce_tree(root, config, stats)
    markup = serialize_children(reduced)
    stats.serialized_chars = len(markup)

    if len(markup) > config.max_chars:
        stats.truncated = True
        logger.info(
            "Reduced markup truncated from %d to %d chars",
            len(markup),
            config.max_chars,
        )
        markup = truncate(markup, config.max_chars)

    logger.debug(
        "Reduction: %d subtrees, %d attributes, %d nodes removed; %d chars",
        stats.removed_subtrees,
        stats.stripped_attributes,
        stats.pruned_nodes,
        stats.serialized_chars,
    )
    return ReductionResult(markup=markup, stats=stats)

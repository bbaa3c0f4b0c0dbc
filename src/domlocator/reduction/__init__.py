# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""DOM reduction engine.

Core data structures for the clone → eliminate → filter → prune → serialize
pipeline that shrinks a page body into compact markup for locator inference.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

# Elements removed together with their whole subtree
EXCLUDED_TAGS: frozenset[str] = frozenset({"script", "style", "noscript", "iframe", "svg", "link", "meta"})

# Attributes that help locate an element; everything else is stripped
ALLOWED_ATTRIBUTES: tuple[str, ...] = (
    "id",
    "class",
    "name",
    "placeholder",
    "aria-label",
    "role",
    "type",
    "href",
    "title",
    "alt",
)

DEFAULT_MAX_CHARS = 15_000


class NodeKind(StrEnum):
    """Node classification used by the structural pruner."""

    ELEMENT = "element"
    TEXT = "text"
    OTHER = "other"  # comments, processing instructions, entities


@dataclass(frozen=True, slots=True)
class ReductionConfig:
    """Fixed sets and limits governing a reduction.

    Attribute names are compared exactly (case-sensitive); tag names are
    compared lower-cased.
    """

    excluded_tags: frozenset[str] = EXCLUDED_TAGS
    allowed_attributes: tuple[str, ...] = ALLOWED_ATTRIBUTES
    max_chars: int = DEFAULT_MAX_CHARS
    drop_empty_elements: bool = True

    def __post_init__(self) -> None:
        if self.max_chars < 0:
            raise ValueError(f"max_chars must be >= 0, got {self.max_chars}")
        object.__setattr__(self, "excluded_tags", frozenset(t.lower() for t in self.excluded_tags))
        object.__setattr__(self, "allowed_attributes", tuple(self.allowed_attributes))


@dataclass
class ReductionStats:
    """Counters collected during a single reduction."""

    removed_subtrees: int = 0
    stripped_attributes: int = 0
    pruned_nodes: int = 0
    serialized_chars: int = 0
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class ReductionResult:
    """Reduced markup ready for the inference service."""

    markup: str
    stats: ReductionStats = field(default_factory=ReductionStats, hash=False)

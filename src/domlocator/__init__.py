# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""domlocator: natural-language element descriptions → verified CSS selectors.

Reduces a live page body from raw DOM to compact markup containing only:
- elements outside the exclusion set (no script, style, svg, ...)
- locator-relevant attributes (id, class, name, aria-label, ...)
- non-blank text

An inference service turns that markup plus a description into a selector,
which is then checked (and highlighted) on the live page.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass
class LocatorResolution:
    """Result of resolving one description on one page."""

    url: str
    description: str
    locator: str
    match_count: int
    highlighted: bool
    markup_chars: int  # length of the markup sent to inference
    truncated: bool = False
    stage_ms: dict[str, float] = field(default_factory=dict)

    @property
    def verified(self) -> bool:
        return self.match_count > 0

    def to_dict(self) -> dict:
        return {**asdict(self), "verified": self.verified}

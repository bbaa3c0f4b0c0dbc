# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Markup serialization and length capping."""

from __future__ import annotations

from html import escape

import lxml.html
from lxml import etree


def serialize_children(root: lxml.html.HtmlElement) -> str:
    """Serialize the inner markup of *root* (like ``innerHTML``).

    Attributes are emitted in insertion order, so the output is
    deterministic for a given tree.
    """
    parts: list[str] = []
    if root.text:
        parts.append(escape(root.text, quote=False))
    for child in root:
        parts.append(etree.tostring(child, encoding="unicode", method="html", with_tail=True))
    return "".join(parts)


def truncate(markup: str, max_chars: int) -> str:
    """Cap *markup* at *max_chars* characters.

    A raw prefix, not tag-aware: the cut may land inside a tag or an
    attribute value, and consumers must accept malformed trailing markup.
    """
    if max_chars < 0:
        raise ValueError(f"max_chars must be >= 0, got {max_chars}")
    return markup[:max_chars]

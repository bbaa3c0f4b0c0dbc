# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""lxml tree helpers: parsing, cloning, node classification, detachment.

lxml has no separate text nodes. The first text child of an element lives in
``el.text`` and the text following a child lives in ``child.tail``; both are
treated as Text nodes by the reduction stages.
"""

from __future__ import annotations

import copy
import logging

import lxml.html
from lxml import etree

from domlocator.reduction import NodeKind

logger = logging.getLogger(__name__)


def parse_body(markup: str) -> lxml.html.HtmlElement:
    """Parse captured ``<body>`` markup into an lxml element.

    Accepts either the body's outer markup or a bare fragment. Blank input
    yields an empty ``<body>`` instead of a parser error.
    """
    if not markup or not markup.strip():
        return lxml.html.Element("body")

    parser = lxml.html.HTMLParser(recover=True, encoding="utf-8")
    try:
        doc = lxml.html.document_fromstring(markup.encode("utf-8", errors="replace"), parser=parser)
    except etree.ParserError:
        logger.debug("Body markup had no parseable content, using empty body")
        return lxml.html.Element("body")

    body = doc.find("body")
    if body is None:
        # Frameset or head-only documents carry no body to reduce
        return lxml.html.Element("body")
    return body


def clone_tree(root: lxml.html.HtmlElement) -> lxml.html.HtmlElement:
    """Return a deep, independent copy of *root*.

    Children, attribute maps and text are copied; nothing is shared with the
    source. The clone's own tail is dropped since it belongs to the source's
    parent, not to the subtree.
    """
    clone = copy.deepcopy(root)
    clone.tail = None
    return clone


def tag_name(el) -> str:
    """Lower-cased local tag name, or "" for non-element nodes."""
    if not isinstance(el.tag, str):
        return ""
    return el.tag.rsplit("}", 1)[-1].lower()


def node_kind(node) -> NodeKind:
    """Classify a child node (or a text/tail string) into a NodeKind."""
    if isinstance(node, str):
        return NodeKind.TEXT
    if isinstance(node.tag, str):
        return NodeKind.ELEMENT
    return NodeKind.OTHER


def drop_node(node) -> None:
    """Detach *node* (and its subtree) from its parent, keeping its tail text.

    The tail is text that followed the node in the document, so it is moved
    onto the previous sibling or, when the node was the first child, onto the
    parent's leading text. Whitespace-only text is never merged: a blank tail
    is discarded and a blank receiving slot is replaced, so the result is the
    same as removing the node and then pruning blank text separately.
    """
    parent = node.getparent()
    if parent is None:
        return
    tail = node.tail
    if tail and tail.strip():
        previous = node.getprevious()
        if previous is None:
            parent.text = _join_text(parent.text, tail)
        else:
            previous.tail = _join_text(previous.tail, tail)
    node.tail = None
    parent.remove(node)


def _join_text(existing: str | None, tail: str) -> str:
    if existing is None or not existing.strip():
        return tail
    return existing + tail

# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for reduction/eliminator.py: excluded-subtree removal."""

from __future__ import annotations

import lxml.html
import pytest

from domlocator.reduction import EXCLUDED_TAGS
from domlocator.reduction.eliminator import eliminate_subtrees
from domlocator.reduction.tree import tag_name
from tests._reduction_helpers import body, iter_elements


class TestEliminateSubtrees:
    @pytest.mark.parametrize("tag", sorted(EXCLUDED_TAGS))
    def test_each_default_tag_removed(self, tag):
        root = lxml.html.Element("body")
        keep = lxml.html.Element("p")
        keep.text = "keep"
        root.append(keep)
        root.append(lxml.html.Element(tag))
        removed = eliminate_subtrees(root)
        assert removed == 1
        assert [tag_name(el) for el in iter_elements(root)] == ["p"]

    def test_nested_excluded_removed(self):
        root = body("<div><section><p>x<style>.a{}</style></p></section></div>")
        eliminate_subtrees(root)
        assert all(tag_name(el) != "style" for el in iter_elements(root))
        assert root.find(".//p").text == "x"

    def test_excluded_inside_excluded_counted_once(self):
        root = lxml.html.Element("body")
        outer = lxml.html.Element("noscript")
        outer.append(lxml.html.Element("iframe"))
        root.append(outer)
        assert eliminate_subtrees(root) == 1
        assert len(root) == 0

    def test_custom_exclusion_set(self):
        root = body("<div><script>x=1</script><style>.a{}</style><p>Hi</p></div>")
        removed = eliminate_subtrees(root, {"script"})
        assert removed == 1
        tags = [tag_name(el) for el in iter_elements(root)]
        assert "script" not in tags
        assert "style" in tags

    def test_case_insensitive_tag_match(self):
        root = lxml.html.Element("body")
        root.append(lxml.html.Element("SCRIPT"))
        assert eliminate_subtrees(root, {"Script"}) == 1
        assert len(root) == 0

    def test_text_after_removed_element_is_kept(self):
        root = body("<p>before<script>var x;</script>after</p>")
        eliminate_subtrees(root)
        p = root[0]
        assert len(p) == 0
        assert p.text == "beforeafter"

    def test_blank_text_around_removed_element_not_glued(self):
        root = body("<p>x<script>1</script>   </p><p>   <style>a{}</style>y</p>")
        eliminate_subtrees(root)
        assert [p.text for p in root] == ["x", "y"]

    def test_root_itself_not_tested(self):
        root = lxml.html.Element("svg")
        child = lxml.html.Element("g")
        root.append(child)
        assert eliminate_subtrees(root, {"svg"}) == 0
        assert len(root) == 1

    def test_comments_skipped(self):
        root = body("<div><!-- script --><p>x</p></div>")
        assert eliminate_subtrees(root) == 0

    def test_no_match_returns_zero(self):
        root = body("<main><h1>Title</h1></main>")
        assert eliminate_subtrees(root) == 0

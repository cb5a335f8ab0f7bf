"""Tests for footnote_munger.traversal module."""

import pytest

from conftest import make_tree
from footnote_munger.traversal import CONTINUE, SKIP_SUBTREE, ReprocessAt, walk


def visited_names(tree, visitor):
    names = []

    def recording_visitor(node, index, parent):
        names.append(node.get("id") or node.name)
        return visitor(node, index, parent)

    walk(tree, recording_visitor)
    return names


class TestWalk:
    """Tests for walk function."""

    def test_depth_first_left_to_right(self):
        tree = make_tree('<div id="a"><p id="b"><i id="c">x</i></p><p id="d"></p></div><p id="e"></p>')
        assert visited_names(tree, lambda *args: CONTINUE) == ["a", "b", "c", "d", "e"]

    def test_none_means_continue(self):
        tree = make_tree('<div id="a"><p id="b"></p></div>')
        assert visited_names(tree, lambda *args: None) == ["a", "b"]

    def test_skip_subtree(self):
        tree = make_tree('<div id="a"><p id="b"></p></div><p id="c"></p>')

        def visitor(node, index, parent):
            return SKIP_SUBTREE if node.get("id") == "a" else CONTINUE

        assert visited_names(tree, visitor) == ["a", "c"]

    def test_text_nodes_are_not_visited(self):
        tree = make_tree('text <b id="a">bold</b> more')
        assert visited_names(tree, lambda *args: CONTINUE) == ["a"]

    def test_visitor_receives_index_and_parent(self):
        tree = make_tree('<div id="a">x<p id="b"></p></div>')
        calls = []
        walk(tree, lambda node, index, parent: calls.append((node["id"], index, parent.name)))
        assert calls == [("a", 0, "[document]"), ("b", 1, "div")]

    def test_reprocess_after_removing_previous_sibling(self):
        tree = make_tree('<p><a id="m"></a><b id="x"></b><i id="y"></i></p>')

        def visitor(node, index, parent):
            if node.get("id") == "x":
                new = tree.new_tag("u", attrs={"id": "z"})
                node.replace_with(new)
                parent.find(id="m").decompose()
                return ReprocessAt(parent.index(new) + 1)
            return CONTINUE

        assert visited_names(tree, visitor) == ["p", "m", "x", "y"]
        assert str(tree) == '<p><u id="z"></u><i id="y"></i></p>'

    def test_reprocess_can_revisit_a_node(self):
        tree = make_tree('<p id="a"></p><p id="b"></p>')
        seen = []

        def visitor(node, index, parent):
            seen.append(node["id"])
            if node["id"] == "b" and seen.count("b") == 1:
                return ReprocessAt(0)
            return SKIP_SUBTREE

        walk(tree, visitor)
        assert seen == ["a", "b", "a", "b"]

    def test_unknown_control_raises(self):
        tree = make_tree('<p id="a"></p>')
        with pytest.raises(TypeError):
            walk(tree, lambda *args: "skip")


class TestReprocessAt:
    """Tests for ReprocessAt."""

    def test_equality(self):
        assert ReprocessAt(2) == ReprocessAt(2)
        assert ReprocessAt(2) != ReprocessAt(3)

    def test_repr(self):
        assert repr(ReprocessAt(4)) == "ReprocessAt(4)"

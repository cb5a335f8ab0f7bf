"""
Depth-first, left-to-right tree walk that lets the visitor splice the tree.

The visitor is called with ``(node, index, parent)`` for every tag and returns
one of the control results below to say where the walk goes next. Returning
``None`` is the same as ``CONTINUE``.
"""

from bs4 import Tag


class Continue:
    """Descend into the node's children, then move on to its next sibling."""

    def __repr__(self):
        return 'CONTINUE'


class SkipSubtree:
    """Move on to the next sibling without visiting the node's children."""

    def __repr__(self):
        return 'SKIP_SUBTREE'


class ReprocessAt:
    """Resume the parent's child loop at ``index``, after the visitor edited it."""

    def __init__(self, index):
        self.index = index

    def __repr__(self):
        return f'ReprocessAt({self.index})'

    def __eq__(self, other):
        return isinstance(other, ReprocessAt) and other.index == self.index


CONTINUE = Continue()
SKIP_SUBTREE = SkipSubtree()


def walk(root, visitor):
    """Visit every tag under root in document order."""
    _walk_children(root, visitor)


def _walk_children(parent, visitor):
    index = 0
    while index < len(parent.contents):
        node = parent.contents[index]
        if not isinstance(node, Tag):
            index += 1
            continue

        control = visitor(node, index, parent)

        if control is None or isinstance(control, Continue):
            _walk_children(node, visitor)
            index += 1
        elif isinstance(control, SkipSubtree):
            index += 1
        elif isinstance(control, ReprocessAt):
            index = control.index
        else:
            raise TypeError(f"Unknown traversal control: {control!r}")

"""
Anchor/link classification: the heart of the resolver.

Calibre writes a footnote as two halves in two files. In the chapter:

    <a id="cap0001184" href="part0020.html#cap0008006">4</a>

and in the footnote container:

    <p><a id="cap0008006"></a><a href="part0014.html#cap0001184">4</a>. Text</p>

Both halves are plain links, so the only way to tell a citation from a
footnote body is the empty anchor sitting in front of the link, and whether
anything has already cited that anchor. That makes the outcome depend on the
order we meet nodes in:

1. The chapter is classified first, completely. Every chapter link is a
   reference and registers the anchor it points at.
2. The footnote container is classified second. A link right after an anchor
   marker that something already cited is a definition; every other link is a
   reference.

Links are classified once, when they are reached, and never revisited. A
link in the footnote container that cites a footnote further down is a
reference on the spot; its target then counts as cited when we get there.
A footnote that nothing had cited by the time we passed it keeps its
back-link as a reference, so a later citation of it dangles.
``verify_resolution`` reports dangling references without failing; whether
such footnotes should be reclassified after the fact is unsettled.
"""

from .errors import (
    DuplicateDefinitionError,
    MalformedLinkError,
    PassOrderError,
    UnexpectedSiblingStructureError,
    UnresolvedAnchorError,
)
from .reporting import quiet
from .traversal import CONTINUE, SKIP_SUBTREE, ReprocessAt, walk
from .tree import (
    DEFINITION_TAG,
    REFERENCE_TAG,
    describe,
    footnote_identifier,
    is_anchor_marker,
    is_link,
    link_label,
    new_definition,
    new_reference,
    next_significant_sibling,
    previous_significant_sibling,
    split_href,
)


class AnchorLinkClassifier:
    """
    Rewrites links into footnote references and definitions.

    ``classify_chapter`` must run to completion before ``classify_footnotes``
    is called; the footnote pass reads the identifiers the chapter pass
    registered. Each pass runs once per classifier.
    """

    def __init__(self, context, chapter_file, footnote_file, log=quiet):
        self.context = context
        self.chapter_file = chapter_file
        self.footnote_file = footnote_file
        self.log = log
        self.chapter_done = False
        self.footnotes_done = False
        self.stats = {'references': 0, 'definitions': 0}
        self._soup = None

    def classify_chapter(self, tree):
        if self.chapter_done:
            raise PassOrderError("The chapter pass has already run")
        if self.footnotes_done:
            raise PassOrderError("The chapter must be classified before the footnotes")

        self._soup = tree
        walk(tree, self._visit_chapter_node)
        self.chapter_done = True

    def classify_footnotes(self, tree):
        if not self.chapter_done:
            raise PassOrderError("The footnote pass needs a fully classified chapter")
        if self.footnotes_done:
            raise PassOrderError("The footnote pass has already run")

        self._soup = tree
        walk(tree, self._visit_footnote_node)
        self.footnotes_done = True

    def _visit_chapter_node(self, node, index, parent):
        if not is_link(node):
            return CONTINUE
        self._replace_with_reference(node)
        return SKIP_SUBTREE

    def _visit_footnote_node(self, node, index, parent):
        if is_anchor_marker(node):
            self._check_marker_pairing(node)
            return SKIP_SUBTREE
        if not is_link(node):
            return CONTINUE

        marker = previous_significant_sibling(node)
        if is_anchor_marker(marker) and self.context.is_resolved(marker['id']):
            definition = self._replace_with_definition(node, marker)
            return ReprocessAt(parent.index(definition) + 1)

        self._replace_with_reference(node)
        return SKIP_SUBTREE

    def _check_marker_pairing(self, marker):
        # Only cited markers must be paired; stray anchors are left alone.
        if not self.context.is_resolved(marker['id']):
            return
        paired = next_significant_sibling(marker)
        if not is_link(paired):
            raise UnexpectedSiblingStructureError(marker['id'], describe(paired))

    def _target_of(self, link):
        href = link['href']
        _, target_id = split_href(href)
        if not target_id:
            raise MalformedLinkError(href)
        label = link_label(link)
        if not label:
            raise MalformedLinkError(href, "link has no label")
        return target_id, label

    def _replace_with_reference(self, link):
        target_id, label = self._target_of(link)
        identifier = self.context.resolve(target_id, label)
        href = link['href']
        link.replace_with(new_reference(self._soup, identifier))
        self.stats['references'] += 1
        self.log(f"    Reference: {href} ({label!r}) -> [^{identifier}]")

    def _replace_with_definition(self, link, marker):
        # The link itself is the footnote's back-link; its target is irrelevant
        # but it must still be well formed.
        self._target_of(link)
        anchor_id = marker['id']
        identifier = self.context.identifier_for(anchor_id)
        definition = new_definition(self._soup, identifier)
        link.replace_with(definition)
        marker.decompose()
        self.stats['definitions'] += 1
        self.log(f"    Definition: #{anchor_id} -> [^{identifier}]:")
        return definition


def verify_resolution(context, chapter_tree, footnote_tree, log=quiet):
    """
    Check that every definition has a home before anything is emitted.

    Raises UnresolvedAnchorError for a definition nothing cites and
    DuplicateDefinitionError for an identifier defined twice. References
    without a definition are only logged.
    """
    cited = set()
    for tree in (chapter_tree, footnote_tree):
        for reference in tree.find_all(REFERENCE_TAG):
            cited.add(footnote_identifier(reference))

    defined = set()
    for definition in footnote_tree.find_all(DEFINITION_TAG):
        identifier = footnote_identifier(definition)
        if identifier in defined:
            raise DuplicateDefinitionError(identifier)
        if identifier not in cited:
            raise UnresolvedAnchorError(identifier)
        defined.add(identifier)

    for identifier in sorted(cited - defined):
        log(f"  WARNING: [^{identifier}] is cited but never defined")

    return defined
